"""
audio.py

Audio extraction with ffmpeg, tuned for speech transcription.
"""

import subprocess
from pathlib import Path

from .tools import ToolRun

AUDIO_SUFFIX = "_whisper.webm"


class AudioError(RuntimeError):
    pass


def audio_path_for(video_path: Path) -> Path:
    """<dir>/<title>.webm -> <dir>/<title>_whisper.webm"""
    return video_path.with_name(video_path.stem + AUDIO_SUFFIX)


def run_ffmpeg(video_path: Path, audio_path: Path) -> ToolRun:
    cmd = [
        "ffmpeg",
        "-y",                     # overwrite output
        "-i", str(video_path),    # input file
        "-vn",                    # no video
        "-ac", "1",               # mono
        "-ar", "16000",           # 16k sample rate
        "-c:a", "libopus",        # opus speech codec
        "-b:a", "32k",
        "-application", "voip",   # voice-optimized encoder mode
        "-f", "webm",             # the API accepts webm but not raw opus
        str(audio_path),
    ]

    try:
        proc = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
    except FileNotFoundError as e:
        raise AudioError("ffmpeg not found; install it and make sure it is on PATH") from e

    return ToolRun(returncode=proc.returncode, output_path=audio_path, stderr=proc.stderr or "")


def extract_audio(video_path: Path) -> Path:
    """
    Extract a mono 16kHz Opus track from a video file.

    Args:
        video_path: Downloaded video file

    Returns:
        Path: Audio file next to the video (<title>_whisper.webm)

    Raises:
        AudioError: If ffmpeg fails or produces no output file
    """
    video_path = Path(video_path)
    audio_path = audio_path_for(video_path)

    run = run_ffmpeg(video_path, audio_path)

    if not run.ok:
        raise AudioError(f"ffmpeg failed: {run.stderr[-2000:]}")

    if not run.output_path.exists():
        raise AudioError(f"Failed to extract audio to {run.output_path}")

    size_mb = run.output_path.stat().st_size / 1024 / 1024
    print(f"Extracted audio: {run.output_path.name} ({size_mb:.2f} MB)")
    return run.output_path
