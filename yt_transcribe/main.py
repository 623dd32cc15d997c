"""
main.py

Entry point for yt-transcribe.
Single video pipeline: YouTube -> video -> speech audio -> OpenAI transcription -> file.
"""

import os
import sys
import time
from typing import List, Optional

from dotenv import load_dotenv

from yt_transcribe.src.audio import AudioError, extract_audio
from yt_transcribe.src.config import ConfigError, Settings, ensure_tmp_dir, load_settings
from yt_transcribe.src.downloader import DownloadError, download_video
from yt_transcribe.src.options import OptionsError, ResolvedArgs, parse_args
from yt_transcribe.src.output import default_output_path, preview_lines, save_output
from yt_transcribe.src.transcriber import BaseTranscriber, TranscriptionError, get_transcriber

FATAL_ERRORS = (OptionsError, ConfigError, DownloadError, AudioError, TranscriptionError)


def format_duration(seconds: float) -> str:
    """
    Format duration in seconds to human-readable string.

    Args:
        seconds: Duration in seconds

    Returns:
        str: Formatted duration (e.g., "2m 35s", "1h 15m 23s", "42s")
    """
    seconds = int(seconds)

    if seconds < 60:
        return f"{seconds}s"

    minutes = seconds // 60
    secs = seconds % 60

    if minutes < 60:
        return f"{minutes}m {secs}s"

    hours = minutes // 60
    mins = minutes % 60
    return f"{hours}h {mins}m {secs}s"


def print_banner(args: ResolvedArgs) -> None:
    request = args.request
    print()
    print("=" * 80)
    print("YT-TRANSCRIBE: YouTube -> Audio -> OpenAI Transcription")
    print("=" * 80)
    print(f"URL:      {args.url}")
    print(f"Model:    {request.model.value}")
    print(f"Format:   {request.response_format.value}")
    print(f"Chunking: {request.describe_chunking()}")
    print("=" * 80)


def remove_file(path: str, label: str) -> None:
    try:
        os.remove(path)
        print(f"✓ Deleted {label}: {path}")
    except OSError as e:
        print(f"⚠ Could not delete {label}: {e}")


def process_video(args: ResolvedArgs, settings: Settings, transcriber: BaseTranscriber) -> str:
    """
    Run the whole pipeline for one video: download, extract, transcribe, save.

    Args:
        args: Resolved command line arguments
        settings: Runtime settings (temp directory)
        transcriber: Transcription backend

    Returns:
        str: Path of the written transcript

    Raises:
        DownloadError, AudioError, TranscriptionError: If a stage fails
    """
    request = args.request
    tmp_dir = ensure_tmp_dir(settings)

    # Step 1: Download video
    print()
    print("STEP 1: Downloading video...")
    video_path = download_video(args.url, output_dir=tmp_dir)
    print(f"✓ Downloaded: {video_path.name}")

    # Step 2: Extract audio
    print()
    print("STEP 2: Extracting and optimizing audio...")
    audio_path = extract_audio(video_path)
    print(f"✓ Audio ready: {audio_path.name}")

    # Step 3: Transcribe
    print()
    print(f"STEP 3: Transcribing with {request.model.value}...")
    transcription_start = time.time()
    result = transcriber.transcribe(audio_path, request)
    duration_str = format_duration(time.time() - transcription_start)
    print(f"✓ Transcription complete in {duration_str}")

    # Step 4: Save results
    print()
    print("STEP 4: Saving results...")
    output_path = args.output_path or str(default_output_path(video_path, request.response_format))
    save_output(result, output_path, request.response_format)

    # Step 5: Cleanup
    print()
    print("STEP 5: Cleaning up...")
    if not args.keep_audio:
        remove_file(str(audio_path), "temporary audio file")
    remove_file(str(video_path), "downloaded video")

    print()
    print("=" * 80)
    print("✓ Done!")
    print("=" * 80)

    lines = preview_lines(result, request.response_format)
    if lines:
        print()
        print("Transcription Preview:")
        print()
        for line in lines:
            print(line)

    return output_path


def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments, check configuration, then run the pipeline.

    Returns:
        int: Process exit status (0 on success, 1 on any failure)
    """
    # Load environment variables from .env file
    load_dotenv()

    try:
        args = parse_args(argv)
        settings = load_settings()
        transcriber = get_transcriber(settings)

        print_banner(args)
        process_video(args, settings, transcriber)
    except FATAL_ERRORS as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        return 1

    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
