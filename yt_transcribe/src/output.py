"""
output.py

Saving transcripts to disk and the console preview of diarized results.
"""

import json
import os
from dataclasses import asdict
from pathlib import Path
from typing import List

from .options import ResponseFormat
from .transcriber import TranscriptionResult

PREVIEW_SEGMENTS = 5


def output_extension(response_format: ResponseFormat) -> str:
    """srt -> .srt, vtt -> .vtt, text -> .txt, anything else -> .json"""
    return response_format.extension


def default_output_path(video_path: Path, response_format: ResponseFormat) -> Path:
    """Place the transcript next to the video, named after it."""
    return Path(video_path).with_suffix(output_extension(response_format))


def render(result: TranscriptionResult, response_format: ResponseFormat) -> str:
    if response_format.is_plain_text:
        return result.text

    data = result.raw
    if data is None:
        data = {k: v for k, v in asdict(result).items() if v is not None and k != "raw"}
    return json.dumps(data, ensure_ascii=False, indent=2)


def save_output(result: TranscriptionResult, output_path: str, response_format: ResponseFormat) -> None:
    """
    Write the transcript, overwriting any existing file.

    Args:
        result: Transcript returned by the transcriber
        output_path: Destination file
        response_format: Format the transcript was requested in
    """
    parent = os.path.dirname(os.path.abspath(output_path))
    os.makedirs(parent, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(render(result, response_format))

    print(f"✓ Saved transcription to: {output_path}")


def _seconds(value) -> str:
    # The service may leave a timestamp null
    if value is None:
        return "?s"
    return f"{value:.1f}s"


def preview_lines(result: TranscriptionResult, response_format: ResponseFormat) -> List[str]:
    """
    Console preview of the first few speaker segments.

    Only diarized JSON results get a preview; anything else yields no lines.
    """
    if response_format is not ResponseFormat.DIARIZED_JSON or not result.segments:
        return []

    lines = []
    for segment in result.segments[:PREVIEW_SEGMENTS]:
        speaker = segment.speaker or "Unknown"
        lines.append(f"  {speaker} [{_seconds(segment.start)} - {_seconds(segment.end)}]")
        lines.append(f"  {segment.text}")
        lines.append("")

    remaining = len(result.segments) - PREVIEW_SEGMENTS
    if remaining > 0:
        lines.append(f"  ... and {remaining} more segments")

    return lines
