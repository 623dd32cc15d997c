"""
downloader.py

Wrapper for yt-dlp to download videos from YouTube.
"""

import os
import re
from pathlib import Path

import yt_dlp
from yt_dlp.utils import DownloadError as YtDlpDownloadError

from .tools import ToolRun

# YouTube serves its native formats in webm
VIDEO_CONTAINER = "webm"
UNKNOWN_TITLE = "Unknown Title"

_ILLEGAL_FILENAME_CHARS = re.compile(r'[/\\?%*:|"<>]')


class DownloadError(RuntimeError):
    pass


def sanitize_title(title: str) -> str:
    """
    Make a video title safe to use as a file name.

    Args:
        title: Video title as reported by yt-dlp

    Returns:
        str: Title with each of / \\ ? % * : | " < > replaced by "_",
        or "Unknown Title" when the title is blank
    """
    return _ILLEGAL_FILENAME_CHARS.sub("_", title.strip()) or UNKNOWN_TITLE


def fetch_title(youtube_url: str) -> str:
    """
    Ask yt-dlp for the video title without downloading anything.

    Raises:
        DownloadError: If yt-dlp cannot extract the video metadata
    """
    ydl_opts = {
        'quiet': True,
        'no_warnings': True,
        'skip_download': True,
    }

    try:
        with yt_dlp.YoutubeDL(ydl_opts) as ydl:
            info = ydl.extract_info(youtube_url, download=False)
    except YtDlpDownloadError as e:
        raise DownloadError(f"Could not read video info for {youtube_url}: {e}") from e

    return (info or {}).get('title') or ''


def run_download(youtube_url: str, output_path: Path) -> ToolRun:
    """
    Download the video to exactly ``output_path``.

    Returns:
        ToolRun: yt-dlp return code and the expected output path
    """
    ydl_opts = {
        'outtmpl': str(output_path),
        'merge_output_format': VIDEO_CONTAINER,
        'quiet': True,
        'no_warnings': True,
        'noprogress': True,
    }

    with yt_dlp.YoutubeDL(ydl_opts) as ydl:
        returncode = ydl.download([youtube_url])

    return ToolRun(returncode=returncode, output_path=output_path)


def download_video(youtube_url: str, output_dir: str) -> Path:
    """
    Download a video into ``output_dir``, naming it after the video title.

    Args:
        youtube_url: YouTube video URL
        output_dir: Directory to save the video file (must exist)

    Returns:
        Path: Location of the downloaded video (<output_dir>/<title>.webm)

    Raises:
        DownloadError: If yt-dlp fails or the file is not where it should be
    """
    print(f"Downloading video from: {youtube_url}")

    title = sanitize_title(fetch_title(youtube_url))
    output_path = Path(output_dir) / f"{title}.{VIDEO_CONTAINER}"

    try:
        run = run_download(youtube_url, output_path)
    except YtDlpDownloadError as e:
        raise DownloadError(f"Failed to download video to {output_path}: {e}") from e

    if not run.ok:
        raise DownloadError(f"Failed to download video to {output_path} (yt-dlp exit code {run.returncode})")

    if not os.path.exists(run.output_path):
        raise DownloadError(f"Failed to download video to {run.output_path}")

    print(f"Video downloaded successfully: {run.output_path}")
    return run.output_path
