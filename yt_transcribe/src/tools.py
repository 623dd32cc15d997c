"""
tools.py

Result type shared by the stages that shell out to external tools (yt-dlp, ffmpeg).
"""

from pathlib import Path
from typing import NamedTuple


class ToolRun(NamedTuple):
    """
    Outcome of a single external tool invocation.

    The tool reporting success does not mean the file is there;
    callers check ``output_path`` themselves.
    """

    returncode: int
    output_path: Path
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0
