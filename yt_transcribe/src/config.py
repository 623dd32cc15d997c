"""
config.py

Runtime settings, read once from the environment at start-up.
"""

import os
from dataclasses import dataclass

# Default temp directory sits next to the package (yt_transcribe/tmp)
PACKAGE_BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_TMP_DIR = os.path.join(PACKAGE_BASE_DIR, "tmp")
DEFAULT_API_URL = "https://api.openai.com/v1"


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class Settings:
    api_key: str
    api_url: str = DEFAULT_API_URL
    tmp_dir: str = DEFAULT_TMP_DIR


def load_settings() -> Settings:
    """
    Build the settings from environment variables.

    Call ``load_dotenv()`` first if values should also come from a .env file.

    Returns:
        Settings: Resolved configuration

    Raises:
        ConfigError: If OPENAI_API_KEY is missing or blank
    """
    api_key = os.getenv("OPENAI_API_KEY", "").strip()
    if not api_key:
        raise ConfigError("OPENAI_API_KEY environment variable is required")

    api_url = os.getenv("OPENAI_BASE_URL", "").strip() or DEFAULT_API_URL
    tmp_dir = os.getenv("YT_TRANSCRIBE_TMP_DIR", "").strip() or DEFAULT_TMP_DIR

    return Settings(api_key=api_key, api_url=api_url, tmp_dir=tmp_dir)


def ensure_tmp_dir(settings: Settings) -> str:
    """Create the temp directory if it does not exist yet and return its path."""
    os.makedirs(settings.tmp_dir, exist_ok=True)
    return settings.tmp_dir
