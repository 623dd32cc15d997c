"""
transcriber.py

Transcription backends. The only backend talks to the OpenAI
audio transcription endpoint over HTTP.
"""

import json
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from .config import ConfigError, Settings, DEFAULT_API_URL
from .options import TranscriptionRequest, VadChunking


class TranscriptionError(RuntimeError):
    pass


@dataclass(frozen=True)
class Segment:
    start: float
    end: float
    text: str
    speaker: Optional[str] = None


@dataclass(frozen=True)
class TranscriptionResult:
    """
    Transcript returned by the service.

    For text/srt/vtt only ``text`` is set, holding the raw response body.
    For JSON formats ``raw`` keeps the decoded body exactly as received.
    """

    text: str
    task: Optional[str] = None
    duration: Optional[float] = None
    segments: Optional[List[Segment]] = None
    usage: Optional[Dict[str, Any]] = None
    raw: Optional[Dict[str, Any]] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "TranscriptionResult":
        segments = None
        if data.get("segments") is not None:
            segments = [
                Segment(
                    start=seg.get("start", 0.0),
                    end=seg.get("end", 0.0),
                    text=seg.get("text", ""),
                    speaker=seg.get("speaker"),
                )
                for seg in data["segments"]
            ]

        return cls(
            text=data.get("text", ""),
            task=data.get("task"),
            duration=data.get("duration"),
            segments=segments,
            usage=data.get("usage"),
            raw=data,
        )


class BaseTranscriber(ABC):
    """
    Abstract base class for transcription backends.
    """

    @abstractmethod
    def transcribe(self, audio_path: Path, request: TranscriptionRequest) -> TranscriptionResult:
        """
        Transcribe an audio file.

        Args:
            audio_path: Path to the audio file
            request: Validated model, format and tuning options

        Returns:
            TranscriptionResult: Parsed transcript
        """


def build_form_fields(request: TranscriptionRequest) -> Dict[str, str]:
    """
    Multipart form fields (besides the file) for a transcription request.

    The chunking strategy is sent as the literal "auto" or as a JSON object.
    """
    fields = {
        "model": request.model.value,
        "response_format": request.response_format.value,
    }

    strategy = request.chunking_strategy
    if isinstance(strategy, VadChunking):
        fields["chunking_strategy"] = json.dumps(strategy.to_dict())
    elif strategy:
        fields["chunking_strategy"] = strategy

    if request.language:
        fields["language"] = request.language

    if request.temperature is not None:
        fields["temperature"] = str(request.temperature)

    return fields


class OpenAITranscriber(BaseTranscriber):
    """
    Sends audio to POST /v1/audio/transcriptions with a bearer token.
    One request, no retries.
    """

    def __init__(self, api_key: str, api_url: str = DEFAULT_API_URL):
        if not api_key:
            raise ConfigError("OPENAI_API_KEY environment variable is required")
        self.api_key = api_key
        self.endpoint = f"{api_url.rstrip('/')}/audio/transcriptions"

    def transcribe(self, audio_path: Path, request: TranscriptionRequest) -> TranscriptionResult:
        print(f"[OpenAI] Transcribing {os.path.basename(audio_path)} with {request.model.value}")

        headers = {"Authorization": f"Bearer {self.api_key}"}
        data = build_form_fields(request)

        try:
            with open(audio_path, "rb") as fh:
                files = {"file": (os.path.basename(audio_path), fh, "audio/webm")}
                resp = requests.post(self.endpoint, headers=headers, data=data, files=files)
        except requests.RequestException as e:
            raise TranscriptionError(f"OpenAI API request failed: {e}") from e

        if not resp.ok:
            raise TranscriptionError(f"OpenAI API error ({resp.status_code}): {resp.text}")

        if request.response_format.is_plain_text:
            return TranscriptionResult(text=resp.text)

        try:
            payload = resp.json()
        except ValueError as e:
            raise TranscriptionError(f"OpenAI API returned invalid JSON: {resp.text[:500]}") from e

        return TranscriptionResult.from_json(payload)


def get_transcriber(settings: Settings) -> BaseTranscriber:
    """
    Create the transcription backend for the given settings.

    Raises:
        ConfigError: If no API key is configured
    """
    return OpenAITranscriber(api_key=settings.api_key, api_url=settings.api_url)
