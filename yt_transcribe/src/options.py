"""
options.py

Command line parsing and validation of the transcription request.
"""

import argparse
import re
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Union


class OptionsError(ValueError):
    pass


class Model(str, Enum):
    GPT_4O_TRANSCRIBE = "gpt-4o-transcribe"
    GPT_4O_MINI_TRANSCRIBE = "gpt-4o-mini-transcribe"
    GPT_4O_MINI_TRANSCRIBE_2025_12_15 = "gpt-4o-mini-transcribe-2025-12-15"
    WHISPER_1 = "whisper-1"
    GPT_4O_TRANSCRIBE_DIARIZE = "gpt-4o-transcribe-diarize"


class ResponseFormat(str, Enum):
    JSON = "json"
    TEXT = "text"
    SRT = "srt"
    VERBOSE_JSON = "verbose_json"
    VTT = "vtt"
    DIARIZED_JSON = "diarized_json"

    @property
    def is_plain_text(self) -> bool:
        """True for formats the service returns as a raw body instead of JSON."""
        return self in (ResponseFormat.TEXT, ResponseFormat.SRT, ResponseFormat.VTT)

    @property
    def extension(self) -> str:
        return _EXTENSIONS.get(self, ".json")


_EXTENSIONS = {
    ResponseFormat.SRT: ".srt",
    ResponseFormat.VTT: ".vtt",
    ResponseFormat.TEXT: ".txt",
}

ALL_FORMATS: FrozenSet[ResponseFormat] = frozenset(ResponseFormat)

# Formats accepted by each model
COMPATIBLE_FORMATS: Dict[Model, FrozenSet[ResponseFormat]] = {
    Model.GPT_4O_TRANSCRIBE_DIARIZE: frozenset(
        {ResponseFormat.JSON, ResponseFormat.TEXT, ResponseFormat.DIARIZED_JSON}
    ),
    Model.GPT_4O_TRANSCRIBE: frozenset({ResponseFormat.JSON}),
    Model.GPT_4O_MINI_TRANSCRIBE: frozenset({ResponseFormat.JSON}),
    Model.GPT_4O_MINI_TRANSCRIBE_2025_12_15: ALL_FORMATS,
    Model.WHISPER_1: ALL_FORMATS,
}

DEFAULT_MODEL = Model.GPT_4O_TRANSCRIBE_DIARIZE
DEFAULT_FORMAT = ResponseFormat.DIARIZED_JSON

AUTO_CHUNKING = "auto"

_LANGUAGE_RE = re.compile(r"^[A-Za-z]{2}$")


@dataclass(frozen=True)
class VadChunking:
    """Server-side voice activity detection settings; unset fields use the service defaults."""

    threshold: Optional[float] = None
    silence_duration_ms: Optional[int] = None
    prefix_padding_ms: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": "server_vad"}
        if self.threshold is not None:
            data["threshold"] = self.threshold
        if self.silence_duration_ms is not None:
            data["silence_duration_ms"] = self.silence_duration_ms
        if self.prefix_padding_ms is not None:
            data["prefix_padding_ms"] = self.prefix_padding_ms
        return data


ChunkingStrategy = Union[str, VadChunking]


@dataclass(frozen=True)
class TranscriptionRequest:
    model: Model = DEFAULT_MODEL
    response_format: ResponseFormat = DEFAULT_FORMAT
    language: Optional[str] = None
    temperature: Optional[float] = None
    chunking_strategy: Optional[ChunkingStrategy] = AUTO_CHUNKING

    def __post_init__(self):
        check_compatibility(self.model, self.response_format)

    def describe_chunking(self) -> str:
        if self.chunking_strategy is None:
            return "disabled"
        if isinstance(self.chunking_strategy, VadChunking):
            return "custom VAD"
        return self.chunking_strategy


@dataclass(frozen=True)
class ResolvedArgs:
    url: str
    request: TranscriptionRequest
    output_path: Optional[str] = None
    keep_audio: bool = False


def _join(values) -> str:
    return ", ".join(v.value for v in values)


def parse_model(value: str) -> Model:
    try:
        return Model(value)
    except ValueError:
        raise OptionsError(f"Invalid model: {value}. Available: {_join(Model)}") from None


def parse_format(value: str) -> ResponseFormat:
    try:
        return ResponseFormat(value)
    except ValueError:
        raise OptionsError(f"Invalid format: {value}. Available: {_join(ResponseFormat)}") from None


def check_compatibility(model: Model, response_format: ResponseFormat) -> None:
    """
    Ensure ``response_format`` is one the model can produce.

    Raises:
        OptionsError: If the combination is not supported
    """
    allowed = COMPATIBLE_FORMATS[model]
    if response_format not in allowed:
        names = ", ".join(f.value for f in ResponseFormat if f in allowed)
        raise OptionsError(
            f"Model {model.value} only supports formats: {names}. Got: {response_format.value}"
        )


def _parse_number(flag: str, value: str, cast):
    try:
        return cast(value)
    except ValueError:
        raise OptionsError(f"Invalid value for {flag}: {value!r}") from None


def parse_temperature(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    temperature = _parse_number("--temperature", value, float)
    if not 0.0 <= temperature <= 1.0:
        raise OptionsError(f"Temperature must be between 0 and 1. Got: {value}")
    return temperature


def parse_language(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if not _LANGUAGE_RE.match(value):
        raise OptionsError(f"Language must be an ISO-639-1 code (e.g. \"en\", \"es\"). Got: {value}")
    return value.lower()


def build_chunking_strategy(
    no_chunking: bool = False,
    vad_threshold: Optional[str] = None,
    vad_silence: Optional[str] = None,
    vad_prefix: Optional[str] = None,
) -> Optional[ChunkingStrategy]:
    """
    Decide how the service should chunk the audio.

    Args:
        no_chunking: Disable chunking entirely (overrides everything else)
        vad_threshold: VAD sensitivity threshold override
        vad_silence: VAD silence duration override in ms
        vad_prefix: VAD prefix padding override in ms

    Returns:
        None when disabled, a VadChunking when any override is given, otherwise "auto"
    """
    if no_chunking:
        return None

    if vad_threshold is None and vad_silence is None and vad_prefix is None:
        return AUTO_CHUNKING

    return VadChunking(
        threshold=None if vad_threshold is None else parse_vad_threshold(vad_threshold),
        silence_duration_ms=None if vad_silence is None else parse_vad_ms("--vad-silence", vad_silence),
        prefix_padding_ms=None if vad_prefix is None else parse_vad_ms("--vad-prefix", vad_prefix),
    )


def parse_vad_threshold(value: str) -> float:
    # NaN fails the comparison, so non-finite values are rejected here too
    threshold = _parse_number("--vad-threshold", value, float)
    if not 0.0 <= threshold <= 1.0:
        raise OptionsError(f"--vad-threshold must be between 0 and 1. Got: {value}")
    return threshold


def parse_vad_ms(flag: str, value: str) -> int:
    duration = _parse_number(flag, value, int)
    if duration < 0:
        raise OptionsError(f"{flag} must be a non-negative number of milliseconds. Got: {value}")
    return duration


def resolve_request(
    model: str = DEFAULT_MODEL.value,
    response_format: str = DEFAULT_FORMAT.value,
    language: Optional[str] = None,
    temperature: Optional[str] = None,
    no_chunking: bool = False,
    vad_threshold: Optional[str] = None,
    vad_silence: Optional[str] = None,
    vad_prefix: Optional[str] = None,
) -> TranscriptionRequest:
    """
    Validate raw option values and build the transcription request.

    Raises:
        OptionsError: On unknown model/format, incompatible pair or bad numeric value
    """
    parsed_model = parse_model(model)
    parsed_format = parse_format(response_format)

    return TranscriptionRequest(
        model=parsed_model,
        response_format=parsed_format,
        language=parse_language(language),
        temperature=parse_temperature(temperature),
        chunking_strategy=build_chunking_strategy(no_chunking, vad_threshold, vad_silence, vad_prefix),
    )


EPILOG = """\
examples:
  # Basic usage with defaults (diarized transcription)
  yt-transcribe https://www.youtube.com/watch?v=abc123

  # Use whisper-1 with plain text output
  yt-transcribe https://www.youtube.com/watch?v=abc123 --model whisper-1 --format text

  # Generate SRT subtitles
  yt-transcribe https://www.youtube.com/watch?v=abc123 --model whisper-1 --format srt

  # Custom VAD settings for noisy audio
  yt-transcribe https://www.youtube.com/watch?v=abc123 --vad-threshold 0.7

environment:
  OPENAI_API_KEY    Required. Your OpenAI API key.
"""


class _ArgumentParser(argparse.ArgumentParser):
    # Usage errors exit with 1 like every other failure
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def create_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="yt-transcribe",
        description="Download YouTube videos and transcribe them with OpenAI Whisper",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("url", nargs="?", help="YouTube video URL")
    parser.add_argument(
        "-m", "--model", default=DEFAULT_MODEL.value,
        help=f"Model to use for transcription (default: {DEFAULT_MODEL.value}). Available: {_join(Model)}",
    )
    parser.add_argument(
        "-f", "--format", dest="response_format", default=DEFAULT_FORMAT.value,
        help=f"Response format (default: {DEFAULT_FORMAT.value}). Available: {_join(ResponseFormat)}",
    )
    parser.add_argument("-l", "--language", help='Language code in ISO-639-1 format (e.g. "en", "es")')
    parser.add_argument("-t", "--temperature", help="Sampling temperature 0-1 (service default: 0)")
    parser.add_argument(
        "--no-chunking", action="store_true",
        help="Disable auto chunking (not recommended for long audio)",
    )
    parser.add_argument("--vad-threshold", help="VAD sensitivity threshold 0-1 (service default: 0.5)")
    parser.add_argument("--vad-silence", help="VAD silence duration in ms (service default: 200)")
    parser.add_argument("--vad-prefix", help="VAD prefix padding in ms (service default: 300)")
    parser.add_argument("-o", "--output", help="Output file path (default: <video-title>.<ext> in the temp directory)")
    parser.add_argument(
        "--keep-audio", action="store_true",
        help="Keep the extracted audio file after transcription",
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> ResolvedArgs:
    """
    Parse the command line into a validated request.

    Prints help and exits with 0 for -h/--help, prints help and exits
    with 1 when the URL is missing.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:])

    Returns:
        ResolvedArgs: URL, request, explicit output path and keep-audio flag

    Raises:
        OptionsError: If an option value fails validation
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.url:
        parser.print_help()
        parser.exit(1)

    request = resolve_request(
        model=args.model,
        response_format=args.response_format,
        language=args.language,
        temperature=args.temperature,
        no_chunking=args.no_chunking,
        vad_threshold=args.vad_threshold,
        vad_silence=args.vad_silence,
        vad_prefix=args.vad_prefix,
    )

    return ResolvedArgs(
        url=args.url,
        request=request,
        output_path=args.output,
        keep_audio=args.keep_audio,
    )
