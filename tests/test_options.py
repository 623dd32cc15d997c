"""Tests for command line parsing and request validation."""

import itertools

import pytest

from yt_transcribe.src.options import (
    AUTO_CHUNKING,
    Model,
    OptionsError,
    ResponseFormat,
    TranscriptionRequest,
    VadChunking,
    build_chunking_strategy,
    parse_args,
    resolve_request,
)

EXPECTED_FORMATS = {
    "gpt-4o-transcribe-diarize": {"json", "text", "diarized_json"},
    "gpt-4o-transcribe": {"json"},
    "gpt-4o-mini-transcribe": {"json"},
    "gpt-4o-mini-transcribe-2025-12-15": {"json", "text", "srt", "verbose_json", "vtt", "diarized_json"},
    "whisper-1": {"json", "text", "srt", "verbose_json", "vtt", "diarized_json"},
}


@pytest.mark.parametrize(
    "model,fmt",
    list(itertools.product([m.value for m in Model], [f.value for f in ResponseFormat])),
)
def test_model_format_compatibility(model: str, fmt: str) -> None:
    if fmt in EXPECTED_FORMATS[model]:
        request = resolve_request(model=model, response_format=fmt)
        assert request.model.value == model
        assert request.response_format.value == fmt
    else:
        with pytest.raises(OptionsError) as excinfo:
            resolve_request(model=model, response_format=fmt)
        message = str(excinfo.value)
        assert model in message
        assert fmt in message


def test_unknown_model_lists_available_models() -> None:
    with pytest.raises(OptionsError, match="Invalid model: whisper-2"):
        resolve_request(model="whisper-2")


def test_unknown_format_is_rejected() -> None:
    with pytest.raises(OptionsError, match="Invalid format: docx"):
        resolve_request(model="whisper-1", response_format="docx")


def test_request_construction_enforces_compatibility() -> None:
    with pytest.raises(OptionsError):
        TranscriptionRequest(model=Model.GPT_4O_TRANSCRIBE, response_format=ResponseFormat.SRT)


def test_no_chunking_wins_over_vad_overrides() -> None:
    assert build_chunking_strategy(True, "0.7", "500", "100") is None


def test_single_vad_override_only_sets_that_field() -> None:
    strategy = build_chunking_strategy(vad_threshold="0.7")

    assert strategy == VadChunking(threshold=0.7)
    assert strategy.to_dict() == {"type": "server_vad", "threshold": 0.7}


def test_all_vad_overrides() -> None:
    strategy = build_chunking_strategy(vad_threshold="0.4", vad_silence="500", vad_prefix="250")

    assert strategy.to_dict() == {
        "type": "server_vad",
        "threshold": 0.4,
        "silence_duration_ms": 500,
        "prefix_padding_ms": 250,
    }


def test_default_chunking_is_auto() -> None:
    assert build_chunking_strategy() == AUTO_CHUNKING


def test_non_numeric_vad_override_is_rejected() -> None:
    with pytest.raises(OptionsError, match="--vad-silence"):
        build_chunking_strategy(vad_silence="long")


def test_parse_args_defaults() -> None:
    args = parse_args(["https://youtu.be/abc"])

    assert args.url == "https://youtu.be/abc"
    assert args.request.model is Model.GPT_4O_TRANSCRIBE_DIARIZE
    assert args.request.response_format is ResponseFormat.DIARIZED_JSON
    assert args.request.chunking_strategy == "auto"
    assert args.request.language is None
    assert args.request.temperature is None
    assert args.output_path is None
    assert args.keep_audio is False


def test_parse_args_short_options() -> None:
    args = parse_args([
        "https://youtu.be/abc", "-m", "whisper-1", "-f", "srt",
        "-l", "EN", "-t", "0.2", "-o", "out.srt", "--keep-audio", "--no-chunking",
    ])

    assert args.request.model is Model.WHISPER_1
    assert args.request.response_format is ResponseFormat.SRT
    assert args.request.language == "en"
    assert args.request.temperature == 0.2
    assert args.request.chunking_strategy is None
    assert args.output_path == "out.srt"
    assert args.keep_audio is True


def test_missing_url_prints_help_and_exits_1(capsys: pytest.CaptureFixture) -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_args([])

    assert excinfo.value.code == 1
    assert "usage:" in capsys.readouterr().out


def test_help_exits_0(capsys: pytest.CaptureFixture) -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_args(["--help"])

    assert excinfo.value.code == 0
    out = capsys.readouterr().out
    assert "OPENAI_API_KEY" in out
    assert "--vad-threshold" in out


def test_unknown_option_exits_1() -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_args(["https://youtu.be/abc", "--bogus"])

    assert excinfo.value.code == 1


def test_extra_positional_exits_1() -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_args(["https://youtu.be/abc", "https://youtu.be/def"])

    assert excinfo.value.code == 1


@pytest.mark.parametrize("value", ["1.5", "-0.1", "warm"])
def test_temperature_out_of_range(value: str) -> None:
    with pytest.raises(OptionsError):
        parse_args(["https://youtu.be/abc", "-m", "whisper-1", "-f", "json", "-t", value])


def test_language_must_be_two_letters() -> None:
    with pytest.raises(OptionsError, match="ISO-639-1"):
        parse_args(["https://youtu.be/abc", "--language", "english"])


def test_incompatible_pair_from_command_line() -> None:
    with pytest.raises(OptionsError, match="Model gpt-4o-transcribe only supports formats: json. Got: srt"):
        parse_args(["https://youtu.be/abc", "--model", "gpt-4o-transcribe", "--format", "srt"])


@pytest.mark.parametrize(
    "overrides,expected",
    [
        ({"vad_silence": "500"}, {"type": "server_vad", "silence_duration_ms": 500}),
        ({"vad_prefix": "250"}, {"type": "server_vad", "prefix_padding_ms": 250}),
        ({"vad_silence": "0", "vad_prefix": "0"}, {"type": "server_vad", "silence_duration_ms": 0, "prefix_padding_ms": 0}),
    ],
)
def test_vad_override_only_sets_given_fields(overrides, expected) -> None:
    assert build_chunking_strategy(**overrides).to_dict() == expected


@pytest.mark.parametrize(
    "overrides,flag",
    [
        ({"vad_threshold": "nan"}, "--vad-threshold"),
        ({"vad_threshold": "inf"}, "--vad-threshold"),
        ({"vad_threshold": "-inf"}, "--vad-threshold"),
        ({"vad_threshold": "7"}, "--vad-threshold"),
        ({"vad_threshold": "-0.1"}, "--vad-threshold"),
        ({"vad_silence": "-5"}, "--vad-silence"),
        ({"vad_prefix": "-1"}, "--vad-prefix"),
    ],
)
def test_vad_override_out_of_range(overrides, flag: str) -> None:
    with pytest.raises(OptionsError, match=flag):
        resolve_request(**overrides)


def test_vad_threshold_bounds_accepted() -> None:
    assert build_chunking_strategy(vad_threshold="0").threshold == 0.0
    assert build_chunking_strategy(vad_threshold="1").threshold == 1.0
