import json
import pytest
from pathlib import Path

from scribe.features.transcription.data.result_parser import parse_whisper_output
from scribe.features.transcription.domain.models import WhisperModel

WHISPER_JSON = {
    "text": " The quick brown fox.",
    "language": "en",
    "duration": 3.5,
    "segments": [
        {"id": 0, "seek": 0, "start": 0.0, "end": 1.6, "text": "  The quick "},
        {"id": 1, "seek": 0, "start": 1.6, "end": 3.5, "text": " brown fox.\n"},
    ],
}


@pytest.fixture
def output_dir(tmp_path):
    path = tmp_path / "whisper_output"
    path.mkdir()
    return path


def test_text_only_artifact(output_dir):
    (output_dir / "sample.txt").write_text("hello world\n", encoding="utf-8")

    result = parse_whisper_output("/audio/sample.mp3", output_dir, WhisperModel.BASE)

    # Text is taken verbatim, no trimming
    assert result.full_text == "hello world\n"
    assert result.file_path == str(output_dir / "sample.txt")
    assert result.segments == []
    assert result.language == ""
    assert result.duration_seconds == 0.0
    assert result.model_used == WhisperModel.BASE
    assert result.source_file == "/audio/sample.mp3"


def test_json_overrides_text_artifact(output_dir):
    (output_dir / "sample.txt").write_text("plain text transcript", encoding="utf-8")
    (output_dir / "sample.json").write_text(json.dumps(WHISPER_JSON), encoding="utf-8")

    result = parse_whisper_output("sample.mp3", output_dir, WhisperModel.SMALL)

    assert result.full_text == " The quick brown fox."
    assert result.language == "en"
    assert result.duration_seconds == 3.5
    # The text artifact path is kept even when JSON wins
    assert result.file_path == str(output_dir / "sample.txt")

    assert [s.id for s in result.segments] == [0, 1]
    assert [s.text for s in result.segments] == ["The quick", "brown fox."]
    assert (result.segments[1].start, result.segments[1].end) == (1.6, 3.5)
    assert not hasattr(result.segments[0], "seek")


def test_json_only_artifact(output_dir):
    (output_dir / "sample.json").write_text(json.dumps(WHISPER_JSON), encoding="utf-8")

    result = parse_whisper_output("sample.flac", output_dir, WhisperModel.TINY)

    assert result.full_text == " The quick brown fox."
    assert result.file_path is None
    assert len(result.segments) == 2


def test_broken_json_falls_back_to_text(output_dir):
    (output_dir / "sample.txt").write_text("still useful", encoding="utf-8")
    (output_dir / "sample.json").write_text("{\"text\": \"trunc", encoding="utf-8")

    result = parse_whisper_output("sample.mp3", output_dir, WhisperModel.BASE)

    assert result.full_text == "still useful"
    assert result.segments == []
    assert result.language == ""


@pytest.mark.parametrize("payload", [
    [1, 2, 3],
    {"text": "x", "segments": [{"id": 0, "start": "soon", "end": 1.0, "text": "a"}]},
    {"text": "x", "segments": ["not a segment"]},
    {"text": "x", "segments": {"id": 0}},
    {"text": 123},
    {"text": "x", "language": ["en"]},
    {"text": "x", "duration": "3.5"},
    {"text": "x", "duration": True},
    {"text": "x", "segments": [{"id": 1.5, "start": 0.0, "end": 1.0, "text": "a"}]},
    {"text": "x", "segments": [{"id": 0, "start": 0.0, "end": 1.0, "text": 7}]},
])
def test_wrongly_typed_json_is_ignored(output_dir, payload):
    (output_dir / "sample.txt").write_text("fallback", encoding="utf-8")
    (output_dir / "sample.json").write_text(json.dumps(payload), encoding="utf-8")

    result = parse_whisper_output("sample.mp3", output_dir, WhisperModel.BASE)

    assert result.full_text == "fallback"
    assert result.language == ""
    assert result.segments == []


def test_inverted_segment_is_dropped_but_json_is_kept(output_dir, caplog):
    (output_dir / "sample.txt").write_text("plain", encoding="utf-8")
    payload = {
        "text": "from json",
        "language": "en",
        "duration": 2.5,
        "segments": [
            {"id": 0, "start": 0.0, "end": 1.0, "text": "ok"},
            {"id": 1, "start": 2.0, "end": 1.99, "text": "inverted"},
            {"id": 2, "start": -1.0, "end": 0.5, "text": "negative"},
        ],
    }
    (output_dir / "sample.json").write_text(json.dumps(payload), encoding="utf-8")

    with caplog.at_level("WARNING"):
        result = parse_whisper_output("sample.mp3", output_dir, WhisperModel.BASE)

    assert result.full_text == "from json"
    assert result.language == "en"
    assert result.duration_seconds == 2.5
    assert [s.id for s in result.segments] == [0]
    assert "Dropping segment" in caplog.text


def test_out_of_order_segment_is_dropped_but_json_is_kept(output_dir):
    (output_dir / "sample.txt").write_text("plain", encoding="utf-8")
    payload = {
        "text": "x",
        "segments": [
            {"id": 0, "start": 5.0, "end": 6.0, "text": "late"},
            {"id": 1, "start": 1.0, "end": 2.0, "text": "early"},
            {"id": 2, "start": 6.0, "end": 7.0, "text": "later"},
        ],
    }
    (output_dir / "sample.json").write_text(json.dumps(payload), encoding="utf-8")

    result = parse_whisper_output("sample.mp3", output_dir, WhisperModel.BASE)

    assert result.full_text == "x"
    assert [s.text for s in result.segments] == ["late", "later"]


def test_null_json_fields_default_to_empty(output_dir):
    payload = {"text": None, "language": None, "duration": None, "segments": None}
    (output_dir / "sample.json").write_text(json.dumps(payload), encoding="utf-8")

    result = parse_whisper_output("sample.mp3", output_dir, WhisperModel.BASE)

    assert result.full_text == ""
    assert result.duration_seconds == 0.0
    assert result.segments == []


def test_integer_json_times_are_accepted(output_dir):
    payload = {"text": "x", "duration": 3, "segments": [{"id": 0, "start": 0, "end": 3, "text": "x"}]}
    (output_dir / "sample.json").write_text(json.dumps(payload), encoding="utf-8")

    result = parse_whisper_output("sample.mp3", output_dir, WhisperModel.BASE)

    assert result.duration_seconds == 3.0
    assert (result.segments[0].start, result.segments[0].end) == (0.0, 3.0)


def test_missing_json_keys_default_to_empty(output_dir):
    (output_dir / "sample.txt").write_text("from text", encoding="utf-8")
    (output_dir / "sample.json").write_text(json.dumps({"language": "de"}), encoding="utf-8")

    result = parse_whisper_output("sample.mp3", output_dir, WhisperModel.BASE)

    # Parseable JSON is authoritative, even when it carries no text
    assert result.full_text == ""
    assert result.language == "de"
    assert result.duration_seconds == 0.0
    assert result.segments == []


def test_no_artifacts_is_an_empty_result(output_dir):
    result = parse_whisper_output("sample.mp3", output_dir, WhisperModel.MEDIUM)

    assert result.full_text == ""
    assert result.language == ""
    assert result.duration_seconds == 0.0
    assert result.segments == []
    assert result.file_path is None
    assert result.model_used == WhisperModel.MEDIUM


def test_artifacts_for_other_inputs_are_ignored(output_dir):
    (output_dir / "other.txt").write_text("not mine", encoding="utf-8")

    result = parse_whisper_output(str(Path("/x/sample.mp3")), output_dir, WhisperModel.BASE)

    assert result.full_text == ""


def test_only_the_last_extension_is_stripped(output_dir):
    (output_dir / "episode.01.txt").write_text("episode one", encoding="utf-8")

    result = parse_whisper_output("episode.01.wav", output_dir, WhisperModel.BASE)

    assert result.full_text == "episode one"
