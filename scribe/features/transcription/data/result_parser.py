# File: scribe/features/transcription/data/result_parser.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..domain.models import TextSegment, TranscriptionResult, WhisperModel

logger = logging.getLogger(__name__)


def parse_whisper_output(audio_path: str, output_dir: Path, model: WhisperModel) -> TranscriptionResult:
    """
    Reconciles whatever whisper left in `output_dir` into one result.

    Precedence:
    1. `<name>.txt` seeds the text and the artifact path.
    2. `<name>.json`, if it parses, overrides text, language, duration and segments.
       Segments with invalid or out-of-order times are dropped individually.
    3. A broken or wrongly typed JSON file is ignored; the plain-text transcript still stands.
    4. No artifacts at all is not an error: the result is simply empty.

    The model is always the one from the config that drove the run.
    """
    base_name = Path(audio_path).stem
    output_dir = Path(output_dir)

    full_text = ""
    language = ""
    duration = 0.0
    segments: List[TextSegment] = []
    file_path: Optional[str] = None

    txt_file = output_dir / f"{base_name}.txt"
    if txt_file.is_file():
        full_text = txt_file.read_text(encoding="utf-8", errors="replace")
        file_path = str(txt_file)

    json_file = output_dir / f"{base_name}.json"
    if json_file.is_file():
        parsed = _read_json_artifact(json_file)
        if parsed is not None:
            full_text = parsed["text"]
            language = parsed["language"]
            duration = parsed["duration"]
            segments = parsed["segments"]

    if not full_text and file_path is None and not segments:
        logger.warning(f"whisper produced no usable output for {audio_path}")

    return TranscriptionResult(
        source_file=str(audio_path),
        model_used=model,
        full_text=full_text,
        language=language,
        duration_seconds=duration,
        segments=segments,
        file_path=file_path,
    )


def _read_json_artifact(json_file: Path) -> Optional[Dict[str, Any]]:
    """
    Returns the normalised JSON fields, or None when the file cannot be used.

    A document that parses but carries a wrongly typed field is unusable as a
    whole. Missing or null keys fall back to empty values. Segments with bad
    timestamps are dropped one by one; the rest of the document still counts.
    """
    try:
        raw = json.loads(json_file.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise TypeError(f"expected an object, got {type(raw).__name__}")

        text = _typed_field(raw, "text", str, "")
        language = _typed_field(raw, "language", str, "")
        duration = float(_typed_field(raw, "duration", (int, float), 0.0))

        entries = []
        for seg in _typed_field(raw, "segments", list, []):
            if not isinstance(seg, dict):
                raise TypeError(f"segment must be an object, got {type(seg).__name__}")
            # 'seek' is part of the schema but not surfaced
            entries.append((
                _typed_field(seg, "id", int, 0),
                float(_typed_field(seg, "start", (int, float), 0.0)),
                float(_typed_field(seg, "end", (int, float), 0.0)),
                _typed_field(seg, "text", str, "").strip(),
            ))
    except (OSError, ValueError, TypeError) as e:
        # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
        logger.warning(f"Ignoring unreadable whisper JSON {json_file.name}: {e}")
        return None

    return {
        "text": text,
        "language": language,
        "duration": duration,
        "segments": _keep_valid_segments(entries, json_file.name),
    }


def _typed_field(raw: Dict[str, Any], key: str, types, default):
    value = raw.get(key)
    if value is None:
        return default
    # bool is an int subclass, but never a valid number here
    if isinstance(value, bool) or not isinstance(value, types):
        raise TypeError(f"'{key}' has unexpected type {type(value).__name__}")
    return value


def _keep_valid_segments(entries: List[tuple], source_name: str) -> List[TextSegment]:
    """Drops segments with negative or inverted times, or that start before the previous kept one."""
    segments: List[TextSegment] = []
    for seg_id, start, end, text in entries:
        try:
            segment = TextSegment(id=seg_id, start=start, end=end, text=text)
        except ValueError as e:
            logger.warning(f"Dropping segment from {source_name}: {e}")
            continue

        if segments and segment.start < segments[-1].start:
            logger.warning(
                f"Dropping segment {seg_id} from {source_name}: starts at {start}, "
                f"before segment {segments[-1].id} ({segments[-1].start})."
            )
            continue

        segments.append(segment)
    return segments
