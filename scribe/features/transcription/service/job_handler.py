# File: scribe/features/transcription/service/job_handler.py
import logging
from dataclasses import replace
from typing import Optional
from uuid import UUID

from scribe.core.config.settings import settings
from scribe.core.database.connection import SessionLocal
from ..data.whisper_cli_adapter import WhisperCliAdapter
from ..data.sql_models import TranscriptionModel, TranscriptionSegmentModel
from ..domain.models import TranscriptionResult, WhisperConfig, get_preset

logger = logging.getLogger(__name__)

# Job payload keys allowed to override the chosen preset
CONFIG_OVERRIDES = (
    "model", "language", "output_format", "device", "threads",
    "timeout_seconds", "beam_size", "best_of", "temperature", "verbose",
)


def config_from_params(params: dict) -> WhisperConfig:
    """Preset (params["preset"] or WHISPER_PRESET) plus any whitelisted overrides."""
    config = get_preset(params.get("preset") or settings.WHISPER_PRESET)
    overrides = {key: params[key] for key in CONFIG_OVERRIDES if key in params}
    return replace(config, **overrides) if overrides else config


def save_transcription(result: TranscriptionResult, config: WhisperConfig, job_id: Optional[UUID]) -> UUID:
    """Persists header + segments in one transaction and returns the header id."""
    with SessionLocal() as db:
        transcription = TranscriptionModel(
            job_id=job_id,
            source_path=result.source_file,
            language=result.language,
            model_used=result.model_used.value,
            duration_seconds=result.duration_seconds,
            full_text=result.full_text,
            processing_meta={
                "output_format": config.output_format.value,
                "device": config.device,
                "beam_size": config.beam_size,
                "best_of": config.best_of,
                "temperature": config.temperature,
            },
        )

        for seg in result.segments:
            transcription.segments.append(TranscriptionSegmentModel(
                segment_index=seg.id,
                start_time=seg.start,
                end_time=seg.end,
                text=seg.text,
            ))

        db.add(transcription)
        db.commit()

        logger.info(f"Transcription saved. ID: {transcription.id}, Segments: {len(result.segments)}")
        return transcription.id


class TranscriptionHandler:
    """
    Worker class responsible for executing TRANSCRIPTION jobs.
    Payload: {"audio_path": str, "preset"?: str, <config overrides>?}
    """

    def handle(self, job_id: Optional[UUID], params: dict) -> dict:
        audio_path = params.get("audio_path")
        if not audio_path:
            raise ValueError("Transcription job payload is missing 'audio_path'.")

        logger.info(f"Processing Transcription for: {audio_path}")

        config = config_from_params(params)
        adapter = WhisperCliAdapter(config)
        result = adapter.transcribe(audio_path)

        transcription_id = save_transcription(result, config, job_id)

        return {
            "transcription_id": str(transcription_id),
            "segment_count": len(result.segments),
            "language": result.language,
            "model": result.model_used.value,
        }


class BatchTranscriptionHandler:
    """
    Worker for BATCH_TRANSCRIPTION jobs.
    Payload: {"audio_paths": [str, ...], "preset"?: str, <config overrides>?}
    A failed file never fails the job; it is reported under "failures".
    """

    def handle(self, job_id: Optional[UUID], params: dict) -> dict:
        audio_paths = list(params.get("audio_paths") or [])
        if not audio_paths:
            raise ValueError("Batch transcription job payload has no 'audio_paths'.")

        logger.info(f"Processing Batch Transcription of {len(audio_paths)} files")

        config = config_from_params(params)
        adapter = WhisperCliAdapter(config)
        summary = adapter.run_batch(audio_paths)

        transcription_ids = [str(save_transcription(result, config, job_id)) for result in summary.results]

        return {
            "transcription_ids": transcription_ids,
            "files_total": summary.files_total,
            "files_transcribed": summary.files_transcribed,
            "failures": [
                {"audio_path": failure.audio_path, "error": str(failure.error)}
                for failure in summary.failures
            ],
        }
