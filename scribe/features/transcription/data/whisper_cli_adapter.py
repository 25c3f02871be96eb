# File: scribe/features/transcription/data/whisper_cli_adapter.py
import logging
import subprocess
import tempfile
import threading
from pathlib import Path
from typing import Optional, Sequence

from scribe.core.config.settings import settings
from ..domain.errors import InvalidAudioFileError, WhisperNotInstalledError
from ..domain.interfaces import ITranscriber
from ..domain.models import BatchFailure, BatchSummary, TranscriptionResult, WhisperConfig, default_config
from .argument_builder import build_whisper_args
from .process_runner import WhisperProcessRunner
from .result_parser import parse_whisper_output

logger = logging.getLogger(__name__)


class WhisperCliAdapter(ITranscriber):
    """
    Drives the external `whisper` command line tool.

    Installation is checked once, here in the constructor; if whisper is missing
    the adapter is never built. Each call gets its own throwaway output directory,
    removed on every exit path.
    """

    def __init__(self, config: Optional[WhisperConfig] = None, binary: Optional[str] = None):
        self.config = config or default_config()
        self.binary = binary or settings.WHISPER_BINARY

        self._check_installed()
        self.runner = WhisperProcessRunner(
            self.binary,
            poll_interval=settings.WHISPER_POLL_INTERVAL,
            kill_grace=settings.WHISPER_KILL_GRACE,
        )

    def _check_installed(self) -> None:
        try:
            subprocess.run(
                [self.binary, "--help"],
                check=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=settings.WHISPER_PROBE_TIMEOUT,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.error(f"whisper probe failed for '{self.binary}': {e}")
            raise WhisperNotInstalledError(f"could not run '{self.binary} --help'") from e

    def transcribe_with_cancellation(self, audio_path: str,
                                     cancel_event: Optional[threading.Event] = None) -> TranscriptionResult:
        audio_file = Path(audio_path)
        if not audio_file.exists():
            raise InvalidAudioFileError(str(audio_path), "file does not exist")
        if not audio_file.is_file():
            raise InvalidAudioFileError(str(audio_path), "not a regular file")

        args = build_whisper_args(self.config, str(audio_path))

        if self.config.verbose:
            logger.info(f"Transcribing {audio_path} with whisper ({self.config.model.value})...")

        settings.ensure_dirs()
        with tempfile.TemporaryDirectory(prefix="whisper_output_", dir=settings.WHISPER_TEMP_DIR) as tmp_dir:
            output_dir = Path(tmp_dir)

            self.runner.run(
                str(audio_path),
                args,
                output_dir,
                self.config.timeout_seconds,
                cancel_event=cancel_event,
                verbose=self.config.verbose,
            )

            return parse_whisper_output(str(audio_path), output_dir, self.config.model)

    def run_batch(self, audio_paths: Sequence[str]) -> BatchSummary:
        summary = BatchSummary(files_total=len(audio_paths))

        for index, audio_path in enumerate(audio_paths, start=1):
            if self.config.verbose:
                logger.info(f"Processing file {index}/{summary.files_total}: {audio_path}")

            try:
                result = self.transcribe(audio_path)
            except Exception as e:
                logger.error(f"Transcription of {audio_path} failed, skipping: {e}")
                summary.failures.append(BatchFailure(audio_path=str(audio_path), error=e))
                continue

            summary.results.append(result)

        logger.info(f"Batch complete. Transcribed: {summary.files_transcribed}/{summary.files_total}")
        return summary
