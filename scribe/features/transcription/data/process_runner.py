# File: scribe/features/transcription/data/process_runner.py
import logging
import subprocess
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from scribe.core.config.settings import settings
from ..domain.errors import TranscriptionFailedError, TranscriptionTimeoutError
from ..domain.models import format_duration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessOutcome:
    returncode: int
    stdout: str
    stderr: str
    elapsed_seconds: float


class WhisperProcessRunner:
    """
    Launches the whisper CLI and supervises it until exit, deadline or cancellation.

    The caller blocks for the whole run. Completion is raced against the deadline
    and the caller's cancel event by polling communicate(); a poll that times out
    keeps the output buffered, so nothing written by the child is lost.
    """

    def __init__(self, binary: str, poll_interval: Optional[float] = None, kill_grace: Optional[float] = None):
        self.binary = binary
        self.poll_interval = settings.WHISPER_POLL_INTERVAL if poll_interval is None else poll_interval
        self.kill_grace = settings.WHISPER_KILL_GRACE if kill_grace is None else kill_grace

    def run(self, audio_path: str, args: List[str], output_dir: Path, timeout_seconds: float,
            cancel_event: Optional[threading.Event] = None, verbose: bool = False) -> ProcessOutcome:
        cmd = [self.binary, *args, "--output_dir", str(output_dir)]
        duration = format_duration(timeout_seconds)

        log_level = logging.INFO if verbose else logging.DEBUG
        logger.log(log_level, f"Executing whisper: {' '.join(cmd)}")

        if cancel_event is not None and cancel_event.is_set():
            logger.warning(f"Cancelled before launch: {audio_path}")
            raise TranscriptionTimeoutError(duration)

        started = time.monotonic()
        deadline = started + timeout_seconds

        try:
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            logger.error(f"Could not launch whisper: {e}")
            raise TranscriptionFailedError(audio_path, str(e)) from e

        try:
            while True:
                remaining = deadline - time.monotonic()
                cancelled = cancel_event is not None and cancel_event.is_set()

                if remaining <= 0 or cancelled:
                    reason = "cancelled by caller" if cancelled else f"deadline of {duration} exceeded"
                    logger.warning(f"Stopping whisper for {audio_path}: {reason}")
                    self._stop(process)
                    raise TranscriptionTimeoutError(duration)

                try:
                    stdout, stderr = process.communicate(timeout=min(self.poll_interval, remaining))
                    break
                except subprocess.TimeoutExpired:
                    continue
        finally:
            # Never leave an orphaned child behind, whatever unwound us
            if process.poll() is None:
                self._stop(process)

        elapsed = time.monotonic() - started

        if process.returncode != 0:
            logger.error(f"whisper failed on {audio_path} (exit {process.returncode}). STDERR: {stderr.strip()}")
            raise TranscriptionFailedError(audio_path, stderr, process.returncode) from subprocess.CalledProcessError(
                process.returncode, cmd, output=stdout, stderr=stderr
            )

        logger.log(log_level, f"whisper finished {audio_path} in {elapsed:.2f}s")
        if stdout.strip():
            logger.debug(f"whisper output:\n{stdout.strip()}")

        return ProcessOutcome(
            returncode=process.returncode,
            stdout=stdout,
            stderr=stderr,
            elapsed_seconds=elapsed,
        )

    def _stop(self, process: subprocess.Popen) -> None:
        """Terminates the child, escalating to kill after the grace period, and reaps it."""
        process.terminate()
        try:
            process.communicate(timeout=self.kill_grace)
        except subprocess.TimeoutExpired:
            logger.warning(f"whisper (pid {process.pid}) ignored SIGTERM, killing it.")
            process.kill()
            process.communicate()
