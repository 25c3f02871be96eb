import threading
from typing import Optional, Sequence

from ..data.whisper_cli_adapter import WhisperCliAdapter
from ..domain.models import BatchSummary, TranscriptionResult, WhisperConfig

def run_transcription(audio_path: str, config: Optional[WhisperConfig] = None,
                      cancel_event: Optional[threading.Event] = None) -> TranscriptionResult:
    """
    Standalone API for running transcription directly.
    Useful for scripts and tests without the full Job system.

    Raises:
        WhisperNotInstalledError: If the whisper CLI is not available.
        InvalidAudioFileError / TranscriptionTimeoutError / TranscriptionFailedError
    """
    adapter = WhisperCliAdapter(config)
    return adapter.transcribe_with_cancellation(audio_path, cancel_event)

def run_batch_transcription(audio_paths: Sequence[str], config: Optional[WhisperConfig] = None) -> BatchSummary:
    """
    Transcribes files one after another. Failed files are skipped and listed in the summary.
    """
    adapter = WhisperCliAdapter(config)
    return adapter.run_batch(audio_paths)
