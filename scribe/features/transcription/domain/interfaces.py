import threading
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from .models import BatchSummary, TranscriptionResult

class ITranscriber(ABC):
    """
    Contract for any ASR (Automatic Speech Recognition) engine.
    Allows us to swap the whisper CLI for another backend later.
    """
    @abstractmethod
    def transcribe_with_cancellation(self, audio_path: str,
                                     cancel_event: Optional[threading.Event] = None) -> TranscriptionResult:
        """
        Transcribes the audio file at the given path.

        Args:
            audio_path: Path to the audio file.
            cancel_event: Optional caller signal; setting it stops the run.

        Returns:
            Structured TranscriptionResult.

        Raises:
            InvalidAudioFileError: If the file does not exist.
            TranscriptionTimeoutError: If the deadline elapses or the caller cancels.
            TranscriptionFailedError: If the engine reports a failure.
        """
        pass

    def transcribe(self, audio_path: str) -> TranscriptionResult:
        return self.transcribe_with_cancellation(audio_path, None)

    @abstractmethod
    def run_batch(self, audio_paths: Sequence[str]) -> BatchSummary:
        """
        Transcribes every path in order, skipping (and recording) failures.
        """
        pass

    def transcribe_batch(self, audio_paths: Sequence[str]) -> List[TranscriptionResult]:
        return self.run_batch(audio_paths).results
