# File: scribe/features/transcription/domain/errors.py
from typing import Optional


class TranscriptionError(Exception):
    """Base class for every failure the whisper client reports to its caller."""


class WhisperNotInstalledError(TranscriptionError):
    """
    The whisper CLI could not be reached at client construction time.
    Fatal: a client is never created, so no invocation is attempted.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return (
            f"Whisper is not installed: {self.message}\n\n"
            "Install it with:\n"
            "  pip install -U openai-whisper\n"
            "  # or\n"
            "  pip3 install -U openai-whisper\n"
            "Or point WHISPER_BINARY_PATH at an existing whisper executable."
        )


class InvalidAudioFileError(TranscriptionError):
    def __init__(self, file_path: str, reason: str):
        self.file_path = file_path
        self.reason = reason
        super().__init__(file_path, reason)

    def __str__(self) -> str:
        return f"Invalid audio file: {self.file_path}, reason: {self.reason}"


class TranscriptionTimeoutError(TranscriptionError):
    """
    The effective deadline elapsed (or the caller cancelled) before whisper exited.
    `duration` is the configured timeout, formatted like "5s" or "30m0s".
    """

    def __init__(self, duration: str):
        self.duration = duration
        super().__init__(duration)

    def __str__(self) -> str:
        return f"Transcription timed out after {self.duration}"


class TranscriptionFailedError(TranscriptionError):
    """
    whisper exited non-zero or could not be launched.
    The underlying process error is available as __cause__.
    """

    def __init__(self, file_path: str, stderr: str = "", returncode: Optional[int] = None):
        self.file_path = file_path
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(file_path, stderr, returncode)

    def __str__(self) -> str:
        detail = self.stderr.strip() or "no error output"
        if self.returncode is not None:
            return f"Transcription failed: {self.file_path}, exit code {self.returncode}: {detail}"
        return f"Transcription failed: {self.file_path}: {detail}"
