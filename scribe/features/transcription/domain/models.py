# File: scribe/features/transcription/domain/models.py
from dataclasses import dataclass, field, replace
from enum import Enum, unique
from typing import Callable, Dict, List, Optional


@unique
class WhisperModel(str, Enum):
    """
    Model tiers, smallest to largest.
    Bigger tiers are slower and more accurate; medium is the sweet spot for long audio.
    """
    TINY = "tiny"
    BASE = "base"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


@unique
class OutputFormat(str, Enum):
    TXT = "txt"
    SRT = "srt"
    VTT = "vtt"
    JSON = "json"
    ALL = "all"


@dataclass(frozen=True)
class WhisperConfig:
    """
    Everything the whisper CLI gets told about a run.
    Built once per client and never mutated; safe to share between threads.

    Zero values mean "let whisper decide": an empty language auto-detects,
    threads=0 is automatic, beam_size/best_of <= 0 are left unset and
    temperature=0 keeps whisper's greedy default.
    """
    # Model
    model: WhisperModel = WhisperModel.MEDIUM
    language: str = "zh"

    # Output
    output_format: OutputFormat = OutputFormat.TXT
    verbose: bool = False

    # Performance
    device: str = "cpu"
    threads: int = 0
    timeout_seconds: float = 30 * 60
    beam_size: int = 5
    best_of: int = 5
    temperature: float = 0.0

    # Long audio strategy
    enable_vad: bool = True
    max_segment_len: int = 300  # seconds, 0 = unbounded
    split_on_silence: bool = True

    def __post_init__(self):
        # Accept plain strings ("base", "json") from callers and job payloads
        object.__setattr__(self, "model", WhisperModel(self.model))
        object.__setattr__(self, "output_format", OutputFormat(self.output_format))

        if self.timeout_seconds <= 0:
            raise ValueError(f"Timeout must be positive, got {self.timeout_seconds}")
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"Temperature must be within [0, 1], got {self.temperature}")
        if self.threads < 0:
            raise ValueError(f"Thread count cannot be negative: {self.threads}")
        if self.max_segment_len < 0:
            raise ValueError(f"Max segment length cannot be negative: {self.max_segment_len}")

    @property
    def timeout_display(self) -> str:
        return format_duration(self.timeout_seconds)


def default_config() -> WhisperConfig:
    """Long-audio defaults: medium model, VAD on, 5 minute segments."""
    return WhisperConfig()


def fast_config() -> WhisperConfig:
    """Trades accuracy for speed."""
    return replace(
        default_config(),
        model=WhisperModel.BASE,
        beam_size=1,
        best_of=1,
        max_segment_len=180,
    )


def accurate_config() -> WhisperConfig:
    """Trades speed for accuracy; large model needs the longer deadline."""
    return replace(
        default_config(),
        model=WhisperModel.LARGE,
        beam_size=10,
        best_of=10,
        max_segment_len=600,
        timeout_seconds=60 * 60,
    )


PRESETS: Dict[str, Callable[[], WhisperConfig]] = {
    "default": default_config,
    "fast": fast_config,
    "accurate": accurate_config,
}


def get_preset(name: str) -> WhisperConfig:
    try:
        return PRESETS[name.lower()]()
    except KeyError:
        raise ValueError(f"Unknown preset '{name}'. Expected one of: {', '.join(PRESETS)}") from None


_NS_PER_SECOND = 1_000_000_000


def format_duration(seconds: float) -> str:
    """
    Renders 5 -> '5s', 1800 -> '30m0s', 3600 -> '1h0m0s', 0.5 -> '500ms'.
    Exact to the nanosecond; fractions keep every significant digit.
    """
    total_ns = round(seconds * _NS_PER_SECOND)
    if total_ns == 0:
        return "0s"

    sign = "-" if total_ns < 0 else ""
    total_ns = abs(total_ns)

    if total_ns < 1_000:
        return f"{sign}{total_ns}ns"
    if total_ns < 1_000_000:
        return f"{sign}{_decimal(*divmod(total_ns, 1_000), 3)}µs"
    if total_ns < _NS_PER_SECOND:
        return f"{sign}{_decimal(*divmod(total_ns, 1_000_000), 6)}ms"

    hours, rem = divmod(total_ns, 3600 * _NS_PER_SECOND)
    minutes, rem = divmod(rem, 60 * _NS_PER_SECOND)
    secs_text = _decimal(*divmod(rem, _NS_PER_SECOND), 9) + "s"

    if hours:
        return f"{sign}{hours}h{minutes}m{secs_text}"
    if minutes:
        return f"{sign}{minutes}m{secs_text}"
    return f"{sign}{secs_text}"


def _decimal(whole: int, fraction: int, digits: int) -> str:
    if not fraction:
        return str(whole)
    return f"{whole}.{fraction:0{digits}d}".rstrip("0")


@dataclass(frozen=True)
class TextSegment:
    """
    One timestamped phrase. `id` is unique within a single result only.
    """
    id: int
    start: float
    end: float
    text: str

    def __post_init__(self):
        if self.start < 0 or self.end < 0:
            raise ValueError(f"Segment {self.id}: timestamps cannot be negative.")
        if self.start > self.end:
            raise ValueError(f"Segment {self.id}: start ({self.start}) is after end ({self.end}).")


def validate_segment_order(segments: List[TextSegment]) -> None:
    """Raises ValueError unless segment start times are non-decreasing."""
    for previous, current in zip(segments, segments[1:]):
        if current.start < previous.start:
            raise ValueError(
                f"Segment {current.id} starts at {current.start}, before segment {previous.id} ({previous.start})."
            )


@dataclass(frozen=True)
class TranscriptionResult:
    """
    The reconciled output of one whisper run.
    """
    source_file: str
    model_used: WhisperModel
    full_text: str = ""
    language: str = ""
    duration_seconds: float = 0.0
    segments: List[TextSegment] = field(default_factory=list)

    # Where whisper wrote the plain-text transcript, if it wrote one.
    # Lives inside the per-call output directory, which is gone once the call returns.
    file_path: Optional[str] = None

    def __post_init__(self):
        validate_segment_order(self.segments)


@dataclass(frozen=True)
class BatchFailure:
    audio_path: str
    error: Exception


@dataclass
class BatchSummary:
    """
    Report returned after a batch completes.
    Results keep input order; failed inputs only show up in `failures`.
    """
    files_total: int = 0
    results: List[TranscriptionResult] = field(default_factory=list)
    failures: List[BatchFailure] = field(default_factory=list)

    @property
    def files_transcribed(self) -> int:
        return len(self.results)

    @property
    def files_failed(self) -> int:
        return len(self.failures)
