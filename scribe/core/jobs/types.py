from enum import Enum

class JobType(str, Enum):
    TRANSCRIPTION = "transcription"
    BATCH_TRANSCRIPTION = "batch_transcription"

class JobStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
