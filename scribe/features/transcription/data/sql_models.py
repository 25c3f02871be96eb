import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, Float, Integer, ForeignKey, DateTime, JSON, Uuid
from sqlalchemy.orm import relationship
from scribe.core.database.base import Base
from scribe.core.jobs.models import JobModel


def utc_now():
    return datetime.now(timezone.utc)


class TranscriptionModel(Base):
    """
    The Header record for one transcribed audio file.
    """
    __tablename__ = "transcriptions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    job_id = Column(Uuid, ForeignKey("jobs.id"), nullable=True, index=True)

    source_path = Column(String, nullable=False)
    language = Column(String, default="")
    model_used = Column(String, nullable=False)
    duration_seconds = Column(Float, default=0.0)

    # The Full Text Blob (Useful for basic "CTRL+F" search)
    full_text = Column(Text, nullable=False, default="")

    # Run parameters (e.g. {"output_format": "json", "device": "cpu"})
    processing_meta = Column(JSON, default=dict)

    created_at = Column(DateTime(timezone=True), default=utc_now)

    job = relationship(JobModel)
    segments = relationship(
        "TranscriptionSegmentModel",
        back_populates="transcription",
        cascade="all, delete-orphan",
        order_by="TranscriptionSegmentModel.segment_index",
    )


class TranscriptionSegmentModel(Base):
    """
    One timestamped phrase. segment_index is whisper's own id, unique per transcription.
    """
    __tablename__ = "transcription_segments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    transcription_id = Column(Uuid, ForeignKey("transcriptions.id"), nullable=False)

    segment_index = Column(Integer, nullable=False)
    start_time = Column(Float, nullable=False)
    end_time = Column(Float, nullable=False)
    text = Column(Text, nullable=False)

    transcription = relationship("TranscriptionModel", back_populates="segments")
