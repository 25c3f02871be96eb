# File: scribe/core/jobs/manager.py

import logging
from typing import Optional
from uuid import UUID
from datetime import datetime, timezone
from scribe.core.database.connection import SessionLocal
from .models import JobModel
from .types import JobType, JobStatus

logger = logging.getLogger(__name__)

class JobManager:
    """
    The Central Dispatcher.
    It doesn't know *how* to transcribe, but it knows *who* can.
    """

    def submit_job(self, job_type: JobType, params: Optional[dict] = None) -> UUID:
        """Create a Job Record in PENDING state."""
        with SessionLocal() as db:
            job = JobModel(job_type=job_type, payload=dict(params or {}))
            db.add(job)
            db.commit()
            db.refresh(job)
            logger.info(f"Job Submitted: {job.id} [{job_type.value}]")
            return job.id

    def run_job(self, job_id: UUID) -> Optional[JobStatus]:
        """
        Executes a specific job by routing it to the appropriate feature handler.
        Returns the final status, or None if the job does not exist.
        """
        with SessionLocal() as db:
            job = db.get(JobModel, job_id)
            if not job:
                logger.error(f"Job {job_id} not found.")
                return None

            # Read routing info before the commit expires the instance
            job_type = job.job_type
            payload = dict(job.payload or {})

            # Update Status -> PROCESSING
            job.status = JobStatus.PROCESSING
            job.started_at = datetime.now(timezone.utc)
            db.commit()

            try:
                logger.info(f"Starting Job {job_id} ({job_type.value})...")

                result = self._route_to_feature(job_id, job_type, payload)

                # Update Status -> COMPLETED
                job.result_meta = result
                job.status = JobStatus.COMPLETED
                logger.info(f"Job {job_id} Completed successfully.")

            except NotImplementedError as e:
                # Configuration error
                job.status = JobStatus.FAILED
                job.error_message = f"Configuration Error: {str(e)}"
                logger.error(f"Job {job_id} Failed: {e}")

            except Exception as e:
                # Execution error
                job.status = JobStatus.FAILED
                job.error_message = str(e)
                logger.exception(f"Job {job_id} Failed: {e}")

            finally:
                job.finished_at = datetime.now(timezone.utc)
                db.commit()

            return job.status

    def _route_to_feature(self, job_id: UUID, job_type: JobType, payload: dict) -> dict:
        """
        Routes the job to the correct Feature Handler.
        Uses lazy imports to prevent circular dependencies.
        """
        if job_type == JobType.TRANSCRIPTION:
            from scribe.features.transcription.service.job_handler import TranscriptionHandler
            return TranscriptionHandler().handle(job_id, payload)

        elif job_type == JobType.BATCH_TRANSCRIPTION:
            from scribe.features.transcription.service.job_handler import BatchTranscriptionHandler
            return BatchTranscriptionHandler().handle(job_id, payload)

        raise NotImplementedError(f"No handler registered for JobType: {job_type}")
