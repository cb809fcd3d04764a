from sqlalchemy.orm import Session
from skrbl.models import AgentJob
from skrbl.models.job import JOB_QUEUED, JOB_IN_PROGRESS, JOB_COMPLETE, JOB_FAILED
from skrbl.utils.time import utc_now_naive
from typing import Any, Dict, Optional
import uuid
import logging

logger = logging.getLogger(__name__)

STARTED_PROGRESS = 5

def clamp_progress(progress: int) -> int:
    return max(0, min(100, int(progress)))

class JobService:
    """Status transitions for agent jobs.

    Each transition is one read followed by one write. An unknown job id
    returns None and nothing is created. Jobs in a terminal state
    (complete, failed) are returned untouched.
    """

    @staticmethod
    def create_job(db: Session, job_type: str, user_id: Optional[str] = None,
                   job_id: Optional[str] = None, input_data: Optional[Dict[str, Any]] = None) -> AgentJob:
        now = utc_now_naive()
        job = AgentJob(
            id=job_id or str(uuid.uuid4()),
            job_type=job_type,
            user_id=user_id,
            status=JOB_QUEUED,
            progress=0,
            input=input_data,
            created_at=now,
            updated_at=now,
        )
        db.add(job)
        db.commit()
        db.refresh(job)
        logger.info(f"Created {job_type} job {job.id}")
        return job

    @staticmethod
    def get_job(db: Session, job_id: str) -> Optional[AgentJob]:
        return db.query(AgentJob).filter(AgentJob.id == job_id).first()

    @staticmethod
    def _load_mutable(db: Session, job_id: str, action: str) -> Optional[AgentJob]:
        job = JobService.get_job(db, job_id)
        if not job:
            logger.warning(f"Cannot {action}: job {job_id} not found")
            return None
        if job.is_terminal:
            logger.warning(f"Cannot {action}: job {job_id} is already {job.status}")
        return job

    @staticmethod
    def _save(db: Session, job: AgentJob) -> AgentJob:
        job.updated_at = utc_now_naive()
        db.commit()
        db.refresh(job)
        return job

    @staticmethod
    def mark_job_started(db: Session, job_id: str) -> Optional[AgentJob]:
        job = JobService._load_mutable(db, job_id, "start")
        if not job or job.is_terminal:
            return job
        job.status = JOB_IN_PROGRESS
        job.progress = max(job.progress or 0, STARTED_PROGRESS)
        return JobService._save(db, job)

    @staticmethod
    def update_job_progress(db: Session, job_id: str, progress: int) -> Optional[AgentJob]:
        """Clamp into [0, 100]; progress is never lowered."""
        job = JobService._load_mutable(db, job_id, "update progress")
        if not job or job.is_terminal:
            return job
        job.progress = max(job.progress or 0, clamp_progress(progress))
        return JobService._save(db, job)

    @staticmethod
    def mark_job_complete(db: Session, job_id: str, output: Optional[Dict[str, Any]] = None) -> Optional[AgentJob]:
        job = JobService._load_mutable(db, job_id, "complete")
        if not job or job.is_terminal:
            return job
        job.status = JOB_COMPLETE
        job.progress = 100
        job.output = output
        job.error = None
        logger.info(f"Job {job_id} complete")
        return JobService._save(db, job)

    @staticmethod
    def mark_job_failed(db: Session, job_id: str, error: Optional[str]) -> Optional[AgentJob]:
        job = JobService._load_mutable(db, job_id, "fail")
        if not job or job.is_terminal:
            return job
        job.status = JOB_FAILED
        job.error = error or "Unknown error"
        logger.error(f"Job {job_id} failed: {job.error}")
        return JobService._save(db, job)
