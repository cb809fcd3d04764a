from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from skrbl.db.session import get_db
from skrbl.core.exceptions import JobNotFoundError
from skrbl.schemas.job import JobResponse, JobStatusEnvelope
from skrbl.services.job_service import JobService

router = APIRouter()

@router.get("/{job_id}", response_model=JobStatusEnvelope)
def get_job_status(
    job_id: str,
    db: Session = Depends(get_db)
):
    """
    Poll the status and progress of an agent job
    """
    job = JobService.get_job(db, job_id)
    if not job:
        raise JobNotFoundError()
    return JobStatusEnvelope(data=JobResponse.from_job(job))
