from pydantic import BaseModel
from datetime import datetime
from typing import Optional, Dict, Any

class JobResponse(BaseModel):
    jobId: str
    jobType: str
    status: str  # queued, in_progress, complete, failed
    progress: int
    output: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_job(cls, job) -> "JobResponse":
        return cls(
            jobId=job.id,
            jobType=job.job_type,
            status=job.status,
            progress=job.progress,
            output=job.output,
            error=job.error,
            createdAt=job.created_at,
            updatedAt=job.updated_at,
        )

class JobStatusEnvelope(BaseModel):
    success: bool = True
    data: JobResponse
