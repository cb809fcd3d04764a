from sqlalchemy import Column, Integer, String, DateTime, JSON, Text
from skrbl.db.session import Base
from skrbl.utils.time import utc_now_naive
import uuid

JOB_QUEUED = "queued"
JOB_IN_PROGRESS = "in_progress"
JOB_COMPLETE = "complete"
JOB_FAILED = "failed"

TERMINAL_STATUSES = (JOB_COMPLETE, JOB_FAILED)

class AgentJob(Base):
    __tablename__ = "agent_jobs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    job_type = Column(String, nullable=False, index=True)  # socialBot, branding, ...
    user_id = Column(String, index=True)
    status = Column(String, nullable=False, default=JOB_QUEUED, index=True)
    progress = Column(Integer, nullable=False, default=0)
    input = Column(JSON)
    output = Column(JSON)
    error = Column(Text)
    created_at = Column(DateTime, nullable=False, default=utc_now_naive)
    updated_at = Column(DateTime, nullable=False, default=utc_now_naive)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
