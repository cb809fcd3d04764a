from sqlalchemy import Column, Integer, String, DateTime, JSON
from skrbl.db.session import Base
from skrbl.utils.time import utc_now_naive

class WorkflowLog(Base):
    __tablename__ = "workflowLogs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, index=True)
    agent_id = Column(String, index=True)
    workflow = Column(String, index=True)
    job_id = Column(String, index=True)
    status = Column(String, nullable=False)
    duration_ms = Column(Integer)
    details = Column(JSON)
    created_at = Column(DateTime, nullable=False, default=utc_now_naive, index=True)
