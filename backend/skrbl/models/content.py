from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from skrbl.db.session import Base
from skrbl.utils.time import utc_now_naive

class AgentLog(Base):
    __tablename__ = "agent-logs"

    id = Column(Integer, primary_key=True, index=True)
    agent = Column(String, nullable=False, index=True)
    user_id = Column(String, index=True)
    input = Column(JSON)
    business_name = Column(String)
    created_at = Column(DateTime, nullable=False, default=utc_now_naive)

class SocialContent(Base):
    __tablename__ = "social-content"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=True, index=True)
    job_id = Column(String, ForeignKey("agent_jobs.id"), nullable=True, index=True)
    business_name = Column(String, nullable=False)
    industry = Column(String, nullable=False)
    content = Column(JSON, nullable=False)  # {"platforms": [{"platform": ..., "posts": [...]}], "schedule": ...}
    params = Column(JSON)
    status = Column(String, default="completed")
    created_at = Column(DateTime, nullable=False, default=utc_now_naive)

class BrandingContent(Base):
    __tablename__ = "branding"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=True, index=True)
    job_id = Column(String, ForeignKey("agent_jobs.id"), nullable=True, index=True)
    business_name = Column(String, nullable=False)
    industry = Column(String, nullable=False)
    target_audience = Column(String)
    brand_identity = Column(JSON, nullable=False)
    params = Column(JSON)
    status = Column(String, default="completed")
    created_at = Column(DateTime, nullable=False, default=utc_now_naive)
