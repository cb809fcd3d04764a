from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from skrbl.db.session import Base
from skrbl.utils.time import utc_now_naive
import uuid

class Lead(Base):
    __tablename__ = "leads"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=True, index=True)
    email = Column(String, nullable=False, index=True)
    name = Column(String)
    source = Column(String, nullable=False, default="website", index=True)
    page_path = Column(String)
    vertical = Column(String)  # business, sports
    offer_type = Column(String)
    campaign = Column(String)
    referrer = Column(String)
    status = Column(String, nullable=False, default="new")
    score = Column(Integer, nullable=False, default=0)
    metadata_ = Column("metadata", JSON)
    created_at = Column(DateTime, nullable=False, default=utc_now_naive)
    updated_at = Column(DateTime, nullable=False, default=utc_now_naive)

    activities = relationship("LeadActivity", back_populates="lead", order_by="LeadActivity.id")

class LeadActivity(Base):
    __tablename__ = "lead_activities"

    id = Column(Integer, primary_key=True, index=True)
    lead_id = Column(String, ForeignKey("leads.id"), nullable=False, index=True)
    activity_type = Column(String, nullable=False)  # form_submit, email_open, ...
    activity_data = Column(JSON)
    score_change = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utc_now_naive)

    lead = relationship("Lead", back_populates="activities")
