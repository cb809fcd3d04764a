from sqlalchemy import Boolean, Column, Index, Integer, String, DateTime, JSON, Text
from skrbl.db.session import Base
from skrbl.utils.time import utc_now_naive

class EmailSequenceEnrollment(Base):
    __tablename__ = "email_sequences"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    sequence_id = Column(String, nullable=False)
    trigger_type = Column(String, nullable=False)
    user_role = Column(String)
    user_email = Column(String)
    active = Column(Boolean, nullable=False, default=True)
    metadata_ = Column("metadata", JSON)
    created_at = Column(DateTime, nullable=False, default=utc_now_naive)

    __table_args__ = (
        # At most one active enrollment per user and sequence
        Index(
            "uq_email_sequences_active_enrollment",
            "user_id",
            "sequence_id",
            unique=True,
            postgresql_where=active.is_(True),
            sqlite_where=active.is_(True),
        ),
    )

class EmailQueueItem(Base):
    __tablename__ = "email_queue"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, index=True)
    enrollment_id = Column(Integer, index=True)
    sequence_id = Column(String)
    step = Column(Integer, default=0)
    recipient_email = Column(String, nullable=False)
    template = Column(String, nullable=False)
    subject = Column(String, nullable=False)
    html_content = Column(Text, nullable=False)
    template_data = Column(JSON)
    scheduled_for = Column(DateTime, nullable=False, index=True)
    status = Column(String, nullable=False, default="pending", index=True)  # pending, sent, failed
    attempts = Column(Integer, nullable=False, default=0)
    last_error = Column(Text)
    sent_at = Column(DateTime)
    created_at = Column(DateTime, nullable=False, default=utc_now_naive)

class EmailLog(Base):
    __tablename__ = "email_logs"

    id = Column(Integer, primary_key=True, index=True)
    recipient_email = Column(String, nullable=False)
    template = Column(String, nullable=False)
    status = Column(String, nullable=False)
    provider_message_id = Column(String)
    sent_at = Column(DateTime, nullable=False, default=utc_now_naive)
