from sqlalchemy import Boolean, Column, Integer, String, DateTime, Text
from skrbl.db.session import Base
from skrbl.utils.time import utc_now_naive

class PercyContact(Base):
    __tablename__ = "percy_contacts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    contact_method = Column(String, nullable=False)  # sms, email, voice, chat
    message_type = Column(String, nullable=False)
    urgency = Column(String, nullable=False, default="normal")
    test_mode = Column(Boolean, nullable=False, default=False)
    provider = Column(String)
    message_id = Column(String)
    status = Column(String)
    success = Column(Boolean, nullable=False, default=False)
    error_message = Column(Text)
    contact_info_hash = Column(String)
    created_at = Column(DateTime, nullable=False, default=utc_now_naive)

class SmsVerification(Base):
    __tablename__ = "sms_verifications"

    id = Column(Integer, primary_key=True, index=True)
    phone_number = Column(String, nullable=False, index=True)
    code = Column(String, nullable=False)
    vip_tier = Column(String)
    message_id = Column(String)
    verified = Column(Boolean, nullable=False, default=False)
    attempts = Column(Integer, nullable=False, default=0)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utc_now_naive)
