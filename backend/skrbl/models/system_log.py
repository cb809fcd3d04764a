from sqlalchemy import Column, Integer, String, DateTime, JSON, Text
from skrbl.db.session import Base
from skrbl.utils.time import utc_now_naive

class SystemLog(Base):
    __tablename__ = "system_logs"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String, nullable=False, index=True)  # info, warning, error
    message = Column(Text, nullable=False)
    meta = Column(JSON)
    created_at = Column(DateTime, nullable=False, default=utc_now_naive, index=True)
