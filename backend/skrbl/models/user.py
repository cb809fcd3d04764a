from sqlalchemy import Column, Integer, String, DateTime, JSON
from skrbl.db.session import Base
from skrbl.utils.time import utc_now_naive

class UserSettings(Base):
    __tablename__ = "user_settings"

    user_id = Column(String, primary_key=True)
    onboarding = Column(JSON, nullable=False, default=dict)  # {agent_id: state}
    updated_at = Column(DateTime, nullable=False, default=utc_now_naive)

class UserRole(Base):
    __tablename__ = "user_roles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    role = Column(String, nullable=False)  # user, vip, admin, superadmin
    created_at = Column(DateTime, nullable=False, default=utc_now_naive)
