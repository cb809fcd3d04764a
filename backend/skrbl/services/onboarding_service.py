from typing import Any, Dict, Optional
import logging

from sqlalchemy.orm import Session

from skrbl.models import UserSettings
from skrbl.utils.time import utc_now_naive

logger = logging.getLogger(__name__)

class OnboardingService:
    """Per-agent onboarding state stored in ``user_settings.onboarding``."""

    @staticmethod
    def save(db: Session, user_id: str, agent_id: str, state: Dict[str, Any]) -> UserSettings:
        row = db.query(UserSettings).filter(UserSettings.user_id == user_id).first()
        if row is None:
            row = UserSettings(user_id=user_id, onboarding={})
            db.add(row)
        # Reassign so the JSON column is flagged dirty
        row.onboarding = {**(row.onboarding or {}), agent_id: state}
        row.updated_at = utc_now_naive()
        db.commit()
        db.refresh(row)
        return row

    @staticmethod
    def get(db: Session, user_id: str, agent_id: str) -> Optional[Dict[str, Any]]:
        row = db.query(UserSettings).filter(UserSettings.user_id == user_id).first()
        if row is None:
            return None
        return (row.onboarding or {}).get(agent_id)
