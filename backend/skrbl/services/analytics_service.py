from typing import List, Optional

from sqlalchemy.orm import Session

from skrbl.core.config import settings
from skrbl.models import SystemLog, WorkflowLog

class AnalyticsService:
    @staticmethod
    def clamp_limit(limit: Optional[int]) -> int:
        if not limit or limit < 1:
            return settings.ANALYTICS_HISTORY_DEFAULT_LIMIT
        return min(limit, settings.ANALYTICS_HISTORY_MAX_LIMIT)

    @staticmethod
    def workflow_history(db: Session, user_id: Optional[str] = None, agent_id: Optional[str] = None,
                         workflow: Optional[str] = None, limit: Optional[int] = None) -> List[WorkflowLog]:
        query = db.query(WorkflowLog)
        if user_id:
            query = query.filter(WorkflowLog.user_id == user_id)
        if agent_id:
            query = query.filter(WorkflowLog.agent_id == agent_id)
        if workflow:
            query = query.filter(WorkflowLog.workflow == workflow)
        return (
            query.order_by(WorkflowLog.created_at.desc(), WorkflowLog.id.desc())
            .limit(AnalyticsService.clamp_limit(limit))
            .all()
        )

    @staticmethod
    def system_logs(db: Session, type: Optional[str] = None, limit: Optional[int] = None) -> List[SystemLog]:
        query = db.query(SystemLog)
        if type:
            query = query.filter(SystemLog.type == type)
        return (
            query.order_by(SystemLog.created_at.desc(), SystemLog.id.desc())
            .limit(AnalyticsService.clamp_limit(limit))
            .all()
        )
