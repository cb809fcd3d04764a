from sqlalchemy.orm import Session
from skrbl.models import SystemLog, WorkflowLog
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

def system_log(db: Session, type: str, message: str, meta: Optional[Dict[str, Any]] = None) -> bool:
    """Persist an operational event for the admin log view. Never raises."""
    try:
        db.add(SystemLog(type=type, message=message, meta=meta))
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to write system log '{message}': {e}")
        return False

def record_workflow(db: Session, status: str, agent_id: Optional[str] = None, workflow: Optional[str] = None,
                    user_id: Optional[str] = None, job_id: Optional[str] = None,
                    duration_ms: Optional[int] = None, details: Optional[Dict[str, Any]] = None) -> bool:
    """Append a workflowLogs row used by the analytics history route. Never raises."""
    try:
        db.add(WorkflowLog(
            user_id=user_id,
            agent_id=agent_id,
            workflow=workflow,
            job_id=job_id,
            status=status,
            duration_ms=duration_ms,
            details=details,
        ))
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to record workflow {workflow or agent_id}: {e}")
        return False
