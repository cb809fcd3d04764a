from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from skrbl.core.rate_limiting import rate_limit_by_ip
from skrbl.db.session import get_db
from skrbl.schemas.analytics import AnalyticsHistoryResponse, WorkflowHistoryItem
from skrbl.services.analytics_service import AnalyticsService

router = APIRouter()

@router.get("/history", response_model=AnalyticsHistoryResponse, dependencies=[Depends(rate_limit_by_ip("analytics"))])
def get_workflow_history(
    userId: Optional[str] = None,
    agentId: Optional[str] = None,
    workflow: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    """
    Workflow run history, newest first
    """
    rows = AnalyticsService.workflow_history(db, user_id=userId, agent_id=agentId, workflow=workflow, limit=limit)
    return AnalyticsHistoryResponse(history=[WorkflowHistoryItem.model_validate(r) for r in rows])
