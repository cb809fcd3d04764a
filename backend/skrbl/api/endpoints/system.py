from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from skrbl.api.deps import CurrentUser, require_admin
from skrbl.db.session import get_db
from skrbl.schemas.system import SystemLogOut, SystemLogsResponse
from skrbl.services.analytics_service import AnalyticsService

router = APIRouter()

@router.get("/logs", response_model=SystemLogsResponse)
def get_system_logs(
    type: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Recent system log entries, admins only
    """
    logs = AnalyticsService.system_logs(db, type=type, limit=limit)
    return SystemLogsResponse(logs=[SystemLogOut.model_validate(log) for log in logs])
