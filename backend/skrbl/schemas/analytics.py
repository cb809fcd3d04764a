from pydantic import BaseModel
from datetime import datetime
from typing import Optional, List, Dict, Any

class WorkflowHistoryItem(BaseModel):
    id: int
    user_id: Optional[str] = None
    agent_id: Optional[str] = None
    workflow: Optional[str] = None
    job_id: Optional[str] = None
    status: str
    duration_ms: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    created_at: datetime

    class Config:
        from_attributes = True

class AnalyticsHistoryResponse(BaseModel):
    success: bool = True
    history: List[WorkflowHistoryItem]
