from pydantic import BaseModel
from datetime import datetime
from typing import Optional, List, Dict, Any

class SystemLogOut(BaseModel):
    id: int
    type: str
    message: str
    meta: Optional[Dict[str, Any]] = None
    created_at: datetime

    class Config:
        from_attributes = True

class SystemLogsResponse(BaseModel):
    success: bool = True
    logs: List[SystemLogOut]
