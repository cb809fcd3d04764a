from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List, Dict, Any

class EmailTriggerRequest(BaseModel):
    triggerType: str = Field(..., min_length=1)
    userId: str = Field(..., min_length=1)
    userEmail: str = Field(..., min_length=1)
    userRole: str = "client"
    metadata: Dict[str, Any] = {}

class SequenceResult(BaseModel):
    sequenceId: str
    sequenceName: str
    triggered: bool
    workflowId: Optional[str] = None
    error: Optional[str] = None

class EmailTriggerResponse(BaseModel):
    success: bool
    triggeredSequences: List[SequenceResult] = []
    failedSequences: List[SequenceResult] = []
    message: Optional[str] = None

class EnrollmentOut(BaseModel):
    id: int
    user_id: str
    sequence_id: str
    trigger_type: str
    user_role: Optional[str] = None
    active: bool
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="metadata_")
    created_at: datetime

    class Config:
        from_attributes = True

class EnrollmentListResponse(BaseModel):
    sequences: List[EnrollmentOut]

class DripProcessResponse(BaseModel):
    success: bool = True
    processed: int
    sent: int = 0
    failed: int = 0
    cancelled: int = 0
