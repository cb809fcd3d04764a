from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional, Dict, Any

class LeadSubmit(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: EmailStr
    name: Optional[str] = None
    source: str = "website"
    page_path: Optional[str] = None
    vertical: Optional[str] = None  # business, sports
    offer_type: Optional[str] = None
    campaign: Optional[str] = None
    referrer: Optional[str] = None
    user_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

class LeadSubmitResponse(BaseModel):
    success: bool = True
    leadId: str
    status: str = "created"  # created, updated
    score: int
