from pydantic import BaseModel, Field
from typing import Literal, Optional, Dict, Any

ContactMethod = Literal["sms", "email", "voice", "chat"]
MessageType = Literal["welcome", "onboarding", "followup", "custom"]
Urgency = Literal["low", "normal", "high"]

class ContactInfo(BaseModel):
    phone: Optional[str] = None
    email: Optional[str] = None

class PercyContactRequest(BaseModel):
    userId: str = Field(..., min_length=1)
    contactMethod: ContactMethod
    contactInfo: ContactInfo
    message: Optional[str] = None
    messageType: MessageType = "welcome"
    urgency: Urgency = "normal"
    testMode: bool = False

class PercyContactResponse(BaseModel):
    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
