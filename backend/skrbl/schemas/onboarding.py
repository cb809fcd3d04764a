from pydantic import BaseModel, Field
from typing import Optional, Dict, Any

class OnboardingUpdate(BaseModel):
    userId: str = Field(..., min_length=1)
    agentId: str = Field(..., min_length=1)
    onboarding: Dict[str, Any]

class OnboardingResponse(BaseModel):
    success: bool = True
    onboarding: Optional[Dict[str, Any]] = None
