from pydantic import BaseModel, Field, field_validator
from typing import Optional
import re

E164_PATTERN = re.compile(r"^\+?[1-9]\d{7,14}$")

def normalize_phone(value: str) -> str:
    digits = re.sub(r"[\s\-\(\)\.]", "", value or "")
    if not E164_PATTERN.match(digits):
        raise ValueError("phoneNumber must be a valid international number")
    return digits if digits.startswith("+") else f"+{digits}"

class SendVerificationRequest(BaseModel):
    phoneNumber: str
    vipTier: Optional[str] = None
    message: Optional[str] = None

    @field_validator("phoneNumber")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return normalize_phone(v)

class SendVerificationResponse(BaseModel):
    success: bool = True
    messageId: str
    expiresAt: str

class VerifyCodeRequest(BaseModel):
    phoneNumber: str
    code: str = Field(..., pattern=r"^\d{6}$")

    @field_validator("phoneNumber")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return normalize_phone(v)

class VerifyCodeResponse(BaseModel):
    success: bool
    verified: bool
