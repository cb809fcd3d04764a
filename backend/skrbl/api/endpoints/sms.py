from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from skrbl.api.deps import get_twilio
from skrbl.core.config import settings
from skrbl.core.rate_limiting import limiter
from skrbl.db.session import get_db
from skrbl.schemas.sms import (
    SendVerificationRequest, SendVerificationResponse, VerifyCodeRequest, VerifyCodeResponse,
)
from skrbl.services.messaging import TwilioClient
from skrbl.services.sms_verification_service import SmsVerificationService
from skrbl.services.system_log import system_log
from skrbl.utils.time import isoformat

router = APIRouter()

@router.post("/send-verification", response_model=SendVerificationResponse)
@limiter.limit(settings.SMS_VERIFICATION_RATE_LIMIT)
async def send_verification(
    request: Request,
    body: SendVerificationRequest,
    db: Session = Depends(get_db),
    twilio: TwilioClient = Depends(get_twilio),
):
    """
    Text a 6-digit verification code to a VIP phone number
    """
    row, message_id = await SmsVerificationService.send_code(
        db, twilio, body.phoneNumber, vip_tier=body.vipTier, message=body.message
    )
    system_log(db, "info", "SMS verification sent", {"vipTier": body.vipTier, "messageId": message_id})
    return SendVerificationResponse(messageId=message_id, expiresAt=isoformat(row.expires_at))

@router.post("/verify-code", response_model=VerifyCodeResponse)
@limiter.limit(settings.SMS_VERIFICATION_RATE_LIMIT)
def verify_code(
    request: Request,
    body: VerifyCodeRequest,
    db: Session = Depends(get_db),
):
    verified = SmsVerificationService.verify_code(db, body.phoneNumber, body.code)
    return VerifyCodeResponse(success=verified, verified=verified)
