import secrets
from datetime import datetime, timedelta
from typing import Optional, Tuple
import logging

from sqlalchemy.orm import Session

from skrbl.core.config import settings
from skrbl.core.exceptions import ForbiddenError, UpstreamError
from skrbl.models import SmsVerification
from skrbl.schemas.sms import normalize_phone
from skrbl.services.messaging import TwilioClient
from skrbl.utils.time import utc_now_naive

logger = logging.getLogger(__name__)

MAX_VERIFY_ATTEMPTS = 5


def generate_code() -> str:
    return f"{secrets.randbelow(10 ** 6):06d}"


def is_whitelisted(phone_number: str) -> bool:
    """An empty whitelist allows every number."""
    whitelist = settings.VIP_SMS_WHITELIST
    if not whitelist:
        return True
    allowed = set()
    for entry in whitelist:
        try:
            allowed.add(normalize_phone(entry))
        except ValueError:
            logger.warning("Ignoring malformed VIP_SMS_WHITELIST entry")
    return phone_number in allowed


def verification_text(code: str, message: Optional[str] = None) -> str:
    text = f"Your SKRBL AI verification code is {code}. It expires in {settings.SMS_CODE_TTL_MINUTES} minutes."
    return f"{message}\n\n{text}" if message else text


class SmsVerificationService:
    @staticmethod
    async def send_code(db: Session, twilio: TwilioClient, phone_number: str, vip_tier: Optional[str] = None,
                        message: Optional[str] = None) -> Tuple[SmsVerification, str]:
        """Send a 6-digit code and store it. Returns ``(row, message_id)``."""
        if not is_whitelisted(phone_number):
            logger.warning(f"SMS verification refused for non-whitelisted number ending {phone_number[-4:]}")
            raise ForbiddenError("Phone number is not enabled for VIP SMS")

        code = generate_code()
        result = await twilio.send_sms(phone_number, verification_text(code, message))
        if not result.success:
            raise UpstreamError(result.error or "Failed to send verification SMS")

        now = utc_now_naive()
        row = SmsVerification(
            phone_number=phone_number,
            code=code,
            vip_tier=vip_tier,
            message_id=result.message_id,
            expires_at=now + timedelta(minutes=settings.SMS_CODE_TTL_MINUTES),
            created_at=now,
        )
        db.add(row)
        db.commit()
        db.refresh(row)
        return row, result.message_id

    @staticmethod
    def verify_code(db: Session, phone_number: str, code: str, now: Optional[datetime] = None) -> bool:
        """Check the latest pending code for the number; a match marks it verified."""
        now = now or utc_now_naive()
        row = (
            db.query(SmsVerification)
            .filter(
                SmsVerification.phone_number == phone_number,
                SmsVerification.verified.is_(False),
                SmsVerification.expires_at > now,
            )
            .order_by(SmsVerification.created_at.desc(), SmsVerification.id.desc())
            .first()
        )
        if row is None or row.attempts >= MAX_VERIFY_ATTEMPTS:
            return False

        row.attempts += 1
        if secrets.compare_digest(row.code, code):
            row.verified = True
        db.commit()
        return row.verified
