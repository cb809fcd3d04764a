"""
Percy contact dispatch: compose the message for the requested type and
urgency, deliver it over SMS, email, voice or internal chat, and record the
attempt in ``percy_contacts``.
"""

import hashlib
import html
import re
import time
from typing import Any, Dict, Optional
import logging

from sqlalchemy.orm import Session

from skrbl.core.config import settings
from skrbl.core.exceptions import ValidationError
from skrbl.models import PercyContact
from skrbl.schemas.percy import PercyContactRequest
from skrbl.services.messaging import DeliveryResult, ResendClient, TwilioClient
from skrbl.utils.time import isoformat, utc_now_naive

logger = logging.getLogger(__name__)

CATCHPHRASE = "Your wish is my command protocol!"
GREETING = f"🌟 Hello! I'm Percy, your Cosmic Concierge at SKRBL AI. {CATCHPHRASE}"

DEFAULT_WELCOME = (
    "Welcome to SKRBL AI! I'm here to help you navigate our superhero league of AI agents. "
    "What amazing project can we bring to life together?"
)
DEFAULT_ONBOARDING = "Let's unlock the full potential of our AI superhero team."
DEFAULT_FOLLOWUP = "Just checking in to see how your SKRBL AI experience is going. Need any assistance from our superhero team?"

EMAIL_SUBJECTS = {
    "welcome": "🌟 Welcome to SKRBL AI - Percy is here to help!",
    "onboarding": "🚀 Your SKRBL AI journey begins now!",
    "followup": "💫 Quick check-in from your AI Concierge",
}

EMOJI_PATTERN = re.compile("[\u2600-\u27BF\uE000-\uF8FF\U0001F000-\U0001FAFF\uFE0F\u200D]")
URL_PATTERN = re.compile(r"https?://\S+")

CAPABILITIES = {
    "name": "Percy the Cosmic Concierge",
    "catchphrase": CATCHPHRASE,
    "availableContactMethods": ["email", "sms", "voice", "chat"],
    "supportedMessageTypes": ["welcome", "onboarding", "followup", "custom"],
    "urgencyLevels": ["low", "normal", "high"],
    "features": ["twilio-sms", "twilio-voice", "resend-email", "contact-logging"],
}


def compose_message(message: Optional[str], message_type: str, urgency: str, test_mode: bool) -> str:
    dashboard = f"{settings.BASE_URL.rstrip('/')}/dashboard"
    if message_type == "welcome":
        text = (
            f"{GREETING}\n\n{message or DEFAULT_WELCOME}\n\n"
            "🚀 Ready to get started? Just reply and I'll guide you to the perfect AI solution!"
        )
    elif message_type == "onboarding":
        text = (
            f"{GREETING}\n\nI've prepared a personalized onboarding experience just for you! "
            f"{message or DEFAULT_ONBOARDING}\n\n✨ Your personalized dashboard is ready at {dashboard}"
        )
    elif message_type == "followup":
        text = (
            f"Hello from Percy! 🚀 {message or DEFAULT_FOLLOWUP}\n\n"
            "💬 Hit reply if you need anything - I'm always here to help!"
        )
    else:
        text = message or ""

    if urgency == "high":
        text = f"🚨 PRIORITY MESSAGE {text}"
    if test_mode:
        text = f"[TEST MODE] {text}"
    return text


def email_subject(message_type: str, urgency: str) -> str:
    subject = EMAIL_SUBJECTS.get(message_type, f"🌟 Percy here from SKRBL AI - {message_type}")
    if urgency == "high":
        subject = f"🚨 PRIORITY: {subject}"
    return subject


def voice_text(text: str) -> str:
    """Strip emoji, collapse line breaks and replace links for text-to-speech."""
    text = EMOJI_PATTERN.sub("", text)
    text = re.sub(r"\n+", " ", text)
    text = URL_PATTERN.sub("Visit our website", text)
    return re.sub(r" {2,}", " ", text).strip()


def email_html(subject: str, text: str) -> str:
    body = html.escape(text).replace("\n", "<br>")
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>{html.escape(subject)}</title></head>
<body style="font-family: 'Segoe UI', Arial, sans-serif; line-height: 1.6; color: #333;">
  <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
    <div style="background: linear-gradient(135deg, #1E90FF, #30D5C8); color: white; padding: 30px 20px; text-align: center;">
      <h1>Percy, Your AI Concierge</h1>
      <p style="font-style: italic;">{CATCHPHRASE}</p>
    </div>
    <div style="padding: 30px 20px; border: 1px solid #ddd;">{body}</div>
    <p style="text-align: center; color: #666; font-size: 12px;">This message was sent by Percy from SKRBL AI</p>
  </div>
</body>
</html>"""


def contact_hash(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return hashlib.sha256(value.strip().lower().encode("utf-8")).hexdigest()[:16]


class PercyService:
    @staticmethod
    def capabilities(include_services: bool = False,
                     twilio: Optional[TwilioClient] = None,
                     resend: Optional[ResendClient] = None) -> Dict[str, Any]:
        result: Dict[str, Any] = {"success": True, "percy": dict(CAPABILITIES), "timestamp": isoformat(utc_now_naive())}
        if include_services:
            twilio = twilio or TwilioClient()
            resend = resend or ResendClient()
            result["services"] = {
                "twilio": {
                    "configured": twilio.configured,
                    "sandbox": bool(settings.TWILIO_SANDBOX_NUMBER),
                    "phone": bool(settings.TWILIO_PHONE_NUMBER),
                },
                "resend": {
                    "configured": resend.configured,
                    "fromEmail": bool(settings.PERCY_FROM_EMAIL),
                },
            }
        return result

    @staticmethod
    async def deliver(request: PercyContactRequest, text: str, twilio: TwilioClient,
                      resend: ResendClient) -> DeliveryResult:
        method = request.contactMethod
        info = request.contactInfo

        if method in ("sms", "voice") and not info.phone:
            raise ValidationError(f"Phone number required for {method} contact")
        if method == "email" and not info.email:
            raise ValidationError("Email address required for email contact")

        if method == "sms":
            return await twilio.send_sms(info.phone, text)
        if method == "voice":
            return await twilio.place_call(info.phone, voice_text(text))
        if method == "email":
            subject = email_subject(request.messageType, request.urgency)
            return await resend.send_email(info.email, subject, email_html(subject, text), text=text)

        logger.info(f"Percy chat message logged for {request.userId}")
        return DeliveryResult(success=True, provider="internal_chat",
                              message_id=f"chat_{int(time.time() * 1000)}", status="logged")

    @staticmethod
    def log_attempt(db: Session, request: PercyContactRequest, result: DeliveryResult) -> None:
        try:
            db.add(PercyContact(
                user_id=request.userId,
                contact_method=request.contactMethod,
                message_type=request.messageType,
                urgency=request.urgency,
                test_mode=request.testMode,
                provider=result.provider,
                message_id=result.message_id,
                status=result.status,
                success=result.success,
                error_message=result.error,
                contact_info_hash=contact_hash(request.contactInfo.email or request.contactInfo.phone),
            ))
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to log Percy contact attempt: {e}")

    @staticmethod
    async def contact(db: Session, request: PercyContactRequest, twilio: TwilioClient,
                      resend: ResendClient) -> Dict[str, Any]:
        text = compose_message(request.message, request.messageType, request.urgency, request.testMode)
        result = await PercyService.deliver(request, text, twilio, resend)
        PercyService.log_attempt(db, request, result)

        return {
            "success": result.success,
            "message": f"Percy contact attempt via {request.contactMethod}",
            "data": {
                "contactMethod": request.contactMethod,
                "messageType": request.messageType,
                "messageId": result.message_id,
                "status": result.status,
                "provider": result.provider,
                "percyCatchphrase": CATCHPHRASE,
                "urgency": request.urgency,
                "testMode": request.testMode,
                "timestamp": isoformat(utc_now_naive()),
            },
            "error": result.error,
        }
