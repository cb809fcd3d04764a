"""
Outbound SMS, voice and email delivery.

Twilio (SMS and voice) and Resend (email) are called over their REST APIs
with httpx. When credentials are absent the clients return a successful
mock delivery so development and test environments never send anything.
Transport errors are retried a few times; HTTP error responses are not.
"""

import time
from dataclasses import dataclass
from typing import Dict, Optional
from xml.sax.saxutils import escape
import logging

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    before_sleep_log,
)

from skrbl.core.config import settings

logger = logging.getLogger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"
RESEND_API_URL = "https://api.resend.com/emails"
REQUEST_TIMEOUT = 15.0


@dataclass
class DeliveryResult:
    success: bool
    provider: str
    message_id: Optional[str] = None
    status: Optional[str] = None
    error: Optional[str] = None
    mock: bool = False


def _mock_id(kind: str) -> str:
    return f"mock_{kind}_{int(time.time() * 1000)}"


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
    retry=retry_if_exception_type(httpx.TransportError),
    before_sleep=before_sleep_log(logger, logging.INFO),
    reraise=True,
)
async def _post(url: str, transport=None, **kwargs) -> httpx.Response:
    async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT, transport=transport) as client:
        return await client.post(url, **kwargs)


def _json_body(response: httpx.Response) -> Dict:
    try:
        body = response.json()
    except ValueError:
        logger.warning(f"Non-JSON success body ({response.status_code}): {response.text[:100]}")
        return {}
    return body if isinstance(body, dict) else {}


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:300]
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)[:300]
    return str(body)[:300]


class TwilioClient:
    provider = "twilio"

    def __init__(self, account_sid: Optional[str] = None, auth_token: Optional[str] = None,
                 from_number: Optional[str] = None, transport=None):
        self.account_sid = account_sid if account_sid is not None else settings.TWILIO_ACCOUNT_SID
        self.auth_token = auth_token if auth_token is not None else settings.TWILIO_AUTH_TOKEN
        self.from_number = from_number if from_number is not None else (
            settings.TWILIO_PHONE_NUMBER or settings.TWILIO_SANDBOX_NUMBER
        )
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    async def _create(self, resource: str, data: Dict[str, str]) -> DeliveryResult:
        url = f"{TWILIO_API_BASE}/Accounts/{self.account_sid}/{resource}.json"
        try:
            response = await _post(url, transport=self.transport, data=data,
                                   auth=(self.account_sid, self.auth_token))
        except httpx.HTTPError as e:
            logger.error(f"Twilio {resource} request failed: {e}")
            return DeliveryResult(success=False, provider=self.provider, error=str(e))

        if response.status_code in (200, 201):
            body = _json_body(response)
            return DeliveryResult(success=True, provider=self.provider,
                                  message_id=body.get("sid"), status=body.get("status"))

        detail = _error_detail(response)
        logger.error(f"Twilio {resource} returned {response.status_code}: {detail}")
        return DeliveryResult(success=False, provider=self.provider,
                              error=f"Twilio API error ({response.status_code}): {detail}")

    async def send_sms(self, to: str, body: str) -> DeliveryResult:
        if not self.configured:
            logger.info(f"Twilio not configured, mocking SMS to {to[-4:].rjust(len(to), '*')}")
            return DeliveryResult(success=True, provider="twilio_mock", message_id=_mock_id("sms"),
                                  status="mock_sent", mock=True)
        return await self._create("Messages", {"To": to, "From": self.from_number, "Body": body})

    async def place_call(self, to: str, text: str) -> DeliveryResult:
        if not self.configured:
            logger.info("Twilio not configured, mocking voice call")
            return DeliveryResult(success=True, provider="twilio_mock", message_id=_mock_id("voice"),
                                  status="mock_scheduled", mock=True)
        twiml = f'<Response><Say voice="alice">{escape(text)}</Say></Response>'
        return await self._create("Calls", {"To": to, "From": self.from_number, "Twiml": twiml})


class ResendClient:
    provider = "resend"

    def __init__(self, api_key: Optional[str] = None, from_email: Optional[str] = None, transport=None):
        self.api_key = api_key if api_key is not None else settings.RESEND_API_KEY
        self.from_email = from_email or settings.PERCY_FROM_EMAIL
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def send_email(self, to: str, subject: str, html: str, text: Optional[str] = None) -> DeliveryResult:
        if not self.configured:
            logger.info(f"Resend not configured, mocking email '{subject}'")
            return DeliveryResult(success=True, provider="resend_mock", message_id=_mock_id("email"),
                                  status="mock_sent", mock=True)

        payload = {"from": self.from_email, "to": [to], "subject": subject, "html": html}
        if text:
            payload["text"] = text
        try:
            response = await _post(RESEND_API_URL, transport=self.transport, json=payload,
                                   headers={"Authorization": f"Bearer {self.api_key}"})
        except httpx.HTTPError as e:
            logger.error(f"Resend request failed: {e}")
            return DeliveryResult(success=False, provider=self.provider, error=str(e))

        if response.status_code in (200, 201):
            return DeliveryResult(success=True, provider=self.provider,
                                  message_id=_json_body(response).get("id"), status="sent")

        detail = _error_detail(response)
        logger.error(f"Resend returned {response.status_code}: {detail}")
        return DeliveryResult(success=False, provider=self.provider,
                              error=f"Resend API error ({response.status_code}): {detail}")


def get_twilio_client() -> TwilioClient:
    return TwilioClient()


def get_resend_client() -> ResendClient:
    return ResendClient()
