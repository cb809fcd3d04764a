"""
n8n webhook trigger for email sequences.

One POST per sequence to ``{base}/webhook/{sequence_id}``. Failures are
reported back to the caller and never retried.
"""

import re
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

import httpx

from skrbl.core.config import settings

logger = logging.getLogger(__name__)

USER_AGENT = "SKRBL-AI-Email/1.0"


@dataclass
class TriggerResult:
    success: bool
    workflow_id: Optional[str] = None
    error: Optional[str] = None


def normalize_base_url(raw: Optional[str]) -> str:
    """Strip trailing slashes and a trailing ``/webhook`` so paths can be appended."""
    base = (raw or "").strip().rstrip("/")
    return re.sub(r"/webhook$", "", base, flags=re.IGNORECASE)


class N8nClient:
    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None,
                 timeout: Optional[float] = None, noop: Optional[bool] = None, transport=None):
        self.base_url = normalize_base_url(settings.N8N_BASE_URL if base_url is None else base_url)
        self.api_key = settings.N8N_API_KEY if api_key is None else api_key
        self.timeout = timeout or settings.N8N_REQUEST_TIMEOUT
        self.noop = settings.FF_N8N_NOOP if noop is None else noop
        self.transport = transport

    def webhook_url(self, sequence_id: str) -> str:
        return f"{self.base_url}/webhook/{sequence_id}"

    async def trigger_sequence(self, sequence_id: str, payload: Dict[str, Any]) -> TriggerResult:
        if self.noop:
            logger.info(f"[NOOP] Skipping n8n email sequence {sequence_id}")
            return TriggerResult(success=True, workflow_id=f"noop_{sequence_id}_{int(time.time() * 1000)}")

        if not self.base_url:
            return TriggerResult(success=False, error="N8N base URL not configured")

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
            "User-Agent": USER_AGENT,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.webhook_url(sequence_id), json=payload, headers=headers)
            if response.status_code >= 400:
                detail = response.text[:300]
                raise httpx.HTTPStatusError(
                    f"N8n webhook failed: {response.status_code} {response.reason_phrase}"
                    + (f" - {detail}" if detail else ""),
                    request=response.request,
                    response=response,
                )
            try:
                body = response.json()
            except ValueError:
                body = {}
            workflow_id = body.get("workflowId") if isinstance(body, dict) else None
            return TriggerResult(success=True, workflow_id=workflow_id or sequence_id)
        except httpx.HTTPError as e:
            logger.error(f"n8n trigger for {sequence_id} failed: {e}")
            return TriggerResult(success=False, error=str(e))


def get_n8n_client() -> N8nClient:
    return N8nClient()
