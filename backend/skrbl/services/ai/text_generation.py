"""
OpenAI text generation used for best-effort content enrichment.

A call is made exactly once and awaited under a timeout. Callers use
``enrich`` which never raises: on any failure it logs a warning and
returns the fallback text unchanged.
"""

import asyncio
import time
from typing import Optional
import logging

import openai
from openai import AsyncOpenAI

from skrbl.core.config import settings
from skrbl.services.ai.base import (
    AIResponse,
    AIServiceError,
    AIUsageMetrics,
    EmptyCompletionError,
    ProviderError,
    RateLimitError,
)

logger = logging.getLogger(__name__)


class TextGenerationService:
    """Thin wrapper over ``chat.completions.create``"""

    provider = "openai"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, client=None):
        self.model = model or settings.DEFAULT_TEXT_MODEL
        api_key = api_key or settings.OPENAI_API_KEY
        if client is None and not api_key:
            raise AIServiceError("OpenAI API key not configured", self.provider, self.model)
        self.client = client or AsyncOpenAI(api_key=api_key, timeout=settings.AI_REQUEST_TIMEOUT)

    async def generate(self, prompt: str, max_tokens: int = 150, temperature: float = 0.7,
                       system_prompt: str = "") -> AIResponse:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        start_time = time.time()
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except openai.RateLimitError as e:
            raise RateLimitError(f"OpenAI rate limit exceeded: {e}", self.provider, self.model, e)
        except openai.APIError as e:
            raise ProviderError(f"OpenAI API error: {e}", self.provider, self.model, e)

        content = (response.choices[0].message.content or "").strip()
        if not content:
            raise EmptyCompletionError("OpenAI returned an empty completion", self.provider, self.model)

        usage = getattr(response, "usage", None)
        return AIResponse(
            content=content,
            usage=AIUsageMetrics(
                provider=self.provider,
                model=self.model,
                tokens_input=getattr(usage, "prompt_tokens", 0) or 0,
                tokens_output=getattr(usage, "completion_tokens", 0) or 0,
                latency_ms=int((time.time() - start_time) * 1000),
            ),
            metadata={"finish_reason": response.choices[0].finish_reason},
        )

    async def enrich(self, prompt: str, fallback: str, max_tokens: int = 150,
                     timeout: Optional[float] = None, system_prompt: str = "") -> str:
        """Return generated text, or ``fallback`` on timeout or provider error."""
        timeout = timeout if timeout is not None else settings.AI_ENRICHMENT_TIMEOUT
        try:
            response = await asyncio.wait_for(
                self.generate(prompt, max_tokens=max_tokens, system_prompt=system_prompt),
                timeout=timeout,
            )
            return response.content
        except asyncio.TimeoutError:
            logger.warning(f"Text enrichment timed out after {timeout}s, keeping template text")
        except AIServiceError as e:
            logger.warning(f"Text enrichment failed, keeping template text: {e.message}")
        except Exception as e:
            logger.warning(f"Unexpected enrichment error, keeping template text: {e}")
        return fallback


def get_text_generation_service() -> Optional[TextGenerationService]:
    """None when no OpenAI key is configured; enrichment is then skipped."""
    if not settings.OPENAI_API_KEY:
        return None
    return TextGenerationService()
