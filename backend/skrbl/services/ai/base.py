"""
Base AI service types

Standard response/usage containers and the error hierarchy shared by the
text-generation provider and the agents that call it.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class AIUsageMetrics:
    """Token usage for a single provider call"""
    provider: str
    model: str
    tokens_input: int = 0
    tokens_output: int = 0
    latency_ms: int = 0
    timestamp: float = 0.0

    def __post_init__(self):
        if self.timestamp == 0.0:
            self.timestamp = time.time()


@dataclass
class AIResponse:
    """Standardized AI response format"""
    content: str
    usage: AIUsageMetrics
    metadata: Dict[str, Any] = field(default_factory=dict)
    success: bool = True
    error: Optional[str] = None


class AIServiceError(Exception):
    """Base exception for AI service errors"""
    def __init__(self, message: str, provider: str = "", model: str = "", original_error: Exception = None):
        self.message = message
        self.provider = provider
        self.model = model
        self.original_error = original_error
        super().__init__(self.message)


class RateLimitError(AIServiceError):
    """Rate limit exceeded error"""
    pass


class ProviderError(AIServiceError):
    """Provider-specific error"""
    pass


class EmptyCompletionError(AIServiceError):
    """Provider answered without any text"""
    pass
