"""
Rate limiting configuration and utilities

Two layers are used:

* ``limiter`` - a slowapi limiter for decorator-style limits on abuse-prone
  endpoints (SMS sends).
* ``FixedWindowRateLimiter`` - the per-IP fixed-window counter shared by the
  onboarding, analytics and agent routes. Counters live in process memory by
  default, or in Redis when ``RATE_LIMIT_BACKEND=redis`` so several API
  instances share one window.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from fastapi import Depends, Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from sqlalchemy.orm import Session
import logging

from skrbl.core.config import settings
from skrbl.core.exceptions import RateLimitedError
from skrbl.db.session import get_db
from skrbl.services.system_log import system_log

logger = logging.getLogger(__name__)

# Create rate limiter instance
limiter = Limiter(key_func=get_remote_address)


def custom_rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Custom handler for rate limit exceeded"""
    logger.warning(f"Rate limit exceeded for {get_remote_address(request)}: {exc.detail}")

    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "success": False,
            "error": f"Too many requests. Limit: {exc.detail}",
        }
    )


def client_ip(request: Request) -> str:
    """Resolve the caller IP, preferring the first hop of X-Forwarded-For"""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


@dataclass
class WindowEntry:
    count: int
    reset_at: float


class MemoryWindowStore:
    """Process-local counters. Reset happens lazily on the next request."""

    def __init__(self):
        self._entries: Dict[str, WindowEntry] = {}
        self._lock = threading.Lock()

    def hit(self, key: str, window_seconds: int, now: float) -> int:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or now >= entry.reset_at:
                entry = WindowEntry(count=0, reset_at=now + window_seconds)
                self._entries[key] = entry
            entry.count += 1
            return entry.count

    def clear(self):
        with self._lock:
            self._entries.clear()


class RedisWindowStore:
    """Counters shared through Redis (INCR + EXPIRE on first hit)."""

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        if self._client is None:
            import redis
            self._client = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)
        return self._client

    def hit(self, key: str, window_seconds: int, now: float) -> int:
        window_start = int(now // window_seconds)
        redis_key = f"rl:{key}:{window_start}"
        current = self.client.incr(redis_key)
        if current == 1:
            self.client.expire(redis_key, window_seconds)
        return current

    def clear(self):
        for key in self.client.scan_iter("rl:*"):
            self.client.delete(key)


class FixedWindowRateLimiter:
    """Fixed-window counter keyed by an arbitrary string (IP, IP+route)."""

    def __init__(
        self,
        max_requests: int = None,
        window_seconds: int = None,
        store=None,
        clock: Callable[[], float] = time.time,
    ):
        self.max_requests = max_requests or settings.RATE_LIMIT_MAX_REQUESTS
        self.window_seconds = window_seconds or settings.RATE_LIMIT_WINDOW_SECONDS
        self.store = store or MemoryWindowStore()
        self.clock = clock

    def check_rate_limit(self, key: str) -> bool:
        """Record one request for ``key``; True means the caller is over the limit."""
        count = self.store.hit(key, self.window_seconds, self.clock())
        return count > self.max_requests

    def reset(self):
        self.store.clear()


def build_rate_limiter(backend: Optional[str] = None) -> FixedWindowRateLimiter:
    backend = backend or settings.RATE_LIMIT_BACKEND
    if backend == "redis":
        return FixedWindowRateLimiter(store=RedisWindowStore())
    return FixedWindowRateLimiter()


ip_rate_limiter = build_rate_limiter()


def check_rate_limit(key: str) -> bool:
    return ip_rate_limiter.check_rate_limit(key)


def rate_limit_by_ip(scope: str):
    """Dependency factory: 429 once the caller exceeds the window for ``scope``."""

    def dependency(request: Request, db: Session = Depends(get_db)) -> None:
        ip = client_ip(request)
        if check_rate_limit(f"{scope}:{ip}"):
            logger.warning(f"Rate limit exceeded on {scope} for {ip}")
            system_log(db, "warning", f"Rate limit exceeded on {request.method} {request.url.path}", {"ip": ip})
            raise RateLimitedError()

    return dependency
