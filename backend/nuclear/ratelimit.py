"""
Fixed-window rate limiting for mutating requests.
State lives in an injected store (app.state.rate_limiter), not in module globals, so tests and
each app instance get their own counters. Swap the store for a shared one (e.g. Redis) when
running several workers.
"""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Protocol

from fastapi import Depends, HTTPException, Request, status

from nuclear.api.deps import get_current_user
from nuclear.models.user import User

logger = logging.getLogger(__name__)

MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class RateLimitStore(Protocol):
    def incr(self, key: str, window_seconds: int) -> tuple[int, float]:
        """Increment key's counter; return (count in current window, seconds until it resets)."""
        ...


class MemoryRateLimitStore:
    """Keyed counters with expiry, process-local. Thread-safe; expired keys are swept every prune_every incr calls."""

    def __init__(self, clock: Callable[[], float] = time.monotonic, prune_every: int = 1000):
        if prune_every < 1:
            raise ValueError("prune_every must be at least 1")
        self._clock = clock
        self._lock = threading.Lock()
        self._counters: dict[str, tuple[int, float]] = {}  # key -> (count, expires_at)
        self._prune_every = prune_every
        self._since_prune = 0

    def incr(self, key: str, window_seconds: int) -> tuple[int, float]:
        with self._lock:
            now = self._clock()
            self._since_prune += 1
            if self._since_prune >= self._prune_every:
                self._prune_locked(now)
            count, expires_at = self._counters.get(key, (0, 0.0))
            if expires_at <= now:
                count, expires_at = 0, now + window_seconds
            count += 1
            self._counters[key] = (count, expires_at)
            return count, expires_at - now

    def prune(self) -> int:
        """Drop expired counters; return how many were removed."""
        with self._lock:
            return self._prune_locked(self._clock())

    def _prune_locked(self, now: float) -> int:
        self._since_prune = 0
        expired = [k for k, (_, exp) in self._counters.items() if exp <= now]
        for k in expired:
            del self._counters[k]
        if expired:
            logger.debug("Pruned %s expired rate limit counter(s)", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._counters)


@dataclass
class RateLimitResult:
    allowed: bool
    count: int
    retry_after: int


class FixedWindowRateLimiter:
    def __init__(self, store: RateLimitStore, limit: int, window_seconds: int):
        if limit < 1 or window_seconds < 1:
            raise ValueError("limit and window_seconds must be at least 1")
        self.store = store
        self.limit = limit
        self.window_seconds = window_seconds

    def hit(self, key: str) -> RateLimitResult:
        count, reset_in = self.store.incr(key, self.window_seconds)
        return RateLimitResult(allowed=count <= self.limit, count=count, retry_after=max(1, int(reset_in + 0.999)))


def enforce_rate_limit(request: Request, current_user: User = Depends(get_current_user)) -> None:
    """Dependency: count mutating requests per user; 429 once the window's limit is exceeded."""
    if request.method not in MUTATING_METHODS:
        return
    limiter: FixedWindowRateLimiter | None = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        return
    result = limiter.hit(f"user:{current_user.id}")
    if not result.allowed:
        logger.warning("Rate limit exceeded for user %s (%s requests)", current_user.id, result.count)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests. Try again later.",
            headers={"Retry-After": str(result.retry_after)},
        )
