"""
Per-owner, per-action rate limiting.

The limiter is created and owned by the application and injected into
the orchestrator. Attempt timestamps live in a store with TTL
semantics so an external cache can back it in multi-process setups.
"""

import logging
import math
import time
from typing import Callable, Protocol

from prepcoach.core.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


class RateLimiter(Protocol):
    """Anything that can veto an owner's action."""

    def check(self, owner_id: str, action: str) -> None:
        """Record an attempt, raising RateLimitExceededError when over budget."""
        ...


class TTLStore(Protocol):
    """Key-value store whose entries expire."""

    def get(self, key: str) -> list[float] | None: ...

    def set(self, key: str, value: list[float], ttl_seconds: float) -> None: ...


class InMemoryTTLStore:
    """Process-local TTLStore."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[float, list[float]]] = {}

    def get(self, key: str) -> list[float] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at <= self._clock():
            del self._entries[key]
            return None
        return list(value)

    def set(self, key: str, value: list[float], ttl_seconds: float) -> None:
        self._entries[key] = (self._clock() + ttl_seconds, list(value))


class SlidingWindowRateLimiter:
    """Allows `max_attempts` per (owner, action) within a sliding window."""

    def __init__(
        self,
        store: TTLStore,
        max_attempts: int = 5,
        window_seconds: float = 15 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._clock = clock

    def check(self, owner_id: str, action: str) -> None:
        now = self._clock()
        key = f"{owner_id}:{action}"
        attempts = [t for t in self.store.get(key) or [] if now - t < self.window_seconds]

        if len(attempts) >= self.max_attempts:
            retry_after = math.ceil(self.window_seconds - (now - attempts[0]))
            logger.warning(f"Rate limit hit: owner={owner_id} action={action}")
            raise RateLimitExceededError(action, max(retry_after, 1))

        attempts.append(now)
        self.store.set(key, attempts, self.window_seconds)
