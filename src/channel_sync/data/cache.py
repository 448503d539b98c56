"""Simple TTL cache for provider results."""

import json
import time
from collections.abc import Callable
from typing import Any


def monotonic_ms() -> float:
    """Default clock for caches and rate limiters, in milliseconds."""
    return time.monotonic() * 1000.0


def canonical_query(query: dict[str, Any]) -> str:
    """Serialise query arguments so equal queries always produce the same string."""
    return json.dumps(query, sort_keys=True, separators=(",", ":"), default=str)


class TTLCache:
    """In-memory cache with per-key TTL expiration.

    Time comes from the injected ``now`` clock (milliseconds), so expiry is
    deterministic under test. An entry is live while ``now() < expires_at``.
    """

    def __init__(self, *, now: Callable[[], float] = monotonic_ms) -> None:
        self._now = now
        self._store: dict[str, tuple[Any, float]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._now() >= expires_at:
            del self._store[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl_ms: float) -> None:
        self._store[key] = (value, self._now() + ttl_ms)

    def prune(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self._now()
        expired = [key for key, (_, expires_at) in self._store.items() if now >= expires_at]
        for key in expired:
            del self._store[key]
        return len(expired)

    def invalidate_prefix(self, prefix: str) -> None:
        for key in [k for k in self._store if k.startswith(prefix)]:
            del self._store[key]

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
