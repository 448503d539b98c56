"""Token-bucket rate limiting for any DataProvider."""

import logging
import threading
from collections.abc import Callable
from typing import Any

from channel_sync.config import Endpoint, RateLimitConfig
from channel_sync.data.cache import canonical_query, monotonic_ms
from channel_sync.data.models import ChannelSnapshot, VideoStat
from channel_sync.data.provider import DataProvider
from channel_sync.errors import SYNC_RATE_LIMIT_EXCEEDED, AppError, Err, Result
from channel_sync.monitoring.logging import error_extra

logger = logging.getLogger(__name__)


class TokenBucket:
    """A bucket of permits refilled continuously up to ``capacity``.

    Refill is lazy: each :meth:`try_acquire` adds
    ``elapsed_seconds * tokens_per_second`` tokens before checking. Fractions
    are kept, so a 2 tokens/s bucket yields a permit after 500 ms even when
    earlier calls only added half a token each. The bucket starts full.
    """

    def __init__(
        self,
        capacity: float,
        tokens_per_second: float,
        *,
        now: Callable[[], float] = monotonic_ms,
    ) -> None:
        self.capacity = capacity
        self.tokens_per_second = tokens_per_second
        self._now = now
        self._tokens = float(capacity)
        self._last_refill_at = now()

    @property
    def tokens(self) -> float:
        """Currently available tokens, without refilling."""
        return self._tokens

    def try_acquire(self) -> bool:
        """Refill, then take one token if available."""
        self._refill()
        if self._tokens >= 1:
            self._tokens -= 1
            return True
        return False

    def _refill(self) -> None:
        now = self._now()
        elapsed_seconds = max(now - self._last_refill_at, 0.0) / 1000.0
        self._tokens = min(self.capacity, self._tokens + elapsed_seconds * self.tokens_per_second)
        self._last_refill_at = now


class RateLimitedDataProvider:
    """Wrap a ``DataProvider`` with one token bucket per endpoint.

    A call that finds its bucket empty fails immediately with
    ``SYNC_RATE_LIMIT_EXCEEDED`` and never reaches the inner provider.
    """

    def __init__(
        self,
        inner: DataProvider,
        *,
        limits: RateLimitConfig | None = None,
        now: Callable[[], float] = monotonic_ms,
        name: str | None = None,
    ) -> None:
        self._inner = inner
        self._name = name
        self._lock = threading.Lock()
        cfg = limits or RateLimitConfig()
        endpoints: tuple[Endpoint, ...] = ("get_channel_stats", "get_video_stats", "get_recent_videos")
        self._buckets: dict[Endpoint, TokenBucket] = {}
        for endpoint in endpoints:
            bucket_cfg = cfg.for_endpoint(endpoint)
            self._buckets[endpoint] = TokenBucket(bucket_cfg.capacity, bucket_cfg.tokens_per_second, now=now)

    @property
    def name(self) -> str:
        return self._name if self._name is not None else f"{self._inner.name}:rate-limited"

    @property
    def configured(self) -> bool:
        return self._inner.configured

    @property
    def requires_auth(self) -> bool:
        return self._inner.requires_auth

    def get_channel_stats(self, channel_id: str) -> Result[ChannelSnapshot]:
        rejected = self._acquire("get_channel_stats", {"channel_id": channel_id})
        if rejected is not None:
            return rejected
        return self._inner.get_channel_stats(channel_id)

    def get_video_stats(self, video_ids: list[str]) -> Result[list[VideoStat]]:
        rejected = self._acquire("get_video_stats", {"video_ids": list(video_ids)})
        if rejected is not None:
            return rejected
        return self._inner.get_video_stats(video_ids)

    def get_recent_videos(self, channel_id: str, *, limit: int = 10) -> Result[list[VideoStat]]:
        rejected = self._acquire("get_recent_videos", {"channel_id": channel_id, "limit": limit})
        if rejected is not None:
            return rejected
        return self._inner.get_recent_videos(channel_id, limit=limit)

    def available_tokens(self, endpoint: Endpoint) -> float:
        return self._buckets[endpoint].tokens

    def _acquire(self, endpoint: Endpoint, query: dict[str, Any]) -> Err | None:
        """Return ``None`` if a token was taken, else the rate-limit error."""
        bucket = self._buckets[endpoint]
        with self._lock:
            if bucket.try_acquire():
                return None
            available = bucket.tokens

        error = AppError.create(
            SYNC_RATE_LIMIT_EXCEEDED,
            f"Rate limit exceeded for {endpoint}; retry later",
            "warning",
            {
                "endpoint": endpoint,
                "query": canonical_query(query),
                "capacity": bucket.capacity,
                "tokens_per_second": bucket.tokens_per_second,
                "available_tokens": available,
            },
        )
        logger.warning("Rate limit exceeded for %s", endpoint, extra=error_extra(error))
        return Err(error)
