"""Cached wrapper around any DataProvider."""

import logging
import threading
from collections.abc import Callable
from typing import Any

from channel_sync.config import Endpoint, EndpointTTLConfig
from channel_sync.data.cache import TTLCache, canonical_query, monotonic_ms
from channel_sync.data.models import ChannelSnapshot, VideoStat
from channel_sync.data.provider import DataProvider
from channel_sync.errors import Result

logger = logging.getLogger(__name__)


class CachedDataProvider:
    """Wrap a ``DataProvider`` with an independent TTL per endpoint.

    Only successful results are cached. Failures are returned unchanged and
    the next call goes to the inner provider again. Expired entries are
    pruned whenever a new result is stored.
    """

    def __init__(
        self,
        inner: DataProvider,
        *,
        ttl_ms: EndpointTTLConfig | None = None,
        now: Callable[[], float] = monotonic_ms,
        name: str | None = None,
    ) -> None:
        self._inner = inner
        self._ttl_ms = ttl_ms or EndpointTTLConfig()
        self._cache = TTLCache(now=now)
        self._name = name
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name if self._name is not None else f"{self._inner.name}:cached"

    @property
    def configured(self) -> bool:
        return self._inner.configured

    @property
    def requires_auth(self) -> bool:
        return self._inner.requires_auth

    def get_channel_stats(self, channel_id: str) -> Result[ChannelSnapshot]:
        return self._cached(
            "get_channel_stats",
            {"channel_id": channel_id},
            lambda: self._inner.get_channel_stats(channel_id),
        )

    def get_video_stats(self, video_ids: list[str]) -> Result[list[VideoStat]]:
        return self._cached(
            "get_video_stats",
            {"video_ids": list(video_ids)},
            lambda: self._inner.get_video_stats(video_ids),
        )

    def get_recent_videos(self, channel_id: str, *, limit: int = 10) -> Result[list[VideoStat]]:
        return self._cached(
            "get_recent_videos",
            {"channel_id": channel_id, "limit": limit},
            lambda: self._inner.get_recent_videos(channel_id, limit=limit),
        )

    def invalidate(self, endpoint: Endpoint | None = None) -> None:
        """Drop cached entries for one endpoint, or for all of them."""
        with self._lock:
            if endpoint is None:
                self._cache.clear()
            else:
                self._cache.invalidate_prefix(f"{endpoint}:")

    def _cached(self, endpoint: Endpoint, query: dict[str, Any], call: Callable[[], Result]) -> Result:
        ttl = self._ttl_ms.for_endpoint(endpoint)
        if ttl <= 0:
            return call()

        cache_key = f"{endpoint}:{canonical_query(query)}"
        with self._lock:
            cached: Result | None = self._cache.get(cache_key)
            if cached is not None:
                logger.debug("Cache hit for %s", cache_key)
                return cached

            result = call()
            if result.ok:
                self._cache.prune()
                self._cache.set(cache_key, result, ttl)
            else:
                logger.debug("Not caching failed %s: %s", endpoint, result.error.code)
            return result
