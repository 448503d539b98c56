"""Live data provider backed by an injected adapter.

The provider never talks to the network itself. It delegates to a
:class:`ProviderAdapter` supplied by the caller, to a fixture (for local
development), or, when neither is given, to :class:`UnconfiguredAdapter`
which fails every call.
"""

import logging
from pathlib import Path

from channel_sync.data.fake import FakeDataProvider
from channel_sync.data.models import ChannelSnapshot, VideoStat
from channel_sync.data.provider import ProviderAdapter
from channel_sync.errors import SYNC_REAL_PROVIDER_NOT_CONFIGURED, AppError, Err, Result

logger = logging.getLogger(__name__)


class UnconfiguredAdapter:
    """Adapter used when no live client or fixture is available."""

    def get_channel_stats(self, channel_id: str) -> Result[ChannelSnapshot]:
        return self._fail("get_channel_stats")

    def get_video_stats(self, video_ids: list[str]) -> Result[list[VideoStat]]:
        return self._fail("get_video_stats")

    def get_recent_videos(self, channel_id: str, *, limit: int = 10) -> Result[list[VideoStat]]:
        return self._fail("get_recent_videos")

    @staticmethod
    def _fail(endpoint: str) -> Err:
        return Err(
            AppError.create(
                SYNC_REAL_PROVIDER_NOT_CONFIGURED,
                "Real data provider is not configured (missing adapter or credentials)",
                "error",
                {"endpoint": endpoint},
            )
        )


class RealDataProvider:
    """Provider for live analytics data.

    Args:
        adapter: Live client implementing the three query operations. Takes
            precedence over ``fixture_path`` when both are given.
        fixture_path: Serve a fixture instead of a live client.
        name: Override the default provider name.
        requires_auth: Override the default auth requirement.
    """

    def __init__(
        self,
        *,
        adapter: ProviderAdapter | None = None,
        fixture_path: Path | None = None,
        name: str | None = None,
        requires_auth: bool | None = None,
    ) -> None:
        if adapter is not None:
            self._adapter: ProviderAdapter = adapter
            self.configured = True
            default_name, default_auth = "real-adapter-provider", True
        elif fixture_path is not None:
            self._adapter = FakeDataProvider(Path(fixture_path), name="real-fixture-provider")
            self.configured = True
            default_name, default_auth = "real-fixture-provider", False
        else:
            self._adapter = UnconfiguredAdapter()
            self.configured = False
            default_name, default_auth = "real-provider-unconfigured", True

        self.name = name if name is not None else default_name
        self.requires_auth = requires_auth if requires_auth is not None else default_auth
        if not self.configured:
            logger.info("Real data provider is not configured; calls will fail until an adapter is supplied")

    def get_channel_stats(self, channel_id: str) -> Result[ChannelSnapshot]:
        return self._adapter.get_channel_stats(channel_id)

    def get_video_stats(self, video_ids: list[str]) -> Result[list[VideoStat]]:
        return self._adapter.get_video_stats(video_ids)

    def get_recent_videos(self, channel_id: str, *, limit: int = 10) -> Result[list[VideoStat]]:
        return self._adapter.get_recent_videos(channel_id, limit=limit)
