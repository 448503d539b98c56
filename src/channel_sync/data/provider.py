"""Provider protocols for the data layer abstraction.

The fixture provider, the live provider, the recording decorator and the
cache / rate-limit decorators all satisfy :class:`DataProvider` via
structural typing, so any of them can wrap or replace any other.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pathlib import Path

    from channel_sync.data.models import ChannelSnapshot, VideoStat
    from channel_sync.errors import Result


class ProviderAdapter(Protocol):
    """A live client (e.g. a network API wrapper) backing ``RealDataProvider``."""

    def get_channel_stats(self, channel_id: str) -> Result[ChannelSnapshot]: ...

    def get_video_stats(self, video_ids: list[str]) -> Result[list[VideoStat]]: ...

    def get_recent_videos(self, channel_id: str, *, limit: int = 10) -> Result[list[VideoStat]]: ...


class DataProvider(ProviderAdapter, Protocol):
    """Structural protocol for channel analytics providers.

    Besides the three query operations, every provider exposes its
    ``name``, whether it is ``configured`` and whether it ``requires_auth``.
    """

    @property
    def name(self) -> str: ...

    @property
    def configured(self) -> bool: ...

    @property
    def requires_auth(self) -> bool: ...


class RecordingProvider(DataProvider, Protocol):
    """A provider that also persists what it serves to a replayable file."""

    def get_last_record_path(self) -> Path | None: ...
