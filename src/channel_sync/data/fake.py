"""Fixture-backed data provider for tests and development.

Loads a JSON fixture once at construction and serves it through the same
DataProvider interface used by the live provider.
"""

import json
import logging
from pathlib import Path

from channel_sync.data.models import ChannelSnapshot, FixtureDataset, VideoStat
from channel_sync.errors import (
    SYNC_FAKE_DATA_NOT_FOUND,
    SYNC_FAKE_FIXTURE_LOAD_FAILED,
    AppError,
    Err,
    Ok,
    Result,
    SyncError,
)

logger = logging.getLogger(__name__)


def load_fixture(fixture_path: Path) -> FixtureDataset:
    """Read and parse a fixture file, raising :class:`SyncError` on failure."""
    try:
        raw = json.loads(fixture_path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            msg = "fixture root must be a JSON object"
            raise TypeError(msg)
        dataset = FixtureDataset.from_fixture(raw)
    except (OSError, ValueError, TypeError, KeyError) as exc:
        raise SyncError(
            AppError.create(
                SYNC_FAKE_FIXTURE_LOAD_FAILED,
                f"Could not load fixture {fixture_path}: {exc}",
                "error",
                {"fixture_path": str(fixture_path)},
            )
        ) from exc
    if dataset.channel is None:
        raise SyncError(
            AppError.create(
                SYNC_FAKE_FIXTURE_LOAD_FAILED,
                f"Fixture {fixture_path} has no channel",
                "error",
                {"fixture_path": str(fixture_path)},
            )
        )
    return dataset


class FakeDataProvider:
    """Deterministic provider serving a single channel from a fixture file.

    Args:
        fixture_path: JSON fixture (seed data or a previous recording).
        name: Provider name reported to callers.
    """

    configured = True
    requires_auth = False

    def __init__(self, fixture_path: Path, *, name: str = "fake-data-provider") -> None:
        self.name = name
        self._fixture_path = Path(fixture_path)
        self._dataset = load_fixture(self._fixture_path)
        logger.info(
            "Loaded fixture %s (%d videos, %d daily rows)",
            self._fixture_path,
            len(self._dataset.videos),
            len(self._dataset.channel_daily),
        )

    @property
    def dataset(self) -> FixtureDataset:
        """The parsed fixture, including profile and daily metric rows."""
        return self._dataset

    # ------------------------------------------------------------------
    # DataProvider protocol methods
    # ------------------------------------------------------------------

    def get_channel_stats(self, channel_id: str) -> Result[ChannelSnapshot]:
        channel = self._dataset.channel
        if channel is None or channel.channel_id != channel_id:
            return self._not_found("channel", {"channel_id": channel_id})
        return Ok(channel)

    def get_video_stats(self, video_ids: list[str]) -> Result[list[VideoStat]]:
        """Return fixture videos in request order; duplicates in the request are kept."""
        by_id = {video.video_id: video for video in self._dataset.videos}
        matched = [by_id[video_id] for video_id in video_ids if video_id in by_id]
        if not matched:
            return self._not_found("videos", {"video_ids": list(video_ids)})
        return Ok(matched)

    def get_recent_videos(self, channel_id: str, *, limit: int = 10) -> Result[list[VideoStat]]:
        channel = self._dataset.channel
        if channel is None or channel.channel_id != channel_id:
            return self._not_found("channel", {"channel_id": channel_id, "limit": limit})
        videos = [v for v in self._dataset.videos if v.channel_id == channel_id]
        videos.sort(key=lambda v: v.published_at, reverse=True)
        return Ok(videos[: max(limit, 0)])

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _not_found(self, what: str, context: dict[str, object]) -> Err:
        return Err(
            AppError.create(
                SYNC_FAKE_DATA_NOT_FOUND,
                f"No fixture {what} matches the request",
                "error",
                {**context, "fixture_path": str(self._fixture_path)},
            )
        )
