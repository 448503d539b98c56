"""Shared pytest fixtures."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from channel_sync.data.models import ChannelSnapshot, VideoStat
from channel_sync.errors import Ok

SEED_FIXTURE = Path(__file__).resolve().parents[1] / "fixtures" / "seed-data.json"


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> None:
        self.now_ms += ms


def make_channel(channel_id: str = "UC-001", **overrides: object) -> ChannelSnapshot:
    data: dict[str, object] = {
        "channel_id": channel_id,
        "name": "Test",
        "description": "Test",
        "subscriber_count": 100,
        "video_count": 10,
        "view_count": 1000,
        "created_at": "2020-01-01T00:00:00.000Z",
    }
    data.update(overrides)
    return ChannelSnapshot(**data)  # type: ignore[arg-type]


def make_video(video_id: str, published_at: str, channel_id: str = "UC-001", **overrides: object) -> VideoStat:
    data: dict[str, object] = {
        "video_id": video_id,
        "channel_id": channel_id,
        "title": f"Video {video_id}",
        "published_at": published_at,
        "duration_seconds": 600,
        "view_count": 500,
        "like_count": 25,
        "comment_count": 5,
    }
    data.update(overrides)
    return VideoStat(**data)  # type: ignore[arg-type]


def make_inner(name: str = "test-provider", *, configured: bool = True, requires_auth: bool = False) -> MagicMock:
    """A MagicMock provider whose three endpoints succeed."""
    inner = MagicMock()
    inner.name = name
    inner.configured = configured
    inner.requires_auth = requires_auth
    inner.get_channel_stats.return_value = Ok(make_channel())
    inner.get_video_stats.return_value = Ok([])
    inner.get_recent_videos.return_value = Ok([])
    return inner


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def seed_fixture_path() -> Path:
    return SEED_FIXTURE
