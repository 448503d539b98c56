"""Pydantic data models for channel analytics fixtures and provider payloads."""

from typing import Any

from pydantic import BaseModel, Field


def _str_field(data: dict[str, Any], key: str) -> str:
    """Extract an optional string field, defaulting to empty string."""
    return data.get(key) or ""


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    """Extract a nullable string field, mapping empty strings to None."""
    return data.get(key) or None


def _int_field(data: dict[str, Any], key: str) -> int:
    """Extract an optional numeric field, defaulting to 0."""
    return int(data.get(key) or 0)


def _section(value: Any, key: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        msg = f"{key} entries must be JSON objects, got {type(value).__name__}"
        raise TypeError(msg)
    return value


def _records(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    """Return the list under ``key``, requiring every entry to be an object."""
    rows = data.get(key) or []
    if not isinstance(rows, list):
        msg = f"{key} must be a JSON array"
        raise TypeError(msg)
    return [_section(row, key) for row in rows]


class ChannelSnapshot(BaseModel):
    """Point-in-time statistics for a single channel."""

    channel_id: str
    name: str
    description: str = ""
    thumbnail_url: str | None = None
    subscriber_count: int = 0
    video_count: int = 0
    view_count: int = 0
    created_at: str = ""
    last_sync_at: str | None = None

    @classmethod
    def from_fixture(cls, data: dict[str, Any]) -> "ChannelSnapshot":
        """Parse a channel dict from fixture or recording JSON."""
        return cls(
            channel_id=str(data["channelId"]),
            name=data["name"],
            description=_str_field(data, "description"),
            thumbnail_url=_optional_str(data, "thumbnailUrl"),
            subscriber_count=_int_field(data, "subscriberCount"),
            video_count=_int_field(data, "videoCount"),
            view_count=_int_field(data, "viewCount"),
            created_at=_str_field(data, "createdAt"),
            last_sync_at=_optional_str(data, "lastSyncAt"),
        )

    def to_fixture(self) -> dict[str, Any]:
        return {
            "channelId": self.channel_id,
            "name": self.name,
            "description": self.description,
            "thumbnailUrl": self.thumbnail_url,
            "subscriberCount": self.subscriber_count,
            "videoCount": self.video_count,
            "viewCount": self.view_count,
            "createdAt": self.created_at,
            "lastSyncAt": self.last_sync_at,
        }


class VideoStat(BaseModel):
    """Statistics for a single video."""

    video_id: str
    channel_id: str
    title: str
    description: str = ""
    thumbnail_url: str | None = None
    published_at: str
    duration_seconds: int | None = None
    view_count: int = 0
    like_count: int = 0
    comment_count: int = 0

    @classmethod
    def from_fixture(cls, data: dict[str, Any]) -> "VideoStat":
        """Parse a video dict from fixture or recording JSON."""
        duration = data.get("durationSeconds")
        return cls(
            video_id=str(data["videoId"]),
            channel_id=str(data["channelId"]),
            title=data["title"],
            description=_str_field(data, "description"),
            thumbnail_url=_optional_str(data, "thumbnailUrl"),
            published_at=data["publishedAt"],
            duration_seconds=int(duration) if duration is not None else None,
            view_count=_int_field(data, "viewCount"),
            like_count=_int_field(data, "likeCount"),
            comment_count=_int_field(data, "commentCount"),
        )

    def to_fixture(self) -> dict[str, Any]:
        return {
            "videoId": self.video_id,
            "channelId": self.channel_id,
            "title": self.title,
            "description": self.description,
            "thumbnailUrl": self.thumbnail_url,
            "publishedAt": self.published_at,
            "durationSeconds": self.duration_seconds,
            "viewCount": self.view_count,
            "likeCount": self.like_count,
            "commentCount": self.comment_count,
        }


class ChannelProfile(BaseModel):
    """The local profile a fixture channel belongs to."""

    id: str
    name: str
    is_active: bool = True
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_fixture(cls, data: dict[str, Any]) -> "ChannelProfile":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            is_active=bool(data.get("isActive", True)),
            created_at=_str_field(data, "createdAt"),
            updated_at=_str_field(data, "updatedAt"),
        )


class ChannelDailyMetric(BaseModel):
    """One day of aggregated channel metrics."""

    date: str
    subscribers: int = 0
    views: int = 0
    videos: int = 0
    likes: int = 0
    comments: int = 0
    watch_time_minutes: int | None = None

    @classmethod
    def from_fixture(cls, data: dict[str, Any]) -> "ChannelDailyMetric":
        watch_time = data.get("watchTimeMinutes")
        return cls(
            date=data["date"],
            subscribers=_int_field(data, "subscribers"),
            views=_int_field(data, "views"),
            videos=_int_field(data, "videos"),
            likes=_int_field(data, "likes"),
            comments=_int_field(data, "comments"),
            watch_time_minutes=int(watch_time) if watch_time is not None else None,
        )


class FixtureDataset(BaseModel):
    """Everything a fixture (or a replayed recording) file contains.

    Seed fixtures carry a profile, one channel, its per-day metric rows and a
    list of videos. Recordings only carry ``channel``, ``videos`` and
    ``generatedAt``, so the other sections are optional.
    """

    profile: ChannelProfile | None = None
    channel: ChannelSnapshot | None = None
    channel_daily: list[ChannelDailyMetric] = Field(default_factory=list)
    videos: list[VideoStat] = Field(default_factory=list)
    generated_at: str | None = None

    @classmethod
    def from_fixture(cls, data: dict[str, Any]) -> "FixtureDataset":
        """Parse a whole fixture document."""
        profile = data.get("profile")
        channel = data.get("channel")
        return cls(
            profile=ChannelProfile.from_fixture(_section(profile, "profile")) if profile else None,
            channel=ChannelSnapshot.from_fixture(_section(channel, "channel")) if channel else None,
            channel_daily=[ChannelDailyMetric.from_fixture(row) for row in _records(data, "channelDaily")],
            videos=[VideoStat.from_fixture(v) for v in _records(data, "videos")],
            generated_at=data.get("generatedAt"),
        )
