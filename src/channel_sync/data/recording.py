"""Recording decorator that captures provider responses to a replayable file."""

import json
import logging
import threading
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

from channel_sync.data.models import ChannelSnapshot, VideoStat
from channel_sync.data.provider import DataProvider
from channel_sync.errors import SYNC_RECORD_SAVE_FAILED, AppError, Err, Ok, Result
from channel_sync.monitoring.logging import error_extra

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


class RecordingDataProvider:
    """Wrap a ``DataProvider`` and persist everything it successfully returns.

    The recording holds the latest channel snapshot plus every video seen so
    far, de-duplicated by ``video_id`` and sorted newest first. The file is
    rewritten after each successful call once a channel snapshot exists, and
    can be loaded back with ``FakeDataProvider``.
    """

    def __init__(
        self,
        inner: DataProvider,
        output_path: Path,
        *,
        now: Callable[[], str] = _utc_now_iso,
        name: str | None = None,
    ) -> None:
        self._inner = inner
        self._output_path = Path(output_path)
        self._now = now
        self._name = name
        self._channel: ChannelSnapshot | None = None
        self._videos: dict[str, VideoStat] = {}
        self._last_record_path: Path | None = None
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name if self._name is not None else f"{self._inner.name}:recording"

    @property
    def configured(self) -> bool:
        return self._inner.configured

    @property
    def requires_auth(self) -> bool:
        return self._inner.requires_auth

    def get_last_record_path(self) -> Path | None:
        """Return the output path once something has been written, else None."""
        return self._last_record_path

    def get_channel_stats(self, channel_id: str) -> Result[ChannelSnapshot]:
        result = self._inner.get_channel_stats(channel_id)
        if not result.ok:
            return result
        with self._lock:
            self._channel = result.value
            return self._flush(result)

    def get_video_stats(self, video_ids: list[str]) -> Result[list[VideoStat]]:
        result = self._inner.get_video_stats(video_ids)
        if not result.ok:
            return result
        with self._lock:
            self._merge_videos(result.value)
            return self._flush(result)

    def get_recent_videos(self, channel_id: str, *, limit: int = 10) -> Result[list[VideoStat]]:
        result = self._inner.get_recent_videos(channel_id, limit=limit)
        if not result.ok:
            return result
        with self._lock:
            self._merge_videos(result.value)
            return self._flush(result)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _merge_videos(self, videos: list[VideoStat]) -> None:
        for video in videos:
            self._videos[video.video_id] = video

    def _sorted_videos(self) -> list[VideoStat]:
        return sorted(self._videos.values(), key=lambda v: v.published_at, reverse=True)

    def _flush(self, result: Ok) -> Result:
        """Write the recording if a channel snapshot exists; pass ``result`` through on success."""
        if self._channel is None:
            return result

        payload = {
            "channel": self._channel.to_fixture(),
            "videos": [v.to_fixture() for v in self._sorted_videos()],
            "generatedAt": self._now(),
        }
        try:
            self._output_path.parent.mkdir(parents=True, exist_ok=True)
            self._output_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:
            error = AppError.create(
                SYNC_RECORD_SAVE_FAILED,
                f"Could not save recording to {self._output_path}",
                "error",
                {"output_path": str(self._output_path), "reason": str(exc)},
            )
            logger.warning("Failed to write recording to %s", self._output_path, extra=error_extra(error))
            return Err(error)

        self._last_record_path = self._output_path
        logger.info("Recorded %d videos to %s", len(self._videos), self._output_path)
        return result
