"""Data mode state machine: selects which base provider is active.

The manager owns one provider per :class:`DataMode` and exposes exactly one
of them at a time. Switching is validated (known mode, configured provider)
and then offered to an optional guard before it is committed.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from channel_sync.data.provider import DataProvider, RecordingProvider
from channel_sync.errors import (
    SYNC_MODE_INVALID,
    SYNC_MODE_UNAVAILABLE,
    SYNC_PROBE_INVALID_INPUT,
    AppError,
    Err,
    Ok,
    Result,
)
from channel_sync.monitoring.logging import error_extra

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "local-runtime"


class DataMode(str, Enum):
    """Where analytics data comes from."""

    FAKE = "fake"
    REAL = "real"
    RECORD = "record"


MODE_PRIORITY: tuple[DataMode, ...] = (DataMode.FAKE, DataMode.REAL, DataMode.RECORD)


class ModeGuard(Protocol):
    """Hook consulted before a mode switch is committed.

    Runs outside the manager lock, so a guard may read status or switch modes
    itself.
    """

    def __call__(self, *, mode: DataMode) -> Result[None]: ...


def allow_all_modes(*, mode: DataMode) -> Result[None]:
    """Default guard: never blocks a transition."""
    return Ok(None)


class DataModeStatus(BaseModel):
    """Snapshot of the manager state."""

    mode: DataMode
    available_modes: list[DataMode]
    source: str


@dataclass(frozen=True)
class ActiveProvider:
    """The committed mode and the provider bound to it."""

    mode: DataMode
    provider: DataProvider


class ProbeRequest(BaseModel):
    """Input for :meth:`DataModeManager.probe`."""

    model_config = ConfigDict(extra="forbid")

    channel_id: StrictStr = Field(min_length=1)
    video_ids: list[StrictStr] = Field(default_factory=lambda: ["VID-001"])
    recent_limit: StrictInt = Field(default=5, gt=0)


class ProbeSummary(BaseModel):
    """What a probe of the active provider returned."""

    mode: DataMode
    provider_name: str
    channel_id: str
    recent_videos_count: int
    video_stats_count: int
    failed_calls: int = 0
    record_file_path: str | None = None


class DataModeManager:
    """Hold the fake, real and record providers and switch between them.

    Args:
        fake_provider: Fixture-backed provider.
        real_provider: Live provider.
        record_provider: Recording decorator, usually around the live provider.
        initial_mode: Requested starting mode. Falls back to the first
            configured mode in ``fake, real, record`` order if its provider is
            not configured.
        can_activate_mode: Guard invoked before a switch is committed.
        source: Label reported by :meth:`get_status`.
    """

    def __init__(
        self,
        *,
        fake_provider: DataProvider,
        real_provider: DataProvider,
        record_provider: RecordingProvider,
        initial_mode: DataMode | str = DataMode.FAKE,
        can_activate_mode: ModeGuard | None = None,
        source: str | None = None,
    ) -> None:
        self._record_provider = record_provider
        self._providers: dict[DataMode, DataProvider] = {
            DataMode.FAKE: fake_provider,
            DataMode.REAL: real_provider,
            DataMode.RECORD: record_provider,
        }
        self._guard: ModeGuard = can_activate_mode or allow_all_modes
        self._source = source or DEFAULT_SOURCE
        self._lock = threading.Lock()
        self._mode = self._resolve_initial_mode(DataMode(initial_mode))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_status(self) -> DataModeStatus:
        return DataModeStatus(mode=self._mode, available_modes=self._available_modes(), source=self._source)

    def get_active_provider(self) -> ActiveProvider:
        mode = self._mode
        return ActiveProvider(mode=mode, provider=self._providers[mode])

    def set_mode(self, mode: DataMode | str) -> Result[DataModeStatus]:
        """Switch the active mode after validation and the guard check."""
        try:
            target = DataMode(mode)
        except ValueError:
            return Err(
                AppError.create(
                    SYNC_MODE_INVALID,
                    f"Unknown data mode: {mode!r}",
                    "error",
                    {"mode": str(mode), "allowed": [m.value for m in MODE_PRIORITY]},
                )
            )

        provider = self._providers[target]
        if not provider.configured:
            return Err(
                AppError.create(
                    SYNC_MODE_UNAVAILABLE,
                    f"Data mode {target.value!r} is not available",
                    "error",
                    {"mode": target.value, "provider": provider.name},
                )
            )

        verdict = self._guard(mode=target)
        if not verdict.ok:
            logger.warning("Mode switch to %s blocked", target.value, extra=error_extra(verdict.error))
            return verdict
        with self._lock:
            previous, self._mode = self._mode, target

        if previous is not target:
            logger.info("Data mode changed: %s -> %s", previous.value, target.value)
        return Ok(self.get_status())

    def probe(self, request: ProbeRequest | Mapping[str, Any]) -> Result[ProbeSummary]:
        """Exercise the active provider's three endpoints and summarise the outcome.

        Individual endpoint failures are counted in ``failed_calls`` rather
        than failing the probe. Invalid input fails before any provider call.
        """
        if not isinstance(request, ProbeRequest):
            try:
                request = ProbeRequest.model_validate(dict(request))
            except (ValidationError, TypeError, ValueError) as exc:
                details = exc.errors(include_url=False, include_context=False) if isinstance(exc, ValidationError) else str(exc)
                return Err(
                    AppError.create(
                        SYNC_PROBE_INVALID_INPUT,
                        "Invalid probe input",
                        "error",
                        {"issues": details},
                    )
                )

        active = self.get_active_provider()
        provider = active.provider
        failed = 0

        channel = provider.get_channel_stats(request.channel_id)
        if not channel.ok:
            failed += 1
            logger.debug("Probe get_channel_stats failed: %s", channel.error.code)

        recent = provider.get_recent_videos(request.channel_id, limit=request.recent_limit)
        recent_count = len(recent.value) if recent.ok else 0
        if not recent.ok:
            failed += 1
            logger.debug("Probe get_recent_videos failed: %s", recent.error.code)

        stats = provider.get_video_stats(request.video_ids)
        stats_count = len(stats.value) if stats.ok else 0
        if not stats.ok:
            failed += 1
            logger.debug("Probe get_video_stats failed: %s", stats.error.code)

        record_path: str | None = None
        if active.mode is DataMode.RECORD:
            last = self._record_provider.get_last_record_path()
            record_path = str(last) if last is not None else None

        return Ok(
            ProbeSummary(
                mode=active.mode,
                provider_name=provider.name,
                channel_id=request.channel_id,
                recent_videos_count=recent_count,
                video_stats_count=stats_count,
                failed_calls=failed,
                record_file_path=record_path,
            )
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _available_modes(self) -> list[DataMode]:
        return [mode for mode in MODE_PRIORITY if self._providers[mode].configured]

    def _resolve_initial_mode(self, requested: DataMode) -> DataMode:
        if self._providers[requested].configured:
            return requested
        available = self._available_modes()
        if not available:
            logger.warning("No configured data provider; staying in %s mode", requested.value)
            return requested
        logger.info("Data mode %s unavailable, falling back to %s", requested.value, available[0].value)
        return available[0]
