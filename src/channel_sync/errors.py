"""Error model and result envelope shared by every provider.

Provider operations never raise for expected failures. They return either
:class:`Ok` carrying the payload or :class:`Err` carrying an :class:`AppError`
with a stable ``code``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Generic, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

Severity = Literal["debug", "info", "warning", "error", "critical"]

SYNC_REAL_PROVIDER_NOT_CONFIGURED = "SYNC_REAL_PROVIDER_NOT_CONFIGURED"
SYNC_FAKE_DATA_NOT_FOUND = "SYNC_FAKE_DATA_NOT_FOUND"
SYNC_FAKE_FIXTURE_LOAD_FAILED = "SYNC_FAKE_FIXTURE_LOAD_FAILED"
SYNC_MODE_INVALID = "SYNC_MODE_INVALID"
SYNC_MODE_UNAVAILABLE = "SYNC_MODE_UNAVAILABLE"
SYNC_MODE_BLOCKED = "SYNC_MODE_BLOCKED"
SYNC_PROBE_INVALID_INPUT = "SYNC_PROBE_INVALID_INPUT"
SYNC_RATE_LIMIT_EXCEEDED = "SYNC_RATE_LIMIT_EXCEEDED"
SYNC_RECORD_SAVE_FAILED = "SYNC_RECORD_SAVE_FAILED"


def _utc_now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


class AppError(BaseModel):
    """A recoverable failure with a stable code and structured context."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    severity: Severity = "error"
    context: dict[str, Any] = Field(default_factory=dict)
    timestamp: str = Field(default_factory=_utc_now_iso)

    @classmethod
    def create(
        cls,
        code: str,
        message: str,
        severity: Severity = "error",
        context: dict[str, Any] | None = None,
    ) -> "AppError":
        """Build an error stamped with the current UTC time."""
        return cls(code=code, message=message, severity=severity, context=dict(context or {}))


class SyncError(Exception):
    """Raised for construction-time failures such as an unreadable fixture."""

    def __init__(self, error: AppError) -> None:
        super().__init__(f"{error.code}: {error.message}")
        self.error = error


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_dump(v) for v in value]
    return value


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result carrying ``value``."""

    value: T

    @property
    def ok(self) -> Literal[True]:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"ok": True, "value": _dump(self.value)}


@dataclass(frozen=True)
class Err:
    """Failed result carrying ``error``."""

    error: AppError

    @property
    def ok(self) -> Literal[False]:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {"ok": False, "error": self.error.model_dump(mode="json")}


Result = Union[Ok[T], Err]
