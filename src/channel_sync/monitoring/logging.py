"""Structured JSON logging for channel-sync."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from channel_sync.config import MonitoringConfig
    from channel_sync.errors import AppError

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def error_extra(error: AppError, **fields: Any) -> dict[str, Any]:
    """Build a ``logging`` ``extra`` mapping that carries an AppError.

    Usage: ``logger.warning("...", extra=error_extra(err, endpoint="..."))``.
    """
    return {"error_code": error.code, "extra_data": {**error.context, **fields}}


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Records logged with :func:`error_extra` also get ``error_code`` and a
    ``data`` object with the error context.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        error_code = getattr(record, "error_code", None)
        if error_code is not None:
            log_entry["error_code"] = error_code
        extra_data = getattr(record, "extra_data", None)
        if extra_data is not None:
            log_entry["data"] = extra_data
        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_structured_logging(
    *,
    log_file: Path | None = None,
    level: int = logging.INFO,
) -> None:
    """Configure the root logger with JSON output to stderr and optionally a file."""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    formatter = JSONFormatter()
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(log_file)))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)


def configure_logging(cfg: MonitoringConfig, *, level: int = logging.INFO) -> None:
    """Pick JSON or plain-text logging from the monitoring config."""
    if cfg.structured_logging:
        setup_structured_logging(log_file=Path(cfg.log_file) if cfg.log_file else None, level=level)
    else:
        logging.basicConfig(level=level, format=PLAIN_FORMAT)
