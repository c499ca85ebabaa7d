"""Structured logging for request observability.

Records carry the current request id and feed name from contextvars, and
domain events attach their fields as ``extra_data`` so that the JSON
formatter can emit them under ``data``.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import UTC, datetime
from functools import lru_cache
from typing import Any

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_feed_name: ContextVar[str | None] = ContextVar("feed_name", default=None)

_CONTEXT_FIELDS = (("request_id", _request_id), ("feed_name", _feed_name))

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def set_context(
    request_id: str | None = None,
    feed_name: str | None = None,
) -> None:
    """Tag subsequent records; None leaves a field unchanged."""
    if request_id is not None:
        _request_id.set(request_id)
    if feed_name is not None:
        _feed_name.set(feed_name)


def clear_context() -> None:
    for _, var in _CONTEXT_FIELDS:
        var.set(None)


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({field: value for field, var in _CONTEXT_FIELDS if (value := var.get())})

        data = getattr(record, "extra_data", None)
        if data is not None:
            entry["data"] = data
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def configure_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Configure the root logger once at startup.

    Args:
        level: Level name (DEBUG, INFO, ...)
        fmt: "json" for StructuredFormatter, anything else for plain text
    """
    handler = logging.StreamHandler(sys.stdout)
    formatter = StructuredFormatter() if fmt == "json" else logging.Formatter(TEXT_FORMAT)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


class StructuredLogger:
    """Emits domain events with their fields attached to the record.

    Owns no handler and no level; output follows the root configuration.
    """

    def __init__(self, name: str):
        self._logger = logging.getLogger(name)

    @property
    def name(self) -> str:
        return self._logger.name

    def event(self, level: int, msg: str, **data: Any) -> None:
        self._logger.log(level, msg, extra={"extra_data": data})

    def request_completed(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: int | None = None,
        **extra: Any,
    ) -> None:
        data = {"method": method, "path": path, "status": status_code, **extra}
        if duration_ms is not None:
            data["duration_ms"] = duration_ms
        self.event(logging.INFO, f"{method} {path} {status_code}", **data)

    def feed_registered(self, name: str, url: str, **extra: Any) -> None:
        self.event(logging.INFO, f"Feed registered {name}: {url}", feed=name, url=url, **extra)

    def registration_rejected(self, url: str, reason: str, status_code: int, **extra: Any) -> None:
        self.event(
            logging.WARNING,
            f"Registration rejected ({status_code}): {reason}",
            url=url,
            reason=reason,
            status=status_code,
            **extra,
        )

    def not_modified(self, path: str, etag: str, **extra: Any) -> None:
        """Conditional request answered with 304."""
        self.event(logging.DEBUG, f"Not modified: {path}", path=path, etag=etag, **extra)


@lru_cache(maxsize=None)
def get_logger(name: str) -> StructuredLogger:
    """Shared StructuredLogger per name."""
    return StructuredLogger(name)
