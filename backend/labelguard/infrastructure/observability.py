"""Structured Logging: JSON formatter and setup for the edit engine.

Invariants:
    - Every JSON line carries timestamp, level, logger and message
    - Edit extras (element_id, edit_op, error_code, attempt, counts) appear only when set
    - setup_logging installs at most one engine handler on the root logger;
      calling it again replaces that handler instead of stacking another

Design Decisions:
    - stdlib logging plus a small JSONFormatter: the engine is embedded in a host
      process and must not impose a logging framework on it
    - Setup is opt-in; library code only ever calls logging.getLogger
"""

import json
import logging
from datetime import datetime, timezone

from labelguard.config import Settings, get_settings

LOG_EXTRA_FIELDS = (
    "element_id", "edit_op", "error_code", "attempt",
    "valid_count", "rejected_count", "clamped_count",
)

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with edit-engine extras surfaced."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, getattr(record, key))
            for key in LOG_EXTRA_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class _EngineHandler(logging.StreamHandler):
    """Marker type so repeated setup can find and replace its own handler."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the engine's stream handler on the root logger; returns it."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _EngineHandler)]:
        root.removeHandler(existing)

    handler = _EngineHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler


def configure_logging(settings: Settings | None = None) -> logging.Handler:
    """setup_logging driven by LABELGUARD_LOG_LEVEL / LABELGUARD_LOG_FORMAT."""
    settings = settings or get_settings()
    return setup_logging(settings.log_level, settings.log_format)
