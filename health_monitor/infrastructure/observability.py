"""Request Logging — one JSON object per record, tagged with patient/prescription context.

Invariants:
    - Every record carries timestamp, level, logger and message
    - Context passed through `extra` (patient_id, prescription_id, operation,
      error_code, path) is emitted only when set
    - setup_logging is idempotent: a second call replaces its own handler, never stacks

Design Decisions:
    - Stdlib logging.Formatter subclass, as the JSON line format needs nothing more
    - Handler tagged with an attribute so repeated lifespans (tests, reloads) find and drop it
"""

import logging
import json
from datetime import datetime, timezone

CONTEXT_FIELDS = (
    "patient_id", "prescription_id", "operation", "error_code", "path",
)
_HANDLER_TAG = "_health_monitor_handler"


class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def __init__(self, fields: tuple[str, ...] = CONTEXT_FIELDS):
        super().__init__()
        self.fields = fields

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(
                record.created, timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update(
            (key, getattr(record, key)) for key in self.fields
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        # ObjectId and datetime values from extra fall back to str()
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the application's root handler, replacing any earlier one."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if getattr(h, _HANDLER_TAG, False)]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    setattr(handler, _HANDLER_TAG, True)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
