"""Structured Logging — JSON log lines carrying record and session context.

Invariants:
    - Every line has timestamp (the record's creation time, UTC), level, logger, message
    - user_id, record_id, error_code, operation, auth_state and path appear
      only when the call site passed them in `extra`
    - setup_logging() installs exactly one jobtracker handler on the root
      logger, however often it is called (API lifespan and client bootstrap
      both call it)
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "user_id", "record_id", "error_code", "operation", "auth_state", "path",
)
_HANDLER_NAME = "jobtracker"


class JSONFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install (or replace) the jobtracker root handler."""
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
