"""Logging setup: JSON lines on stdout"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

_EXTRA_FIELDS = ("request_id", "provider_id", "route")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k in _EXTRA_FIELDS:
            if hasattr(record, k):
                payload[k] = str(getattr(record, k))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(level: str | None = None) -> None:
    """
    Route all logging to stdout as JSON.

    Args:
        level: Log level name; defaults to MEDIGUARD_LOG_LEVEL, then INFO
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    level_name = (level or os.getenv("MEDIGUARD_LOG_LEVEL", "INFO")).upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    root.handlers = [handler]
