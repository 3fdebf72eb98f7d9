from __future__ import annotations

import json
import logging
import os
import time
from typing import Any, Dict


class JsonFormatter(logging.Formatter):
    """One JSON object per line; structured fields go in ``extra={"extra": {...}}``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "severity": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "time_unix": time.time(),
            "service": os.getenv("SERVICE_NAME") or "handoff-exchange",
        }
        if hasattr(record, "extra") and isinstance(record.extra, dict):
            payload.update(record.extra)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)
