"""JSON log formatter for batch-encoder."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    Every entry has timestamp (ISO-8601 UTC), level, logger and message.
    Records emitted while a batch plans a file also carry
    ``file: {"number": 3, "path": "..."}``, taken from the attributes
    FileContextFilter sets. Exceptions are rendered under ``exception``.
    """

    def format(self, record: logging.LogRecord) -> str:
        record_time = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": record_time.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        file_path = getattr(record, "file_path", None)
        if file_path is not None:
            entry["file"] = {
                "number": getattr(record, "file_number", None),
                "path": file_path,
            }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
