from __future__ import annotations

import logging
from datetime import datetime, timezone

from pythonjsonlogger.json import JsonFormatter

from ...shared.to_jsonable import to_jsonable


# Attributes every LogRecord carries; anything else came in through `extra`.
_RESERVED = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


class JSONFormatter(JsonFormatter):
    """One JSON object per line: event name, level, timestamp and structured fields."""

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["message"] = record.getMessage()

        for key, value in record.__dict__.items():
            if key not in _RESERVED:
                log_record[key] = to_jsonable(value)


class HumanReadableFormatter(logging.Formatter):
    """Console formatter: event name followed by its structured fields."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        fields = {k: v for k, v in record.__dict__.items() if k not in _RESERVED}
        if fields:
            text += " " + " ".join(f"{k}={v}" for k, v in fields.items())
        return text
