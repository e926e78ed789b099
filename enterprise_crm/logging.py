from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from enterprise_crm.context import current_correlation_id


# Only these ``extra`` keys reach the JSON ``fields`` object.
LOGGED_FIELDS = frozenset(
    {
        "method",
        "path",
        "status_code",
        "duration_ms",
        "entity",
        "entity_id",
        "actor",
        "username",
        "reason",
        "error",
    }
)
_MAX_ERROR_LENGTH = 500

_base_record_factory = logging.getLogRecordFactory()


def _with_correlation_id(record: logging.LogRecord) -> logging.LogRecord:
    if not getattr(record, "correlation_id", None):
        record.correlation_id = current_correlation_id()
    return record


def _crm_record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
    return _with_correlation_id(_base_record_factory(*args, **kwargs))


class CorrelationIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        _with_correlation_id(record)
        return True


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, correlation id and whitelisted fields."""

    def format(self, record: logging.LogRecord) -> str:
        fields = {key: record.__dict__[key] for key in LOGGED_FIELDS if key in record.__dict__}
        if isinstance(fields.get("error"), str):
            fields["error"] = fields["error"][:_MAX_ERROR_LENGTH]
        if record.exc_info:
            fields["exception"] = self.formatException(record.exc_info)

        return json.dumps(
            {
                "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "msg": record.getMessage(),
                "correlation_id": getattr(record, "correlation_id", None),
                "fields": fields,
            },
            default=str,
        )


def configure_logging(level_name: str = "INFO") -> None:
    root_logger = logging.getLogger()
    if getattr(root_logger, "_crm_configured", False):
        return

    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonLogFormatter())
    handler.addFilter(CorrelationIdFilter())

    root_logger.handlers[:] = [handler]
    root_logger.setLevel(level)
    logging.setLogRecordFactory(_crm_record_factory)
    root_logger._crm_configured = True  # type: ignore[attr-defined]
