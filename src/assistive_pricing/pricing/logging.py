"""JSON-lines logging for pricing runs.

Each record becomes one JSON object. The pricing context of a record
(`repo`, `issue_number`) is lifted to top-level keys so every line of one
reconciliation can be filtered together; the remaining `extra=` fields are
nested under `extra`.

Call sites build their `extra=` mapping with `log_fields`, which renames keys
that would clash with attributes `logging` already sets on every record.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

# Attributes present on every LogRecord. Passing one of them through
# `extra=` makes `Logger.makeRecord` raise KeyError.
RECORD_ATTRIBUTES: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {"message", "asctime"}

CONTEXT_FIELDS: tuple[str, ...] = ("repo", "issue_number")


def log_fields(**fields: Any) -> dict[str, Any]:
    """Build an `extra=` mapping; `created=` becomes `created_field=`."""
    return {
        (f"{key}_field" if key in RECORD_ATTRIBUTES else key): value
        for key, value in fields.items()
    }


def _json_default(value: object) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return repr(value)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        fields = {
            key: value
            for key, value in vars(record).items()
            if key not in RECORD_ATTRIBUTES and not key.startswith("_")
        }
        for key in CONTEXT_FIELDS:
            if key in fields:
                payload[key] = fields.pop(key)
        if fields:
            payload["extra"] = fields

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=_json_default)


def configure_logging(level: str) -> None:
    """Send JSON lines to stdout, replacing whatever handlers the root logger had."""
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper())

    # PyGithub and urllib3 log every request at DEBUG.
    for name in ("github", "urllib3"):
        logging.getLogger(name).setLevel(max(root.level, logging.INFO))
