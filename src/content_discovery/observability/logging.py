"""Structured JSON logging correlated with the search being served.

Every record carries the trace and span ids of the current task and, while a
search is running, its ``base_path`` and ``term``. ``extra`` fields are kept
as top-level keys, with credential-like keys redacted.
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import sys
from typing import Any

import orjson

from content_discovery.observability.context import SEARCH_FIELDS, get_trace_context


_STANDARD_RECORD_KEYS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}

# Libraries whose INFO output is per-request noise
_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    REDACT_KEYS = frozenset({"password", "token", "authorization", "cookie"})
    MAX_MESSAGE_LEN = 2000

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_trace_context()
        message = record.getMessage()
        if len(message) > self.MAX_MESSAGE_LEN:
            message = message[: self.MAX_MESSAGE_LEN] + "..."
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "component": record.name.rsplit(".", 1)[-1],
            "message": message,
            "trace_id": ctx.get("trace_id", ""),
            "span_id": ctx.get("span_id", ""),
        }
        entry.update({field: ctx[field] for field in SEARCH_FIELDS if ctx.get(field)})

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _STANDARD_RECORD_KEYS or key.startswith("_"):
                continue
            entry[key] = "[REDACTED]" if key.lower() in self.REDACT_KEYS else value

        return orjson.dumps(entry, default=_json_default).decode("utf-8")


def _json_default(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """Replace root handlers with a single stdout handler at ``level``."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
