"""JSON log lines for the ordering API.

Every record carries the current request id. Order, table and cache fields
are filled in when callers pass them through ``extra=``.
"""

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any

from ..middlewares.request_id import request_id_ctx

EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+", re.I)
# Indonesian mobile numbers: 08xx, 628xx or +628xx
PHONE_RE = re.compile(r"\b(?:\+?62|0)8\d{8,11}\b")

EXTRA_FIELDS = ("route", "status", "latency_ms", "order_id", "table", "cache")

# chatty per-request loggers from the ledger client
QUIET_LOGGERS = ("httpx", "httpcore")


def scrub(text: str) -> str:
    """Mask email addresses and phone numbers in ``text``."""
    return PHONE_RE.sub("***", EMAIL_RE.sub("***", text))


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.req_id = request_id_ctx.get(None)
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record, contact details masked."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "req_id": getattr(record, "req_id", None),
        }
        for name in EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                data[name] = value
        data["msg"] = scrub(record.getMessage())
        if record.exc_info:
            data["exc"] = scrub(self.formatException(record.exc_info))
        return json.dumps(data)


def configure_logging(level: int = logging.INFO) -> None:
    """Send every logger through one JSON handler on stderr."""

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
