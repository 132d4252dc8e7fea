# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""JSON formatter for harness logs.

:class:`HarnessJsonFormatter` writes one JSON object per record.  The
context the harness attaches to its records (``scenario``, ``role``,
``index``, ``state``, ``reason``) is lifted to the top level in a fixed
order so that log lines of one scenario can be grepped and sorted; any
other ``extra`` field lands under ``"extra"``.

Not imported by ``gatt_conformance`` itself; the CLI loads it on demand::

    from gatt_conformance.logging_utils import HarnessJsonFormatter
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from enum import Enum

__all__ = ["CONTEXT_KEYS", "HarnessJsonFormatter"]

# Fields every LogRecord carries; the rest came in through ``extra``.
_RECORD_ATTRS: frozenset[str] = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
}

CONTEXT_KEYS: tuple[str, ...] = ("scenario", "role", "index", "state", "reason")

_OUTPUT_KEYS: frozenset[str] = frozenset({"timestamp", "level", "logger", "message", "extra", "exception"})


def _jsonable(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    return value


class HarnessJsonFormatter(logging.Formatter):
    """Single-line JSON records with the harness context up front.

    Args:
        utc: Render ``timestamp`` as ISO-8601 in UTC rather than through
            :meth:`logging.Formatter.formatTime`.

    """

    def __init__(self, *, utc: bool = True) -> None:
        """Initialize the formatter."""
        super().__init__()
        self._utc = utc

    def _timestamp(self, record: logging.LogRecord) -> str:
        if self._utc:
            return datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds")
        return self.formatTime(record)

    def format(self, record: logging.LogRecord) -> str:
        """Format ``record`` as one line of JSON."""
        record.message = record.getMessage()
        obj: dict[str, object] = {
            "timestamp": self._timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.message,
        }
        extra: dict[str, object] = {}
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or key in _OUTPUT_KEYS:
                continue
            if key not in CONTEXT_KEYS:
                extra[key] = _jsonable(value)
        for key in CONTEXT_KEYS:
            if key in record.__dict__ and record.__dict__[key] is not None:
                obj[key] = _jsonable(record.__dict__[key])
        if extra:
            obj["extra"] = extra
        if record.exc_info and record.exc_info[1]:
            obj["exception"] = self.formatException(record.exc_info)
        return json.dumps(obj, default=str)
