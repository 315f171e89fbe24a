"""
Logging setup shared by the relay and the command line client.

The relay logs JSON lines to stdout, one object per record, tagged with the
``request_id`` its middleware puts in ``request_id_ctx``. The ``generate``
command writes to a terminal, so it asks for plain text on stderr instead.
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from typing import TextIO

request_id_ctx: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default="-"
)

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per record, carrying the current relay request id."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": request_id_ctx.get(),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(
    level: str = "INFO",
    stream: TextIO | None = None,
    json_lines: bool = True,
) -> None:
    """Replace the root logger's handlers with a single stream handler.

    ``json_lines=False`` selects the human-readable format used by the CLI.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    for h in root.handlers[:]:
        root.removeHandler(h)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JSONFormatter() if json_lines else logging.Formatter(PLAIN_FORMAT))
    root.addHandler(handler)


def new_request_id() -> str:
    """Short random id for one relay request."""
    return uuid.uuid4().hex[:12]
