"""Logging setup for perch's namespaced loggers.

Perch logs through ``perch.access`` (request paths and access lines),
``perch.server`` (errors, startup), and ``perch.app`` (application
code). Nothing is configured at import time; the server entry points
call ``configure_logging`` once before serving.
"""

import json
import logging
import sys
from typing import TextIO

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class JSONFormatter(logging.Formatter):
    """Format each record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(
    level: str = "info",
    fmt: str = "text",
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach a single stream handler to the ``perch`` logger.

    Calling this again replaces the handler rather than stacking a
    second one.

    Raises:
        ValueError: If *level* or *fmt* is not recognised.
    """
    numeric = logging.getLevelNamesMapping().get(level.upper())
    if numeric is None:
        msg = f"Unknown log level {level!r}"
        raise ValueError(msg)

    if fmt == "json":
        formatter: logging.Formatter = JSONFormatter()
    elif fmt == "text":
        formatter = logging.Formatter(_TEXT_FORMAT)
    else:
        msg = f"Unknown log format {fmt!r}; expected 'text' or 'json'"
        raise ValueError(msg)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger("perch")
    for existing in list(root.handlers):
        if getattr(existing, "_perch_handler", False):
            root.removeHandler(existing)
    handler._perch_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(numeric)
    return root
