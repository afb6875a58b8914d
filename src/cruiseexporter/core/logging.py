"""Logging setup for the exporter process.

Library modules only create loggers with ``logging.getLogger(__name__)``;
handlers are installed once by the CLI through :func:`configure_logging`.

Example:
    >>> import logging
    >>> from cruiseexporter.core.logging import configure_logging
    >>> configure_logging("WARNING", "json")
    >>> logging.getLogger("cruiseexporter").level == logging.WARNING
    True
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "cruiseexporter"


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(level: str = "INFO", fmt: str = "console") -> None:
    """Install a single handler on the package logger.

    Args:
        level: Logging level name (e.g. "INFO", "DEBUG").
        fmt: "console" for rich output on stderr, "json" for one JSON
            object per line.
    """
    if fmt == "json":
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(ROOT_LOGGER)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    logger.propagate = False
