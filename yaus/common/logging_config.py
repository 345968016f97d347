"""Logging configuration for the YAUS service.

Service code logs below the ``yaus`` namespace (``yaus.web``,
``yaus.server``, ``yaus.storage``...). The HTTP server's own ``uvicorn``
loggers are routed through the same handlers, so a single process writes
one stream in one format.

JSON format, one object per line:
{
    "timestamp": "2026-01-01T12:00:00.000Z",
    "level": "INFO",
    "logger": "yaus.web",
    "message": "127.0.0.1 POST /shorten - Status: 200 - Duration: 1.20ms"
}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import List, Optional

LOGGER_NAME = "yaus"

# Loggers of the HTTP server sharing the service handlers
SERVER_LOGGER_NAMES = ("uvicorn",)


class JsonFormatter(logging.Formatter):
    """Formatter writing each record as a JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc) \
                            .isoformat(timespec="milliseconds") \
                            .replace("+00:00", "Z")

        log = {
            "timestamp": timestamp,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)

        return json.dumps(log)


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """Setup logging configuration.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
        json_format: Whether to use JSON format

    Returns:
        Configured root logger of the service
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    if json_format:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)

    for name in (LOGGER_NAME,) + SERVER_LOGGER_NAMES:
        target = logging.getLogger(name)
        _reset_handlers(target)
        target.setLevel(numeric_level)
        for handler in handlers:
            target.addHandler(handler)

    return logging.getLogger(LOGGER_NAME)


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get a logger below the service namespace.

    Args:
        name: Logger name, prefixed with the service namespace if needed

    Returns:
        Logger instance
    """
    if name != LOGGER_NAME and not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
