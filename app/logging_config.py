# =============================================================================
# app/logging_config.py - Logging Setup
# =============================================================================
# Configures stdlib logging for the API process:
# - One stream handler on the root logger
# - Request id appended to every line logged inside a request
# - Colored level labels in development, plain text elsewhere
#
# Usage:
#   from app.logging_config import configure_logging
#   configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
# =============================================================================

import logging
import sys

from app.context import get_request_id

LOG_FORMAT = "%(asctime)s.%(msecs)03d [%(levelname)-8s] %(name)s - %(message)s%(request_suffix)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",     # cyan
    logging.INFO: "\033[32m",      # green
    logging.WARNING: "\033[33m",   # yellow
    logging.ERROR: "\033[31m",     # red
    logging.CRITICAL: "\033[35m",  # magenta
}
_RESET = "\033[0m"


class RequestContextFilter(logging.Filter):
    """Attach ` request_id=...` to records emitted while a request is active."""

    def filter(self, record: logging.LogRecord) -> bool:
        request_id = get_request_id()
        record.request_suffix = f" request_id={request_id}" if request_id else ""
        return True


class ColorFormatter(logging.Formatter):
    """Formatter that colors the level label. Used in development only."""

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        color = _LEVEL_COLORS.get(record.levelno)
        if color:
            record.levelname = f"{color}{original}{_RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def configure_logging(level: str = "info", environment: str = "development") -> None:
    """
    Configure the root logger.

    Safe to call more than once; existing handlers are replaced.

    Args:
        level: Minimum level name (debug, info, warning, error, critical)
        environment: development gets colored output
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())

    formatter_class = ColorFormatter if environment == "development" else logging.Formatter
    handler.setFormatter(formatter_class(LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level.upper())

    # The HTTP logger middleware already writes one line per request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
