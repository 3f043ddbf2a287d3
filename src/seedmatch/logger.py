"""Logging facade for seedmatch.

Wraps a single ``seedmatch`` stdlib logger with a coloured console formatter,
an extra SUCCESS level and a ``section`` banner helper, and exposes
module-level functions so callers can simply ``from . import logger``.
"""

import logging
import sys
from urllib.parse import urlsplit, urlunsplit

LOGGER_NAME = "seedmatch"

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[37m",
    SUCCESS: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}
_RESET = "\033[0m"


class ColorFormatter(logging.Formatter):
    """Formatter that colours the level name when writing to a terminal."""

    def __init__(self, use_color: bool) -> None:
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self.use_color:
            return message
        color = _COLORS.get(record.levelno, "")
        return f"{color}{message}{_RESET}" if color else message


_logger_instance: logging.Logger | None = None


def init_logger(level: str | int = "INFO") -> logging.Logger:
    """Configure the seedmatch logger.

    Safe to call more than once; the previous handler is replaced.

    Args:
        level: Log level name (``debug``, ``info``, ...) or numeric level.

    Returns:
        logging.Logger: The configured logger.

    Raises:
        ValueError: If the level name is unknown.
    """
    global _logger_instance

    if isinstance(level, str):
        numeric_level = logging.getLevelName(level.upper())
        if not isinstance(numeric_level, int):
            raise ValueError(f"Invalid log level: {level}")
    else:
        numeric_level = level

    instance = logging.getLogger(LOGGER_NAME)
    for handler in list(instance.handlers):
        instance.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColorFormatter(use_color=sys.stderr.isatty()))
    instance.addHandler(handler)
    instance.setLevel(numeric_level)
    instance.propagate = False

    _logger_instance = instance
    return instance


def get_logger() -> logging.Logger:
    """Get the seedmatch logger, initializing it with defaults if needed."""
    if _logger_instance is None:
        return init_logger()
    return _logger_instance


def redact_url_password(url: str) -> str:
    """Replace the password part of a URL with ``***``.

    Args:
        url: URL that may carry ``user:password@`` credentials.

    Returns:
        str: The URL with its password masked, or unchanged if it has none.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if not parts.password:
        return url
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    netloc = f"{parts.username or ''}:***@{host}"
    return urlunsplit(parts._replace(netloc=netloc))


def debug(msg: str, *args, **kwargs) -> None:
    get_logger().debug(msg, *args, **kwargs)


def info(msg: str, *args, **kwargs) -> None:
    get_logger().info(msg, *args, **kwargs)


def success(msg: str, *args, **kwargs) -> None:
    get_logger().log(SUCCESS, msg, *args, **kwargs)


def section(msg: str, *args, **kwargs) -> None:
    """Log a run-level section banner."""
    get_logger().log(SUCCESS, msg, *args, **kwargs)


def warning(msg: str, *args, **kwargs) -> None:
    get_logger().warning(msg, *args, **kwargs)


def error(msg: str, *args, **kwargs) -> None:
    get_logger().error(msg, *args, **kwargs)
