import logging
import sys
from typing import Optional, Union

LOGGER_NAME = "base32_codec"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_handler: Optional[logging.Handler] = None


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if name is None or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def parse_log_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    upper = level.upper()
    if upper not in LOG_LEVELS:
        raise ValueError(f"log level must be one of: {', '.join(LOG_LEVELS)}")
    return getattr(logging, upper)


def configure_logging(level: Union[str, int] = "WARNING") -> logging.Logger:
    """Attach a single stderr handler to the package logger."""
    global _handler
    resolved = parse_log_level(level)
    logger = get_logger()
    logger.setLevel(resolved)
    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(_handler)
    _handler.setLevel(resolved)
    return logger


__all__ = ["LOG_LEVELS", "configure_logging", "get_logger", "parse_log_level"]
