"""Logging for the bot process.

All modules log below the ``kartel`` logger via get_logger(name);
setup_logging() attaches its handlers once at start.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys

ROOT_LOGGER_NAME = 'kartel'

CONSOLE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)8s] %(name)s:%(lineno)d - %(message)s"

LOG_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL,
}


def _level(name: str | None, default: int) -> int:
    if not name:
        return default
    return LOG_LEVELS.get(name.upper(), default)


def setup_logging(
    level: str = 'INFO',
    log_file: str | None = None,
    console_level: str | None = None,
    file_level: str | None = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """Configure the ``kartel`` logger and return it.

    Every call replaces the handlers installed by the previous one, so the
    last call wins.

    Args:
        level: Logger level name; unknown names fall back to INFO
        log_file: Path to a rotating log file (console only when omitted)
        console_level: Console handler level (defaults to ``level``)
        file_level: File handler level (defaults to ``level``)
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    base = _level(level, logging.INFO)
    logger.setLevel(base)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(_level(console_level, base))
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                log_file, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8'
            )
        except OSError as e:
            logger.warning(f"Could not open log file {log_file}: {e}")
        else:
            file_handler.setLevel(_level(file_level, base))
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
            logger.addHandler(file_handler)

    logger.debug("Logging configured")
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger of the bot's root logger."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
