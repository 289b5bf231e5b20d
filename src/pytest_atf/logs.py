"""Logging configuration for command-line runs.

Progress messages are written to the console and, optionally, copied to
a log file with timestamps.
"""

import logging
import sys
from pathlib import Path

from pytest_atf.progress import NOTICE

#: Name of the package root logger.
ROOT_LOGGER = 'pytest_atf'

#: Prefix of the names of handlers installed by `configure_logging`.
HANDLER_PREFIX = 'atf-'

CONSOLE_FORMAT = '%(message)s'
FILE_FORMAT = '%(asctime)s [%(levelname)-7s] %(message)s'


def configure_logging(level: str | int = NOTICE,
                      log_file: Path | str | None = None) -> logging.Logger:
    """Install console and file handlers on the package logger.

    Handlers installed by a previous call are replaced, so the function
    may be called several times.

    Args:
        level: Minimal level of emitted messages.
        log_file: Optional file receiving a copy of the messages.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    for handler in list(logger.handlers):
        if (handler.get_name() or '').startswith(HANDLER_PREFIX):
            logger.removeHandler(handler)
            handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.set_name(f'{HANDLER_PREFIX}console')
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.set_name(f'{HANDLER_PREFIX}file')
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger
