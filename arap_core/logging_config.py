"""Opt-in logging for arap_core: a console handler and an optional log file."""
import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Route the 'arap_core' loggers to stdout and, optionally, to a file.

    The library only creates module loggers; demos and applications call
    this once. Calling it again replaces the handlers.

    Args:
        level: Logging level, e.g. logging.DEBUG to see assembly sizes.
        log_file: Optional path; overwritten on each call.
    """
    logger = logging.getLogger("arap_core")
    logger.setLevel(level)
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
