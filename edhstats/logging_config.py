"""Logging setup for command-line runs of the stats engine."""

import logging
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = 'edhstats'

CONSOLE_FORMAT = '%(levelname)s: %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'


def setup_logging(
    verbose: bool = False,
    log_file: Optional[Path | str] = None,
    stream=None,
) -> logging.Logger:
    """
    Configure the 'edhstats' logger hierarchy.

    Library modules log under 'edhstats.<module>' and never attach handlers
    themselves; a script calls this once at startup.

    Args:
        verbose: Log DEBUG (per-match skips, ingestion counts) instead of INFO
        log_file: Optional file that receives the same records with
            timestamps and source locations
        stream: Console stream (default: sys.stdout)

    Returns:
        The 'edhstats' logger

    Example:
        logger = setup_logging(verbose=True, log_file='logs/export.log')
        logger.info("Aggregating matches")
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

    return logger
