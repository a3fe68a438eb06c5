"""
Logging setup for the 'subfield' logger namespace.

Library modules only create module loggers; handlers are installed here,
once, by whatever front end runs the engine (the render script, a notebook).
Console output goes to stderr so the scripts' stdout summaries stay clean.
"""
import logging
import sys
from typing import Optional, Union

LOGGER_NAME = 'subfield'
LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')

CONSOLE_FORMAT = '%(levelname)-7s %(name)s: %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _resolve_level(level):
    if isinstance(level, str):
        if level.upper() not in LEVELS:
            raise ValueError(f"Unknown log level '{level}'. Available: {list(LEVELS)}")
        return getattr(logging, level.upper())
    return level


def setup_logging(level: Union[int, str] = logging.INFO,
                  log_file: Optional[str] = None) -> logging.Logger:
    """
    Route the package's log records to stderr and optionally a file.

    Calling it again replaces (and closes) the handlers of the previous call.

    Args:
        level: Level as an int (logging.DEBUG) or a name ('debug', 'INFO')
        log_file: Optional path; the file is overwritten and gets timestamps

    Returns:
        The 'subfield' logger
    """
    level = _resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%H:%M:%S'))
        logger.addHandler(file_handler)

    logger.debug("Logging at %s%s", logging.getLevelName(level),
                 f", copy in {log_file}" if log_file else '')
    return logger
