# File: src/mstair/xprobe/xlogging/logger_factory.py
"""
Logger factory for creating and configuring CoreLogger instances.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from mstair.xprobe.xlogging.core_logger import CoreLogger


__all__ = ["create_logger"]


def create_logger(name: str, *, level: int | str | None = None) -> CoreLogger:
    """
    Return the CoreLogger registered under `name`, creating it if needed.

    ``__main__`` is replaced by the stem of the running script so records from a
    script are attributed to something readable.

    :param name: Logger name, usually the module's ``__name__``.
    :param level: Optional explicit level; otherwise resolved from the environment.
    :raises TypeError: If the logging registry returns something other than a CoreLogger.
    """
    logger_name = name
    if logger_name == "__main__":
        arg0 = Path(sys.argv[0]) if sys.argv and sys.argv[0] else None
        logger_name = arg0.stem if arg0 and arg0.exists() else "embedded_main"

    existing = logging.Logger.manager.loggerDict.get(logger_name)
    if isinstance(existing, CoreLogger):
        logger = existing
    else:
        logger = _get_core_logger_from_logging(logger_name)
    if level is not None:
        logger.setLevel(level)
    return logger


def _get_core_logger_from_logging(name: str) -> CoreLogger:
    """
    Create a CoreLogger through logging.getLogger() so it joins the normal hierarchy.

    Without the registry, a manually built logger would have no parent and
    records would never reach the root handlers (or pytest's caplog).
    """
    logging_class = logging.getLoggerClass()
    if logging_class is not CoreLogger:
        logging.setLoggerClass(CoreLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        if logging_class is not CoreLogger:
            logging.setLoggerClass(logging_class)
    if not isinstance(logger, CoreLogger):
        raise TypeError(f"Failed to create CoreLogger: {logger!r}")
    return logger


# End of file: src/mstair/xprobe/xlogging/logger_factory.py
