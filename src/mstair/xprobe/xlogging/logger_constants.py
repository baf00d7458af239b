# File: src/mstair/xprobe/xlogging/logger_constants.py

import logging


K_KLASS_NAME = "klass_name"

TRACE = logging.DEBUG - 1  # (9) LOG.trace() will not output at DEBUG level

DEFAULT_LOG_LEVEL = logging.WARNING

_logging_constants_initialized = False


def initialize_logger_constants() -> None:
    """Register the TRACE level name once per process."""
    global _logging_constants_initialized
    if _logging_constants_initialized:
        return
    _logging_constants_initialized = True
    if "TRACE" not in logging.getLevelNamesMapping():
        logging.addLevelName(TRACE, "TRACE")


# End of file: src/mstair/xprobe/xlogging/logger_constants.py
