# File: src/mstair/xprobe/xlogging/logger_formatter.py
"""
Log record formatting for the xprobe package logger.

Adds ``fileAndLine``, ``klassAndMethod`` and colored ``levelName`` fields to each
record, and renders timestamps in the zone named by LOG_TZ (default UTC).
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Literal

import pytz
from colorama import Fore, Style

import mstair.xprobe.base.config as cfg
from mstair.xprobe.base.fs_helpers import fs_safe_relpath
from mstair.xprobe.xlogging.logger_constants import K_KLASS_NAME


__all__ = ["CoreFormatter", "get_color_code"]


FormatStyle = Literal["%", "{", "$"]

DEFAULT_LOG_FORMAT = r"%(levelName)s %(asctime)s %(fileAndLine)s %(klassAndMethod)s %(message)s"
DEFAULT_LOG_DATEFMT = "%H:%M:%S"

COLOR_MAP: dict[str | None, str] = {
    "fileAndLine": Fore.CYAN,
    "klassAndMethod": Fore.BLUE,
    "TRACE": Fore.MAGENTA,
    "DEBUG": Style.DIM,
    "INFO": Fore.WHITE,
    "WARNING": Fore.YELLOW,
    "ERROR": Fore.RED,
    "CRITICAL": Fore.LIGHTRED_EX,
    None: Style.RESET_ALL,
}


def get_color_code(key: str | None = None) -> str:
    """Return the colorama code for `key`, or "" when output is not interactive."""
    if not cfg.in_desktop_mode():
        return ""
    return COLOR_MAP.get(key, Style.RESET_ALL)


def _resolve_timezone(name: str | None) -> Any:
    """Return the pytz zone for `name`, falling back to UTC on unknown names."""
    try:
        return pytz.timezone(name or "UTC")
    except pytz.UnknownTimeZoneError:
        return pytz.utc


class CoreFormatter(logging.Formatter):
    """
    Formatter that adds file and line information, class and method names,
    and color-coded log levels.
    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: FormatStyle = "%",
        validate: bool = True,
        *,
        tz_name: str | None = None,
    ) -> None:
        """
        :param fmt: The format string for log messages.
        :param datefmt: The date format string for log timestamps.
        :param style: The style for the format string (default is "%").
        :param validate: Whether to validate the format strings (default is True).
        :param tz_name: Time zone for timestamps, default is LOG_TZ or UTC.
        """
        super().__init__(
            fmt=fmt or DEFAULT_LOG_FORMAT,
            datefmt=datefmt or DEFAULT_LOG_DATEFMT,
            style=style,
            validate=validate,
        )
        self.tz = _resolve_timezone(tz_name or os.environ.get("LOG_TZ"))

    def format(self, record: logging.LogRecord) -> str:
        record.fileAndLine = self.format_fileAndLine(record.pathname, record.lineno)
        record.klassAndMethod = self.format_klassAndMethod(record)
        record.levelName = get_color_code(record.levelname) + record.levelname + get_color_code()
        return super().format(record)

    @staticmethod
    def format_file(file: str) -> str:
        """Return `file` relative to the working directory when it lies below it."""
        if not file:
            return "<unknown file>"
        relative = fs_safe_relpath(file, Path.cwd())
        return relative if not relative.startswith("..") else Path(file).as_posix()

    def format_fileAndLine(self, file: str, lineno: int) -> str:
        return get_color_code("fileAndLine") + f"{self.format_file(file)}:{lineno}" + get_color_code()

    @staticmethod
    def format_klassAndMethod(record: logging.LogRecord) -> str:
        klass_name: str | None = getattr(record, K_KLASS_NAME, None)
        if not klass_name:
            text = record.funcName if record.funcName == "<module>" else f"{record.funcName}()"
        elif record.funcName == "__init__":
            text = f"{klass_name}()"
        else:
            text = f"{klass_name}.{record.funcName}()"
        return get_color_code("klassAndMethod") + text + get_color_code()

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        stamp = datetime.fromtimestamp(record.created, self.tz)
        return stamp.strftime(datefmt) if datefmt else stamp.isoformat()


# End of file: src/mstair/xprobe/xlogging/logger_formatter.py
