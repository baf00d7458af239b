# File: src/mstair/xprobe/xlogging/core_logger.py
"""
Package logger with environment-driven levels.

Example:
    >>> from mstair.xprobe.xlogging import create_logger
    >>> LOG = create_logger(__name__)
    >>> with LOG.prefix_with("[call-site]"):
    ...     LOG.debug("no match on line %d", 12)

Design:
- Only the root logger owns handlers/formatters; CoreLogger instances propagate.
- Log levels are controlled per-logger (via environment and LogLevelConfig).
- initialize_root() is the only entry point for root setup.
"""

from __future__ import annotations

import contextvars
import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from types import FrameType
from typing import Any, ClassVar, TextIO

from mstair.xprobe.xlogging.logger_constants import (
    DEFAULT_LOG_LEVEL,
    K_KLASS_NAME,
    TRACE,
    initialize_logger_constants,
)
from mstair.xprobe.xlogging.logger_formatter import CoreFormatter
from mstair.xprobe.xlogging.logger_util import LogLevelConfig


__all__: list[str] = [
    "CoreLogger",
    "initialize_root",
]

_LOG_ROOT_ATTR_NAME = "_xprobe_corelogger_initialized"

_log_prefix: contextvars.ContextVar[str] = contextvars.ContextVar("log_prefix", default="")


class CoreLogger(logging.Logger):
    """
    Application logger that extends logging.Logger with:

    - A TRACE level below DEBUG.
    - The calling class name in each record (``klass_name``).
    - A prefix context manager for scoped message prefixes.

    Handlers are not attached directly; all CoreLogger instances propagate
    to the root logger, which holds a single stderr handler per initialize_root().
    """

    _INTERNAL_FRAME_OFFSET: ClassVar[int] = 1  # the log() method itself

    def __init__(
        self,
        name: str,
        level: int | str = logging.NOTSET,
    ) -> None:
        """
        :param name: The name of the logger, typically the module name.
        :param level: The initial log level; NOTSET means "resolve from the environment".
        """
        initialize_logger_constants()
        if level in {logging.NOTSET, "NOTSET", ""}:
            level = LogLevelConfig.get_instance().get_effective_level(name)
        super().__init__(name, level)

    def __repr__(self) -> str:
        level = self.getEffectiveLevel()
        return f"<{type(self).__name__} '{self.name}' {logging.getLevelName(level)}={level}>"

    def log(self, level: int, msg: object, *args: Any, **kwargs: Any) -> None:
        """
        Emit a log record attributed to the code that called the logger.

        :param level: Numeric log level.
        :param msg: Message or %-format string.
        :param args: Format arguments.
        :param kwargs: Standard logging keywords; `stacklevel` counts from the caller.
        """
        if not self.isEnabledFor(level):
            return
        initialize_root()

        stacklevel: int = kwargs.pop("stacklevel", 1)
        extra: dict[str, Any] = dict(kwargs.pop("extra", None) or {})
        if K_KLASS_NAME not in extra:
            extra[K_KLASS_NAME] = _caller_class_name(stacklevel)

        prefix = _log_prefix.get()
        if prefix:
            msg = f"{prefix}{msg}"

        super().log(
            level,
            msg,
            *args,
            stacklevel=stacklevel + self._INTERNAL_FRAME_OFFSET,
            extra=extra,
            **kwargs,
        )

    def _log_at(self, level: int, msg: object, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        # One extra frame for the level-named wrapper.
        kwargs["stacklevel"] = kwargs.get("stacklevel", 1) + 2
        self.log(level, msg, *args, **kwargs)

    def trace(self, msg: object, *args: Any, **kwargs: Any) -> None:
        """Log a message at TRACE level (below DEBUG)."""
        self._log_at(TRACE, msg, args, kwargs)

    def debug(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self._log_at(logging.DEBUG, msg, args, kwargs)

    def info(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self._log_at(logging.INFO, msg, args, kwargs)

    def warning(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self._log_at(logging.WARNING, msg, args, kwargs)

    def error(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self._log_at(logging.ERROR, msg, args, kwargs)

    def critical(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self._log_at(logging.CRITICAL, msg, args, kwargs)

    def exception(self, msg: object, *args: Any, **kwargs: Any) -> None:
        """Log a message at ERROR level with exception info."""
        kwargs.setdefault("exc_info", True)
        self._log_at(logging.ERROR, msg, args, kwargs)

    @contextmanager
    def prefix_with(self, prefix: str) -> Iterator[None]:
        """
        Prefix all log messages emitted within the current context.

        Nested prefixes accumulate. Uses contextvars, so concurrent contexts do
        not see each other's prefixes.

        :param prefix: The prefix string to prepend to all log messages.
        """
        current_prefix = _log_prefix.get()
        token = _log_prefix.set(f"{current_prefix}{prefix} > ")
        try:
            yield
        finally:
            _log_prefix.reset(token)


def _caller_class_name(depth: int) -> str | None:
    """Return the class part of the qualname of the frame `depth` levels above log()."""
    try:
        frame: FrameType = sys._getframe(depth + 1)
    except ValueError:
        return None
    owner, _, _ = frame.f_code.co_qualname.rpartition(".")
    if not owner or owner.endswith(">"):
        return None
    return owner.rpartition(".")[2]


def initialize_root(
    fmt: str | None = None,
    datefmt: str | None = None,
    level: int | str | None = None,
    force: bool = False,
) -> None:
    """
    Idempotently configure the root logger for CoreLogger.

    - Ensures exactly one stderr StreamHandler with CoreFormatter exists.
    - If `force=True`, removes and recreates the stderr handler.
    - Sets root level to `level` if provided, otherwise WARNING when NOTSET.
    - Does not modify non-stderr handlers owned by the host application.

    :param fmt: Format string. Defaults to LOG_FORMAT or the package default.
    :param datefmt: Date format. Defaults to LOG_DATEFMT or the package default.
    :param level: Root logger level (int or name).
    :param force: Reinitialize even if already initialized.
    """
    root: logging.Logger = logging.getLogger()
    if getattr(root, _LOG_ROOT_ATTR_NAME, False) and not force:
        return
    setattr(root, _LOG_ROOT_ATTR_NAME, True)
    initialize_logger_constants()

    stderr_handlers: list[logging.StreamHandler[TextIO]] = [
        h for h in root.handlers if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr
    ]
    if force:
        for h in stderr_handlers:
            root.removeHandler(h)
        stderr_handlers = []

    formatter = CoreFormatter(
        fmt or os.environ.get("LOG_FORMAT"),
        datefmt or os.environ.get("LOG_DATEFMT"),
    )
    if not stderr_handlers:
        handler: logging.StreamHandler[TextIO] = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        root.addHandler(handler)
    elif not any(isinstance(h.formatter, CoreFormatter) for h in stderr_handlers):
        stderr_handlers[0].setFormatter(formatter)

    if level is not None:
        if isinstance(level, str):
            level = logging.getLevelNamesMapping().get(level.upper(), DEFAULT_LOG_LEVEL)
        root.setLevel(level)
    elif root.level == logging.NOTSET:
        root.setLevel(DEFAULT_LOG_LEVEL)


# End of file: src/mstair/xprobe/xlogging/core_logger.py
