# File: src/mstair/xprobe/xprobe_api.py
"""
Public entry points of the dumper.

Functions
---------
- d(*args): Dump values, labeled with the source expressions that produced them.
- dd(*args), ddd(*args): Dump, then exit the process.
- s(*args): Dump as plain text, whatever the configured mode.
- sd(*args): `s()`, then exit the process.

Classes
-------
- XProbe: Settings holder with the `dump()` and `trace()` methods behind the functions.
- Dumped: `str` result of a dump; unary ``-``, ``+`` and ``~`` return it unchanged,
  so prefixes such as ``-d(x)`` and ``~d(x)`` are valid Python.

Examples
--------
>>> from mstair.xprobe import d
>>> user = {"name": "ada", "roles": ["admin"]}
>>> d(user)                     # doctest: +SKIP
user dict(2)
    'name' str(3) 'ada'
    'roles' list(1)
        0 str(5) 'admin'
Called from <repo>/app.py:2
>>> html = d(user)              # assigned: returned instead of printed  # doctest: +SKIP
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import Any, NoReturn, Self

from mstair.xprobe.call_site import CallInfo, Modifier, resolve_call_info
from mstair.xprobe.decorators import Decorator, PlainDecorator, RichDecorator
from mstair.xprobe.frames import capture_stack
from mstair.xprobe.settings import Mode, XProbeSettings, resolve_mode, settings_from_environment
from mstair.xprobe.trace_normalizer import NormalizedStep, normalize_trace
from mstair.xprobe.value_tree import ValueParser
from mstair.xprobe.xlogging import create_logger


__all__ = [
    "NO_ARGUMENTS",
    "Dumped",
    "XProbe",
    "d",
    "dd",
    "ddd",
    "s",
    "sd",
]

LOG = create_logger(__name__)

NO_ARGUMENTS = "[[no arguments passed]]"

_xprobe_instance: XProbe | None = None


class Dumped(str):
    """Output of a dump; empty when the dump was printed or disabled."""

    def __neg__(self) -> Self:
        return self

    def __pos__(self) -> Self:
        return self

    def __invert__(self) -> Self:
        return self


def _modifier_changes(modifiers: frozenset[Modifier]) -> dict[str, Any]:
    changes: dict[str, Any] = {}
    if Modifier.EXPAND_ALL in modifiers:
        changes["expanded_by_default"] = True
    if Modifier.IGNORE_DEPTH in modifiers:
        changes["max_levels"] = None
    if Modifier.RETURN_OUTPUT in modifiers:
        changes["return_output"] = True
        changes["first_run"] = True
    if Modifier.FORCE_PLAIN in modifiers:
        changes["enabled"] = Mode.WHITESPACE
    return changes


class XProbe:
    """
    A dumper bound to one XProbeSettings object.

    The module-level functions share the instance returned by `get_instance()`,
    configured from XPROBE_* environment variables.
    """

    settings: XProbeSettings

    def __init__(self, settings: XProbeSettings | None = None) -> None:
        self.settings = settings if settings is not None else settings_from_environment()

    @classmethod
    def get_instance(cls) -> XProbe:
        """Return the process-wide XProbe, creating it on first use."""
        global _xprobe_instance
        if _xprobe_instance is None:
            _xprobe_instance = cls()
        return _xprobe_instance

    def enabled(self, force_mode: bool | Mode | None = None) -> bool | Mode:
        """
        Get, or set and get back, the enabled state.

        :param force_mode: False disables dumping, True auto-selects a mode, a Mode pins it.
        :return: The value in effect before this call.
        """
        previous = self.settings.enabled
        if force_mode is not None:
            self.settings.enabled = force_mode
        return previous

    def dump(self, *args: Any) -> Dumped:
        """
        Render `args` with their source labels.

        A single literal ``1`` dumps the current stack instead, when the call's
        source can be read; a single list or tuple that looks like a backtrace
        is rendered as one.

        :return: The output when returning is in effect, otherwise "" (the output is printed).
        """
        if resolve_mode(self.settings) is None:
            return Dumped("")

        stack = capture_stack()
        info = resolve_call_info(stack, self.settings.aliases, len(args))
        if Modifier.FLUSH_OUTPUT in info.modifiers:
            sys.stdout.flush()
            self.settings.first_run = True

        with self.settings.overridden(**_modifier_changes(info.modifiers)):
            mode = resolve_mode(self.settings)
            if mode is None:
                return Dumped("")
            with self.settings.overridden(enabled=mode):
                output = self._render(mode, args, info, stack)
                if self.settings.return_output:
                    return Dumped(output)
        sys.stdout.write(output)
        return Dumped("")

    def trace(self, trace: Sequence[Any] | None = None) -> Dumped:
        """
        Dump a backtrace.

        :param trace: Frames, backtrace mappings or `inspect.stack()` records;
            default is the current stack.
        """
        if resolve_mode(self.settings) is None:
            return Dumped("")
        return self.dump(list(trace) if trace is not None else list(capture_stack()))

    # ---------- internals ----------

    def _decorator(self, mode: Mode) -> Decorator:
        if mode is Mode.RICH:
            return RichDecorator(self.settings)
        return PlainDecorator(mode, self.settings)

    def _as_trace(
        self,
        args: tuple[Any, ...],
        info: CallInfo,
        stack: Sequence[Any],
    ) -> list[NormalizedStep] | None:
        if len(args) != 1:
            return None
        value = args[0]
        if (
            type(value) is int
            and value == 1
            and info.labels == (None,)
            and info.call_site is not None
            and info.call_site.paren_offset is not None
        ):
            return normalize_trace(stack, self.settings.aliases, self.settings)
        if isinstance(value, (list, tuple)):
            return normalize_trace(value, self.settings.aliases, self.settings)
        return None

    def _render(
        self,
        mode: Mode,
        args: tuple[Any, ...],
        info: CallInfo,
        stack: Sequence[Any],
    ) -> str:
        decorator = self._decorator(mode)
        output = ""
        if self.settings.first_run:
            output += decorator.init()
            self.settings.first_run = False
        output += decorator.wrap_start(info.call_site)

        steps = self._as_trace(args, info, stack)
        if steps is not None:
            output += decorator.decorate_trace(steps)
        else:
            parser = ValueParser(self.settings)
            values = args if args else (NO_ARGUMENTS,)
            labels = info.labels if args else (None,)
            for value, label in zip(values, labels, strict=True):
                parser.reset()
                output += decorator.decorate(parser.parse(value, label))

        output += decorator.wrap_end(info.call_site, info.mini_trace, info.previous_caller)
        LOG.trace("rendered %d char(s) in %s mode", len(output), mode.name)
        return output


def d(*args: Any) -> Dumped:
    """Dump `args`; see `XProbe.dump()`."""
    return XProbe.get_instance().dump(*args)


def dd(*args: Any) -> NoReturn:
    """Dump `args`, then exit with status 0."""
    XProbe.get_instance().dump(*args)
    sys.exit(0)


def ddd(*args: Any) -> NoReturn:
    XProbe.get_instance().dump(*args)
    sys.exit(0)


def _plain_mode(mode: Mode) -> Mode:
    return Mode.WHITESPACE if mode in (Mode.CLI, Mode.WHITESPACE) else Mode.PLAIN


def s(*args: Any) -> Dumped:
    """
    Dump `args` as plain text.

    Terminal output becomes uncolored whitespace text; every other mode becomes
    escaped text inside ``<pre>``.
    """
    xp = XProbe.get_instance()
    mode = resolve_mode(xp.settings)
    if mode is None:
        return Dumped("")
    with xp.settings.overridden(enabled=_plain_mode(mode)):
        return xp.dump(*args)


def sd(*args: Any) -> NoReturn:
    """`s()`, then exit with status 0."""
    xp = XProbe.get_instance()
    mode = resolve_mode(xp.settings)
    if mode is not None:
        with xp.settings.overridden(enabled=_plain_mode(mode)):
            xp.dump(*args)
    sys.exit(0)


# End of file: src/mstair/xprobe/xprobe_api.py
