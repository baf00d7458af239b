# File: src/mstair/xprobe/call_site.py
"""
Recover what a dump call looked like in source.

Given the captured stack, `resolve_call_info()` finds the frame that called
into the dumper, reads its source file up to the last line of the call
expression, and recovers:

- the modifier prefix characters written before the call (``-d(x)``, ``~d(x)``),
- whether the call's result was assigned,
- a display label for each argument (``d(user.name, 42)`` -> ``["user.name", None]``).

Every failure degrades to unlabeled output; nothing here raises into the
caller's program.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final, Self

from mstair.xprobe.argument_splitter import ArgumentLabel, label_arguments
from mstair.xprobe.base.fs_helpers import fs_read_source_lines
from mstair.xprobe.frames import CallType, Frame
from mstair.xprobe.settings import AliasRegistry
from mstair.xprobe.source_stripper import SENTINEL, strip_source
from mstair.xprobe.stack_walker import walk_stack
from mstair.xprobe.xlogging import create_logger


__all__ = [
    "MODIFIER_CHARS",
    "CallInfo",
    "CallSite",
    "CallSiteMatch",
    "Modifier",
    "match_call_site",
    "parse_call_site",
    "resolve_call_info",
]

LOG = create_logger(__name__)


class Modifier(StrEnum):
    """Prefix characters that change how a single dump renders."""

    FLUSH_OUTPUT = "-"
    EXPAND_ALL = "!"
    IGNORE_DEPTH = "+"
    RETURN_OUTPUT = "@"
    FORCE_PLAIN = "~"


MODIFIER_CHARS: Final[str] = "".join(m.value for m in Modifier)

_S: Final[str] = SENTINEL
_QUALIFIER_CHAIN: Final[str] = rf"(?:[a-z_]\w*{_S}*\.{_S}*)*"
_RECEIVER_CHAIN: Final[str] = rf"(?:\$?\w+(?:\(\))?(?:\[[^\]]*\])?{_S}*(?:\.|->){_S}*)+"


@dataclass(frozen=True, slots=True)
class CallSiteMatch:
    modifiers: frozenset[Modifier] = frozenset()
    is_assigned: bool = False
    paren_offset: int | None = None
    """Offset of the call's `(` in the matched text; None when nothing matched."""


@dataclass(frozen=True, slots=True)
class CallSite:
    frame: Frame
    modifiers: frozenset[Modifier] = frozenset()
    is_assigned: bool = False
    paren_offset: int | None = None


@dataclass(frozen=True, slots=True)
class CallInfo:
    labels: tuple[ArgumentLabel, ...]
    modifiers: frozenset[Modifier] = frozenset()
    call_site: CallSite | None = None
    previous_caller: Frame | None = None
    mini_trace: tuple[Frame, ...] = field(default=())

    @classmethod
    def unresolved(cls, arg_count: int) -> Self:
        """Fully degraded info: no call site and no labels."""
        return cls(labels=(None,) * arg_count)


def _callee_pattern(frame: Frame) -> str:
    name = re.escape(frame.function)
    if frame.class_name and frame.call_type is CallType.STATIC:
        klass = re.escape(frame.class_name)
        return rf"{_QUALIFIER_CHAIN}{klass}{_S}*(?:\.|::){_S}*{name}"
    if frame.class_name and frame.call_type is CallType.INSTANCE:
        return rf"{_RECEIVER_CHAIN}{name}"
    return rf"{_QUALIFIER_CHAIN}{name}"


def match_call_site(normalized: str, frame: Frame) -> CallSiteMatch:
    """
    Find the last call to `frame`'s callee in a stripped source view.

    :param normalized: Matching view from `strip_source()`.
    :param frame: The call site frame; its function/class/call type pick the callee spelling.
    :return: CallSiteMatch; empty when the callee does not appear.
    """
    pattern = re.compile(
        rf"(?:[{_S}{{(\[,;:=]|^)"
        r"([-+!@~]*)"
        rf"{_S}*"
        rf"(\$?[a-z0-9_]+{_S}*[.+:]?={_S}*)?"
        r"\\?"
        rf"{_S}*"
        + _callee_pattern(frame)
        + rf"{_S}*"
        r"(\()",
        re.IGNORECASE,
    )
    matches = list(pattern.finditer(normalized))
    if not matches:
        return CallSiteMatch()
    last = matches[-1]
    modifiers = {Modifier(c) for c in last.group(1)}
    is_assigned = last.group(2) is not None
    if is_assigned:
        modifiers.add(Modifier.RETURN_OUTPUT)
    return CallSiteMatch(frozenset(modifiers), is_assigned, last.start(3))


def parse_call_site(source: str, frame: Frame, arg_count: int) -> CallInfo:
    """
    Parse the source text of a call site.

    :param source: The file's text from its start through the last line of the call.
    :param frame: The call site frame; `frame.line` is the call's first line.
    :param arg_count: Number of runtime argument values.
    :return: CallInfo with labels, modifiers and the CallSite (no trace context).
    """
    stripped = strip_source(source)
    view = stripped.text
    cut = len(view)
    if frame.line is not None:
        lines = source.splitlines(keepends=True)
        cut = stripped.normalized_offset(sum(len(line) for line in lines[: frame.line]))

    match = match_call_site(view[:cut], frame)
    if match.paren_offset is None and cut < len(view):
        match = match_call_site(view, frame)
    if match.paren_offset is None:
        LOG.debug("no call to %s() found in %s:%s", frame.display_name, frame.file, frame.line)
        labels: Sequence[ArgumentLabel] = [None] * arg_count
    else:
        labels = label_arguments(stripped.code_text()[match.paren_offset + 1 :], arg_count)

    call_site = CallSite(frame, match.modifiers, match.is_assigned, match.paren_offset)
    return CallInfo(labels=tuple(labels), modifiers=match.modifiers, call_site=call_site)


def resolve_call_info(
    stack: Sequence[Frame],
    aliases: AliasRegistry,
    arg_count: int,
) -> CallInfo:
    """
    Resolve labels, modifiers and trace context for the dump call in `stack`.

    Never raises: an unresolvable call site, an unreadable file or unexpected
    source yields unlabeled output.

    :param stack: Captured stack, innermost call first.
    :param aliases: Entry points that count as internal.
    :param arg_count: Number of runtime argument values.
    """
    try:
        walk = walk_stack(stack, aliases)
        frame = walk.call_site
        if frame is None or frame.file is None or frame.line is None:
            LOG.debug("no call site in a stack of %d frame(s)", len(stack))
            return CallInfo(
                labels=(None,) * arg_count,
                previous_caller=walk.previous_caller,
                mini_trace=walk.mini_trace,
            )
        try:
            lines = fs_read_source_lines(frame.file, stop=max(frame.line, frame.end_line or 0))
        except (OSError, SyntaxError, UnicodeDecodeError) as e:
            LOG.debug("cannot read %s: %s", frame.file, e)
            return CallInfo(
                labels=(None,) * arg_count,
                previous_caller=walk.previous_caller,
                mini_trace=walk.mini_trace,
            )
        parsed = parse_call_site("".join(lines), frame, arg_count)
        return CallInfo(
            labels=parsed.labels,
            modifiers=parsed.modifiers,
            call_site=parsed.call_site,
            previous_caller=walk.previous_caller,
            mini_trace=walk.mini_trace,
        )
    except Exception:
        LOG.debug("call site resolution failed", exc_info=True)
        return CallInfo.unresolved(arg_count)


# End of file: src/mstair/xprobe/call_site.py
