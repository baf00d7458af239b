# File: src/mstair/xprobe/stack_walker.py
"""
Find the call site of a dump in a captured stack.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

from mstair.xprobe.frames import Frame
from mstair.xprobe.settings import AliasRegistry


__all__ = [
    "WalkResult",
    "walk_stack",
]


class WalkResult(NamedTuple):
    call_site: Frame | None
    """Outermost internal frame of the innermost internal run: where user code called in."""
    previous_caller: Frame | None
    """The call of the function that contains the call site."""
    mini_trace: tuple[Frame, ...]
    """Stripped external frames outward of the call site, innermost first."""


def walk_stack(stack: Sequence[Frame], aliases: AliasRegistry) -> WalkResult:
    """
    Locate the dump call site in `stack` (innermost call first).

    Starting from the innermost frame, leading external frames are skipped; the
    first internal frame starts a run of contiguous internal frames (a wrapper
    such as `d()` calling `XProbe.dump()`), and the outermost frame of that run
    is the call site. The mini trace collects external frames with a known
    location from just outside the call site up to the next internal frame.

    Stopping at the next internal frame keeps a dump fired while another dump
    is rendering attributed to its own call site.

    :param stack: Frames from `capture_stack()` or an equivalent backtrace.
    :param aliases: Entry points that count as internal.
    :return: WalkResult; all parts empty when no internal frame is present.
    """
    index = 0
    count = len(stack)
    while index < count and not aliases.is_internal(stack[index]):
        index += 1
    if index == count:
        return WalkResult(None, None, ())
    while index + 1 < count and aliases.is_internal(stack[index + 1]):
        index += 1

    call_site = stack[index]
    previous_caller = stack[index + 1].stripped() if index + 1 < count else None

    mini_trace: list[Frame] = []
    for frame in stack[index + 1 :]:
        if aliases.is_internal(frame):
            break
        if frame.file is not None and frame.line is not None:
            mini_trace.append(frame.stripped())
    return WalkResult(call_site, previous_caller, tuple(mini_trace))


# End of file: src/mstair/xprobe/stack_walker.py
