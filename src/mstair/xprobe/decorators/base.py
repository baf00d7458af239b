# File: src/mstair/xprobe/decorators/base.py
"""
Shared contract and helpers for output decorators.

A decorator turns the pieces of one dump into text. The dumper calls, in order:
`init()` (first dump only), `wrap_start()`, then `decorate()` once per value or
`decorate_trace()` once for a backtrace, and finally `wrap_end()`. Each call
returns a string; the dumper concatenates them.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

from mstair.xprobe.path_resolver import FileLink, file_link
from mstair.xprobe.settings import XProbeSettings


if TYPE_CHECKING:
    from mstair.xprobe.call_site import CallSite
    from mstair.xprobe.frames import Frame
    from mstair.xprobe.trace_normalizer import NormalizedStep
    from mstair.xprobe.value_tree import ValueNode


__all__ = [
    "Decorator",
    "caller_label",
    "frame_link",
    "node_summary",
    "step_link",
]


class Decorator(Protocol):
    settings: XProbeSettings

    def init(self) -> str: ...
    def wrap_start(self, call_site: CallSite | None) -> str: ...
    def decorate(self, node: ValueNode) -> str: ...
    def decorate_trace(self, steps: Sequence[NormalizedStep]) -> str: ...
    def wrap_end(
        self,
        call_site: CallSite | None,
        mini_trace: Sequence[Frame],
        previous_caller: Frame | None,
    ) -> str: ...


def node_summary(node: ValueNode) -> list[tuple[str, str]]:
    """
    Return the (role, text) pieces of a node's one-line summary.

    Roles, in order and only when present: "name", "type" (with the size as
    ``type(size)``), "value" and "note".
    """
    parts: list[tuple[str, str]] = []
    if node.name is not None:
        parts.append(("name", node.name))
    type_text = node.type_name if node.size is None else f"{node.type_name}({node.size})"
    parts.append(("type", type_text))
    if node.value is not None:
        parts.append(("value", node.value))
    if node.note is not None:
        parts.append(("note", node.note))
    return parts


def caller_label(frame: Frame | None) -> str:
    """``Class.method()`` or ``function()`` for `frame`, "" for None."""
    return f"{frame.display_name}()" if frame is not None else ""


def frame_link(frame: Frame, settings: XProbeSettings) -> FileLink | None:
    if frame.file is None:
        return None
    return file_link(frame.file, frame.line, settings)


def step_link(step: NormalizedStep, settings: XProbeSettings) -> FileLink | None:
    if step.file is None:
        return None
    return file_link(step.file, step.line, settings)


# End of file: src/mstair/xprobe/decorators/base.py
