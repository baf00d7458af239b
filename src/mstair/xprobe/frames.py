# File: src/mstair/xprobe/frames.py
"""
Module: mstair.xprobe.frames

Snapshot of the interpreter call stack in backtrace form.

Each Frame describes one *call*: `function` and `class_name` name the callee,
while `file`, `line` and `end_line` locate the call expression in the caller.
This is the shape the stack walker and the trace normalizer work on, and it is
also the shape of a plain backtrace mapping, so both sources share one model.
"""

from __future__ import annotations

import dataclasses
import inspect
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from itertools import islice
from types import CodeType, FrameType
from typing import Any, Self


__all__ = [
    "CallType",
    "Frame",
    "capture_stack",
    "frame_from_raw",
]


class CallType(StrEnum):
    """How the callee was bound: through the class or through an instance."""

    STATIC = "::"
    INSTANCE = "->"


@dataclass(frozen=True, slots=True, kw_only=True)
class Frame:
    function: str
    """Name of the called function or method."""

    class_name: str | None = None
    """Owning class of the callee, if it is a method."""

    call_type: CallType | None = None
    """STATIC for class/static methods, INSTANCE for bound methods, None for functions."""

    file: str | None = None
    """Source file containing the call expression."""

    line: int | None = None
    """First line of the call expression (1-based)."""

    end_line: int | None = None
    """Last line of the call expression; equal to `line` for single-line calls."""

    args: tuple[Any, ...] | None = None
    """Positional argument values; bound self/cls excluded. None when unknown."""

    obj: Any = None
    """Bound instance (or class, for classmethods)."""

    module: str | None = None
    """Module in which the callee is defined."""

    qualname: str | None = None
    """Qualified name of the callee's code object."""

    def stripped(self) -> Self:
        """Return a copy without argument values or the bound object."""
        return dataclasses.replace(self, args=None, obj=None)

    @property
    def display_name(self) -> str:
        """``Class.method`` for methods, ``function`` otherwise."""
        return f"{self.class_name}.{self.function}" if self.class_name else self.function

    @classmethod
    def from_mapping(cls, step: Mapping[str, Any]) -> Self:
        """
        Build a Frame from a backtrace-style mapping.

        Recognized keys: function, class, type ("::", "->" or "."), file, line,
        end_line, args, object.

        :raises KeyError: If `function` is missing.
        """
        call_type: CallType | None = None
        raw_type = step.get("type")
        if raw_type == "::":
            call_type = CallType.STATIC
        elif raw_type in {"->", "."}:
            call_type = CallType.INSTANCE if step.get("object") is not None else CallType.STATIC
        args = step.get("args")
        return cls(
            function=str(step["function"]),
            class_name=step.get("class"),
            call_type=call_type,
            file=step.get("file"),
            line=step.get("line"),
            end_line=step.get("end_line", step.get("line")),
            args=tuple(args) if args is not None else None,
            obj=step.get("object"),
        )


def _call_position(caller: FrameType) -> tuple[int | None, int | None]:
    """Return (start, end) lines of the instruction `caller` is executing."""
    line = caller.f_lineno
    if caller.f_lasti < 0:
        return line, line
    code: CodeType = caller.f_code
    position = next(islice(code.co_positions(), caller.f_lasti // 2, None), None)
    if position is None:
        return line, line
    start, end, _, _ = position
    return (start or line), (end or start or line)


def _owner_from_qualname(qualname: str) -> str | None:
    owner, _, _ = qualname.rpartition(".")
    if not owner or owner.endswith(">"):
        return None
    return owner.rpartition(".")[2]


def frame_from_raw(raw: FrameType) -> Frame:
    """
    Describe the call that created `raw`.

    The location fields come from `raw.f_back`; a frame without a caller has no
    call location and is described with file and line unset.
    """
    code: CodeType = raw.f_code
    f_locals: Mapping[str, Any] = raw.f_locals
    param_names = code.co_varnames[: code.co_argcount]
    class_name = _owner_from_qualname(code.co_qualname)

    call_type: CallType | None = None
    obj: Any = None
    first = param_names[0] if param_names else None
    if first == "self" and first in f_locals:
        obj = f_locals["self"]
        class_name = class_name or type(obj).__name__
        call_type = CallType.INSTANCE
    elif first == "cls" and isinstance(f_locals.get("cls"), type):
        obj = f_locals["cls"]
        class_name = class_name or obj.__name__
        call_type = CallType.STATIC
    elif class_name:
        call_type = CallType.STATIC
    if call_type is not None and obj is not None:
        param_names = param_names[1:]

    args: list[Any] = [f_locals[name] for name in param_names if name in f_locals]
    if code.co_flags & inspect.CO_VARARGS:
        varargs_name = code.co_varnames[code.co_argcount + code.co_kwonlyargcount]
        args.extend(f_locals.get(varargs_name, ()))

    file: str | None = None
    line: int | None = None
    end_line: int | None = None
    caller = raw.f_back
    if caller is not None:
        file = caller.f_code.co_filename
        line, end_line = _call_position(caller)

    return Frame(
        function=code.co_name,
        class_name=class_name,
        call_type=call_type,
        file=file,
        line=line,
        end_line=end_line,
        args=tuple(args),
        obj=obj,
        module=raw.f_globals.get("__name__"),
        qualname=code.co_qualname,
    )


def capture_stack(start: FrameType | None = None, *, limit: int | None = None) -> tuple[Frame, ...]:
    """
    Snapshot the call stack, innermost call first.

    The outermost interpreter frame (the module being run) has no caller and is
    not included.

    :param start: Innermost frame to describe, default is the caller of capture_stack().
    :param limit: Maximum number of frames to return.
    """
    raw: FrameType | None = start if start is not None else sys._getframe(1)
    frames: list[Frame] = []
    while raw is not None and raw.f_back is not None:
        if limit is not None and len(frames) >= limit:
            break
        frames.append(frame_from_raw(raw))
        raw = raw.f_back
    return tuple(frames)


# End of file: src/mstair/xprobe/frames.py
