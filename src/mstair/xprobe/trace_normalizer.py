# File: src/mstair/xprobe/trace_normalizer.py
"""
Validate and normalize a backtrace for display.

`normalize_trace()` accepts the shapes a user might hand to `trace()` or
`dump()`: a sequence of Frame objects, a list of backtrace-style mappings, or
the FrameInfo records returned by `inspect.stack()`. Anything else is "not a
trace" and yields None, so the caller can dump it as a plain value instead.
"""

from __future__ import annotations

import inspect
import sys
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Any, Final

from mstair.xprobe.frames import Frame, capture_stack
from mstair.xprobe.path_resolver import shorten_path
from mstair.xprobe.settings import AliasRegistry, XProbeSettings
from mstair.xprobe.source_snippet import SourceSnippet, read_source_snippet
from mstair.xprobe.xlogging import create_logger


__all__ = [
    "AUTOLOAD_FUNCTIONS",
    "INCLUDE_FUNCTIONS",
    "TRACE_FIELDS",
    "NormalizedStep",
    "normalize_trace",
    "resolve_parameters",
]

LOG = create_logger(__name__)

TRACE_FIELDS: Final[tuple[str, ...]] = ("file", "line", "args", "class")
"""A step must carry at least one of these to count as a backtrace entry."""

AUTOLOAD_FUNCTIONS: Final[frozenset[str]] = frozenset(
    {
        "_call_with_frames_removed",
        "_find_and_load",
        "_find_and_load_unlocked",
        "_gcd_import",
        "_handle_fromlist",
        "_load_unlocked",
    }
)
"""Import machinery frames; they carry no information for the reader."""

INCLUDE_FUNCTIONS: Final[frozenset[str]] = frozenset({"run_path", "run_module"})
"""`runpy` calls whose first argument names the code being run: a path or a module name."""

_FROZEN_IMPORTLIB_PREFIX: Final[str] = "<frozen importlib"

_STEP_FIELD_TYPES: Final[tuple[tuple[str, type], ...]] = (
    ("class", str),
    ("file", str),
    ("line", int),
    ("end_line", int),
)


@dataclass(kw_only=True)
class NormalizedStep:
    function: str
    """``Class.method`` or ``function``; empty for the terminal marker step."""
    args: dict[str, Any] | None = None
    file: str | None = None
    line: int | None = None
    obj: Any = field(default=None, repr=False)

    @cached_property
    def source(self) -> SourceSnippet | None:
        """Source window around `line`, read on first access."""
        return read_source_snippet(self.file, self.line)

    @property
    def is_marker(self) -> bool:
        return not self.function


def _field_present(frame: Frame, name: str) -> bool:
    value = {
        "file": frame.file,
        "line": frame.line,
        "args": frame.args,
        "class": frame.class_name,
    }[name]
    return value is not None


def _is_step_mapping(item: Any) -> bool:
    if not isinstance(item, Mapping) or not isinstance(item.get("function"), str):
        return False
    for key, kind in _STEP_FIELD_TYPES:
        value = item.get(key)
        if value is not None and (not isinstance(value, kind) or isinstance(value, bool)):
            return False
    args = item.get("args")
    return args is None or (isinstance(args, Iterable) and not isinstance(args, (str, bytes)))


def _as_frames(data: Sequence[Any]) -> list[Frame] | None:
    if data and all(isinstance(item, inspect.FrameInfo) for item in data):
        return list(capture_stack(start=data[0].frame))
    frames: list[Frame] = []
    for item in data:
        if isinstance(item, Frame):
            frames.append(item)
        elif _is_step_mapping(item):
            frames.append(Frame.from_mapping(item))
        else:
            return None
    return frames


def _is_autoload(frame: Frame) -> bool:
    return frame.function in AUTOLOAD_FUNCTIONS or (frame.file or "").startswith(
        _FROZEN_IMPORTLIB_PREFIX
    )


def _resolve_owner(frame: Frame) -> type | None:
    if frame.obj is not None:
        return frame.obj if isinstance(frame.obj, type) else type(frame.obj)
    if not frame.class_name or not frame.module:
        return None
    target: Any = sys.modules.get(frame.module)
    path = (frame.qualname or "").split(".")[:-1] or [frame.class_name]
    for part in path:
        target = getattr(target, part, None)
    return target if isinstance(target, type) else None


def _resolve_function(frame: Frame) -> Callable[..., Any] | None:
    target: Any = sys.modules.get(frame.module or "")
    for part in (frame.qualname or frame.function).split("."):
        target = getattr(target, part, None)
    return target if callable(target) else None


def _positional_names(func: Any, *, drop_first: bool) -> list[str] | None:
    try:
        signature = inspect.signature(func, follow_wrapped=False)
    except (TypeError, ValueError):
        return None
    names = [
        p.name
        for p in signature.parameters.values()
        if p.kind in {inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD}
    ]
    return names[1:] if drop_first else names


def _method_parameters(owner: type, name: str) -> list[str] | None:
    try:
        attr = inspect.getattr_static(owner, name)
    except AttributeError:
        return None
    if isinstance(attr, staticmethod):
        return _positional_names(attr.__func__, drop_first=False)
    if isinstance(attr, classmethod):
        return _positional_names(attr.__func__, drop_first=True)
    if inspect.isfunction(attr):
        return _positional_names(attr, drop_first=True)
    return None


def resolve_parameters(frame: Frame) -> list[str] | None:
    """
    Return the positional parameter names of the callee described by `frame`.

    For methods the lookup tries, in order: the method itself, the owner's
    ``__getattr__`` handler, and the metaclass ``__getattr__`` handler. Bound
    ``self``/``cls`` are not included. Returns None when nothing can be
    resolved, in which case arguments are keyed by position.
    """
    try:
        if frame.class_name:
            owner = _resolve_owner(frame)
            if owner is None:
                return None
            for target, name in (
                (owner, frame.function),
                (owner, "__getattr__"),
                (type(owner), "__getattr__"),
            ):
                names = _method_parameters(target, name)
                if names is not None:
                    return names
            return None
        func = _resolve_function(frame)
        return _positional_names(func, drop_first=False) if func is not None else None
    except Exception:
        LOG.trace("parameter lookup failed for %s", frame.display_name, exc_info=True)
        return None


def _step_args(frame: Frame, settings: XProbeSettings) -> dict[str, Any] | None:
    if frame.function in INCLUDE_FUNCTIONS and not frame.class_name:
        if not frame.args:
            return {}
        if frame.function == "run_module":
            return {"module": str(frame.args[0])}
        return {"file": shorten_path(str(frame.args[0]), settings)}
    if frame.args is None:
        return None
    names = resolve_parameters(frame) or []
    return {
        (names[i] if i < len(names) else f"#{i + 1}"): value for i, value in enumerate(frame.args)
    }


def normalize_trace(
    data: Sequence[Any],
    aliases: AliasRegistry,
    settings: XProbeSettings,
) -> list[NormalizedStep] | None:
    """
    Validate `data` as a backtrace and convert it into display steps.

    The scan runs from the outermost entry inward. Import machinery frames are
    dropped. The first internal frame (a call into the dumper) becomes a marker
    step carrying only its location, and ends the trace.

    :param data: Frames, backtrace mappings or FrameInfo records, innermost first.
    :param aliases: Entry points that count as internal.
    :param settings: Used for path shortening of include-style arguments.
    :return: Steps innermost first, or None if `data` is not a trace.
    """
    try:
        frames = _as_frames(data)
        return _normalize(frames, aliases, settings) if frames is not None else None
    except Exception:
        LOG.debug("not a trace: normalization failed", exc_info=True)
        return None


def _normalize(
    frames: Sequence[Frame],
    aliases: AliasRegistry,
    settings: XProbeSettings,
) -> list[NormalizedStep] | None:
    kept: list[Frame] = []
    marker: Frame | None = None
    file_found = False
    for frame in reversed(frames):
        if not file_found and frame.file and Path(frame.file).is_file():
            file_found = True
        if not any(_field_present(frame, name) for name in TRACE_FIELDS):
            return None
        if aliases.is_internal(frame):
            marker = frame
            break
        if not _is_autoload(frame):
            kept.append(frame)
    if not file_found:
        return None

    steps: list[NormalizedStep] = []
    if marker is not None:
        steps.append(NormalizedStep(function="", file=marker.file, line=marker.line))
    for frame in reversed(kept):
        steps.append(
            NormalizedStep(
                function=frame.display_name,
                args=_step_args(frame, settings),
                file=frame.file,
                line=frame.line,
                obj=frame.obj,
            )
        )
    return steps


# End of file: src/mstair/xprobe/trace_normalizer.py
