# File: src/mstair/xprobe/base/context_managers.py
"""
Context managers for scoped state used while rendering dumps.

Provides:
- CycleGuard: Prevents direct object cycles in recursive value parsing.
- AttributeSaveStack: Stack-based, exception-safe attribute overrides.
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from typing import Any, NamedTuple


__all__ = [
    "AttributeSaveStack",
    "CycleGuard",
    "CycleGuardSeenItem",
]


class CycleGuardSeenItem(NamedTuple):
    """
    Represents an object identity and type for use in cycle detection.

    :param obj_id: The id() of the object.
    :param obj_type: The type of the object.
    """

    obj_id: int
    obj_type: type


class CycleGuard:
    """
    Maintains a stack to track objects during recursive parsing, preventing direct cycles.

    Each parser owns its own guard so that `reset()` between sibling top-level
    values cannot disturb another parser that is still running.

    Example:
        >>> guard = CycleGuard()
        >>> data = {}
        >>> data["self"] = data
        >>> with guard.prevent_cycles(data) as outer:
        ...     with guard.prevent_cycles(data) as inner:
        ...         assert (outer, inner) == (False, True)
    """

    seen: list[CycleGuardSeenItem]

    def __init__(self) -> None:
        self.seen = []

    @property
    def depth(self) -> int:
        """Number of objects currently on the guard stack."""
        return len(self.seen)

    @contextlib.contextmanager
    def prevent_cycles(self, obj: Any) -> Iterator[bool]:
        """
        Track `obj` for the duration of the context and report whether it is already open.

        Uses (id(obj), type(obj)) pairs to avoid false positives from accidental
        id reuse. Uses a stack, not a set, so separate branches may visit the
        same object independently.

        :param obj: The object to guard against cycles.
        :yield: True if a cycle is detected, otherwise False.
        """
        item = CycleGuardSeenItem(id(obj), type(obj))
        is_cycle = item in self.seen
        self.seen.append(item)
        try:
            yield is_cycle
        finally:
            self.seen.pop()

    def reset(self) -> None:
        """Forget every tracked object."""
        self.seen.clear()


class AttributeSaveStack:
    """
    Scoped, nestable attribute overrides for a single target object.

    Every `overridden()` context pushes the previous values of the attributes it
    changes and pops them on exit, whatever the exit path. Because the saved
    values live on a stack rather than in single slots, an override opened while
    another one is active (a dump rendered during another dump) restores in the
    right order.

    Example:
        >>> class Options:
        ...     indent = 2
        >>> opts = Options()
        >>> saves = AttributeSaveStack(opts)
        >>> with saves.overridden(indent=4):
        ...     assert opts.indent == 4
        >>> opts.indent
        2
    """

    target: object
    saved: list[dict[str, Any]]

    def __init__(self, target: object) -> None:
        self.target = target
        self.saved = []

    @property
    def depth(self) -> int:
        """Number of overrides currently active."""
        return len(self.saved)

    @contextlib.contextmanager
    def overridden(self, **changes: Any) -> Iterator[None]:
        """
        Apply `changes` to the target for the duration of the context.

        :param changes: Attribute names and their temporary values.
        :yield: None
        :raises TypeError: If an attribute does not exist on the target.
        :raises RuntimeError: If the save stack was emptied from inside the context.
        """
        unknown = [name for name in changes if not hasattr(self.target, name)]
        if unknown:
            raise TypeError(
                f"{type(self.target).__name__} has no attribute(s): {', '.join(sorted(unknown))}"
            )
        self.saved.append({name: getattr(self.target, name) for name in changes})
        try:
            for name, value in changes.items():
                setattr(self.target, name, value)
            yield
        finally:
            if not self.saved:
                raise RuntimeError(f"{type(self).__name__} stack is empty. Cannot restore.")
            for name, value in self.saved.pop().items():
                setattr(self.target, name, value)


# End of file: src/mstair/xprobe/base/context_managers.py
