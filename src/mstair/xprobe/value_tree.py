# File: src/mstair/xprobe/value_tree.py
"""
Turn an arbitrary Python value into a display tree.

ValueParser walks a value the way a debugger's variables pane does: scalars
become leaves with an inline rendering, while mappings, sequences, sets,
dataclasses and plain objects become nodes whose children are their items or
attributes. The tree is what the decorators render; no text is produced here.

Limits come from XProbeSettings:

- strings and bytes longer than `max_str_length` are cut and marked with ``...``;
- containers nested deeper than `max_levels` are not expanded (None = unlimited);
- a container that contains itself is not entered a second time.
"""

from __future__ import annotations

import contextlib
import dataclasses
from collections.abc import Callable, Iterator, Mapping, Sequence, Set
from dataclasses import dataclass, field
from types import ModuleType
from typing import Any, Final

from mstair.xprobe.base.context_managers import CycleGuard
from mstair.xprobe.base.types import SCALAR_TYPES
from mstair.xprobe.settings import XProbeSettings
from mstair.xprobe.xlogging import create_logger


__all__ = [
    "DEPTH_NOTE",
    "RECURSION_NOTE",
    "ValueNode",
    "ValueParser",
]

LOG = create_logger(__name__)

RECURSION_NOTE: Final[str] = "*RECURSION*"
DEPTH_NOTE: Final[str] = "*DEPTH TOO GREAT*"

_UNREPRESENTABLE: Final[str] = "<unrepresentable>"


@dataclass(slots=True, kw_only=True)
class ValueNode:
    """
    One entry of the display tree.

    :param name: Label, key, index or attribute name; None for an unlabeled value.
    :param type_name: Qualified name of the value's type.
    :param value: Inline rendering for leaves; None for expanded containers.
    :param size: Length of strings, bytes and containers, where meaningful.
    :param children: Items or attributes of a container.
    :param note: Why the node is incomplete (recursion, depth limit, access error).
    """

    name: str | None
    type_name: str
    value: str | None = None
    size: int | None = None
    children: list[ValueNode] = field(default_factory=list)
    note: str | None = None

    @property
    def is_expandable(self) -> bool:
        return bool(self.children)

    def walk(self, depth: int = 0) -> Iterator[tuple[int, ValueNode]]:
        """Yield (depth, node) for this node and its descendants, depth first."""
        yield depth, self
        for child in self.children:
            yield from child.walk(depth + 1)


def _safe_repr(value: Any) -> str:
    text = _UNREPRESENTABLE
    with contextlib.suppress(Exception):
        text = repr(value)
    return text


def _type_name(value: Any) -> str:
    return type(value).__qualname__


def _slot_names(cls: type) -> list[str]:
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name not in ("__dict__", "__weakref__") and name not in names:
                names.append(name)
    return names


_Getter = Callable[[], Any]


def _attribute_getter(obj: Any, name: str) -> _Getter:
    return lambda: getattr(obj, name)


def _constant_getter(value: Any) -> _Getter:
    return lambda: value


class ValueParser:
    """
    Build ValueNode trees under the limits of an XProbeSettings object.

    The parser is reusable. Call `reset()` between unrelated top-level values;
    the cycle guard belongs to this parser alone, so resetting it cannot
    disturb a parser that is still walking another value.
    """

    settings: XProbeSettings
    _guard: CycleGuard

    def __init__(self, settings: XProbeSettings) -> None:
        self.settings = settings
        self._guard = CycleGuard()

    def reset(self) -> None:
        """Forget the objects currently being walked."""
        self._guard.reset()

    def parse(self, value: Any, label: str | None = None) -> ValueNode:
        """
        Build the display tree for `value`.

        :param value: Any Python object.
        :param label: Display name for the root node, usually the source expression.
        :return: The root ValueNode.
        """
        return self._parse(value, label, level=0)

    # ---------- internals ----------

    def _parse(self, value: Any, name: str | None, level: int) -> ValueNode:
        node = ValueNode(name=name, type_name=_type_name(value))
        if isinstance(value, SCALAR_TYPES):
            self._fill_scalar(node, value)
            return node

        members = self._members(value)
        if members is None:
            node.value = _safe_repr(value)
            return node

        with self._guard.prevent_cycles(value) as is_cycle:
            if is_cycle:
                node.note = RECURSION_NOTE
                return node
            if isinstance(value, (Mapping, Sequence, Set)):
                node.size = len(members)
            if not members:
                node.value = _safe_repr(value)
                return node
            max_levels = self.settings.max_levels
            if max_levels is not None and level >= max_levels:
                node.note = DEPTH_NOTE
                return node
            for child_name, getter in members:
                node.children.append(self._parse_member(child_name, getter, level + 1))
        return node

    def _parse_member(self, name: str, getter: _Getter, level: int) -> ValueNode:
        try:
            value = getter()
        except Exception as e:
            LOG.trace("cannot read member %s: %s", name, e)
            return ValueNode(name=name, type_name=type(e).__qualname__, note=f"*ERROR* {e}")
        return self._parse(value, name, level)

    def _fill_scalar(self, node: ValueNode, value: Any) -> None:
        if isinstance(value, (str, bytes, bytearray)):
            limit = self.settings.max_str_length
            node.size = len(value)
            if len(value) > limit:
                node.value = _safe_repr(value[:limit]) + "..."
                return
        node.value = _safe_repr(value)

    def _members(self, value: Any) -> list[tuple[str, _Getter]] | None:
        """
        Return (name, getter) pairs for the children of `value`, or None for a leaf.
        """
        if isinstance(value, (type, ModuleType)) or callable(value):
            return None
        if isinstance(value, Mapping):
            return [(_safe_repr(k), _constant_getter(v)) for k, v in value.items()]
        if isinstance(value, (Sequence, Set)):
            return [(str(i), _constant_getter(v)) for i, v in enumerate(value)]
        if dataclasses.is_dataclass(value):
            return [(f.name, _attribute_getter(value, f.name)) for f in dataclasses.fields(value)]
        names = _slot_names(type(value))
        instance_dict = getattr(value, "__dict__", None)
        if isinstance(instance_dict, Mapping):
            names.extend(n for n in instance_dict if n not in names)
        elif not names:
            return None
        return [(n, _attribute_getter(value, n)) for n in names]


# End of file: src/mstair/xprobe/value_tree.py
