# File: src/mstair/xprobe/test_call_site.py
"""
Tests for call-site parsing, on literal source text and on real calls in this file.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from mstair.xprobe.call_site import CallInfo, Modifier, parse_call_site, resolve_call_info
from mstair.xprobe.frames import CallType, Frame, capture_stack
from mstair.xprobe.settings import AliasRegistry


D = Frame(function="d", line=1)


def _at(line: int, frame: Frame = D) -> Frame:
    return Frame(
        function=frame.function,
        class_name=frame.class_name,
        call_type=frame.call_type,
        line=line,
        end_line=line,
    )


# ---------- parse_call_site() on text ----------


def test_labels_and_literals() -> None:
    info = parse_call_site("x = 1\nd(x, 2, 'two')\n", _at(2), 3)
    assert info.labels == ("x", None, None)
    assert info.modifiers == frozenset()
    assert info.call_site is not None and not info.call_site.is_assigned


def test_php_style_assigned_call() -> None:
    source = '  $x = dump($a, $b->prop, [1,2], "literal");\n'
    info = parse_call_site(source, Frame(function="dump", line=1, end_line=1), 4)
    assert info.labels == ("$a", "$b->prop", None, None)
    assert info.modifiers == frozenset({Modifier.RETURN_OUTPUT})
    assert info.call_site is not None and info.call_site.is_assigned


@pytest.mark.parametrize(
    ("source", "modifiers"),
    [
        ("~d(a)\n", {Modifier.FORCE_PLAIN}),
        ("print(-d(a))\n", {Modifier.FLUSH_OUTPUT}),
        ("+d(a)\n", {Modifier.IGNORE_DEPTH}),
        ("!d(a)\n", {Modifier.EXPAND_ALL}),
        ("-~d(a)\n", {Modifier.FLUSH_OUTPUT, Modifier.FORCE_PLAIN}),
        ("x == d(a)\n", set()),
    ],
)
def test_modifiers(source: str, modifiers: set[Modifier]) -> None:
    info = parse_call_site(source, _at(1), 1)
    assert info.modifiers == frozenset(modifiers)
    assert info.labels == ("a",)


@pytest.mark.parametrize("source", ["out = d(a)\n", "out += d(a)\n", "if (n := d(a)):\n"])
def test_assignment_implies_return_output(source: str) -> None:
    info = parse_call_site(source, _at(1), 1)
    assert info.call_site is not None and info.call_site.is_assigned
    assert Modifier.RETURN_OUTPUT in info.modifiers


def test_rightmost_call_on_the_line_wins() -> None:
    info = parse_call_site("d(a); d(b, c)\n", _at(1), 2)
    assert info.labels == ("b", "c")


def test_view_is_cut_at_the_call_line() -> None:
    info = parse_call_site("d(a)\nd(b)\n", _at(1), 1)
    assert info.labels == ("a",)


def test_falls_back_to_whole_text_when_line_has_no_call() -> None:
    info = parse_call_site("x = 1\nd(z)\n", _at(1), 1)
    assert info.labels == ("z",)


def test_comments_are_ignored() -> None:
    info = parse_call_site("# d(fake, fake)\nd(real)  # d(x, y)\n", _at(2), 1)
    assert info.labels == ("real",)


def test_multiline_call() -> None:
    source = "d(\n    user.name,  # who\n    items[0],\n)\n"
    info = parse_call_site(source, Frame(function="d", line=1, end_line=4), 2)
    assert info.labels == ("user.name", "items[...]")


def test_qualified_function() -> None:
    info = parse_call_site("xprobe.d(a)\n", _at(1), 1)
    assert info.labels == ("a",)


def test_static_method_call() -> None:
    frame = Frame(function="dump", class_name="XProbe", call_type=CallType.STATIC, line=1)
    info = parse_call_site("mstair.xprobe.XProbe.dump(v)\n", frame, 1)
    assert info.labels == ("v",)


def test_instance_method_call() -> None:
    frame = Frame(function="dump", class_name="XProbe", call_type=CallType.INSTANCE, line=1)
    info = parse_call_site("self.dumpers[0].dump(v, w)\n", frame, 2)
    assert info.labels == ("v", "w")


def test_missing_callee_degrades() -> None:
    info = parse_call_site("print(x)\n", _at(1), 2)
    assert info.labels == (None, None)
    assert info.call_site is not None and info.call_site.paren_offset is None


# ---------- resolve_call_info() on real calls ----------

ALIASES = AliasRegistry()
ALIASES.register_function("peek")
ALIASES.register_method("_Inspector", "look")


def peek(*args: Any) -> CallInfo:
    return resolve_call_info(capture_stack(), ALIASES, len(args))


class _Inspector:
    def look(self, *args: Any) -> CallInfo:
        return resolve_call_info(capture_stack(), ALIASES, len(args))


def _caller_of_peek() -> CallInfo:
    user = SimpleNamespace(name="ada")
    return peek(user.name)


def test_real_call_labels() -> None:
    user = SimpleNamespace(name="ada", tags=["x"])
    info = peek(user.name, user.tags[0], 42)
    assert info.labels == ("user.name", "user.tags[...]", None)
    assert Modifier.RETURN_OUTPUT in info.modifiers
    assert info.call_site is not None
    assert info.call_site.frame.file == __file__


def test_real_multiline_call() -> None:
    items = [1, 2]
    info = peek(
        items,
        len(items),  # size
    )
    assert info.labels == ("items", "len(...)")


def test_real_method_call() -> None:
    holder = SimpleNamespace(inspector=_Inspector())
    value = 3
    info = holder.inspector.look(value)
    assert info.labels == ("value",)


def test_previous_caller_and_mini_trace() -> None:
    info = _caller_of_peek()
    assert info.labels == ("user.name",)
    assert info.previous_caller is not None
    assert info.previous_caller.function == "_caller_of_peek"
    assert info.previous_caller.args is None
    assert info.mini_trace[0].function == "_caller_of_peek"


def test_unreadable_file_degrades() -> None:
    stack = [Frame(function="peek", file="/nonexistent/app.py", line=3)]
    info = resolve_call_info(stack, ALIASES, 2)
    assert info.labels == (None, None)
    assert info.call_site is None


def test_no_internal_frame_degrades() -> None:
    stack = [Frame(function="main", file=__file__, line=1)]
    assert resolve_call_info(stack, ALIASES, 1) == CallInfo.unresolved(1)


# End of file: src/mstair/xprobe/test_call_site.py
