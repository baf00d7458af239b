# File: src/mstair/xprobe/base/test_context_managers.py
"""
Unit tests for mstair.xprobe.base.context_managers.

These tests verify stack integrity of the cycle guard and the exception-safe
restore order of attribute overrides.
"""

from __future__ import annotations

import pytest

from mstair.xprobe.base.context_managers import AttributeSaveStack, CycleGuard


# ----------------------------------------------------------------------
# CycleGuard
# ----------------------------------------------------------------------


def test_cycle_guard_detects_cycle() -> None:
    """Ensure direct self-reference cycles are detected within a single stack."""
    guard = CycleGuard()
    a: dict[str, object] = {}
    a["self"] = a

    with guard.prevent_cycles(a) as first:
        assert first is False
        with guard.prevent_cycles(a) as second:
            assert second is True

    # After exiting, stack clears; a new entry is not a cycle
    with guard.prevent_cycles(a) as third:
        assert third is False
    assert guard.depth == 0


def test_cycle_guard_sibling_visits_are_not_cycles() -> None:
    guard = CycleGuard()
    shared = [1, 2]
    outer = [shared, shared]
    with guard.prevent_cycles(outer):
        for item in outer:
            with guard.prevent_cycles(item) as is_cycle:
                assert is_cycle is False


def test_cycle_guards_are_independent() -> None:
    a: list[object] = []
    first, second = CycleGuard(), CycleGuard()
    with first.prevent_cycles(a):
        with second.prevent_cycles(a) as is_cycle:
            assert is_cycle is False
        second.reset()
        assert first.depth == 1


# ----------------------------------------------------------------------
# AttributeSaveStack
# ----------------------------------------------------------------------


class _Options:
    indent: int = 2
    color: bool = True


def test_overridden_restores_on_exit() -> None:
    opts = _Options()
    saves = AttributeSaveStack(opts)
    with saves.overridden(indent=4, color=False):
        assert (opts.indent, opts.color) == (4, False)
    assert (opts.indent, opts.color) == (2, True)
    assert saves.depth == 0


def test_overridden_nested_restores_in_order() -> None:
    opts = _Options()
    saves = AttributeSaveStack(opts)
    with saves.overridden(indent=4):
        with saves.overridden(indent=8):
            assert opts.indent == 8
            assert saves.depth == 2
        assert opts.indent == 4
    assert opts.indent == 2


def test_overridden_restores_when_body_raises() -> None:
    opts = _Options()
    saves = AttributeSaveStack(opts)
    with pytest.raises(ZeroDivisionError):
        with saves.overridden(indent=0):
            _ = 1 / opts.indent
    assert opts.indent == 2
    assert saves.depth == 0


def test_overridden_rejects_unknown_attribute() -> None:
    saves = AttributeSaveStack(_Options())
    with pytest.raises(TypeError, match="no_such_option"):
        with saves.overridden(no_such_option=1):
            pass
    assert saves.depth == 0


# End of file: src/mstair/xprobe/base/test_context_managers.py
