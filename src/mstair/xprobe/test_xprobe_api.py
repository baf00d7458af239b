# File: src/mstair/xprobe/test_xprobe_api.py
"""
End-to-end tests for XProbe.dump(), XProbe.trace() and the d/dd/s/sd functions.

The dumps below are real calls: labels and modifiers are read back from this file.
"""

from __future__ import annotations

import dataclasses
import inspect
import os
from typing import Any

import pytest

from mstair.xprobe import xprobe_api
from mstair.xprobe.base import git_helpers
from mstair.xprobe.settings import Mode, XProbeSettings
from mstair.xprobe.xprobe_api import NO_ARGUMENTS, Dumped, XProbe, d, dd, s, sd


HERE = os.path.dirname(__file__).replace("\\", "/")
ROOTS = {HERE: "<TESTS>"}


@pytest.fixture(autouse=True)
def no_git(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(git_helpers, "git_repo_basedir", lambda start=".": None)


def make_settings(**changes: Any) -> XProbeSettings:
    values: dict[str, Any] = {
        "enabled": Mode.WHITESPACE,
        "display_called_from": False,
        "app_root_dirs": dict(ROOTS),
    }
    values.update(changes)
    return XProbeSettings(**values)


@pytest.fixture
def xp() -> XProbe:
    return XProbe(make_settings())


@pytest.fixture
def shared(monkeypatch: pytest.MonkeyPatch) -> XProbe:
    """Install a test instance behind the module-level functions."""
    instance = XProbe(make_settings())
    monkeypatch.setattr(xprobe_api, "_xprobe_instance", instance)
    return instance


# ---------- XProbe.dump() ----------


def test_assigned_dump_returns_labeled_output(xp: XProbe) -> None:
    user = {"name": "ada"}
    out = xp.dump(user, 42)
    assert isinstance(out, Dumped)
    assert out == "user dict(1)\n    'name' str(3) 'ada'\nint 42\n"


def test_expression_labels(xp: XProbe) -> None:
    user = {"name": "ada"}
    items = [1, 2]
    out = xp.dump(user["name"], len(items))
    assert out == "user[...] str(3) 'ada'\nlen(...) int 2\n"


def test_unassigned_dump_prints(xp: XProbe, capsys: pytest.CaptureFixture[str]) -> None:
    value = 1
    assert xp.dump(value) == ""
    assert capsys.readouterr().out == "value int 1\n"


def test_no_arguments(xp: XProbe) -> None:
    out = xp.dump()
    assert NO_ARGUMENTS in out


def test_disabled_dumper_is_silent(capsys: pytest.CaptureFixture[str]) -> None:
    xp = XProbe(make_settings(enabled=False))
    out = xp.dump(1)
    assert out == ""
    assert capsys.readouterr().out == ""


def test_enabled_getter_and_setter(xp: XProbe) -> None:
    assert xp.enabled() is Mode.WHITESPACE
    assert xp.enabled(False) is Mode.WHITESPACE
    assert xp.enabled() is False
    out = xp.dump(1)
    assert out == ""


def test_settings_restored_after_dump() -> None:
    xp = XProbe(make_settings(enabled=True, cli_detection=True, max_levels=3))
    out = +xp.dump([1])
    assert out == ""
    assert xp.settings.enabled is True
    assert xp.settings.max_levels == 3
    assert xp.settings.return_output is False


def test_list_that_is_not_a_trace_is_dumped_as_a_value(xp: XProbe) -> None:
    items = [1, 2]
    out = xp.dump(items)
    assert out == "items list(2)\n    0 int 1\n    1 int 2\n"


def test_labeled_one_is_a_value(xp: XProbe) -> None:
    one = 1
    out = xp.dump(one)
    assert out == "one int 1\n"


def test_one_without_a_readable_call_site_is_a_value() -> None:
    xp = XProbe(make_settings(return_output=True))
    namespace: dict[str, Any] = {"xp": xp, "x": 1}
    exec(compile("out = xp.dump(x)", "<console>", "exec"), namespace)
    assert namespace["out"] == "int 1\n"


def test_malformed_trace_mapping_is_dumped_as_a_value(xp: XProbe) -> None:
    steps = [{"function": "f", "args": 5, "file": __file__}]
    out = xp.dump(steps)
    assert out.startswith("steps list(1)\n    0 dict(3)\n")
    assert "'args' int 5\n" in out


def test_footer_names_the_call_site() -> None:
    xp = XProbe(make_settings(display_called_from=True))
    value = 1
    out = xp.dump(value)
    lines = out.splitlines()
    assert lines[0] == "value int 1"
    assert lines[1].startswith("Called from <TESTS>/test_xprobe_api.py:")
    assert lines[1].endswith("[test_footer_names_the_call_site()]")


# ---------- modifiers ----------


def test_force_plain_modifier(capsys: pytest.CaptureFixture[str]) -> None:
    xp = XProbe(make_settings(enabled=Mode.PLAIN))
    value = 1
    ~xp.dump(value)
    assert capsys.readouterr().out == "value int 1\n"


def test_ignore_depth_modifier() -> None:
    xp = XProbe(make_settings(max_levels=1, return_output=True))
    nested = [[["deep"]]]
    limited = [xp.dump(nested)]
    unlimited = [+xp.dump(nested)]
    assert "*DEPTH TOO GREAT*" in limited[0]
    assert "*DEPTH TOO GREAT*" not in unlimited[0]
    assert "'deep'" in unlimited[0]


def test_flush_modifier_emits_prelude_again() -> None:
    xp = XProbe(make_settings(enabled=Mode.PLAIN, return_output=True))
    outputs: list[str] = []
    outputs.append(xp.dump("a"))
    outputs.append(xp.dump("b"))
    outputs.append(-xp.dump("c"))
    assert outputs[0].startswith("<style>")
    assert outputs[1].startswith('<pre class="xprobe-plain">')
    assert outputs[2].startswith("<style>")


def test_dumped_unary_operators_return_self() -> None:
    dumped = Dumped("text")
    assert -dumped is dumped
    assert +dumped is dumped
    assert ~dumped is dumped


# ---------- dumps fired while rendering ----------


class _Abort(BaseException):
    pass


def test_dump_inside_repr_has_its_own_call_site() -> None:
    xp = XProbe(make_settings(display_called_from=True))
    before = dataclasses.replace(xp.settings)
    inner: list[str] = []

    class _Noisy:
        __slots__ = ()

        def __repr__(self) -> str:
            marker = "inner"
            text = xp.dump(marker)
            inner.append(text)
            return "<noisy>"

    value = 7
    noisy = _Noisy()
    out = xp.dump(value, noisy)

    lines = out.splitlines()
    assert lines[0] == "value int 7"
    assert lines[1].startswith("noisy ")
    assert lines[1].endswith(" <noisy>")
    assert lines[2].startswith("Called from <TESTS>/test_xprobe_api.py:")
    assert lines[2].endswith("[test_dump_inside_repr_has_its_own_call_site()]")

    (text,) = inner
    inner_lines = text.splitlines()
    assert inner_lines[0] == "marker str(5) 'inner'"
    assert inner_lines[1].startswith("Called from <TESTS>/test_xprobe_api.py:")
    assert inner_lines[1].endswith("__repr__()]")
    assert inner_lines[1].split()[2] != lines[2].split()[2]

    assert xp.settings == before


def test_settings_restored_when_repr_aborts_a_dump(capsys: pytest.CaptureFixture[str]) -> None:
    xp = XProbe(make_settings(max_levels=2, first_run=False))
    before = dataclasses.replace(xp.settings)

    class _Failing:
        __slots__ = ()

        def __repr__(self) -> str:
            marker = "inner"
            text = xp.dump(marker)
            raise _Abort(text)

    with pytest.raises(_Abort) as exc:
        xp.dump(_Failing())
    assert str(exc.value) == "marker str(5) 'inner'\n"
    assert xp.settings == before

    value = 7
    assert xp.dump(value) == ""
    assert capsys.readouterr().out == "value int 7\n"


# ---------- traces ----------


def test_dumping_one_renders_the_stack() -> None:
    xp = XProbe(make_settings(max_levels=1))
    out = xp.dump(1)
    lines = out.splitlines()
    assert lines[0].startswith("1. <TESTS>/test_xprobe_api.py:")
    assert lines[1].startswith("2. ")
    assert lines[1].endswith(" test_dumping_one_renders_the_stack()")


def test_trace_method_output(capsys: pytest.CaptureFixture[str]) -> None:
    xp = XProbe(make_settings(max_levels=1))
    xp.trace()
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("1. <TESTS>/test_xprobe_api.py:")
    assert lines[1].endswith(" test_trace_method_output()")


def test_trace_of_mappings() -> None:
    xp = XProbe(make_settings(return_output=True))
    steps = [{"function": "handler", "file": __file__, "line": 3, "args": ["x"]}]
    out = xp.trace(steps)
    assert out == "1. <TESTS>/test_xprobe_api.py:3 handler()\n    #1 str(1) 'x'\n"


def test_trace_accepts_inspect_records() -> None:
    xp = XProbe(make_settings(max_levels=1, return_output=True))
    out = xp.trace(inspect.stack())
    assert out.startswith("1. ")
    assert "test_trace_accepts_inspect_records()" in out


def test_disabled_trace_is_silent() -> None:
    xp = XProbe(make_settings(enabled=False))
    out = xp.trace()
    assert out == ""


# ---------- module-level functions ----------


def test_get_instance_is_shared(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(xprobe_api, "_xprobe_instance", None)
    monkeypatch.setattr(xprobe_api, "settings_from_environment", make_settings)
    first = XProbe.get_instance()
    assert XProbe.get_instance() is first
    assert first.settings.enabled is Mode.WHITESPACE


def test_d_labels_through_the_wrapper(shared: XProbe) -> None:
    value = "hi"
    out = d(value)
    assert out == "value str(2) 'hi'\n"


def test_dd_exits_after_printing(shared: XProbe, capsys: pytest.CaptureFixture[str]) -> None:
    value = 1
    with pytest.raises(SystemExit) as exc:
        dd(value)
    assert exc.value.code == 0
    assert capsys.readouterr().out == "value int 1\n"


def test_s_strips_terminal_output(shared: XProbe) -> None:
    shared.settings.enabled = Mode.CLI
    value = 1
    out = s(value)
    assert out == "value int 1\n"
    assert shared.settings.enabled is Mode.CLI


def test_s_escapes_html_output(shared: XProbe) -> None:
    shared.settings.enabled = Mode.RICH
    tag = "<b>"
    out = s(tag)
    assert "<pre" in out
    assert "'&lt;b&gt;'" in out
    assert shared.settings.enabled is Mode.RICH


def test_sd_exits(shared: XProbe, capsys: pytest.CaptureFixture[str]) -> None:
    value = 1
    with pytest.raises(SystemExit):
        sd(value)
    assert capsys.readouterr().out == "value int 1\n"


# End of file: src/mstair/xprobe/test_xprobe_api.py
