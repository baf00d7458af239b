# File: src/mstair/xprobe/base/config.py
"""
Environment and execution context detection utilities.

This module answers the questions the dumper asks before it renders anything:
is this a test run, is this an interactive notebook kernel, and should output
be decorated for a human (colors, pretty layout). Overrides are kept in
thread-local storage so tests can pin a context without leaking it.

Exports:
- in_test_mode(): check or override whether code is in test mode.
- in_notebook(): check or override whether code runs inside a notebook kernel.
- in_desktop_mode(): check or override whether output targets an interactive display.
- parse_truthy(): parse a boolean-ish string.
"""

from __future__ import annotations

import os
import sys
import threading
from dataclasses import dataclass


__all__ = [
    "in_desktop_mode",
    "in_notebook",
    "in_test_mode",
    "parse_truthy",
]

_TRUTHY: frozenset[str] = frozenset({"1", "true", "yes", "on"})
_FALSY: frozenset[str] = frozenset({"0", "false", "no", "off"})

_tls = threading.local()


@dataclass
class TLSAttrs:
    """Thread-local flags for environment context."""

    in_test_mode_override: bool | None = None
    in_notebook_override: bool | None = None
    in_desktop_mode_override: bool | None = None


def _get_tls() -> TLSAttrs:
    """Return the current thread's TLSAttrs instance, initializing if needed."""
    try:
        return _tls.state
    except AttributeError:
        _tls.state = TLSAttrs()
        return _tls.state


def parse_truthy(value: str) -> bool | None:
    """Return True/False for a boolean-ish string, or None when it is neither."""
    value_lower = value.strip().lower()
    if value_lower in _TRUTHY:
        return True
    if value_lower in _FALSY:
        return False
    return None


def in_test_mode(
    *,
    unset_override: bool = False,
    override: bool | None = None,
) -> bool:
    """
    Check if running in test mode, with optional override.

    Detection order:
      1. Explicit override (thread-local).
      2. Presence of pytest/unittest in sys.modules.
      3. Known environment variables (PYTEST_CURRENT_TEST, CI).

    :param unset_override: If True, clears any prior override for this thread.
    :param override: If True or False, sets the override for this thread.
    :return: True if test mode is active, False otherwise.
    """
    tls = _get_tls()
    if unset_override:
        tls.in_test_mode_override = None
    if override is not None:
        tls.in_test_mode_override = override
        return override
    if tls.in_test_mode_override is not None:
        return tls.in_test_mode_override
    if "pytest" in sys.modules or "unittest" in sys.modules:
        return True
    return bool(os.environ.get("PYTEST_CURRENT_TEST")) or os.environ.get("CI") == "true"


def in_notebook(
    *,
    unset_override: bool = False,
    override: bool | None = None,
) -> bool:
    """
    Check if running inside a Jupyter/IPython kernel, where HTML output renders.

    :param unset_override: If True, clears any prior override for this thread.
    :param override: If True or False, sets the override for this thread.
    :return: True if a notebook kernel is driving the interpreter.
    """
    tls = _get_tls()
    if unset_override:
        tls.in_notebook_override = None
    if override is not None:
        tls.in_notebook_override = override
        return override
    if tls.in_notebook_override is not None:
        return tls.in_notebook_override
    return "ipykernel" in sys.modules


def in_desktop_mode(
    *,
    unset_override: bool = False,
    override: bool | None = None,
) -> bool:
    """
    Determine if output should be decorated for interactive display.

    Rules:
      - Explicit override wins.
      - NO_COLOR in the environment disables decoration.
      - Returns True in test mode.
      - Otherwise True when stdout is attached to a terminal.

    :param unset_override: If True, clears any prior override for this thread.
    :param override: If True or False, sets the override for this thread.
    :return: True if desktop mode is active, False otherwise.
    """
    tls = _get_tls()
    if unset_override:
        tls.in_desktop_mode_override = None
    if override is not None:
        tls.in_desktop_mode_override = override
        return override
    if tls.in_desktop_mode_override is not None:
        return tls.in_desktop_mode_override
    if os.environ.get("NO_COLOR"):
        return False
    if in_test_mode():
        return True
    stream = sys.stdout
    return bool(stream is not None and hasattr(stream, "isatty") and stream.isatty())


# End of file: src/mstair/xprobe/base/config.py
