# File: src/mstair/xprobe/settings.py
"""
Runtime configuration for the dumper.

XProbeSettings is an explicit object handed to the value parser, the decorators
and the path resolver. Temporary changes (dump modifiers, `s()` forcing plain
output) go through `XProbeSettings.overridden()`, which restores the previous
values on every exit path, nested dumps included.

Environment variables (optionally from a .env file):

    XPROBE_ENABLED               true | false | r | w | c | p
    XPROBE_RETURN_OUTPUT         bool
    XPROBE_FILE_LINK_FORMAT      e.g. "vscode://file/%f:%l"
    XPROBE_DISPLAY_CALLED_FROM   bool
    XPROBE_MAX_STR_LENGTH        int
    XPROBE_MAX_LEVELS            int, or "none" for unlimited
    XPROBE_EXPANDED_BY_DEFAULT   bool
    XPROBE_CLI_DETECTION         bool
    XPROBE_CLI_COLORS            bool
    XPROBE_APP_ROOT_DIRS         "/srv/app=<APP>;/opt/lib=<LIB>"
    XPROBE_ALIAS_FUNCTIONS       "dump_it,show"
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field, fields
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Final

import mstair.xprobe.base.config as cfg
from mstair.xprobe.base.context_managers import AttributeSaveStack
from mstair.xprobe.base.fs_helpers import fs_load_dotenv
from mstair.xprobe.xlogging import create_logger


if TYPE_CHECKING:
    from mstair.xprobe.frames import Frame


__all__ = [
    "DEFAULT_ALIAS_FUNCTIONS",
    "DEFAULT_ALIAS_METHODS",
    "AliasRegistry",
    "Mode",
    "XProbeSettings",
    "resolve_mode",
    "settings_from_environment",
]

LOG = create_logger(__name__)


class Mode(StrEnum):
    """Output modes. The values are the short spellings accepted by XPROBE_ENABLED."""

    RICH = "r"
    WHITESPACE = "w"
    CLI = "c"
    PLAIN = "p"


DEFAULT_ALIAS_METHODS: Final[frozenset[tuple[str, str]]] = frozenset(
    {("xprobe", "dump"), ("xprobe", "trace")}
)
DEFAULT_ALIAS_FUNCTIONS: Final[frozenset[str]] = frozenset({"d", "dd", "ddd", "s", "sd"})


@dataclass(slots=True)
class AliasRegistry:
    """
    Names that count as "the dumper itself" when walking the stack.

    Method aliases are (class, method) pairs; function aliases are bare names.
    Matching is case-insensitive.
    """

    methods: set[tuple[str, str]] = field(default_factory=lambda: set(DEFAULT_ALIAS_METHODS))
    functions: set[str] = field(default_factory=lambda: set(DEFAULT_ALIAS_FUNCTIONS))

    def __post_init__(self) -> None:
        self.methods = {(c.lower(), m.lower()) for c, m in self.methods}
        self.functions = {f.lower() for f in self.functions}

    def register_method(self, class_name: str, method: str) -> None:
        self.methods.add((class_name.lower(), method.lower()))

    def register_function(self, name: str) -> None:
        self.functions.add(name.lower())

    def is_internal(self, frame: Frame) -> bool:
        """Return True if `frame` is a call into one of the registered entry points."""
        function = frame.function.lower()
        if frame.class_name:
            return (frame.class_name.lower(), function) in self.methods
        return function in self.functions


@dataclass(slots=True, kw_only=True)
class XProbeSettings:
    """
    Dumper configuration.

    :param enabled: False disables dumping; True picks a mode automatically; a Mode pins it.
    :param return_output: Return the rendered dump instead of printing it.
    :param file_link_format: Editor URL template with %f (file) and %l (line), or None.
    :param display_called_from: Append the "Called from" footer.
    :param max_str_length: Strings longer than this are truncated in the value tree.
    :param app_root_dirs: Path prefix -> label replacements for displayed paths.
    :param max_levels: Nesting depth limit for the value tree; None is unlimited.
    :param expanded_by_default: Rich mode opens every node.
    :param cli_detection: When enabled is True, prefer CLI output outside notebooks.
    :param cli_colors: Color CLI output when the terminal is interactive.
    :param aliases: Entry points recognized when walking the stack.
    :param first_run: The next dump emits the decorator prelude (stylesheet).
    """

    enabled: bool | Mode = True
    return_output: bool = False
    file_link_format: str | None = None
    display_called_from: bool = True
    max_str_length: int = 80
    app_root_dirs: dict[str, str] = field(default_factory=dict)
    max_levels: int | None = 5
    expanded_by_default: bool = False
    cli_detection: bool = True
    cli_colors: bool = True
    aliases: AliasRegistry = field(default_factory=AliasRegistry)
    first_run: bool = True
    _saved: AttributeSaveStack | None = field(default=None, init=False, repr=False, compare=False)

    @contextmanager
    def overridden(self, **changes: Any) -> Iterator[XProbeSettings]:
        """
        Temporarily change settings; the previous values come back on exit.

        :param changes: Field names and their temporary values.
        :yield: This settings object.
        :raises TypeError: If a name is not a settings field.
        """
        public = {f.name for f in fields(self) if not f.name.startswith("_")}
        unknown = sorted(set(changes) - public)
        if unknown:
            raise TypeError(f"Unknown XProbeSettings field(s): {', '.join(unknown)}")
        if self._saved is None:
            self._saved = AttributeSaveStack(self)
        with self._saved.overridden(**changes):
            yield self


def resolve_mode(settings: XProbeSettings) -> Mode | None:
    """
    Return the concrete output mode, or None when dumping is disabled.

    True resolves to CLI when `cli_detection` is on and the process is not a
    notebook kernel, otherwise to RICH.
    """
    if settings.enabled is False:
        return None
    if isinstance(settings.enabled, Mode):
        return settings.enabled
    if settings.cli_detection and not cfg.in_notebook():
        return Mode.CLI
    return Mode.RICH


# ---------- Environment ----------

_ENV_PREFIX: Final[str] = "XPROBE_"
_NONE_WORDS: Final[frozenset[str]] = frozenset({"none", "null", "unlimited", ""})


def _parse_enabled(raw: str) -> bool | Mode:
    value = raw.strip().lower()
    if value in {m.value for m in Mode}:
        return Mode(value)
    if value in {m.name.lower() for m in Mode}:
        return Mode[value.upper()]
    parsed = cfg.parse_truthy(value)
    if parsed is None:
        raise ValueError(f"not a bool or mode: {raw!r}")
    return parsed


def _parse_bool(raw: str) -> bool:
    parsed = cfg.parse_truthy(raw)
    if parsed is None:
        raise ValueError(f"not a bool: {raw!r}")
    return parsed


def _parse_levels(raw: str) -> int | None:
    if raw.strip().lower() in _NONE_WORDS:
        return None
    value = int(raw)
    if value < 1:
        raise ValueError(f"must be >= 1: {raw!r}")
    return value


def _parse_positive_int(raw: str) -> int:
    value = int(raw)
    if value < 1:
        raise ValueError(f"must be >= 1: {raw!r}")
    return value


def _parse_app_root_dirs(raw: str) -> dict[str, str]:
    result: dict[str, str] = {}
    for entry in filter(None, (e.strip() for e in raw.split(";"))):
        path, sep, label = entry.partition("=")
        if not sep or not path.strip() or not label.strip():
            raise ValueError(f"expected path=label: {entry!r}")
        result[path.strip()] = label.strip()
    return result


def _parse_functions(raw: str) -> set[str]:
    return {name.strip() for name in raw.split(",") if name.strip()}


_PARSERS: Final[Mapping[str, Any]] = {
    "enabled": _parse_enabled,
    "return_output": _parse_bool,
    "file_link_format": lambda raw: raw or None,
    "display_called_from": _parse_bool,
    "max_str_length": _parse_positive_int,
    "max_levels": _parse_levels,
    "expanded_by_default": _parse_bool,
    "cli_detection": _parse_bool,
    "cli_colors": _parse_bool,
    "app_root_dirs": _parse_app_root_dirs,
    "alias_functions": _parse_functions,
}


def settings_from_environment(
    environ: Mapping[str, str] | None = None,
    *,
    load_dotenv: bool = True,
) -> XProbeSettings:
    """
    Build settings from XPROBE_* variables.

    Invalid values are logged as warnings and the default is kept.

    :param environ: Mapping to read instead of os.environ.
    :param load_dotenv: Load a .env file into os.environ first (ignored with `environ`).
    """
    if environ is None:
        if load_dotenv:
            fs_load_dotenv()
        environ = os.environ

    values: dict[str, Any] = {}
    extra_functions: Iterable[str] = ()
    for key, parser in _PARSERS.items():
        var_name = f"{_ENV_PREFIX}{key.upper()}"
        raw = environ.get(var_name)
        if raw is None:
            continue
        try:
            parsed = parser(raw)
        except ValueError as e:
            LOG.warning("Ignoring %s=%r: %s", var_name, raw, e)
            continue
        if key == "alias_functions":
            extra_functions = parsed
        else:
            values[key] = parsed

    settings = XProbeSettings(**values)
    for name in extra_functions:
        settings.aliases.register_function(name)
    return settings


# End of file: src/mstair/xprobe/settings.py
