# File: src/mstair/xprobe/xlogging/logger_util.py
"""
Environment variable-driven log level configuration.

Two sources are supported:
- Pattern DSL strings in LOG_LEVELS, e.g. ``mstair.xprobe:DEBUG;TRACE``
- Per-logger overrides in variables like LOG_LEVEL_MSTAIR_XPROBE_CALL__SITE

In the per-logger form a single underscore stands for a dot and a double
underscore for a literal underscore, so the variable above targets the
``mstair.xprobe.call_site`` logger.

Resolution precedence: exact name > nearest ancestor > bare default > WARNING.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import ClassVar, Final, NamedTuple

from mstair.xprobe.base.fs_helpers import fs_load_dotenv
from mstair.xprobe.xlogging.logger_constants import DEFAULT_LOG_LEVEL, initialize_logger_constants


__all__ = ["LogEnvVar", "LogLevelConfig"]

_LOG_VAR_FRAGMENT_SEPARATOR_RX: Final[re.Pattern[str]] = re.compile(r"[;, ]+")
_LOG_VAR_ASSIGNMENT_OPERATOR_RX: Final[re.Pattern[str]] = re.compile(r"[:=]+")

_log_level_config_instance: LogLevelConfig | None = None


@dataclass(slots=True, frozen=True)
class LogEnvVar:
    """
    Parsed representation of a LOG_LEVEL / LOG_LEVELS environment variable.

    :param module: Dotted logger name the variable is scoped to ("" for global).
    :param value: Raw variable value.
    """

    NAME_RX: ClassVar[re.Pattern[str]] = re.compile(
        r"^LOG_LEVELS?(?P<SUFFIX>(?:_[A-Z][A-Z0-9_]*)*)$",
    )

    module: str = ""
    value: str = ""

    @classmethod
    def from_env_var(cls, name: str, value: str) -> LogEnvVar | None:
        """Return a LogEnvVar if the variable name is recognized, else None."""
        re_match = cls.NAME_RX.match(name)
        if re_match is None:
            return None
        suffix = re_match["SUFFIX"].lstrip("_")
        if not suffix or suffix == "ROOT":
            return cls(module="", value=value)
        module = suffix.replace("__", "\0").replace("_", ".").replace("\0", "_").lower()
        return cls(module=module, value=value)

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> Iterator[LogEnvVar]:
        """Yield LogEnvVar instances for all matching environment variables."""
        if environ is None:
            fs_load_dotenv()
            environ = os.environ
        for name, value in sorted(environ.items()):
            env_var = cls.from_env_var(name, value)
            if env_var is not None:
                yield env_var


class LogEnvPatternLevel(NamedTuple):
    """Mapping from a logger name (or "" for the default) to an integer log level."""

    pattern: str
    level: int


@dataclass(slots=True)
class LogLevelConfig:
    """
    Resolve per-logger levels from the environment.

    :param pattern_to_level: Logger name ("" for the default) to level; read from
        the environment when empty.
    """

    pattern_to_level: dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.pattern_to_level:
            self.update_from_environment()

    def update_from_environment(self, environ: Mapping[str, str] | None = None) -> None:
        """Rebuild name->level mappings from the environment."""
        self.pattern_to_level.clear()
        for var in LogEnvVar.from_environ(environ):
            for entry in self.parse_log_var(var):
                self.pattern_to_level[entry.pattern] = entry.level

    def get_effective_level(self, logger_name: str, *, default: int = DEFAULT_LOG_LEVEL) -> int:
        """Return the configured level for `logger_name`, falling back to `default`."""
        lc_map = {k.lower(): v for k, v in self.pattern_to_level.items() if k}
        name_lc = logger_name.lower()
        if name_lc in lc_map:
            return lc_map[name_lc]
        parts = name_lc.split(".")
        while len(parts) > 1:
            parts.pop()
            ancestor = ".".join(parts)
            if ancestor in lc_map:
                return lc_map[ancestor]
        return self.pattern_to_level.get("", default)

    @classmethod
    def get_instance(cls) -> LogLevelConfig:
        """Return the process-wide LogLevelConfig, creating it on first use."""
        global _log_level_config_instance
        if _log_level_config_instance is None:
            initialize_logger_constants()
            _log_level_config_instance = LogLevelConfig()
        return _log_level_config_instance

    @staticmethod
    def parse_log_var(var: LogEnvVar) -> Iterator[LogEnvPatternLevel]:
        """Parse one variable into name->level entries, skipping unknown level names."""
        level_names = logging.getLevelNamesMapping()
        for fragment in _LOG_VAR_FRAGMENT_SEPARATOR_RX.split(var.value):
            fragment = fragment.strip()
            if not fragment:
                continue
            parts = _LOG_VAR_ASSIGNMENT_OPERATOR_RX.split(fragment, maxsplit=1)
            pattern, level_name = ("", parts[0]) if len(parts) == 1 else (parts[0], parts[1])
            pattern = pattern.strip().strip("'\"")
            level_name = level_name.strip().strip("'\"").upper()

            if var.module:
                pattern = f"{var.module}.{pattern}" if pattern not in {"", "root"} else var.module
            if pattern.lower() == "root":
                pattern = ""

            level = int(level_name) if level_name.isdigit() else level_names.get(level_name)
            if not level:
                continue
            yield LogEnvPatternLevel(pattern, level)


# End of file: src/mstair/xprobe/xlogging/logger_util.py
