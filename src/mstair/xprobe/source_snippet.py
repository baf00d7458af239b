# File: src/mstair/xprobe/source_snippet.py
"""
Bounded window of source lines around a line of interest.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from mstair.xprobe.base.fs_helpers import fs_read_source_lines
from mstair.xprobe.xlogging import create_logger


__all__ = [
    "SnippetRow",
    "SourceSnippet",
    "read_source_snippet",
]

LOG = create_logger(__name__)


@dataclass(frozen=True, slots=True)
class SnippetRow:
    number: int
    text: str
    highlighted: bool


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    file: str
    line: int
    """The highlighted line."""
    first_line: int
    lines: tuple[str, ...]

    @property
    def last_line(self) -> int:
        return self.first_line + len(self.lines) - 1

    @property
    def number_width(self) -> int:
        return len(str(self.last_line))

    def rows(self) -> Iterator[SnippetRow]:
        for offset, text in enumerate(self.lines):
            number = self.first_line + offset
            yield SnippetRow(number, text.rstrip("\r\n"), number == self.line)


def read_source_snippet(file: str | None, line: int | None, padding: int = 7) -> SourceSnippet | None:
    """
    Read lines `line - padding` through `line + padding` of `file`.

    Reading stops at the end of the window. Returns None when the file cannot
    be read or does not reach `line`.
    """
    if not file or not isinstance(file, str) or not isinstance(line, int) or line < 1:
        return None
    first_line = max(1, line - padding)
    try:
        lines = fs_read_source_lines(file, start=first_line, stop=line + padding)
    except (OSError, SyntaxError, UnicodeDecodeError) as e:
        LOG.trace("no source for %s:%s: %s", file, line, e)
        return None
    if first_line + len(lines) - 1 < line:
        return None
    return SourceSnippet(file=file, line=line, first_line=first_line, lines=tuple(lines))


# End of file: src/mstair/xprobe/source_snippet.py
