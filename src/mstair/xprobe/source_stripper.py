# File: src/mstair/xprobe/source_stripper.py
"""
Reduce call-site source text to its code tokens.

`strip_source()` scans text into a tagged token sequence: CODE tokens keep
their text verbatim, while every run of whitespace and comments, and every
statement separator `;`, collapses into a single ELIDED token. The matching
view (`StrippedSource.text`) renders each ELIDED token as SENTINEL, so
patterns can say "optional layout here" with `SENTINEL*` regardless of how the
call was spaced or commented.

The scanner accepts any text. An unterminated
string literal does not match the string rule and degrades into ordinary
single-character tokens.
"""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass
from enum import Enum
from typing import Final


__all__ = [
    "SENTINEL",
    "StrippedSource",
    "Token",
    "TokenKind",
    "strip_source",
]

SENTINEL: Final[str] = "\x07"
"""Placeholder for elided layout in the matching view."""

_SENTINEL_STANDIN: Final[str] = "\ufffd"
"""Replaces literal SENTINEL characters inside CODE tokens in the matching view."""

_STRING_PREFIX = r"(?:[rRbBuUfF]{1,2})?"
_STRING_BODY = (
    r"'''(?:\\.|[^\\])*?'''"
    + "|"
    + r'"""(?:\\.|[^\\])*?"""'
    + "|"
    + r"'(?:\\.|[^\\'\r\n])*'"
    + "|"
    + r'"(?:\\.|[^\\"\r\n])*"'
)

_TOKEN_RX: Final[re.Pattern[str]] = re.compile(
    r"(?P<space>(?:[\s\ufeff]|\\\r?\n)+)"
    r"|(?P<comment>\#[^\r\n]*)"
    r"|(?P<semicolon>;)"
    rf"|(?P<string>{_STRING_PREFIX}(?:{_STRING_BODY}))"
    r"|(?P<name>\w+)"
    r"|(?P<other>.)",
    re.DOTALL,
)


class TokenKind(Enum):
    CODE = "code"
    ELIDED = "elided"


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    text: str
    """Raw text covered by the token."""
    start: int
    """Offset of the token in the raw text."""


class StrippedSource:
    """
    Token sequence for a piece of source text, plus its matching view.

    Example:
        >>> src = strip_source("x = d( a ,  # note\\n  b)")
        >>> src.text == "x\\x07=\\x07d(\\x07a\\x07,\\x07b)"
        True
    """

    tokens: tuple[Token, ...]
    raw: str
    text: str
    _token_starts: list[int]
    _view_starts: list[int]

    def __init__(self, raw: str, tokens: tuple[Token, ...]) -> None:
        self.raw = raw
        self.tokens = tokens
        self._token_starts = []
        self._view_starts = []
        parts: list[str] = []
        view_len = 0
        for token in tokens:
            self._token_starts.append(token.start)
            self._view_starts.append(view_len)
            piece = (
                SENTINEL
                if token.kind is TokenKind.ELIDED
                else token.text.replace(SENTINEL, _SENTINEL_STANDIN)
            )
            parts.append(piece)
            view_len += len(piece)
        self.text = "".join(parts)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.text!r})"

    def normalized_offset(self, raw_offset: int) -> int:
        """
        Map an offset in the raw text to the matching view.

        Offsets inside a CODE token keep their position within the token; any
        offset inside an ELIDED token maps to that token's SENTINEL.
        """
        if raw_offset <= 0 or not self.tokens:
            return 0
        if raw_offset >= len(self.raw):
            return len(self.text)
        index = bisect.bisect_right(self._token_starts, raw_offset) - 1
        token = self.tokens[index]
        view_start = self._view_starts[index]
        if token.kind is TokenKind.ELIDED:
            return view_start
        return view_start + (raw_offset - token.start)

    def code_text(self) -> str:
        """Return the view with every SENTINEL turned into a single space."""
        return self.text.replace(SENTINEL, " ")


def strip_source(raw: str) -> StrippedSource:
    """Tokenize `raw` into CODE and ELIDED tokens."""
    tokens: list[Token] = []
    pending_start: int | None = None
    for m in _TOKEN_RX.finditer(raw):
        kind = m.lastgroup
        if kind in {"space", "comment"}:
            if pending_start is None:
                pending_start = m.start()
            continue
        if pending_start is not None:
            tokens.append(Token(TokenKind.ELIDED, raw[pending_start : m.start()], pending_start))
            pending_start = None
        if kind == "semicolon":
            tokens.append(Token(TokenKind.ELIDED, m.group(), m.start()))
        else:
            tokens.append(Token(TokenKind.CODE, m.group(), m.start()))
    if pending_start is not None:
        tokens.append(Token(TokenKind.ELIDED, raw[pending_start:], pending_start))
    return StrippedSource(raw, tuple(tokens))


# End of file: src/mstair/xprobe/source_stripper.py
