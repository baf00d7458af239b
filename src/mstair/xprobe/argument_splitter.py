# File: src/mstair/xprobe/argument_splitter.py
"""
Split the text after a call's opening parenthesis into argument labels.

The scan is a single pass over the characters with three pieces of state:
whether we are inside a string (and which quote opened it), whether the
previous character was an unescaped backslash, and a stack of open brackets.
Everything inside strings and nested brackets is blanked out, keeping only the
delimiters, so the remaining top-level commas are exactly the argument
separators. A `)` at the top level ends the argument list.

Blanked runs are rendered as `...`, which gives labels such as `foo(...)`,
`items[...]` and `"..."`. Literal arguments carry no useful label and are
classified as None.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Final, TypeAlias

from mstair.xprobe.xlogging import create_logger


__all__ = [
    "SUPPRESSED_LITERALS",
    "ArgumentLabel",
    "classify_argument",
    "label_arguments",
    "reconcile_labels",
    "split_arguments",
]

LOG = create_logger(__name__)

ArgumentLabel: TypeAlias = str | None

SUPPRESSED_LITERALS: Final[frozenset[str]] = frozenset(
    {
        "null",
        "true",
        "false",
        "none",
        "array(...)",
        "array()",
        "[...]",
        "[]",
        "(...)",
        "()",
        "{...}",
        "{}",
    }
)
"""Argument texts (lowercased, single quotes folded to double) that are literals."""

_BLANK: Final[str] = "\x00"
_CLOSERS: Final[dict[str, str]] = {"(": ")", "[": "]", "{": "}"}
_QUOTES: Final[frozenset[str]] = frozenset({"'", '"'})

_NUMERIC_RX: Final[re.Pattern[str]] = re.compile(
    r"""
    ^[+-]?
    (?:
        0[xob][0-9a-f_]+                                 # hex / octal / binary
      | (?:\d[\d_]*(?:\.[\d_]*)?|\.\d[\d_]*)(?:e[+-]?\d[\d_]*)?j?
    )$
    """,
    re.IGNORECASE | re.VERBOSE,
)
_STRING_LITERAL_RX: Final[re.Pattern[str]] = re.compile(r'^[rbuf]{0,2}("""|")(\.\.\.)?\1$')
_BLANK_RUN_RX: Final[re.Pattern[str]] = re.compile(f"{_BLANK}+")


def split_arguments(text: str) -> list[str]:
    """
    Split the text following an opening parenthesis into top-level arguments.

    :param text: Source text starting just after the call's `(`; layout should
        already be reduced to single spaces.
    :return: Raw argument texts, untrimmed; nested content rendered as `...`.
    """
    chars = list(text)
    in_string: str | None = None
    escaped = False
    opened: list[str] = []
    end = len(chars)

    for i, letter in enumerate(text):
        if in_string is None:
            if letter in _QUOTES:
                in_string = letter
            elif letter in _CLOSERS:
                opened.append(letter)
            elif opened and letter == _CLOSERS[opened[-1]]:
                opened.pop()
            elif not opened and letter == ")":
                end = i
                break
        elif letter == in_string and not escaped:
            in_string = None

        depth = len(opened)
        if depth > 1 or (depth == 1 and letter != opened[-1]):
            chars[i] = _BLANK
        if in_string is not None and (letter != in_string or escaped):
            chars[i] = _BLANK

        escaped = not escaped and letter == "\\"

    flattened = _BLANK_RUN_RX.sub("...", "".join(chars[:end]))
    return flattened.split(",")


def classify_argument(argument: str) -> ArgumentLabel:
    """
    Return the display label for one argument, or None for a literal.

    Numeric literals, `SUPPRESSED_LITERALS` and any string literal shape are
    literals; everything else is returned trimmed.
    """
    argument = argument.strip()
    if _NUMERIC_RX.match(argument):
        return None
    folded = argument.lower().replace("'", '"')
    if folded in SUPPRESSED_LITERALS or _STRING_LITERAL_RX.match(folded):
        return None
    return argument


def reconcile_labels(arguments: Sequence[str], count: int) -> list[ArgumentLabel]:
    """
    Turn split arguments into exactly `count` labels.

    A trailing empty argument (trailing comma, or an empty list) is dropped.
    Texts pair with values by position, up to the first star-unpacked
    argument; values past that point or past the last text get None, and
    surplus texts are dropped.

    :param arguments: Output of `split_arguments()`.
    :param count: Number of runtime argument values.
    """
    texts = [a.strip() for a in arguments]
    if texts and not texts[-1]:
        texts.pop()
    paired = next((i for i, t in enumerate(texts) if t.startswith("*")), len(texts))
    if paired != count or len(texts) != count:
        LOG.debug("cannot pair %d argument text(s) with %d value(s)", len(texts), count)
    labels = [classify_argument(t) for t in texts[: min(paired, count)]]
    return labels + [None] * (count - len(labels))


def label_arguments(text: str, count: int) -> list[ArgumentLabel]:
    """Split, classify and reconcile in one step."""
    return reconcile_labels(split_arguments(text), count)


# End of file: src/mstair/xprobe/argument_splitter.py
