# File: src/mstair/xprobe/test_source_stripper.py
"""
Tests for strip_source() and the StrippedSource views.
"""

from __future__ import annotations

import pytest

from mstair.xprobe.source_stripper import SENTINEL, TokenKind, strip_source


S = SENTINEL


@pytest.mark.parametrize(
    ("raw", "view"),
    [
        ("d(x)", "d(x)"),
        ("d( x )", f"d({S}x{S})"),
        ("d(  \n\t x)", f"d({S}x)"),
        ("d(x)  # trailing note\n", f"d(x){S}"),
        ("a = 1; d(a)", f"a{S}={S}1{S}{S}d(a)"),
        ("d(x,\\\n  y)", f"d(x,{S}y)"),
    ],
)
def test_matching_view(raw: str, view: str) -> None:
    assert strip_source(raw).text == view


def test_strings_are_code_tokens() -> None:
    src = strip_source("d('a # not a comment', \"b ; c\")")
    assert src.text == f"d('a # not a comment',{S}\"b ; c\")"
    kinds = [t.kind for t in src.tokens]
    assert kinds.count(TokenKind.ELIDED) == 1


def test_triple_quoted_string_spans_lines() -> None:
    src = strip_source('d("""one\n# two\n""")')
    assert src.text == 'd("""one\n# two\n""")'


def test_unterminated_string_degrades() -> None:
    src = strip_source("d('oops)")
    assert src.text == "d('oops)"


def test_literal_sentinel_in_code_is_replaced() -> None:
    src = strip_source(f"d('{S}')")
    assert S not in src.text
    assert len(src.text) == len(f"d('{S}')")


def test_code_text_turns_sentinels_into_spaces() -> None:
    src = strip_source("d( a ,   # note\n  b)")
    assert src.code_text() == "d( a , b)"


def test_tokens_cover_raw_text() -> None:
    raw = "x = d( a , b )  # done\n"
    src = strip_source(raw)
    assert "".join(t.text for t in src.tokens) == raw
    assert [t.start for t in src.tokens] == sorted(t.start for t in src.tokens)


class TestNormalizedOffset:
    def test_offset_in_code_token(self) -> None:
        raw = "x  =  d(a)"
        src = strip_source(raw)
        raw_paren = raw.index("(")
        assert src.text[src.normalized_offset(raw_paren)] == "("

    def test_offset_in_elided_token_maps_to_sentinel(self) -> None:
        raw = "x   = 1"
        src = strip_source(raw)
        assert src.text[src.normalized_offset(2)] == S

    def test_bounds(self) -> None:
        raw = "a b"
        src = strip_source(raw)
        assert src.normalized_offset(0) == 0
        assert src.normalized_offset(-4) == 0
        assert src.normalized_offset(len(raw)) == len(src.text)
        assert src.normalized_offset(len(raw) + 10) == len(src.text)

    def test_line_end_offset(self) -> None:
        raw = "first(1)\nsecond(2)\n"
        src = strip_source(raw)
        cut = src.normalized_offset(len("first(1)\n"))
        assert src.text[:cut] == f"first(1){S}"


# End of file: src/mstair/xprobe/test_source_stripper.py
