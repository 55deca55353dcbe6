"""Tests for the ICU MessageFormat parser.

Python 3.13+.
"""

from __future__ import annotations

import pytest
from hypothesis import event, given
from hypothesis import strategies as st

from applocalize.errors import MessageFormatError
from applocalize.formatting.syntax import (
    MAX_NESTING_DEPTH,
    ArgumentElement,
    DateElement,
    NumberElement,
    PluralElement,
    PoundElement,
    SelectElement,
    TextElement,
    TimeElement,
    parse_message,
)
from tests.strategies import safe_patterns


class TestSimpleElements:
    """Text and simple arguments."""

    def test_plain_text(self) -> None:
        assert parse_message("Hello") == (TextElement("Hello"),)

    def test_empty_pattern(self) -> None:
        assert parse_message("") == ()

    def test_argument(self) -> None:
        assert parse_message("Hello, {name}!") == (
            TextElement("Hello, "),
            ArgumentElement("name"),
            TextElement("!"),
        )

    def test_argument_whitespace(self) -> None:
        assert parse_message("{ name }") == (ArgumentElement("name"),)

    @pytest.mark.parametrize(
        ("pattern", "expected"),
        [
            ("{n, number}", NumberElement("n")),
            ("{n, number, percent}", NumberElement("n", "percent")),
            ("{d, date, short}", DateElement("d", "short")),
            ("{d, date, ::yMMMd}", DateElement("d", "::yMMMd")),
            ("{t, time}", TimeElement("t")),
            ("{t, time, HH:mm}", TimeElement("t", "HH:mm")),
        ],
    )
    def test_typed_arguments(self, pattern: str, expected: object) -> None:
        assert parse_message(pattern) == (expected,)

    def test_pound_is_text_outside_plural(self) -> None:
        assert parse_message("#1") == (TextElement("#1"),)


class TestApostrophes:
    """DOUBLE_OPTIONAL apostrophe quoting."""

    def test_doubled_apostrophe(self) -> None:
        assert parse_message("It''s") == (TextElement("It's"),)

    def test_lone_apostrophe_is_literal(self) -> None:
        assert parse_message("I'm here") == (TextElement("I'm here"),)

    def test_quoted_braces(self) -> None:
        assert parse_message("'{name}' is literal") == (TextElement("{name} is literal"),)

    def test_unterminated_quote_runs_to_end(self) -> None:
        assert parse_message("a '{b") == (TextElement("a {b"),)

    def test_quoted_pound_in_plural(self) -> None:
        (plural,) = parse_message("{n, plural, other {'#' #}}")
        assert isinstance(plural, PluralElement)
        assert plural.branches[0][1] == (TextElement("# "), PoundElement())


class TestBlocks:
    """plural, selectordinal and select blocks."""

    def test_plural(self) -> None:
        (plural,) = parse_message("{count, plural, =0 {none} one {# item} other {# items}}")
        assert plural == PluralElement(
            "count",
            (
                ("=0", (TextElement("none"),)),
                ("one", (PoundElement(), TextElement(" item"))),
                ("other", (PoundElement(), TextElement(" items"))),
            ),
        )

    def test_plural_offset(self) -> None:
        (plural,) = parse_message("{n, plural, offset:1 =0 {a} other {b}}")
        assert isinstance(plural, PluralElement)
        assert plural.offset == 1

    def test_selectordinal(self) -> None:
        (plural,) = parse_message("{n, selectordinal, one {#st} other {#th}}")
        assert isinstance(plural, PluralElement)
        assert plural.ordinal is True

    def test_select(self) -> None:
        (select,) = parse_message("{g, select, female {She} other {They}}")
        assert select == SelectElement(
            "g", (("female", (TextElement("She"),)), ("other", (TextElement("They"),)))
        )

    def test_nested_blocks(self) -> None:
        (select,) = parse_message(
            "{g, select, other {{n, plural, one {# thing} other {# things}}}}"
        )
        assert isinstance(select, SelectElement)
        (inner,) = select.branches[0][1]
        assert isinstance(inner, PluralElement)


class TestSyntaxErrors:
    """Malformed patterns raise MessageFormatError with a position."""

    @pytest.mark.parametrize(
        ("pattern", "message"),
        [
            ("Hello {name", "Expected ','"),
            ("{n, number", "Expected '}'"),
            ("Hello }", "Unmatched"),
            ("{}", "argument name"),
            ("{n, currency}", "Unknown argument type"),
            ("{n, number, }", "argument style"),
            ("{n, plural, one {a}}", "Missing 'other'"),
            ("{n, select, a {x} a {y} other {z}}", "Duplicate selector"),
            ("{n, plural, =x {a} other {b}}", "exact-match"),
            ("{n, select,}", "at least one selector"),
            ("{n, plural, offset: other {b}}", "integer offset"),
            ("{n, select, other b}", "Expected '{'"),
        ],
    )
    def test_malformed(self, pattern: str, message: str) -> None:
        with pytest.raises(MessageFormatError, match=message) as exc_info:
            parse_message(pattern)
        assert exc_info.value.pattern == pattern
        assert exc_info.value.position is not None

    def test_nesting_limit(self) -> None:
        depth = MAX_NESTING_DEPTH + 2
        pattern = "{a, select, other {" * depth + "x" + "}}" * depth
        with pytest.raises(MessageFormatError, match="Nesting depth"):
            parse_message(pattern)


class TestParserProperties:
    """Property-based parser checks."""

    @given(safe_patterns())
    def test_safe_text_parses_to_single_text(self, pattern: str) -> None:
        """Text without syntax characters is one TextElement."""
        event(f"pattern_len={min(len(pattern), 10)}")
        assert parse_message(pattern) == (TextElement(pattern),)

    @given(st.text(max_size=30))
    def test_parse_never_raises_other_errors(self, pattern: str) -> None:
        """Arbitrary input either parses or raises MessageFormatError."""
        try:
            parse_message(pattern)
        except MessageFormatError:
            event("outcome=error")
        else:
            event("outcome=parsed")
