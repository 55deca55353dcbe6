"""ICU MessageFormat syntax tree and parser.

Parses message patterns such as::

    Hello, {name}!
    {count, plural, =0 {no files} one {# file} other {# files}}
    {gender, select, female {her} male {his} other {their}} cart
    Due {when, date, long} at {when, time, short}

into an immutable tuple of elements. Parsing happens once per compiled
message; formatting walks the tree.

Apostrophe quoting follows ICU's DOUBLE_OPTIONAL mode:
    - '' is always a literal apostrophe
    - ' followed by { } # or | starts quoted literal text, closed by the next
      single apostrophe (or end of pattern)
    - any other ' is literal

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from applocalize.errors import MessageFormatError

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Elements
    "TextElement",
    "ArgumentElement",
    "NumberElement",
    "DateElement",
    "TimeElement",
    "PluralElement",
    "SelectElement",
    "PoundElement",
    # Type aliases
    "MessageElement",
    "Branches",
    # Limits
    "MAX_NESTING_DEPTH",
    # Entry point
    "parse_message",
]

# Nested plural/select blocks deeper than this are rejected as malformed.
MAX_NESTING_DEPTH: int = 100

_SPECIAL_AFTER_APOSTROPHE = frozenset("{}#|")
_WHITESPACE = frozenset(" \t\n\r")


# ============================================================================
# ELEMENTS
# ============================================================================


@dataclass(frozen=True, slots=True)
class TextElement:
    """Literal text."""

    value: str


@dataclass(frozen=True, slots=True)
class ArgumentElement:
    """Simple argument: {name}"""

    name: str


@dataclass(frozen=True, slots=True)
class NumberElement:
    """Number argument: {name, number} or {name, number, style}"""

    name: str
    style: str | None = None


@dataclass(frozen=True, slots=True)
class DateElement:
    """Date argument: {name, date} or {name, date, style}"""

    name: str
    style: str | None = None


@dataclass(frozen=True, slots=True)
class TimeElement:
    """Time argument: {name, time} or {name, time, style}"""

    name: str
    style: str | None = None


@dataclass(frozen=True, slots=True)
class PluralElement:
    """Plural or selectordinal block.

    Attributes:
        name: Argument name
        branches: (selector, elements) pairs in source order; selectors are
            CLDR categories ("one", "other") or exact matches ("=0")
        offset: Subtracted from the value before category selection and #
        ordinal: True for selectordinal
    """

    name: str
    branches: Branches
    offset: int = 0
    ordinal: bool = False


@dataclass(frozen=True, slots=True)
class SelectElement:
    """Select block: {name, select, a {...} other {...}}"""

    name: str
    branches: Branches


@dataclass(frozen=True, slots=True)
class PoundElement:
    """# inside a plural branch: the (offset-adjusted) plural value."""


type MessageElement = (
    TextElement
    | ArgumentElement
    | NumberElement
    | DateElement
    | TimeElement
    | PluralElement
    | SelectElement
    | PoundElement
)

type Branches = tuple[tuple[str, tuple[MessageElement, ...]], ...]


# ============================================================================
# PARSER
# ============================================================================


class _Parser:
    """Recursive-descent parser over a single pattern string."""

    __slots__ = ("pattern", "pos")

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self.pos = 0

    def error(self, message: str, position: int | None = None) -> MessageFormatError:
        return MessageFormatError(
            message,
            pattern=self.pattern,
            position=self.pos if position is None else position,
        )

    @property
    def is_eof(self) -> bool:
        return self.pos >= len(self.pattern)

    def peek(self, offset: int = 0) -> str | None:
        target = self.pos + offset
        if target >= len(self.pattern):
            return None
        return self.pattern[target]

    def skip_whitespace(self) -> None:
        while not self.is_eof and self.pattern[self.pos] in _WHITESPACE:
            self.pos += 1

    def expect(self, char: str) -> None:
        if self.peek() != char:
            found = "end of pattern" if self.is_eof else repr(self.pattern[self.pos])
            raise self.error(f"Expected {char!r}, found {found}")
        self.pos += 1

    def parse_message(self, depth: int, in_plural: bool) -> tuple[MessageElement, ...]:
        """Parse elements until end of pattern or an unconsumed closing brace."""
        if depth > MAX_NESTING_DEPTH:
            raise self.error(f"Nesting depth exceeds {MAX_NESTING_DEPTH}")

        elements: list[MessageElement] = []
        text: list[str] = []

        def flush() -> None:
            if text:
                elements.append(TextElement("".join(text)))
                text.clear()

        while not self.is_eof:
            char = self.pattern[self.pos]
            if char == "'":
                text.append(self.parse_apostrophe(in_plural))
            elif char == "{":
                flush()
                elements.append(self.parse_argument(depth))
            elif char == "}":
                if depth == 0:
                    raise self.error("Unmatched '}'")
                break
            elif char == "#" and in_plural:
                flush()
                elements.append(PoundElement())
                self.pos += 1
            else:
                text.append(char)
                self.pos += 1

        flush()
        return tuple(elements)

    def parse_apostrophe(self, in_plural: bool) -> str:
        """Consume an apostrophe sequence and return the literal text it stands for."""
        nxt = self.peek(1)
        if nxt == "'":
            self.pos += 2
            return "'"
        if nxt is None or nxt not in _SPECIAL_AFTER_APOSTROPHE or (nxt == "#" and not in_plural):
            self.pos += 1
            return "'"

        # Quoted literal: runs to the next lone apostrophe
        self.pos += 1
        quoted: list[str] = []
        while not self.is_eof:
            char = self.pattern[self.pos]
            if char == "'":
                if self.peek(1) == "'":
                    quoted.append("'")
                    self.pos += 2
                    continue
                self.pos += 1
                break
            quoted.append(char)
            self.pos += 1
        return "".join(quoted)

    def parse_identifier(self, what: str) -> str:
        start = self.pos
        while not self.is_eof:
            char = self.pattern[self.pos]
            if char in _WHITESPACE or char in "{},#'":
                break
            self.pos += 1
        if self.pos == start:
            raise self.error(f"Expected {what}")
        return self.pattern[start : self.pos]

    def parse_argument(self, depth: int) -> MessageElement:
        """Parse {name ...} starting at the opening brace."""
        self.expect("{")
        self.skip_whitespace()
        name = self.parse_identifier("argument name")
        self.skip_whitespace()

        if self.peek() == "}":
            self.pos += 1
            return ArgumentElement(name)

        self.expect(",")
        self.skip_whitespace()
        type_start = self.pos
        arg_type = self.parse_identifier("argument type")
        self.skip_whitespace()

        match arg_type:
            case "number" | "date" | "time":
                style = self.parse_style()
                self.expect("}")
                if arg_type == "number":
                    return NumberElement(name, style)
                if arg_type == "date":
                    return DateElement(name, style)
                return TimeElement(name, style)
            case "plural" | "selectordinal":
                self.expect(",")
                offset = self.parse_offset()
                branches = self.parse_branches(depth, in_plural=True)
                self.expect("}")
                return PluralElement(
                    name, branches, offset=offset, ordinal=arg_type == "selectordinal"
                )
            case "select":
                self.expect(",")
                branches = self.parse_branches(depth, in_plural=False)
                self.expect("}")
                return SelectElement(name, branches)
            case _:
                raise self.error(f"Unknown argument type '{arg_type}'", type_start)

    def parse_style(self) -> str | None:
        """Parse the optional ", style" of a number/date/time argument."""
        if self.peek() != ",":
            return None
        self.pos += 1
        start = self.pos
        buffer: list[str] = []
        brace_depth = 0
        while not self.is_eof:
            char = self.pattern[self.pos]
            if char == "'":
                buffer.append(self.parse_apostrophe(in_plural=False))
                continue
            if char == "{":
                brace_depth += 1
            elif char == "}":
                if brace_depth == 0:
                    break
                brace_depth -= 1
            buffer.append(char)
            self.pos += 1
        style = "".join(buffer).strip()
        if not style:
            raise self.error("Expected argument style", start)
        return style

    def parse_offset(self) -> int:
        self.skip_whitespace()
        if not self.pattern.startswith("offset:", self.pos):
            return 0
        self.pos += len("offset:")
        self.skip_whitespace()
        start = self.pos
        if self.peek() == "-":
            self.pos += 1
        while not self.is_eof and self.pattern[self.pos].isdigit():
            self.pos += 1
        digits = self.pattern[start : self.pos]
        if digits in ("", "-"):
            raise self.error("Expected integer offset", start)
        return int(digits)

    def parse_branches(self, depth: int, *, in_plural: bool) -> Branches:
        """Parse selector {message} pairs up to the closing brace of the block."""
        branches: list[tuple[str, tuple[MessageElement, ...]]] = []
        seen: set[str] = set()
        self.skip_whitespace()
        while not self.is_eof and self.pattern[self.pos] != "}":
            selector_start = self.pos
            selector = self.parse_identifier("selector")
            if in_plural and selector.startswith("="):
                try:
                    float(selector[1:])
                except ValueError:
                    raise self.error(
                        f"Invalid exact-match selector '{selector}'", selector_start
                    ) from None
            if selector in seen:
                raise self.error(f"Duplicate selector '{selector}'", selector_start)
            seen.add(selector)
            self.skip_whitespace()
            self.expect("{")
            body = self.parse_message(depth + 1, in_plural)
            self.expect("}")
            branches.append((selector, body))
            self.skip_whitespace()

        if not branches:
            raise self.error("Expected at least one selector")
        if "other" not in seen:
            raise self.error("Missing 'other' branch")
        return tuple(branches)


def parse_message(pattern: str) -> tuple[MessageElement, ...]:
    """Parse an ICU message pattern.

    Args:
        pattern: Message pattern

    Returns:
        Tuple of message elements

    Raises:
        MessageFormatError: If the pattern is malformed

    Example:
        >>> parse_message("Hi {name}")
        (TextElement(value='Hi '), ArgumentElement(name='name'))
    """
    return _Parser(pattern).parse_message(depth=0, in_plural=False)
