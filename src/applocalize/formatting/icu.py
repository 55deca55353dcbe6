"""Default formatter adapter: ICU MessageFormat over Babel.

IcuMessageFormatter compiles a pattern once (parse + locale lookup) and
returns an IcuMessage that can be formatted many times with different
arguments. CLDR data (plural rules, number symbols, date patterns) comes
from Babel.

Named formats:
    FormatOptions follow the format.js layout, keyed by format type then
    format name, with Intl-style option names:

        {
            "number": {"USD": {"style": "currency", "currency": "USD"}},
            "date": {"compact": {"year": "2-digit", "month": "numeric", "day": "numeric"}},
        }

    A style that is neither a named format nor a built-in
    (integer/percent/currency, short/medium/long/full) is handed to Babel as
    an LDML pattern; date/time styles starting with "::" are skeletons.

Python 3.13+. Uses Babel for i18n.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import UTC, date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from babel import dates as babel_dates
from babel import numbers as babel_numbers

from applocalize.errors import MessageFormatError
from applocalize.formatting.syntax import (
    ArgumentElement,
    Branches,
    DateElement,
    MessageElement,
    NumberElement,
    PluralElement,
    PoundElement,
    SelectElement,
    TextElement,
    TimeElement,
    parse_message,
)
from applocalize.locale_utils import get_babel_locale

if TYPE_CHECKING:
    from babel import Locale

    from applocalize.localization.types import FormatOptions

__all__ = ["IcuMessage", "IcuMessageFormatter"]

logger = logging.getLogger(__name__)

_DATE_STYLES = frozenset({"short", "medium", "long", "full"})

# Intl.DateTimeFormat option -> CLDR skeleton field, per option value.
_SKELETON_FIELDS: tuple[tuple[str, Mapping[str, str]], ...] = (
    ("era", {"narrow": "GGGGG", "short": "G", "long": "GGGG"}),
    ("year", {"numeric": "y", "2-digit": "yy"}),
    ("month", {"numeric": "M", "2-digit": "MM", "short": "MMM", "long": "MMMM", "narrow": "MMMMM"}),
    ("weekday", {"narrow": "EEEEE", "short": "E", "long": "EEEE"}),
    ("day", {"numeric": "d", "2-digit": "dd"}),
    ("hour", {"numeric": "j", "2-digit": "jj"}),
    ("minute", {"numeric": "m", "2-digit": "mm"}),
    ("second", {"numeric": "s", "2-digit": "ss"}),
    ("timeZoneName", {"short": "z", "long": "zzzz"}),
)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _to_datetime(value: object, name: str) -> date | datetime | time:
    """Accept date/datetime/time objects or epoch milliseconds."""
    if isinstance(value, (date, time)):
        return value
    if _is_number(value):
        return datetime.fromtimestamp(float(value) / 1000, tz=UTC)  # type: ignore[arg-type]
    msg = f"Argument '{name}' must be a date, datetime, time or timestamp, got {type(value).__name__}"
    raise MessageFormatError(msg)


def _decimal_pattern(options: Mapping[str, Any], prefix: str = "", suffix: str = "") -> str | None:
    """Build a Babel number pattern from Intl-style fraction/grouping options.

    Returns None when no option overrides the locale default.
    """
    keys = ("minimumFractionDigits", "maximumFractionDigits", "useGrouping")
    if not any(key in options for key in keys):
        return None
    minimum = int(options.get("minimumFractionDigits", 0))
    maximum = int(options.get("maximumFractionDigits", max(minimum, 3)))
    if maximum < minimum:
        msg = f"maximumFractionDigits ({maximum}) is less than minimumFractionDigits ({minimum})"
        raise MessageFormatError(msg)
    integer_part = "#,##0" if options.get("useGrouping", True) else "0"
    if maximum == 0:
        return f"{prefix}{integer_part}{suffix}"
    fraction = "0" * minimum + "#" * (maximum - minimum)
    return f"{prefix}{integer_part}.{fraction}{suffix}"


def _skeleton_from_options(options: Mapping[str, Any]) -> str:
    skeleton: list[str] = []
    for option, fields in _SKELETON_FIELDS:
        choice = options.get(option)
        if choice is None:
            continue
        if choice not in fields:
            msg = f"Unsupported value {choice!r} for date/time option '{option}'"
            raise MessageFormatError(msg)
        skeleton.append(fields[choice])
    if not skeleton:
        msg = "Date/time format options select no fields"
        raise MessageFormatError(msg)
    return "".join(skeleton)


def _apply_hour_cycle(skeleton: str, locale: Locale) -> str:
    """Replace the 'j' (locale-preferred hour) field with 'h' or 'H'.

    CLDR availableFormats never contain 'j', so it is resolved from the
    locale's short time pattern before skeleton matching.
    """
    if "j" not in skeleton:
        return skeleton
    hour = "h" if "h" in locale.time_formats["short"].pattern else "H"
    return skeleton.replace("j", hour)


class IcuMessage:
    """A parsed ICU pattern bound to a locale and named formats.

    Immutable after construction; format() is safe to call concurrently.
    """

    __slots__ = ("_elements", "_formats", "_locale", "locale_code", "pattern")

    def __init__(
        self,
        pattern: str,
        locale_code: str,
        formats: FormatOptions | None = None,
    ) -> None:
        """Parse pattern and resolve the Babel locale.

        Raises:
            MessageFormatError: If the pattern is malformed
        """
        self.pattern = pattern
        self.locale_code = locale_code
        self._elements = parse_message(pattern)
        self._locale: Locale = get_babel_locale(locale_code)
        self._formats: FormatOptions = formats or {}

    def __repr__(self) -> str:
        return f"IcuMessage({self.pattern!r}, {self.locale_code!r})"

    def format(self, args: Mapping[str, Any]) -> str:
        """Substitute arguments into the pattern.

        Raises:
            MessageFormatError: If a referenced argument is missing or has an
                incompatible type
        """
        return self._render(self._elements, args, None)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render(
        self,
        elements: tuple[MessageElement, ...],
        args: Mapping[str, Any],
        plural_value: int | float | Decimal | None,
    ) -> str:
        parts: list[str] = []
        for element in elements:
            match element:
                case TextElement(value=value):
                    parts.append(value)
                case ArgumentElement(name=name):
                    value = self._lookup(args, name)
                    parts.append("" if value is None else str(value))
                case NumberElement(name=name, style=style):
                    parts.append(self._format_number(self._lookup(args, name), name, style))
                case DateElement(name=name, style=style):
                    parts.append(self._format_date(self._lookup(args, name), name, style))
                case TimeElement(name=name, style=style):
                    parts.append(self._format_time(self._lookup(args, name), name, style))
                case PluralElement():
                    parts.append(self._render_plural(element, args))
                case SelectElement(name=name, branches=branches):
                    value = self._lookup(args, name)
                    key = str(value).lower() if isinstance(value, bool) else str(value)
                    parts.append(
                        self._render(self._choose(branches, key), args, plural_value)
                    )
                case PoundElement():
                    if plural_value is None:
                        parts.append("#")
                    else:
                        parts.append(
                            babel_numbers.format_decimal(plural_value, locale=self._locale)
                        )
        return "".join(parts)

    def _lookup(self, args: Mapping[str, Any], name: str) -> Any:
        if name not in args:
            msg = f"Missing value for argument '{name}'"
            raise MessageFormatError(msg, pattern=self.pattern)
        return args[name]

    @staticmethod
    def _choose(branches: Branches, key: str) -> tuple[MessageElement, ...]:
        fallback: tuple[MessageElement, ...] = ()
        for selector, body in branches:
            if selector == key:
                return body
            if selector == "other":
                fallback = body
        return fallback

    def _render_plural(self, element: PluralElement, args: Mapping[str, Any]) -> str:
        value = self._lookup(args, element.name)
        if not _is_number(value):
            msg = f"Plural argument '{element.name}' must be a number, got {type(value).__name__}"
            raise MessageFormatError(msg, pattern=self.pattern)

        for selector, body in element.branches:
            if selector.startswith("=") and Decimal(selector[1:]) == Decimal(str(value)):
                return self._render(body, args, value - element.offset)

        adjusted = value - element.offset
        rule = self._locale.ordinal_form if element.ordinal else self._locale.plural_form
        category = rule(abs(adjusted))
        return self._render(self._choose(element.branches, category), args, adjusted)

    # ------------------------------------------------------------------
    # Numbers
    # ------------------------------------------------------------------

    def _format_number(self, value: Any, name: str, style: str | None) -> str:
        if not _is_number(value):
            msg = f"Number argument '{name}' must be a number, got {type(value).__name__}"
            raise MessageFormatError(msg, pattern=self.pattern)

        named = self._formats.get("number", {}).get(style) if style else None
        try:
            if named is not None:
                return self._format_number_options(value, named)
            match style:
                case None:
                    return babel_numbers.format_decimal(value, locale=self._locale)
                case "integer":
                    return babel_numbers.format_decimal(value, format="#,##0", locale=self._locale)
                case "percent":
                    return babel_numbers.format_percent(value, locale=self._locale)
                case "currency":
                    msg = "Currency style requires a named format with a 'currency' code"
                    raise MessageFormatError(msg, pattern=self.pattern)
                case _:
                    return babel_numbers.format_decimal(value, format=style, locale=self._locale)
        except (ValueError, TypeError, InvalidOperation, KeyError) as e:
            msg = f"Cannot format argument '{name}' as number: {e}"
            raise MessageFormatError(msg, pattern=self.pattern) from e

    def _format_number_options(self, value: int | float | Decimal, options: Mapping[str, Any]) -> str:
        match options.get("style", "decimal"):
            case "currency":
                currency = options.get("currency")
                if not currency:
                    msg = "Currency format options require a 'currency' code"
                    raise MessageFormatError(msg, pattern=self.pattern)
                pattern = _decimal_pattern(options, prefix="\xa4")
                return babel_numbers.format_currency(
                    value,
                    currency,
                    format=pattern,
                    locale=self._locale,
                    currency_digits=pattern is None,
                )
            case "percent":
                return babel_numbers.format_percent(
                    value, format=_decimal_pattern(options, suffix="%"), locale=self._locale
                )
            case "decimal":
                return babel_numbers.format_decimal(
                    value, format=_decimal_pattern(options), locale=self._locale
                )
            case other:
                msg = f"Unsupported number style {other!r}"
                raise MessageFormatError(msg, pattern=self.pattern)

    # ------------------------------------------------------------------
    # Dates and times
    # ------------------------------------------------------------------

    def _format_date(self, value: Any, name: str, style: str | None) -> str:
        instant = _to_datetime(value, name)
        if isinstance(instant, time):
            msg = f"Date argument '{name}' cannot be a time of day"
            raise MessageFormatError(msg, pattern=self.pattern)
        return self._format_temporal(instant, style, "date")

    def _format_time(self, value: Any, name: str, style: str | None) -> str:
        instant = _to_datetime(value, name)
        if isinstance(instant, date) and not isinstance(instant, datetime):
            instant = datetime.combine(instant, time())
        return self._format_temporal(instant, style, "time")

    def _format_temporal(self, instant: Any, style: str | None, kind: str) -> str:
        builtin = babel_dates.format_date if kind == "date" else babel_dates.format_time
        options = self._formats.get(kind, {}).get(style) if style else None
        try:
            if options is not None:
                skeleton = _apply_hour_cycle(_skeleton_from_options(options), self._locale)
                return babel_dates.format_skeleton(skeleton, instant, locale=self._locale)
            if style is None or style in _DATE_STYLES:
                return builtin(instant, format=style or "medium", locale=self._locale)
            if style.startswith("::"):
                skeleton = _apply_hour_cycle(style[2:], self._locale)
                return babel_dates.format_skeleton(skeleton, instant, locale=self._locale)
            return builtin(instant, format=style, locale=self._locale)
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            msg = f"Cannot format date/time with style {style!r}: {e}"
            raise MessageFormatError(msg, pattern=self.pattern) from e


class IcuMessageFormatter:
    """MessageFormatter producing IcuMessage instances.

    Stateless; a single instance can be shared by every Localizer.

    Example:
        >>> message = IcuMessageFormatter().compile("Hello, {name}!", "en", None)
        >>> message.format({"name": "World"})
        'Hello, World!'
    """

    __slots__ = ()

    def compile(
        self,
        pattern: str,
        locale: str,
        formats: FormatOptions | None,
    ) -> IcuMessage:
        """Parse pattern for locale.

        Raises:
            MessageFormatError: If the pattern is malformed
        """
        logger.debug("Compiling pattern for %s: %r", locale, pattern[:50])
        return IcuMessage(pattern, locale, formats)
