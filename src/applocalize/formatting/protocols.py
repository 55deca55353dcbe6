"""Formatter adapter protocols.

The Translator never interprets message syntax itself. It hands a pattern,
a locale and the FormatOptions to a MessageFormatter and keeps the returned
CompiledMessage in the localization cache for reuse.

These are Protocols (structural typing) rather than ABCs so that any
object with matching methods can be plugged in, including test doubles
that count compilations.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping

    from applocalize.localization.types import FormatOptions

__all__ = ["CompiledMessage", "MessageFormatter"]


# pylint: disable=unnecessary-ellipsis
class CompiledMessage(Protocol):
    """A pattern compiled for one locale, ready to accept arguments."""

    def format(self, args: Mapping[str, Any]) -> str:
        """Substitute arguments and return the formatted string.

        Raises:
            MessageFormatError: If an argument is missing or incompatible
        """
        ...


class MessageFormatter(Protocol):
    """Compiles message patterns into reusable CompiledMessage objects.

    Example:
        >>> class Upper:
        ...     def compile(self, pattern, locale, formats):
        ...         return UpperMessage(pattern)
        >>> l10n = Localizer(language="en", formatter=Upper())
    """

    def compile(
        self,
        pattern: str,
        locale: str,
        formats: FormatOptions | None,
    ) -> CompiledMessage:
        """Compile pattern for locale.

        Args:
            pattern: Message pattern
            locale: Language code the pattern was resolved under
            formats: Named format options, passed through unmodified

        Raises:
            MessageFormatError: If the pattern is malformed
        """
        ...
# pylint: enable=unnecessary-ellipsis
