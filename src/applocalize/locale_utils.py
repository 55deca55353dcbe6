"""Language code utilities.

Two distinct notions of "language" meet here:

- Resource keys: opaque, case-sensitive strings ("en-US") used to index a
  ResourceBundle. Only split_fallback_language() interprets them.
- Babel locales: POSIX-style identifiers ("en_US") used for CLDR data when
  formatting. normalize_locale() converts at that boundary.

Python 3.13+.
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING

from applocalize.constants import DEFAULT_LOCALE, LANGUAGE_SEPARATOR

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "get_babel_locale",
    "normalize_locale",
    "split_fallback_language",
]

logger = logging.getLogger(__name__)


def split_fallback_language(language: str) -> str:
    """Return the base language of a region-qualified code.

    Example:
        >>> split_fallback_language("en-US")
        'en'
        >>> split_fallback_language("zh-Hant-TW")
        'zh'
        >>> split_fallback_language("fr")
        'fr'
    """
    return language.split(LANGUAGE_SEPARATOR, 1)[0]


def normalize_locale(locale_code: str) -> str:
    """Convert BCP-47 locale code to POSIX format for Babel.

    Example:
        >>> normalize_locale("pt-BR")
        'pt_BR'
    """
    return locale_code.replace("-", "_")


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale, falling back to the default locale if unknown.

    Parses the locale code once and caches the result. Thread-safe via
    lru_cache internal locking.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object (the default locale for unrecognized codes)
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale, UnknownLocaleError  # noqa: PLC0415

    try:
        return Locale.parse(normalize_locale(locale_code))
    except UnknownLocaleError as e:
        logger.warning(
            "Unknown locale '%s': %s. Falling back to %s", locale_code, e, DEFAULT_LOCALE
        )
    except ValueError as e:
        logger.warning(
            "Invalid locale format '%s': %s. Falling back to %s", locale_code, e, DEFAULT_LOCALE
        )
    return Locale.parse(DEFAULT_LOCALE)
