"""Type aliases for the localization domain.

Provides semantic type aliases used throughout the localization package
and by user code when annotating Localizer call sites.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Mapping
from typing import Any

__all__ = [
    "FormatOptions",
    "LanguageCode",
    "MessageKey",
    "MessagePattern",
    "ResourceBundle",
]

type LanguageCode = str
"""Resource language code, compared case-sensitively (e.g., 'en', 'en-US')."""

type MessageKey = str
"""Translation key within one language (e.g., 'greeting')."""

type MessagePattern = str
"""ICU message pattern (e.g., 'Hello, {name}!')."""

type ResourceBundle = dict[LanguageCode, dict[MessageKey, MessagePattern]]
"""Language -> key -> pattern mapping held by a Localizer."""

type FormatOptions = Mapping[str, Mapping[str, Mapping[str, Any]]]
"""Format type ('number', 'date', 'time') -> format name -> options."""
