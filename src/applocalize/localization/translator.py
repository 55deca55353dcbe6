"""Translator: key lookup with language fallback, cached compilation, formatting.

A Translator is a snapshot of (language, resources, formats). Building one
with build_translator() clears the scope's compiled-message cache, whether
or not the new Translator is ever called. Localizer rebuilds its Translator
whenever any of the three inputs changes.

Resolution order for translate(key, params):
    1. key, resources or language missing -> None
    2. resources lacks language -> use its base language ("en-US" -> "en")
    3. neither present -> None
    4. pattern = resources[language][key]
    5. missing -> resources[base language][key], if that bundle exists
    6. still missing -> key echo (use_key_if_missing) or ""
    7-8. compile (pattern, language, formats) once per (key, pattern)
    9-10. format with params

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from applocalize.constants import MISSING_KEY_SENTINEL
from applocalize.errors import MessageFormatError
from applocalize.locale_utils import split_fallback_language

if TYPE_CHECKING:
    from applocalize.formatting.protocols import MessageFormatter
    from applocalize.localization.cache import LocalizationCache
    from applocalize.localization.types import (
        FormatOptions,
        LanguageCode,
        MessageKey,
        ResourceBundle,
    )

__all__ = [
    "FallbackInfo",
    "Translator",
    "build_translator",
    "coerce_params",
    "pairs_to_params",
]

logger = logging.getLogger(__name__)

type Params = Mapping[str, Any] | Iterable[tuple[str, Any]] | None


@dataclass(frozen=True, slots=True)
class FallbackInfo:
    """Information about a language fallback event.

    Provided to the on_fallback callback when a key is resolved from the
    base language instead of the requested one.

    Attributes:
        requested_language: The language the Translator was built for
        resolved_language: The language whose bundle held the pattern
        key: The translation key that was resolved

    Example:
        >>> def log_fallback(info: FallbackInfo) -> None:
        ...     print(f"{info.key}: {info.requested_language} -> {info.resolved_language}")
        >>> l10n = Localizer(language="en-GB", on_fallback=log_fallback)
    """

    requested_language: LanguageCode
    resolved_language: LanguageCode
    key: MessageKey


def pairs_to_params(pairs: Sequence[Any]) -> dict[str, Any]:
    """Build a parameter mapping from alternating name/value items.

    A trailing name without a value is dropped.

    Example:
        >>> pairs_to_params(("name", "Ana", "count", 3))
        {'name': 'Ana', 'count': 3}
        >>> pairs_to_params(("name", "Ana", "orphan"))
        {'name': 'Ana'}
    """
    if len(pairs) % 2:
        logger.debug("Dropping unpaired trailing parameter name %r", pairs[-1])
    return {pairs[i]: pairs[i + 1] for i in range(0, len(pairs) - 1, 2)}


def coerce_params(params: Params) -> Mapping[str, Any]:
    """Accept None, a mapping, or an iterable of (name, value) pairs.

    Raises:
        TypeError: If params is neither a mapping nor an iterable of pairs
    """
    if params is None:
        return {}
    if isinstance(params, Mapping):
        return params
    try:
        return dict(params)
    except (TypeError, ValueError) as e:
        msg = f"params must be a mapping or (name, value) pairs, got {type(params).__name__}"
        raise TypeError(msg) from e


class Translator:
    """Resolves keys against a resource snapshot and formats the result.

    Attributes:
        language: Requested language
        resources: Resource bundle snapshot
        formats: Named format options passed to the formatter
        use_key_if_missing: Echo the key when no pattern is found; read at
            call time, so it can change without a rebuild
    """

    __slots__ = (
        "_cache",
        "_formatter",
        "_on_fallback",
        "formats",
        "language",
        "resources",
        "use_key_if_missing",
    )

    def __init__(
        self,
        language: LanguageCode | None,
        resources: ResourceBundle | None,
        formats: FormatOptions | None,
        *,
        cache: LocalizationCache,
        formatter: MessageFormatter,
        use_key_if_missing: bool = False,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
    ) -> None:
        self.language = language
        self.resources = resources
        self.formats = formats
        self.use_key_if_missing = use_key_if_missing
        self._cache = cache
        self._formatter = formatter
        self._on_fallback = on_fallback

    def __repr__(self) -> str:
        languages = sorted(self.resources) if self.resources else []
        return f"Translator(language={self.language!r}, resources={languages!r})"

    def __call__(self, key: MessageKey, *name_value_pairs: Any) -> str | None:
        """Translate with alternating name/value parameters.

        Example:
            >>> translator("greet", "name", "World")
            'Hello, World!'
        """
        return self.translate(key, pairs_to_params(name_value_pairs))

    def translate(self, key: MessageKey, params: Params = None) -> str | None:
        """Resolve key and format it with params.

        Args:
            key: Translation key
            params: Mapping or (name, value) pairs

        Returns:
            Formatted string; "" when the key has no pattern (and key echo is
            off); None when key, resources or language is missing, or no
            bundle exists for the language or its base language

        Raises:
            MessageFormatError: If the pattern is malformed or a parameter
                does not fit it
        """
        resources = self.resources
        language = self.language
        if not key or not resources or not language:
            return None

        fallback_language = split_fallback_language(language)
        if resources.get(language) is None:
            language = fallback_language
        bundle = resources.get(language)
        if bundle is None:
            return None

        pattern = bundle.get(key)
        resolved_language = language
        if not pattern and resources.get(fallback_language) is not None:
            pattern = resources[fallback_language].get(key)
            resolved_language = fallback_language

        cache_prefix = key
        if not pattern:
            if not self.use_key_if_missing:
                logger.debug("No pattern for '%s' in %s", key, self.language)
                return ""
            pattern = str(key)
            cache_prefix = MISSING_KEY_SENTINEL
        elif not isinstance(pattern, str):
            msg = f"Pattern for '{key}' must be a string, got {type(pattern).__name__}"
            raise MessageFormatError(msg)
        elif resolved_language != self.language and self._on_fallback is not None:
            self._on_fallback(FallbackInfo(self.language, resolved_language, key))

        compiled = self._cache.get_message(cache_prefix, pattern)
        if compiled is None:
            compiled = self._formatter.compile(pattern, language, self.formats)
            self._cache.put_message(cache_prefix, pattern, compiled)

        return compiled.format(coerce_params(params))


def build_translator(
    language: LanguageCode | None,
    resources: ResourceBundle | None,
    formats: FormatOptions | None,
    *,
    cache: LocalizationCache,
    formatter: MessageFormatter,
    use_key_if_missing: bool = False,
    on_fallback: Callable[[FallbackInfo], None] | None = None,
) -> Translator:
    """Clear compiled messages and return a Translator for the given inputs."""
    cache.clear_messages()
    logger.debug("Rebuilt translator for language %r", language)
    return Translator(
        language,
        resources,
        formats,
        cache=cache,
        formatter=formatter,
        use_key_if_missing=use_key_if_missing,
        on_fallback=on_fallback,
    )
