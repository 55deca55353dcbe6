"""Localization package: resource loading, caching and translation.

Submodules:
    types      - PEP 695 type aliases (LanguageCode, MessageKey, ResourceBundle, ...)
    merge      - deep_merge for resource bundles
    cache      - LocalizationCache and the per-scope registry
    fetching   - ResourceFetcher protocol, HttpxResourceFetcher,
                 PathResourceFetcher, FetchConfig, FetchRequest,
                 FetchResponse, LoadResult
    events     - LocalizeEvent and listener registry
    translator - Translator, build_translator, FallbackInfo
    localizer  - Localizer (localization context)

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from applocalize.enums import EventType, LoadStatus
from applocalize.localization.cache import (
    LocalizationCache,
    ensure_localization_cache,
    get_localization_cache,
    reset_localization_caches,
)
from applocalize.localization.events import LocalizeEvent
from applocalize.localization.fetching import (
    FetchConfig,
    FetchRequest,
    FetchResponse,
    HttpxResourceFetcher,
    LoadResult,
    PathResourceFetcher,
    ResourceFetcher,
)
from applocalize.localization.localizer import Localizer
from applocalize.localization.merge import deep_merge
from applocalize.localization.translator import (
    FallbackInfo,
    Translator,
    build_translator,
    pairs_to_params,
)
from applocalize.localization.types import (
    FormatOptions,
    LanguageCode,
    MessageKey,
    MessagePattern,
    ResourceBundle,
)

__all__ = [
    # Context
    "Localizer",
    # Translation
    "Translator",
    "build_translator",
    "pairs_to_params",
    "FallbackInfo",
    # Cache
    "LocalizationCache",
    "ensure_localization_cache",
    "get_localization_cache",
    "reset_localization_caches",
    # Fetching
    "ResourceFetcher",
    "HttpxResourceFetcher",
    "PathResourceFetcher",
    "FetchConfig",
    "FetchRequest",
    "FetchResponse",
    "LoadResult",
    "LoadStatus",
    # Events
    "EventType",
    "LocalizeEvent",
    # Resources
    "deep_merge",
    # Type aliases
    "FormatOptions",
    "LanguageCode",
    "MessageKey",
    "MessagePattern",
    "ResourceBundle",
]
