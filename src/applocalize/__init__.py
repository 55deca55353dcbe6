"""applocalize - key + language to formatted, parameter-substituted strings.

Resolves translation keys against language -> key -> pattern bundles held
in memory or fetched as JSON, with region fallback ("en-US" -> "en"),
per-scope caching of compiled ICU message formatters and de-duplicated
asynchronous resource loading.

Public API:
    Localizer - Localization context (resources, language, formats, loading)
    Translator - Lookup + fallback + formatting snapshot
    IcuMessageFormatter - Default ICU MessageFormat formatter (Babel)
    FetchConfig - Transport configuration for HTTP resource fetching
    EventType - resources-loaded / resources-error

Exceptions:
    LocalizeError - Base exception class
    MessageFormatError - Malformed pattern or incompatible argument
    ResourceFetchError - Resource could not be retrieved
    ResourceDecodeError - Resource is not a JSON object

Submodules:
    applocalize.localization - Cache, fetchers, events, translator, Localizer
    applocalize.formatting - Formatter protocols and ICU implementation
"""

from .enums import EventType, LoadStatus
from .errors import LocalizeError, MessageFormatError, ResourceDecodeError, ResourceFetchError
from .formatting import IcuMessageFormatter
from .localization import (
    FetchConfig,
    HttpxResourceFetcher,
    LocalizeEvent,
    Localizer,
    PathResourceFetcher,
    Translator,
)

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("applocalize")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "EventType",
    "FetchConfig",
    "HttpxResourceFetcher",
    "IcuMessageFormatter",
    "LoadStatus",
    "LocalizeError",
    "LocalizeEvent",
    "Localizer",
    "MessageFormatError",
    "PathResourceFetcher",
    "ResourceDecodeError",
    "ResourceFetchError",
    "Translator",
    "__version__",
]
