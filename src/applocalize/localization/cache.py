"""Scope-wide localization cache.

Every Localizer subclass (the "scope") shares one LocalizationCache holding:

    requests - resource path -> FetchRequest, so repeated loads of one path
               reuse a single fetch. Entries are never evicted implicitly.
    messages - (key, pattern) -> compiled formatter. Cleared wholesale each
               time a Translator is rebuilt.
    fetcher  - the single ResourceFetcher used to issue requests, created on
               first use.

Caches live in a process-wide registry and are created lazily by
ensure_localization_cache(). Nothing tears them down except
reset_localization_caches(), which exists for test isolation.

Thread Safety:
    The registry and each cache are guarded by threading.RLock. Compiled
    messages are immutable once stored.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable
from threading import Lock, RLock
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from applocalize.formatting.protocols import CompiledMessage
    from applocalize.localization.fetching import FetchRequest, ResourceFetcher

__all__ = [
    "LocalizationCache",
    "ensure_localization_cache",
    "get_localization_cache",
    "reset_localization_caches",
]

logger = logging.getLogger(__name__)

type _MessageCacheKey = tuple[str, str]


class LocalizationCache:
    """Fetch handles, compiled messages and the shared fetcher for one scope.

    Attributes:
        scope: Identity of the owning scope (normally a Localizer subclass)
    """

    __slots__ = (
        "_compiles",
        "_fetcher",
        "_fetcher_factory",
        "_hits",
        "_invalidations",
        "_lock",
        "_messages",
        "_misses",
        "_requests",
        "scope",
    )

    def __init__(
        self,
        scope: Hashable,
        fetcher_factory: Callable[[], ResourceFetcher] | None = None,
    ) -> None:
        """Initialize an empty cache.

        Args:
            scope: Identity of the owning scope
            fetcher_factory: Builds the shared fetcher on first use
        """
        self.scope = scope
        self._fetcher_factory = fetcher_factory
        self._requests: dict[str, FetchRequest] = {}
        self._messages: dict[_MessageCacheKey, CompiledMessage] = {}
        self._fetcher: ResourceFetcher | None = None
        self._lock = RLock()
        self._hits = 0
        self._misses = 0
        self._compiles = 0
        self._invalidations = 0

    def __repr__(self) -> str:
        return (
            f"LocalizationCache(scope={self.scope!r}, "
            f"requests={len(self._requests)}, messages={len(self._messages)})"
        )

    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------

    @property
    def fetcher(self) -> ResourceFetcher | None:
        """The shared fetcher, or None if not created yet."""
        return self._fetcher

    def get_fetcher(self) -> ResourceFetcher:
        """Return the shared fetcher, creating it on first call.

        Raises:
            RuntimeError: If no fetcher exists and no factory was configured
        """
        with self._lock:
            if self._fetcher is None:
                if self._fetcher_factory is None:
                    msg = f"No fetcher factory configured for scope {self.scope!r}"
                    raise RuntimeError(msg)
                self._fetcher = self._fetcher_factory()
                logger.debug("Created shared fetcher for scope %r", self.scope)
            return self._fetcher

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def get_request(self, path: str) -> FetchRequest | None:
        """Return the request issued for path, settled or not."""
        with self._lock:
            return self._requests.get(path)

    def put_request(self, path: str, request: FetchRequest) -> None:
        """Record the request issued for path."""
        with self._lock:
            self._requests[path] = request

    def forget_request(self, path: str) -> bool:
        """Drop the request recorded for path so the next load fetches again.

        Returns:
            True if a request was recorded for path
        """
        with self._lock:
            return self._requests.pop(path, None) is not None

    # ------------------------------------------------------------------
    # Compiled messages
    # ------------------------------------------------------------------

    def get_message(self, key: str, pattern: str) -> CompiledMessage | None:
        """Return the compiled formatter for (key, pattern), or None."""
        with self._lock:
            compiled = self._messages.get((key, pattern))
            if compiled is None:
                self._misses += 1
            else:
                self._hits += 1
            return compiled

    def put_message(self, key: str, pattern: str, compiled: CompiledMessage) -> None:
        """Store the compiled formatter for (key, pattern)."""
        with self._lock:
            self._messages[(key, pattern)] = compiled
            self._compiles += 1

    def clear_messages(self) -> None:
        """Drop every compiled formatter.

        Called on every Translator rebuild. Fetch handles are unaffected.
        """
        with self._lock:
            self._messages.clear()
            self._invalidations += 1

    @property
    def message_count(self) -> int:
        """Number of compiled formatters currently cached."""
        with self._lock:
            return len(self._messages)

    def get_stats(self) -> dict[str, int]:
        """Get cache statistics.

        Returns:
            Dict with keys:
            - requests (int): Recorded fetch handles
            - messages (int): Cached compiled formatters
            - hits (int): Compiled-formatter cache hits
            - misses (int): Compiled-formatter cache misses
            - compiles (int): Formatters stored since creation
            - invalidations (int): Wholesale message clears
        """
        with self._lock:
            return {
                "requests": len(self._requests),
                "messages": len(self._messages),
                "hits": self._hits,
                "misses": self._misses,
                "compiles": self._compiles,
                "invalidations": self._invalidations,
            }


_registry: dict[Hashable, LocalizationCache] = {}
_registry_lock = Lock()


def ensure_localization_cache(
    scope: Hashable,
    fetcher_factory: Callable[[], ResourceFetcher] | None = None,
) -> LocalizationCache:
    """Return the cache for scope, creating an empty one if absent.

    Idempotent: later calls return the same instance and ignore
    fetcher_factory.
    """
    with _registry_lock:
        cache = _registry.get(scope)
        if cache is None:
            cache = LocalizationCache(scope, fetcher_factory)
            _registry[scope] = cache
            logger.debug("Created localization cache for scope %r", scope)
        return cache


def get_localization_cache(scope: Hashable) -> LocalizationCache | None:
    """Return the cache for scope without creating it."""
    with _registry_lock:
        return _registry.get(scope)


def reset_localization_caches() -> None:
    """Forget every scope cache. Intended for tests."""
    with _registry_lock:
        _registry.clear()
