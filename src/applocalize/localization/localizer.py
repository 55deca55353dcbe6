"""Localizer: a localization context with loadable resources.

A Localizer owns a resource store and the current Translator, and shares a
LocalizationCache with every other instance of the same class. Subclassing
Localizer therefore creates a new cache scope:

    class CheckoutText(Localizer):
        fetcher_factory = partial(HttpxResourceFetcher, FetchConfig(timeout=3.0))

Assigning language, resources or formats rebuilds the Translator (and
clears the scope's compiled messages). Resources can also be fetched:

    l10n = Localizer(language="es")
    await l10n.load_resources("https://cdn.example.com/es.json", language="es")
    l10n.localize("greet", "name", "Ana")

Thread Safety:
    Input assignment and Translator rebuilds are serialized by an RLock.
    localize() reads the current Translator reference without locking.
    load_resources() must run on an event loop; completions for different
    paths may interleave and merge last-write-wins. Fetch handles belong to
    the loop that issued them and are reissued when that loop is gone.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from threading import RLock
from typing import TYPE_CHECKING, Any, ClassVar

from applocalize.enums import EventType, LoadStatus
from applocalize.errors import ResourceFetchError
from applocalize.formatting.icu import IcuMessageFormatter
from applocalize.localization.cache import LocalizationCache, ensure_localization_cache
from applocalize.localization.events import ListenerRegistry, LocalizeEvent
from applocalize.localization.fetching import HttpxResourceFetcher, LoadResult
from applocalize.localization.merge import deep_merge
from applocalize.localization.translator import build_translator

if TYPE_CHECKING:
    from applocalize.formatting.protocols import MessageFormatter
    from applocalize.localization.events import EventListener
    from applocalize.localization.fetching import ResourceFetcher
    from applocalize.localization.translator import FallbackInfo, Params, Translator
    from applocalize.localization.types import (
        FormatOptions,
        LanguageCode,
        MessageKey,
        ResourceBundle,
    )

__all__ = ["Localizer"]

logger = logging.getLogger(__name__)


class Localizer:
    """Localization context: configuration, resource store, translator, events.

    Example - Inline resources:
        >>> l10n = Localizer(
        ...     language="fr",
        ...     resources={
        ...         "en": {"hello": "My name is {name}."},
        ...         "fr": {"hello": "Je m'appelle {name}."},
        ...     },
        ... )
        >>> l10n.localize("hello", "name", "Batman")
        "Je m'appelle Batman."

    Example - Region fallback:
        >>> l10n = Localizer(language="en-GB", resources={"en": {"hi": "Hi"}})
        >>> l10n.localize("hi")
        'Hi'

    Attributes:
        use_key_if_missing: Return the key itself when no pattern exists
        bubble_event: Propagate load events to the parent chain
        with_credentials: Default credentials flag for load_resources()
        parent: Localizer receiving bubbled events
    """

    fetcher_factory: ClassVar[Callable[[], ResourceFetcher]] = HttpxResourceFetcher
    """Builds the fetcher shared by every instance of this class."""

    def __init__(
        self,
        *,
        language: LanguageCode | None = None,
        resources: ResourceBundle | None = None,
        formats: FormatOptions | None = None,
        use_key_if_missing: bool = False,
        bubble_event: bool = False,
        with_credentials: bool = False,
        formatter: MessageFormatter | None = None,
        parent: Localizer | None = None,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
    ) -> None:
        """Initialize a localization context.

        Args:
            language: Language used for translation (e.g., 'en', 'en-US')
            resources: Language -> key -> pattern mapping
            formats: Named format options (default: empty)
            use_key_if_missing: Echo the key when no translation exists
            bubble_event: Re-dispatch load events to parent Localizers
            with_credentials: Send credentials when fetching resources
            formatter: Pattern compiler (default: IcuMessageFormatter)
            parent: Next Localizer in the event chain
            on_fallback: Called when a key resolves from the base language
        """
        self._lock = RLock()
        self._language = language
        self._resources = resources
        self._formats: FormatOptions = formats if formats is not None else {}
        self._formatter: MessageFormatter = formatter or IcuMessageFormatter()
        self._on_fallback = on_fallback
        self._use_key_if_missing = use_key_if_missing
        self._listeners = ListenerRegistry()
        self.bubble_event = bubble_event
        self.with_credentials = with_credentials
        self.parent = parent
        self._translator: Translator = self.rebuild_translator()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(language={self._language!r}, "
            f"languages={list(self.languages)!r})"
        )

    # ------------------------------------------------------------------
    # Scope cache
    # ------------------------------------------------------------------

    @classmethod
    def localization_cache(cls) -> LocalizationCache:
        """Return the cache shared by every instance of this class."""
        return ensure_localization_cache(cls, cls.fetcher_factory)

    def get_cache_stats(self) -> dict[str, int]:
        """Get statistics of the shared cache (see LocalizationCache.get_stats)."""
        return self.localization_cache().get_stats()

    # ------------------------------------------------------------------
    # Translator inputs
    # ------------------------------------------------------------------

    @property
    def language(self) -> LanguageCode | None:
        """The language used for translation."""
        return self._language

    @language.setter
    def language(self, value: LanguageCode | None) -> None:
        with self._lock:
            self._language = value
            self.rebuild_translator()

    @property
    def resources(self) -> ResourceBundle | None:
        """The resource store: language -> key -> pattern."""
        return self._resources

    @resources.setter
    def resources(self, value: ResourceBundle | None) -> None:
        with self._lock:
            self._resources = value
            self.rebuild_translator()

    @property
    def formats(self) -> FormatOptions:
        """Named format options handed to the formatter."""
        return self._formats

    @formats.setter
    def formats(self, value: FormatOptions | None) -> None:
        with self._lock:
            self._formats = value if value is not None else {}
            self.rebuild_translator()

    @property
    def use_key_if_missing(self) -> bool:
        """Return the key itself when no pattern exists."""
        return self._use_key_if_missing

    @use_key_if_missing.setter
    def use_key_if_missing(self, value: bool) -> None:
        with self._lock:
            self._use_key_if_missing = value
            self._translator.use_key_if_missing = value

    @property
    def languages(self) -> tuple[LanguageCode, ...]:
        """Languages present in the resource store, sorted."""
        return tuple(sorted(self._resources)) if self._resources else ()

    @property
    def translator(self) -> Translator:
        """The current Translator."""
        return self._translator

    def rebuild_translator(self) -> Translator:
        """Rebuild the Translator from the current inputs.

        Clears the scope's compiled messages even if the new Translator is
        never used.
        """
        with self._lock:
            self._translator = build_translator(
                self._language,
                self._resources,
                self._formats,
                cache=self.localization_cache(),
                formatter=self._formatter,
                use_key_if_missing=self._use_key_if_missing,
                on_fallback=self._on_fallback,
            )
            return self._translator

    # ------------------------------------------------------------------
    # Translation
    # ------------------------------------------------------------------

    def localize(self, key: MessageKey, *name_value_pairs: Any) -> str | None:
        """Translate key with alternating name/value parameters.

        ``localize("greet", "name", "Ana", "count", 3)`` passes
        ``{"name": "Ana", "count": 3}``; a trailing name without value is
        dropped.

        Returns:
            Formatted string, "" for a missing key, or None when language,
            resources or a matching bundle is missing

        Raises:
            MessageFormatError: If the pattern is malformed or a parameter
                does not fit it
        """
        return self._translator(key, *name_value_pairs)

    def translate(self, key: MessageKey, params: Params = None) -> str | None:
        """Translate key with a parameter mapping or (name, value) pairs."""
        return self._translator.translate(key, params)

    # ------------------------------------------------------------------
    # Resource loading
    # ------------------------------------------------------------------

    async def load_resources(
        self,
        path: str,
        language: LanguageCode | None = None,
        merge: bool | None = True,
        with_credentials: bool | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> LoadResult:
        """Fetch a JSON resource file and apply it to the resource store.

        One fetch is issued per distinct path for the whole scope; concurrent
        and later calls for the same path await that same fetch. Fetch
        handles are bound to the event loop that issued them: a cached
        handle that was cancelled, or is still pending on another loop, is
        replaced by a new fetch. If the shared fetch is cancelled while
        awaited, waiters report an error and the handle is dropped.

        Args:
            path: Resource URL (or path, depending on the scope's fetcher)
            language: File the document under this language; the document
                is then a flat key -> pattern map
            merge: Deep-merge into existing resources (default: True);
                False replaces them
            with_credentials: Override the instance's with_credentials
            headers: Request headers; ignored unless a Mapping

        Returns:
            LoadResult describing the outcome. Transport and decoding
            failures are reported here and through a resources-error event,
            never raised.

        Raises:
            TypeError: If path is not a non-empty string
        """
        if not isinstance(path, str) or not path:
            msg = f"path must be a non-empty string, got {path!r}"
            raise TypeError(msg)
        if merge is None:
            merge = True
        if with_credentials is None:
            with_credentials = self.with_credentials

        cache = self.localization_cache()
        fetcher = cache.get_fetcher()
        request = cache.get_request(path)
        if request is not None and not request.usable_from(asyncio.get_running_loop()):
            logger.debug("Discarding unusable resource request %r", request)
            request = None
        if request is None:
            fetcher.url = path
            fetcher.with_credentials = bool(with_credentials)
            if isinstance(headers, Mapping):
                fetcher.headers = headers
            request = fetcher.generate_request()
            cache.put_request(path, request)
            logger.debug("Issued resource request for %s", path)
        else:
            logger.debug("Reusing resource request for %s", path)

        try:
            # Shield: cancelling one waiter must not cancel the shared fetch
            response = await asyncio.shield(request.completes)
        except ResourceFetchError as e:
            return self._report_failure(path, language, merge, e)
        except asyncio.CancelledError:
            task = asyncio.current_task()
            if not request.cancelled or (task is not None and task.cancelling()):
                raise
            # The shared fetch was cancelled, not this waiter
            if cache.get_request(path) is request:
                cache.forget_request(path)
            error = ResourceFetchError(f"Fetch cancelled: {path}", url=path)
            return self._report_failure(path, language, merge, error)

        self._apply_resources(response.body, language, merge)
        logger.info(
            "Loaded resources from %s (%s)", path, "merged" if merge else "replaced"
        )
        self.dispatch_event(
            LocalizeEvent(EventType.RESOURCES_LOADED, detail=response, bubbles=self.bubble_event)
        )
        return LoadResult(path, language, merge, LoadStatus.SUCCESS, response=response)

    def _report_failure(
        self,
        path: str,
        language: LanguageCode | None,
        merge: bool,
        error: ResourceFetchError,
    ) -> LoadResult:
        logger.warning("Failed to load resources from %s: %s", path, error)
        self.dispatch_event(LocalizeEvent(EventType.RESOURCES_ERROR, bubbles=self.bubble_event))
        return LoadResult(path, language, merge, LoadStatus.ERROR, error=error)

    def _apply_resources(
        self,
        body: dict[str, Any],
        language: LanguageCode | None,
        merge: bool,
    ) -> None:
        new_resources: ResourceBundle = {language: body} if language else body
        with self._lock:
            if merge and self._resources is not None:
                self.resources = deep_merge(self._resources, new_resources)
            else:
                self.resources = new_resources

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def add_listener(self, event_type: EventType, listener: EventListener) -> None:
        """Register listener for event_type."""
        self._listeners.add(event_type, listener)

    def remove_listener(self, event_type: EventType, listener: EventListener) -> bool:
        """Unregister listener; returns False if it was not registered."""
        return self._listeners.remove(event_type, listener)

    def on_resources_loaded(self, listener: EventListener) -> EventListener:
        """Register a resources-loaded listener. Usable as a decorator."""
        self.add_listener(EventType.RESOURCES_LOADED, listener)
        return listener

    def on_resources_error(self, listener: EventListener) -> EventListener:
        """Register a resources-error listener. Usable as a decorator."""
        self.add_listener(EventType.RESOURCES_ERROR, listener)
        return listener

    def dispatch_event(self, event: LocalizeEvent) -> None:
        """Run local listeners, then the parent chain's if the event bubbles."""
        target: Localizer | None = self
        while target is not None:
            target._listeners.dispatch(event)  # noqa: SLF001
            if not event.bubbles:
                break
            target = target.parent
