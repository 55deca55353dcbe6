"""Resource fetching for Localizer.load_resources().

A fetcher is a long-lived, reconfigurable object: the caller sets url,
with_credentials and headers, then calls generate_request() to issue one
fetch. Each issued fetch is tracked by a FetchRequest handle whose
``completes`` future settles with a FetchResponse or a ResourceFetchError.
One fetcher is shared by every Localizer in a cache scope.

Components:
    FetchResponse - Immutable record of a settled, successful fetch
    FetchRequest - Handle on one issued fetch
    LoadResult - Immutable outcome of one load_resources() call
    ResourceFetcher - Protocol for fetchers (structural typing)
    FetchConfig - Immutable transport configuration
    HttpxResourceFetcher - HTTP(S) fetcher backed by httpx.AsyncClient
    PathResourceFetcher - Local JSON files with path-traversal prevention

Python 3.13+. Uses httpx for HTTP transport.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

import httpx

from applocalize.constants import DEFAULT_FETCH_TIMEOUT
from applocalize.enums import LoadStatus
from applocalize.errors import ResourceDecodeError, ResourceFetchError

if TYPE_CHECKING:
    from collections.abc import Coroutine

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Results and handles
    "FetchResponse",
    "FetchRequest",
    "LoadResult",
    # Protocol
    "ResourceFetcher",
    # Configuration
    "FetchConfig",
    # Concrete fetchers
    "HttpxResourceFetcher",
    "PathResourceFetcher",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FetchResponse:
    """A settled, successful fetch.

    Attributes:
        url: Requested resource path or URL
        status_code: HTTP status code (200 for local files)
        headers: Response headers (empty for local files)
        body: Decoded JSON document; always a JSON object
    """

    url: str
    status_code: int
    body: dict[str, Any]
    headers: Mapping[str, str] = field(default_factory=dict)


class FetchRequest:
    """Handle on a single issued fetch.

    Any number of awaiters may await ``completes``; they all observe the same
    outcome once the fetch settles.

    Event loops:
        ``completes`` belongs to the loop that issued the fetch. A settled
        handle can be read from any loop; a pending one can only be awaited
        on its own loop (see usable_from()).

    Attributes:
        url: Requested resource path or URL
        completes: Future resolving to FetchResponse or raising ResourceFetchError
    """

    __slots__ = ("completes", "url")

    def __init__(self, url: str, completes: asyncio.Future[FetchResponse]) -> None:
        self.url = url
        self.completes = completes

    def __repr__(self) -> str:
        state = "pending"
        if self.cancelled:
            state = "cancelled"
        elif self.completes.done():
            state = "failed" if self.failed else "succeeded"
        return f"FetchRequest({self.url!r}, {state})"

    @property
    def settled(self) -> bool:
        """True once the fetch succeeded, failed or was cancelled."""
        return self.completes.done()

    @property
    def cancelled(self) -> bool:
        """True if the fetch was cancelled before it settled."""
        return self.completes.cancelled()

    @property
    def failed(self) -> bool:
        """True if the fetch settled with an error or was cancelled."""
        if not self.completes.done():
            return False
        return self.completes.cancelled() or self.completes.exception() is not None

    def usable_from(self, loop: asyncio.AbstractEventLoop) -> bool:
        """Check whether awaiting this handle on loop yields its real outcome.

        False for cancelled handles and for handles still pending on another
        (typically closed) event loop.
        """
        if self.completes.cancelled():
            return False
        return self.completes.done() or self.completes.get_loop() is loop


class ResourceFetcher(Protocol):
    """Protocol for shared, reconfigurable resource fetchers.

    Implementations expose the three request settings as plain attributes
    and snapshot them when generate_request() is called, so reconfiguring
    the fetcher afterwards never affects a fetch already issued.

    Example:
        >>> class StaticFetcher:
        ...     url = None
        ...     with_credentials = False
        ...     headers = None
        ...     def generate_request(self) -> FetchRequest:
        ...         future = asyncio.get_running_loop().create_future()
        ...         future.set_result(FetchResponse(self.url, 200, {"en": {"hi": "Hi"}}))
        ...         return FetchRequest(self.url, future)
    """

    url: str | None
    with_credentials: bool
    headers: Mapping[str, str] | None

    def generate_request(self) -> FetchRequest:
        """Issue a fetch for the current url/with_credentials/headers.

        Must be called with a running event loop.

        Raises:
            ValueError: If url is not set
        """
        ...  # pylint: disable=unnecessary-ellipsis


@dataclass(frozen=True, slots=True)
class FetchConfig:
    """Immutable transport configuration for HttpxResourceFetcher.

    Attributes:
        timeout: Seconds before a request is abandoned (default: 10.0)
        follow_redirects: Follow HTTP redirects (default: True)
        auth: Credentials attached only to with_credentials requests
        cookies: Cookies attached only to with_credentials requests
        default_headers: Headers sent with every request; per-request
            headers take precedence

    Example:
        >>> config = FetchConfig(timeout=3.0, auth=("user", "secret"))
        >>> fetcher = HttpxResourceFetcher(config)
    """

    timeout: float = DEFAULT_FETCH_TIMEOUT
    follow_redirects: bool = True
    auth: httpx.Auth | tuple[str, str] | None = None
    cookies: Mapping[str, str] | None = None
    default_headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If timeout is not positive
        """
        if self.timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)


def _decode_json_object(url: str, raw: bytes | str) -> dict[str, Any]:
    """Decode a resource document, requiring a top-level JSON object."""
    try:
        body = json.loads(raw)
    except ValueError as e:
        msg = f"Resource is not valid JSON: {url}"
        raise ResourceDecodeError(msg, url=url) from e
    if not isinstance(body, dict):
        msg = f"Resource must be a JSON object, got {type(body).__name__}: {url}"
        raise ResourceDecodeError(msg, url=url)
    return body


class _ConfigurableFetcher:
    """Shared request settings and request issuing for concrete fetchers."""

    __slots__ = ("headers", "url", "with_credentials")

    def __init__(self) -> None:
        self.url: str | None = None
        self.with_credentials: bool = False
        self.headers: Mapping[str, str] | None = None

    def generate_request(self) -> FetchRequest:
        if not self.url:
            msg = "Fetcher url must be set before generating a request"
            raise ValueError(msg)
        url = self.url
        headers = dict(self.headers) if self.headers else {}
        task = asyncio.get_running_loop().create_task(
            self._fetch(url, self.with_credentials, headers),
            name=f"applocalize-fetch:{url}",
        )
        return FetchRequest(url, task)

    def _fetch(
        self, url: str, with_credentials: bool, headers: dict[str, str]
    ) -> Coroutine[Any, Any, FetchResponse]:
        raise NotImplementedError


class HttpxResourceFetcher(_ConfigurableFetcher):
    """Fetch JSON resources over HTTP(S) with httpx.

    A new AsyncClient is opened per request so that the fetcher holds no
    event-loop-bound state and can be shared across loops.

    Credentials:
        ``with_credentials=True`` attaches FetchConfig.auth and
        FetchConfig.cookies to the request; otherwise neither is sent.

    Example:
        >>> fetcher = HttpxResourceFetcher(FetchConfig(timeout=5.0))
        >>> fetcher.url = "https://cdn.example.com/locales/es.json"
        >>> request = fetcher.generate_request()
        >>> response = await request.completes
    """

    __slots__ = ("config", "transport")

    def __init__(
        self,
        config: FetchConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize fetcher.

        Args:
            config: Transport configuration (default: FetchConfig())
            transport: Custom httpx transport (e.g., httpx.MockTransport in tests)
        """
        super().__init__()
        self.config = config or FetchConfig()
        self.transport = transport

    async def _fetch(
        self, url: str, with_credentials: bool, headers: dict[str, str]
    ) -> FetchResponse:
        config = self.config
        request_headers = {**config.default_headers, **headers}
        try:
            async with httpx.AsyncClient(
                timeout=config.timeout,
                follow_redirects=config.follow_redirects,
                transport=self.transport,
                auth=config.auth if with_credentials else None,
                cookies=config.cookies if with_credentials else None,
            ) as client:
                response = await client.get(url, headers=request_headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            msg = f"HTTP {status} fetching {url}"
            raise ResourceFetchError(msg, url=url, status_code=status) from e
        except httpx.HTTPError as e:
            msg = f"Transport error fetching {url}: {e}"
            raise ResourceFetchError(msg, url=url) from e
        # Neither derives from httpx.HTTPError
        except httpx.InvalidURL as e:
            msg = f"Invalid resource URL {url}: {e}"
            raise ResourceFetchError(msg, url=url) from e
        except httpx.StreamError as e:
            msg = f"Stream error fetching {url}: {e}"
            raise ResourceFetchError(msg, url=url) from e

        logger.debug("Fetched %s (%d bytes)", url, len(response.content))
        return FetchResponse(
            url=url,
            status_code=response.status_code,
            body=_decode_json_object(url, response.content),
            headers=dict(response.headers),
        )


class PathResourceFetcher(_ConfigurableFetcher):
    """Read JSON resources from a local directory.

    ``url`` is interpreted as a path relative to root_dir. with_credentials
    and headers are accepted and ignored.

    Security:
        Absolute paths, ".." sequences and any path resolving outside
        root_dir are rejected with a ResourceFetchError.

    Example:
        >>> fetcher = PathResourceFetcher("locales")
        >>> fetcher.url = "es.json"
        >>> response = await fetcher.generate_request().completes
    """

    __slots__ = ("root_dir",)

    def __init__(self, root_dir: str | Path = ".") -> None:
        super().__init__()
        self.root_dir = Path(root_dir).resolve()

    def resolve(self, url: str) -> Path:
        """Resolve url against root_dir.

        Raises:
            ResourceFetchError: If url escapes root_dir
        """
        if Path(url).is_absolute() or ".." in Path(url).parts:
            msg = f"Path traversal not allowed in resource path: '{url}'"
            raise ResourceFetchError(msg, url=url)
        full_path = (self.root_dir / url).resolve()
        try:
            full_path.relative_to(self.root_dir)
        except ValueError:
            msg = f"Resource path escapes root directory: '{url}'"
            raise ResourceFetchError(msg, url=url) from None
        return full_path

    async def _fetch(
        self, url: str, with_credentials: bool, headers: dict[str, str]
    ) -> FetchResponse:
        path = self.resolve(url)
        try:
            raw = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            msg = f"Cannot read resource {url}: {e}"
            raise ResourceFetchError(msg, url=url) from e
        return FetchResponse(url=url, status_code=200, body=_decode_json_object(url, raw))


@dataclass(frozen=True, slots=True)
class LoadResult:
    """Outcome of one Localizer.load_resources() call.

    Attributes:
        path: Requested resource path or URL
        language: Language the document was filed under (None for full bundles)
        merged: True if merged into existing resources, False if it replaced them
        status: Load status (success, error)
        response: The settled FetchResponse on success
        error: The fetch/decoding error on failure
    """

    path: str
    language: str | None
    merged: bool
    status: LoadStatus
    response: FetchResponse | None = None
    error: ResourceFetchError | None = None

    @property
    def is_success(self) -> bool:
        """Check if resources were fetched and applied."""
        return self.status == LoadStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        """Check if the load failed."""
        return self.status == LoadStatus.ERROR
