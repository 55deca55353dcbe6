"""Exception hierarchy for applocalize.

Lookup misses are never exceptions: they resolve to None, an empty string,
or the echoed key. Only two families of failure exist:

- MessageFormatError: the pattern is malformed or an argument does not fit
  it. Raised by the formatter and propagated to the localize() caller.
- ResourceFetchError: a resource file could not be retrieved or decoded.
  Captured by Localizer.load_resources() and reported through a
  resources-error event; never raised out of load_resources().

Python 3.13+. Zero external dependencies.
"""

__all__ = [
    "LocalizeError",
    "MessageFormatError",
    "ResourceDecodeError",
    "ResourceFetchError",
]


class LocalizeError(Exception):
    """Base exception for all applocalize errors."""


class MessageFormatError(LocalizeError):
    """Malformed message pattern or incompatible format argument.

    Attributes:
        pattern: The pattern being compiled or formatted (if known)
        position: Character offset of a syntax error (None for argument errors)
    """

    def __init__(
        self,
        message: str,
        *,
        pattern: str | None = None,
        position: int | None = None,
    ) -> None:
        """Initialize MessageFormatError.

        Args:
            message: Human-readable description
            pattern: Offending pattern
            position: Offset into pattern where parsing failed
        """
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)
        self.pattern = pattern
        self.position = position


class ResourceFetchError(LocalizeError):
    """A resource file could not be retrieved.

    Attributes:
        url: Requested resource path or URL
        status_code: HTTP status code, or None for network/file errors
    """

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        """Initialize ResourceFetchError.

        Args:
            message: Human-readable description
            url: Requested resource path or URL
            status_code: HTTP status code if the server answered
        """
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ResourceDecodeError(ResourceFetchError):
    """A resource was retrieved but is not a JSON object."""
