"""Enumerations for applocalize type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class EventType(StrEnum):
    """Notification emitted by a Localizer after a resource load settles.

    StrEnum provides automatic string conversion: str(EventType.RESOURCES_LOADED) == "resources-loaded"
    """

    RESOURCES_LOADED = "resources-loaded"
    """Fetched resources were merged into (or replaced) the resource store."""

    RESOURCES_ERROR = "resources-error"
    """The fetch failed; the event carries no detail."""


class LoadStatus(StrEnum):
    """Outcome of a single load_resources() call.

    StrEnum provides automatic string conversion: str(LoadStatus.SUCCESS) == "success"
    """

    SUCCESS = "success"
    """Resources fetched and applied."""

    ERROR = "error"
    """Transport or decoding failure; resource store untouched."""


__all__ = [
    "EventType",
    "LoadStatus",
]
