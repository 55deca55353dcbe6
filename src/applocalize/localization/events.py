"""Load notifications emitted by Localizer.

Listeners are plain callables registered per EventType. An event whose
``bubbles`` flag is set is re-dispatched to the parent Localizer after the
local listeners ran, and so on up the chain.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from applocalize.enums import EventType

if TYPE_CHECKING:
    from applocalize.localization.fetching import FetchResponse

__all__ = ["EventListener", "ListenerRegistry", "LocalizeEvent"]


@dataclass(frozen=True, slots=True)
class LocalizeEvent:
    """A resources-loaded or resources-error notification.

    Attributes:
        type: Event type
        detail: The settled FetchResponse for resources-loaded; always None
            for resources-error
        bubbles: Propagate to parent Localizers after local listeners
    """

    type: EventType
    detail: FetchResponse | None = None
    bubbles: bool = False


type EventListener = Callable[[LocalizeEvent], None]


class ListenerRegistry:
    """Ordered listener lists keyed by EventType.

    Listeners run in registration order. An exception raised by a listener
    propagates to the dispatcher's caller and stops later listeners.
    """

    __slots__ = ("_listeners",)

    def __init__(self) -> None:
        self._listeners: dict[EventType, list[EventListener]] = {}

    def add(self, event_type: EventType, listener: EventListener) -> None:
        self._listeners.setdefault(EventType(event_type), []).append(listener)

    def remove(self, event_type: EventType, listener: EventListener) -> bool:
        """Remove the first registration of listener.

        Returns:
            True if the listener was registered
        """
        listeners = self._listeners.get(EventType(event_type), [])
        try:
            listeners.remove(listener)
        except ValueError:
            return False
        return True

    def dispatch(self, event: LocalizeEvent) -> None:
        # Copy: listeners may unregister themselves while running
        for listener in tuple(self._listeners.get(event.type, ())):
            listener(event)

    def count(self, event_type: EventType) -> int:
        return len(self._listeners.get(EventType(event_type), ()))
