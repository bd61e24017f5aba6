"""
Connection event manager.

Listeners are plain objects exposing a method named after each event they
listen to. Subscribers additionally declare their events through
``get_subscribed_events()`` so they can be attached in one call.
"""

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


class Events:
    """Event names dispatched by connections."""

    POST_CONNECT = "post_connect"


@dataclass
class EventArgs:
    """Arguments passed to every listener of an event."""

    connection: Any


class EventSubscriber(ABC):
    """An object that knows which events it listens to."""

    @abstractmethod
    def get_subscribed_events(self) -> list[str]:
        pass


class EventManager:
    """
    Dispatches connection events to registered listeners.

    Listeners are called in registration order. A listener registered twice
    for the same event is only called once.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Any]] = defaultdict(list)

    def dispatch_event(self, event_name: str, event_args: EventArgs | None = None) -> None:
        """
        Dispatch an event to all listeners registered for it.

        Args:
            event_name: Name of the event, also the listener method name
            event_args: Arguments handed to each listener
        """
        listeners = self._listeners.get(event_name, [])
        if not listeners:
            return

        logger.debug(f"Dispatching {event_name} to {len(listeners)} listener(s)")
        for listener in list(listeners):
            getattr(listener, event_name)(event_args)

    def get_listeners(self, event_name: str) -> list[Any]:
        return list(self._listeners.get(event_name, []))

    def has_listeners(self, event_name: str) -> bool:
        return bool(self._listeners.get(event_name))

    def add_event_listener(self, events: str | Iterable[str], listener: Any) -> None:
        if isinstance(events, str):
            events = [events]
        for event_name in events:
            if not callable(getattr(listener, event_name, None)):
                raise TypeError(
                    f"{type(listener).__name__} has no '{event_name}' method"
                )
            if listener not in self._listeners[event_name]:
                self._listeners[event_name].append(listener)

    def remove_event_listener(self, events: str | Iterable[str], listener: Any) -> None:
        if isinstance(events, str):
            events = [events]
        for event_name in events:
            if listener in self._listeners.get(event_name, []):
                self._listeners[event_name].remove(listener)

    def add_event_subscriber(self, subscriber: EventSubscriber) -> None:
        self.add_event_listener(subscriber.get_subscribed_events(), subscriber)
        logger.debug(f"Added event subscriber {type(subscriber).__name__}")

    def remove_event_subscriber(self, subscriber: EventSubscriber) -> None:
        self.remove_event_listener(subscriber.get_subscribed_events(), subscriber)
