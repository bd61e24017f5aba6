"""Connection event dispatching and the event subscriber registry."""

from .event_manager import EventArgs, EventManager, Events, EventSubscriber
from .subscribers import create_subscriber, register_subscriber

__all__ = [
    "EventArgs",
    "EventManager",
    "EventSubscriber",
    "Events",
    "create_subscriber",
    "register_subscriber",
]
