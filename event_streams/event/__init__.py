__all__ = [
    "Event",
    "EventRegistry",
    "RawEvent",
    "Serde",
    "WrappedEvent",
]

from event_streams.event.dto import Event, RawEvent, WrappedEvent
from event_streams.event.registry import EventRegistry
from event_streams.event.serde import Serde
