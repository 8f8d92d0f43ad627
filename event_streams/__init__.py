__all__ = [
    "ANY",
    "NO_STREAM",
    "Backend",
    "Event",
    "EventRegistry",
    "EventStore",
    "EventStream",
    "ExpectedVersion",
    "InMemoryBackend",
    "OrderKeyGenerator",
    "StorageStrategy",
    "WrappedEvent",
    "exceptions",
]

from event_streams import exceptions
from event_streams.backend import Backend
from event_streams.event import Event, EventRegistry, WrappedEvent
from event_streams.event_store import EventStore, EventStream
from event_streams.in_memory import InMemoryBackend
from event_streams.interfaces import StorageStrategy
from event_streams.order_key import OrderKeyGenerator
from event_streams.versioning import ANY, NO_STREAM, ExpectedVersion
