import dataclasses
from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel

from event_streams.order_key import OrderKey, created_at


class Event(BaseModel, extra="forbid"):
    """Base class for all events.

    Example usage:
    ```
    class PonyJumped(Event):
        name: str
        distance: int
    ```

    Events are stored under `__event_name__` when a subclass defines it,
    otherwise under `"<module>.<qualified class name>"`.
    """


TEvent = TypeVar("TEvent", bound=BaseModel)


@dataclasses.dataclass(frozen=True)
class RawEvent:
    name: str
    data: str


@dataclasses.dataclass(frozen=True)
class WrappedEvent(Generic[TEvent]):
    """Event read back from a stream together with its storage metadata."""

    event: TEvent
    name: str
    order_key: OrderKey

    @property
    def created_at(self) -> datetime:
        return created_at(self.order_key)
