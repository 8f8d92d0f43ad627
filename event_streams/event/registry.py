import inspect
from collections.abc import Iterator
from typing import TypeAlias

from pydantic import BaseModel

from event_streams.event.dto import Event
from event_streams.exceptions import ClassModuleUnavailable, DuplicatedEvent

TEvent: TypeAlias = BaseModel


def event_name(cls: type) -> str:
    if name := getattr(cls, "__event_name__", ""):
        return name

    event_module = inspect.getmodule(cls)
    if event_module is None:  # pragma: no cover
        raise ClassModuleUnavailable
    return f"{event_module.__name__}.{cls.__qualname__}"


def _defined_events(base: type[Event] = Event) -> Iterator[type[Event]]:
    for subclass in base.__subclasses__():
        yield subclass
        yield from _defined_events(subclass)


class EventRegistry:
    """Keeps mappings between event types and their names.

    Subclasses of `Event` are picked up automatically. Other pydantic models
    may be stored too, once added explicitly:
    ```
    registry = EventRegistry()

    @registry.add
    class PonyFell(BaseModel):
        __event_name__: ClassVar[str] = "PonyFell"
    ```
    """

    def __init__(self) -> None:
        self._types_to_names: dict[type[TEvent], str] = {}
        self._names_to_types: dict[str, type[TEvent]] = {}
        self._register_defined_events()

    def _register_defined_events(self) -> None:
        for event_type in _defined_events():
            if event_type not in self._types_to_names:
                self.add(event_type)

    def add(self, event: type[TEvent]) -> type[TEvent]:
        """Add event type to the registry."""
        if event in self._types_to_names:
            raise DuplicatedEvent(f"Duplicated Event detected! {event}")

        name = event_name(event)
        if name in self._names_to_types:
            raise DuplicatedEvent(f"Duplicated Event name detected! {name}")

        self._types_to_names[event] = name
        self._names_to_types[name] = event
        return event  # for use as a decorator

    def type_for_name(self, name: str) -> type[TEvent]:
        if name not in self._names_to_types:
            self._register_defined_events()
        return self._names_to_types[name]

    def name_for_type(self, event: type[TEvent]) -> str:
        if event not in self._types_to_names:
            self._register_defined_events()
        return self._types_to_names[event]
