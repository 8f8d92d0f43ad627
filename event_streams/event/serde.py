from collections.abc import Iterable, Iterator

from pydantic import BaseModel, ValidationError

from event_streams.event.dto import RawEvent, WrappedEvent
from event_streams.event.registry import EventRegistry
from event_streams.exceptions import EventDecodingError, UnknownEventType
from event_streams.records import EventRecord


class Serde:
    registry: EventRegistry

    def __init__(self, registry: EventRegistry) -> None:
        self.registry = registry

    def serialize(self, event: BaseModel) -> RawEvent:
        try:
            name = self.registry.name_for_type(type(event))
        except KeyError as e:
            raise UnknownEventType(
                f"{type(event).__qualname__} is not a registered event type"
            ) from e

        return RawEvent(name=name, data=event.model_dump_json())

    def deserialize(self, record: EventRecord) -> WrappedEvent:
        try:
            event_type = self.registry.type_for_name(record.name)
        except KeyError as e:
            raise EventDecodingError(
                f"Unknown event type {record.name!r} in stream {record.stream!r}"
            ) from e

        try:
            event = event_type.model_validate_json(record.data)
        except ValidationError as e:
            raise EventDecodingError(
                f"Malformed {record.name!r} payload in stream {record.stream!r} "
                f"at {record.order_key}"
            ) from e

        return WrappedEvent(
            event=event,
            name=record.name,
            order_key=record.order_key,
        )

    def deserialize_lazily(
        self, records: Iterable[EventRecord]
    ) -> Iterator[WrappedEvent]:
        for record in records:
            yield self.deserialize(record)
