from collections.abc import Sequence
from dataclasses import dataclass, field
from uuid import uuid4

from pydantic import BaseModel
from typing_extensions import Self

from event_streams import ANY, Backend, EventStore, EventStream, ExpectedVersion


def a_stream_name() -> str:
    return f"stream-{uuid4().hex}"


@dataclass
class Stream:
    store: EventStore
    name: str = field(default_factory=a_stream_name)

    def receives(
        self,
        *events: BaseModel,
        expected_version: ExpectedVersion | int | None = ANY,
    ) -> Self:
        for event in events:
            self.store.write(self.name, event, expected_version=expected_version)
        return self

    def read(self) -> EventStream:
        return self.store.read(self.name)

    @property
    def events(self) -> list[BaseModel]:
        return [wrapped.event for wrapped in self.read().events]

    @property
    def version(self) -> int:
        return self.read().version

    def loads(self, events: Sequence[BaseModel]) -> None:
        assert self.events == list(events)

    def is_at_version(self, version: int) -> None:
        assert self.version == version, f"{self.version} != {version}"

    def is_empty(self) -> None:
        stream = self.read()
        assert stream.version == 0
        assert list(stream.events) == []


@dataclass
class Step:
    backend: Backend

    @property
    def store(self) -> EventStore:
        return self.backend.event_store

    def stream(self, name: str | None = None) -> Stream:
        return Stream(self.store) if not name else Stream(self.store, name)


class Given(Step):
    def events(self, *events: BaseModel, on: str) -> Self:
        self.stream(on).receives(*events)
        return self

    def event(self, event: BaseModel, on: str) -> Self:
        self.stream(on).receives(event)
        return self


class When(Step):
    def writes(
        self,
        *events: BaseModel,
        to: str,
        expected_version: ExpectedVersion | int | None = ANY,
    ) -> Self:
        self.stream(to).receives(*events, expected_version=expected_version)
        return self


class Then(Step):
    pass
