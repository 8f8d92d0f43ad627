"""Records kept by storage strategies and operations writing them.

Every stream lives in its own partition. The partition holds one version
record under the reserved `VERSION_MARKER` sort key and one event record per
appended event, sorted by `EVENT_PREFIX + order_key`. The version marker sorts
after every event key.
"""
from dataclasses import dataclass
from typing import TypeAlias

from event_streams.order_key import OrderKey
from event_streams.versioning import Condition, NoCondition

VERSION_MARKER = "_METADATA"
EVENT_PREFIX = "EVENT-"


@dataclass(frozen=True)
class VersionRecord:
    stream: str
    version: int

    @property
    def sort_key(self) -> str:
        return VERSION_MARKER


@dataclass(frozen=True)
class EventRecord:
    stream: str
    order_key: OrderKey
    name: str
    data: str

    @property
    def sort_key(self) -> str:
        return event_sort_key(self.order_key)


Record: TypeAlias = VersionRecord | EventRecord


@dataclass(frozen=True)
class IncrementVersion:
    stream: str
    condition: Condition = NoCondition()


@dataclass(frozen=True)
class PutEvent:
    record: EventRecord


Operation: TypeAlias = IncrementVersion | PutEvent


def event_sort_key(order_key: OrderKey) -> str:
    return f"{EVENT_PREFIX}{order_key}"


def is_version_slot(sort_key: str) -> bool:
    return sort_key == VERSION_MARKER


def order_key_from(sort_key: str) -> OrderKey:
    if not sort_key.startswith(EVENT_PREFIX):
        raise ValueError(f"Not an event sort key: {sort_key!r}")
    return sort_key[len(EVENT_PREFIX) :]
