from dataclasses import dataclass, field
from threading import Lock

from typing_extensions import Self

from event_streams.backend import Backend
from event_streams.exceptions import ConditionFailed
from event_streams.interfaces import StorageStrategy
from event_streams.records import (
    VERSION_MARKER,
    IncrementVersion,
    Operation,
    PutEvent,
    Record,
    VersionRecord,
)
from event_streams.versioning import StreamMustNotExist, VersionMustEqual


@dataclass
class Storage:
    _partitions: dict[str, dict[str, Record]] = field(default_factory=dict, init=False)
    lock: Lock = field(default_factory=Lock, init=False)

    def partition(self, stream: str) -> dict[str, Record]:
        return self._partitions.get(stream, {})

    def put(self, record: Record) -> None:
        self._partitions.setdefault(record.stream, {})[record.sort_key] = record


class InMemoryStorageStrategy(StorageStrategy):
    """Keeps streams in process memory. Meant for tests and prototyping."""

    def __init__(self, storage: Storage | None = None) -> None:
        self._storage = storage or Storage()

    def transact_write(self, operations: list[Operation]) -> None:
        with self._storage.lock:
            for operation in operations:
                self._check(operation)
            for operation in operations:
                self._apply(operation)

    def _check(self, operation: Operation) -> None:
        if isinstance(operation, PutEvent):
            record = operation.record
            if record.sort_key in self._storage.partition(record.stream):
                raise ConditionFailed(operation)
            return

        current = self._storage.partition(operation.stream).get(VERSION_MARKER)
        condition = operation.condition
        if isinstance(condition, StreamMustNotExist) and current is not None:
            raise ConditionFailed(operation)
        if isinstance(condition, VersionMustEqual) and (
            not isinstance(current, VersionRecord)
            or current.version != condition.version
        ):
            raise ConditionFailed(operation)

    def _apply(self, operation: Operation) -> None:
        if isinstance(operation, PutEvent):
            self._storage.put(operation.record)
            return

        current = self._storage.partition(operation.stream).get(VERSION_MARKER)
        version = current.version if isinstance(current, VersionRecord) else 0
        self._storage.put(VersionRecord(stream=operation.stream, version=version + 1))

    def query(self, stream: str) -> list[Record]:
        with self._storage.lock:
            partition = dict(self._storage.partition(stream))
        return [partition[sort_key] for sort_key in sorted(partition)]

    def create_keyspace(self) -> None:
        pass


class InMemoryBackend(Backend):
    """Backend keeping everything in memory, e.g. for tests:
    ```
    event_store = InMemoryBackend().event_store
    ```
    """

    def __init__(self) -> None:
        super().__init__()
        self[Storage] = Storage()
        self[StorageStrategy] = lambda c: InMemoryStorageStrategy(c[Storage])

    def configure(self, storage: Storage) -> Self:
        """Makes the backend use the given storage, e.g. shared with another backend."""
        self[Storage] = storage
        return self
