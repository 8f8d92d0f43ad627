import logging
from collections.abc import Iterator
from dataclasses import dataclass

from pydantic import BaseModel

from event_streams.event import Serde, WrappedEvent
from event_streams.exceptions import (
    ConcurrentStreamWriteError,
    ConditionFailed,
    DuplicateOrderKey,
    IllegalStreamName,
)
from event_streams.interfaces import StorageStrategy
from event_streams.order_key import OrderKeyGenerator, default_generator
from event_streams.records import (
    EventRecord,
    IncrementVersion,
    PutEvent,
    VersionRecord,
)
from event_streams.versioning import ANY, ExpectedVersion, expected

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventStream:
    """Point-in-time view of a stream.

    `events` decodes stored events one by one while being iterated and can be
    consumed only once.
    """

    name: str
    version: int
    events: Iterator[WrappedEvent]


class EventStore:
    """API for working with event streams."""

    def __init__(
        self,
        storage_strategy: StorageStrategy,
        serde: Serde,
        order_keys: OrderKeyGenerator = default_generator,
    ) -> None:
        self._storage_strategy = storage_strategy
        self._serde = serde
        self._order_keys = order_keys

    def write(
        self,
        stream: str,
        event: BaseModel,
        expected_version: ExpectedVersion | int | None = ANY,
    ) -> None:
        """Appends an event to a stream, creating the stream if needed.

        Implements optimistic locking to ensure stream wasn't modified since last
        read. To use it, pass the version returned by `read`.

        Examples:
            >>> event_store.write("pony-1", PonyJumped(name="SparkleHooves", distance=5))
            None
            >>> event_store.write("pony-2", PonyJumped(...), expected_version=NO_STREAM)
            None
            >>> event_store.write("pony-1", PonyJumped(...), expected_version=1)
            None

        Args:
            stream: Name of the stream to append to.
            event: The event to append.
            expected_version: `ANY` to skip the check, `NO_STREAM` (or None)
                when the stream must not exist yet, or the exact current version.

        Raises:
            ConcurrentStreamWriteError: The stream is not at the expected version.
            BackendError: The storage failed. Nothing was written.
            IndeterminateOutcome: The write may or may not have happened.
            UnknownEventType: The event type is not registered.
        """
        _validate_stream_name(stream)
        expectation = expected(expected_version)
        raw = self._serde.serialize(event)
        record = EventRecord(
            stream=stream,
            order_key=self._order_keys.new(),
            name=raw.name,
            data=raw.data,
        )

        try:
            self._storage_strategy.transact_write(
                [
                    IncrementVersion(stream, expectation.condition),
                    PutEvent(record),
                ]
            )
        except ConditionFailed as e:
            if isinstance(e.operation, PutEvent):
                raise DuplicateOrderKey(
                    f"Event {record.order_key} already exists in stream {stream!r}"
                ) from e
            logger.warning(
                "Rejected write to stream %r expected at version %r",
                stream,
                expectation,
            )
            raise ConcurrentStreamWriteError(stream, expectation) from e

        logger.debug("Appended %s %s to stream %r", raw.name, record.order_key, stream)

    def read(self, stream: str) -> EventStream:
        """Loads a stream.

        Examples:
            >>> event_store.read("not_existing_stream")
            EventStream(name="not_existing_stream", version=0, events=<generator>)
            >>> list(event_store.read("pony-1").events)
            [WrappedEvent(event=PonyJumped(...), name="PonyJumped", order_key=...)]

        Args:
            stream: Name of the stream to load.

        Returns:
            The stream's version and its events in the order they were written.
            Stream which was never written to has version 0 and no events.
        """
        _validate_stream_name(stream)
        version = 0
        events: list[EventRecord] = []
        for record in self._storage_strategy.query(stream):
            if isinstance(record, VersionRecord):
                version = record.version
            else:
                events.append(record)

        logger.debug(
            "Read stream %r at version %d with %d events", stream, version, len(events)
        )
        return EventStream(
            name=stream,
            version=version,
            events=self._serde.deserialize_lazily(events),
        )

    def provision(self) -> None:
        """Creates the storage for streams, e.g. a DynamoDB table."""
        self._storage_strategy.create_keyspace()


def _validate_stream_name(stream: str) -> None:
    if not isinstance(stream, str) or not stream:
        raise IllegalStreamName(f"Stream name must be a non-empty string: {stream!r}")
