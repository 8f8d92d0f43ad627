from dataclasses import dataclass
from typing import Any


class EventStoreException(Exception):
    pass


@dataclass
class ConcurrentStreamWriteError(EventStoreException):
    stream: str
    expected_version: Any

    def __str__(self) -> str:
        return (
            f"Stream {self.stream!r} is not at expected version "
            f"{self.expected_version!r}"
        )


class BackendError(EventStoreException):
    pass


class EventDecodingError(BackendError):
    pass


class DuplicateOrderKey(BackendError):
    pass


class UnknownEventType(EventStoreException):
    """Event type is neither an `Event` subclass nor added to the registry."""


class IndeterminateOutcome(EventStoreException):
    """Write was sent but its result was lost. Re-read the stream to resolve."""


class IllegalStreamName(ValueError):
    pass


class NoProviderConfigured(EventStoreException):
    pass


class ClassModuleUnavailable(Exception):
    pass


class DuplicatedEvent(Exception):
    pass


@dataclass
class ConditionFailed(EventStoreException):
    """Raised by storage strategies when a guarded operation was rejected.

    `EventStore` translates it into `ConcurrentStreamWriteError`.
    """

    operation: Any
