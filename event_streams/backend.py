from collections.abc import Callable
from functools import wraps
from typing import NoReturn, TypeVar, cast

from event_streams.event import EventRegistry, Serde
from event_streams.event_store import EventStore
from event_streams.exceptions import NoProviderConfigured
from event_streams.interfaces import StorageStrategy
from event_streams.order_key import OrderKeyGenerator, default_generator

T = TypeVar("T")

_Provider = Callable[["_Container"], T]


def singleton(provider: _Provider[T]) -> _Provider[T]:
    result: T | None = None

    @wraps(provider)
    def _wrapper(container: "_Container") -> T:
        nonlocal result
        if result is not None:
            return result
        result = provider(container)
        return result

    return _wrapper


def not_configured(error_message: str) -> _Provider[T]:
    def _raise(container: "_Container") -> NoReturn:
        raise NoProviderConfigured(error_message)

    return _raise


class _Container:
    def __init__(self) -> None:
        self.providers: dict[type, _Provider] = {}

    def __getitem__(self, _type: type[T]) -> T:
        return cast(_Provider[T], self.providers[_type])(self)

    def __setitem__(self, _type: type[T], value: T | _Provider[T]) -> None:
        self.providers[_type] = (
            cast(_Provider[T], lambda _: value)
            if isinstance(value, _type)
            else cast(_Provider[T], value)
        )


class Backend(_Container):
    """Wires an `EventStore` for a storage strategy.

    Providers can be overridden per type, e.g. to use a custom registry:
    ```
    backend[EventRegistry] = my_registry
    event_store = backend.event_store
    ```
    """

    def __init__(self) -> None:
        super().__init__()
        self[EventRegistry] = singleton(lambda _: EventRegistry())
        self[Serde] = lambda c: Serde(registry=c[EventRegistry])
        self[OrderKeyGenerator] = default_generator
        self[StorageStrategy] = not_configured(
            "Use one of the backends: InMemoryBackend or DynamoDBBackend",
        )
        self[EventStore] = lambda c: EventStore(
            storage_strategy=c[StorageStrategy],
            serde=c[Serde],
            order_keys=c[OrderKeyGenerator],
        )

    @property
    def event_store(self) -> EventStore:
        return self[EventStore]
