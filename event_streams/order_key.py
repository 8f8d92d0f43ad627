from datetime import datetime
from threading import Lock
from typing import TypeAlias

from ulid import ULID

OrderKey: TypeAlias = str


class OrderKeyGenerator:
    """Issues ULIDs which sort in the order they were generated.

    A ULID carries a millisecond timestamp followed by 80 random bits, so keys
    from different processes practically never collide. Keys issued within the
    same millisecond would sort randomly, hence the generator remembers the last
    key and bumps it by one whenever the clock did not move forward.
    """

    def __init__(self) -> None:
        self._last: ULID | None = None
        self._lock = Lock()

    def new(self) -> OrderKey:
        candidate = ULID()
        with self._lock:
            if self._last is not None and int(candidate) <= int(self._last):
                candidate = ULID.from_int(int(self._last) + 1)
            self._last = candidate
        return str(candidate)


def created_at(order_key: OrderKey) -> datetime:
    return ULID.from_str(order_key).datetime


default_generator = OrderKeyGenerator()
