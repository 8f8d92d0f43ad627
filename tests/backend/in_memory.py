import pytest

from event_streams import Backend, InMemoryBackend


@pytest.fixture()
def in_memory_backend() -> Backend:
    return InMemoryBackend()
