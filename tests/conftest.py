from typing import cast

import pytest
from _pytest.fixtures import SubRequest

from event_streams import Backend, EventStore
from tests import bdd
from tests.backend.dynamodb import dynamodb_backend
from tests.backend.in_memory import in_memory_backend

__all__ = ["dynamodb_backend", "in_memory_backend"]


@pytest.fixture(params=["in_memory_backend", "dynamodb_backend"])
def backend(request: SubRequest) -> Backend:
    return cast(Backend, request.getfixturevalue(request.param))


@pytest.fixture()
def event_store(backend: Backend) -> EventStore:
    return backend.event_store


@pytest.fixture()
def given(backend: Backend) -> bdd.Given:
    return bdd.Given(backend)


@pytest.fixture()
def when(backend: Backend) -> bdd.When:
    return bdd.When(backend)


@pytest.fixture()
def then(backend: Backend) -> bdd.Then:
    return bdd.Then(backend)
