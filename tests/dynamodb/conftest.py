from collections.abc import Iterator
from typing import Any

import boto3
import pytest
from botocore.stub import Stubber

from event_streams import EventStore, OrderKeyGenerator
from event_streams_dynamodb import DynamoDBBackend, DynamoDBConfig
from tests.order_keys import ORDER_KEYS, FixedOrderKeys


@pytest.fixture()
def config() -> DynamoDBConfig:
    return DynamoDBConfig(table="ponies", wait_for_table=False)


@pytest.fixture()
def client() -> Any:
    return boto3.client(
        "dynamodb",
        region_name="us-east-1",
        aws_access_key_id="test",
        aws_secret_access_key="test",
    )


@pytest.fixture()
def stubber(client: Any) -> Iterator[Stubber]:
    with Stubber(client) as stubber:
        yield stubber
        stubber.assert_no_pending_responses()


@pytest.fixture()
def stubbed_store(config: DynamoDBConfig, client: Any, stubber: Stubber) -> EventStore:
    backend = DynamoDBBackend().configure(config, client)
    backend[OrderKeyGenerator] = FixedOrderKeys(ORDER_KEYS)
    return backend.event_store
