from typing import Any
from unittest.mock import Mock

import pytest
from botocore.exceptions import (
    ConnectionClosedError,
    EndpointConnectionError,
    ReadTimeoutError,
)
from botocore.stub import Stubber

from event_streams import ANY, NO_STREAM, EventStore, ExpectedVersion
from event_streams.event import EventRegistry, Serde
from event_streams.exceptions import (
    BackendError,
    ConcurrentStreamWriteError,
    DuplicateOrderKey,
    IndeterminateOutcome,
)
from event_streams_dynamodb import DynamoDBConfig, DynamoDBStorageStrategy
from tests.events import PonyJumped
from tests.order_keys import ORDER_KEYS

EVENT = PonyJumped(name="SparkleHooves", distance=5)


def version_update(**condition: Any) -> dict[str, Any]:
    update: dict[str, Any] = {
        "TableName": "ponies",
        "Key": {"PK": {"S": "pony-1"}, "SK": {"S": "_METADATA"}},
        "UpdateExpression": "ADD #version :increment",
        "ExpressionAttributeNames": {"#version": "VERSION"},
        "ExpressionAttributeValues": {":increment": {"N": "1"}},
    }
    if "expression" in condition:
        update["ConditionExpression"] = condition["expression"]
    update["ExpressionAttributeValues"].update(condition.get("values", {}))
    return {"Update": update}


def event_put() -> dict[str, Any]:
    return {
        "Put": {
            "TableName": "ponies",
            "Item": {
                "PK": {"S": "pony-1"},
                "SK": {"S": f"EVENT-{ORDER_KEYS[0]}"},
                "TYPE": {"S": "tests.events.PonyJumped"},
                "DATA": {"S": '{"name":"SparkleHooves","distance":5}'},
            },
            "ConditionExpression": "attribute_not_exists(SK)",
        }
    }


def expected_request(update: dict[str, Any]) -> dict[str, Any]:
    return {
        "TransactItems": [update, event_put()],
        "ClientRequestToken": ORDER_KEYS[0],
    }


@pytest.mark.parametrize(
    "expected_version, update",
    [
        (ANY, version_update()),
        (
            NO_STREAM,
            version_update(expression="attribute_not_exists(PK)"),
        ),
        (
            0,
            version_update(expression="attribute_not_exists(PK)"),
        ),
        (
            2,
            version_update(
                expression="#version = :expected",
                values={":expected": {"N": "2"}},
            ),
        ),
    ],
)
def test_writes_version_and_event_in_one_transaction(
    stubbed_store: EventStore,
    stubber: Stubber,
    expected_version: ExpectedVersion | int,
    update: dict[str, Any],
) -> None:
    stubber.add_response("transact_write_items", {}, expected_request(update))

    stubbed_store.write("pony-1", EVENT, expected_version=expected_version)


def cancelled(stubber: Stubber, *codes: str) -> None:
    stubber.add_client_error(
        "transact_write_items",
        service_error_code="TransactionCanceledException",
        service_message="Transaction cancelled",
        modeled_fields={
            "CancellationReasons": [{"Code": code} for code in codes],
        },
    )


def test_failed_version_condition_is_concurrency_error(
    stubbed_store: EventStore, stubber: Stubber
) -> None:
    cancelled(stubber, "ConditionalCheckFailed", "None")

    with pytest.raises(ConcurrentStreamWriteError):
        stubbed_store.write("pony-1", EVENT, expected_version=NO_STREAM)


def test_existing_event_key_is_duplicate_order_key(
    stubbed_store: EventStore, stubber: Stubber
) -> None:
    cancelled(stubber, "None", "ConditionalCheckFailed")

    with pytest.raises(DuplicateOrderKey):
        stubbed_store.write("pony-1", EVENT)


def test_conflicting_transaction_is_backend_error(
    stubbed_store: EventStore, stubber: Stubber
) -> None:
    cancelled(stubber, "TransactionConflict", "None")

    with pytest.raises(BackendError):
        stubbed_store.write("pony-1", EVENT)


def test_throttling_is_backend_error(
    stubbed_store: EventStore, stubber: Stubber
) -> None:
    stubber.add_client_error(
        "transact_write_items",
        service_error_code="ThrottlingException",
        http_status_code=400,
    )

    with pytest.raises(BackendError):
        stubbed_store.write("pony-1", EVENT)


def mocked_store(error: Exception) -> EventStore:
    client = Mock()
    client.transact_write_items.side_effect = error
    strategy = DynamoDBStorageStrategy(DynamoDBConfig(table="ponies"), client)
    return EventStore(strategy, Serde(EventRegistry()))


@pytest.mark.parametrize("error_type", [ReadTimeoutError, ConnectionClosedError])
def test_lost_response_is_indeterminate(error_type: type[Exception]) -> None:
    store = mocked_store(error_type(endpoint_url="http://localhost:8000"))

    with pytest.raises(IndeterminateOutcome):
        store.write("pony-1", EVENT)


def test_unreachable_endpoint_is_backend_error() -> None:
    store = mocked_store(EndpointConnectionError(endpoint_url="http://localhost:8000"))

    with pytest.raises(BackendError):
        store.write("pony-1", EVENT)
