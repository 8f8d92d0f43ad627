"""DynamoDB implementation of the storage strategy."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionClosedError,
    ReadTimeoutError,
)

from event_streams.exceptions import (
    BackendError,
    ConditionFailed,
    IndeterminateOutcome,
)
from event_streams.interfaces import StorageStrategy
from event_streams.records import (
    VERSION_MARKER,
    EventRecord,
    IncrementVersion,
    Operation,
    PutEvent,
    Record,
    VersionRecord,
    event_sort_key,
    is_version_slot,
    order_key_from,
)
from event_streams.versioning import StreamMustNotExist, VersionMustEqual
from event_streams_dynamodb.config import DynamoDBConfig

logger = logging.getLogger(__name__)

PARTITION_KEY = "PK"
SORT_KEY = "SK"
VERSION = "VERSION"
TYPE = "TYPE"
DATA = "DATA"

CONDITION_FAILED = "ConditionalCheckFailed"
TRANSACTION_CANCELED = "TransactionCanceledException"
TABLE_EXISTS = "ResourceInUseException"


@dataclass(repr=False)
class DynamoDBStorageStrategy(StorageStrategy):
    """
    DynamoDB implementation of the storage strategy interface.

    All streams share a single table. A stream is a partition (`PK`), its
    version counter and its events are items sorted by `SK`. The client is
    owned by the caller and is never closed here.
    """

    _config: DynamoDBConfig
    _client: Any

    def transact_write(self, operations: List[Operation]) -> None:
        """
        Writes operations in a single DynamoDB transaction.

        The order key of the inserted event doubles as the client request token,
        so retries made by botocore cannot apply the transaction twice.

        Args:
            operations: Version increments and event inserts to apply together.
        """
        request: Dict[str, Any] = {
            "TransactItems": [self._transact_item(op) for op in operations],
        }
        if (token := _request_token(operations)) is not None:
            request["ClientRequestToken"] = token

        try:
            self._client.transact_write_items(**request)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code")
            if error_code == TRANSACTION_CANCELED:
                reasons = e.response.get("CancellationReasons", [])
                for operation, reason in zip(operations, reasons):
                    if reason.get("Code") == CONDITION_FAILED:
                        raise ConditionFailed(operation) from e
            raise BackendError(f"Transaction rejected by DynamoDB: {e}") from e
        except (ReadTimeoutError, ConnectionClosedError) as e:
            logger.warning("Lost response of transaction %s", token)
            raise IndeterminateOutcome(
                f"Transaction {token} may or may not have been committed"
            ) from e
        except BotoCoreError as e:
            raise BackendError(f"Could not reach DynamoDB: {e}") from e

    def _transact_item(self, operation: Operation) -> Dict[str, Any]:
        if isinstance(operation, PutEvent):
            return {"Put": self._event_put(operation)}
        return {"Update": self._version_update(operation)}

    def _version_update(self, operation: IncrementVersion) -> Dict[str, Any]:
        update: Dict[str, Any] = {
            "TableName": self._config.table,
            "Key": {
                PARTITION_KEY: {"S": operation.stream},
                SORT_KEY: {"S": VERSION_MARKER},
            },
            "UpdateExpression": "ADD #version :increment",
            "ExpressionAttributeNames": {"#version": VERSION},
            "ExpressionAttributeValues": {":increment": {"N": "1"}},
        }

        condition = operation.condition
        if isinstance(condition, StreamMustNotExist):
            update["ConditionExpression"] = f"attribute_not_exists({PARTITION_KEY})"
        elif isinstance(condition, VersionMustEqual):
            update["ConditionExpression"] = "#version = :expected"
            update["ExpressionAttributeValues"][":expected"] = {
                "N": str(condition.version)
            }
        return update

    def _event_put(self, operation: PutEvent) -> Dict[str, Any]:
        record = operation.record
        return {
            "TableName": self._config.table,
            "Item": {
                PARTITION_KEY: {"S": record.stream},
                SORT_KEY: {"S": event_sort_key(record.order_key)},
                TYPE: {"S": record.name},
                DATA: {"S": record.data},
            },
            "ConditionExpression": f"attribute_not_exists({SORT_KEY})",
        }

    def query(self, stream: str) -> List[Record]:
        """
        Fetches the whole partition of a stream, following pagination.

        Args:
            stream: The stream name.

        Returns:
            Version and event records sorted by sort key.
        """
        paginator = self._client.get_paginator("query")
        pages = paginator.paginate(
            TableName=self._config.table,
            KeyConditionExpression=f"{PARTITION_KEY} = :stream",
            ExpressionAttributeValues={":stream": {"S": stream}},
            ConsistentRead=self._config.consistent_read,
        )
        try:
            items = [item for page in pages for item in page.get("Items", [])]
        except (ClientError, BotoCoreError) as e:
            raise BackendError(f"Could not read stream {stream!r}: {e}") from e

        logger.debug("Fetched %d items of stream %r", len(items), stream)
        return [self._item_to_record(item) for item in items]

    def _item_to_record(self, item: Dict[str, Any]) -> Record:
        try:
            stream = item[PARTITION_KEY]["S"]
            sort_key = item[SORT_KEY]["S"]
            if is_version_slot(sort_key):
                return VersionRecord(stream=stream, version=int(item[VERSION]["N"]))
            return EventRecord(
                stream=stream,
                order_key=order_key_from(sort_key),
                name=item[TYPE]["S"],
                data=item[DATA]["S"],
            )
        except (KeyError, ValueError) as e:
            raise BackendError(f"Malformed item in table {self._config.table}") from e

    def create_keyspace(self) -> None:
        """Creates the table, unless it already exists."""
        try:
            self._client.create_table(
                TableName=self._config.table,
                AttributeDefinitions=[
                    {"AttributeName": PARTITION_KEY, "AttributeType": "S"},
                    {"AttributeName": SORT_KEY, "AttributeType": "S"},
                ],
                KeySchema=[
                    {"AttributeName": PARTITION_KEY, "KeyType": "HASH"},
                    {"AttributeName": SORT_KEY, "KeyType": "RANGE"},
                ],
                BillingMode="PAY_PER_REQUEST",
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == TABLE_EXISTS:
                logger.info("Table %s already exists", self._config.table)
                return
            raise BackendError(f"Could not create table: {e}") from e
        except BotoCoreError as e:
            raise BackendError(f"Could not reach DynamoDB: {e}") from e

        logger.info("Created table %s", self._config.table)
        if not self._config.wait_for_table:
            return

        try:
            self._client.get_waiter("table_exists").wait(TableName=self._config.table)
        except BotoCoreError as e:
            raise BackendError(f"Table {self._config.table} did not become active") from e


def _request_token(operations: List[Operation]) -> Optional[str]:
    for operation in operations:
        if isinstance(operation, PutEvent):
            return operation.record.order_key
    return None
