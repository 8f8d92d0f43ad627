"""DynamoDB backend for Event Streams.

Keeps every stream as a partition of a single DynamoDB table and relies on
transactional writes for optimistic concurrency control.
"""
__all__ = [
    "DynamoDBBackend",
    "DynamoDBConfig",
    "DynamoDBStorageStrategy",
    "create_client",
]

from event_streams_dynamodb.backend import DynamoDBBackend, create_client
from event_streams_dynamodb.config import DynamoDBConfig
from event_streams_dynamodb.event_store import DynamoDBStorageStrategy
