"""DynamoDB backend for Event Streams."""
from typing import Any

import boto3
from typing_extensions import Self

from event_streams.backend import Backend, not_configured, singleton
from event_streams.interfaces import StorageStrategy
from event_streams_dynamodb.config import DynamoDBConfig
from event_streams_dynamodb.event_store import DynamoDBStorageStrategy


def create_client(config: DynamoDBConfig) -> Any:
    """
    Creates a low-level DynamoDB client from the configuration.

    Credentials are resolved by boto3 as usual. The caller owns the client and
    may share it between backends.
    """
    return boto3.client(
        "dynamodb",
        endpoint_url=config.endpoint_url,
        region_name=config.region_name,
    )


class DynamoDBBackend(Backend):
    """
    DynamoDB integration backend for Event Streams.

    Example usage:
    ```
    config = DynamoDBConfig(table="ponies")
    backend = DynamoDBBackend().configure(config, create_client(config))
    backend.event_store.provision()
    ```
    """

    UNCONFIGURED_MESSAGE = "Configure backend with `.configure(config, client)`"

    def __init__(self) -> None:
        """Initialize the DynamoDB backend."""
        super().__init__()
        self[DynamoDBConfig] = not_configured(self.UNCONFIGURED_MESSAGE)
        self[StorageStrategy] = not_configured(self.UNCONFIGURED_MESSAGE)

    def configure(self, config: DynamoDBConfig, client: Any) -> Self:
        """
        Sets the backend configuration for DynamoDB.

        Args:
            config: Configuration, e.g. the table name.
            client: boto3 DynamoDB client, owned by the caller.

        Returns:
            The configured backend instance (for chaining).
        """
        self[DynamoDBConfig] = config
        self[StorageStrategy] = singleton(
            lambda c: DynamoDBStorageStrategy(c[DynamoDBConfig], client)
        )
        return self
