"""Configuration for the DynamoDB backend."""
from pydantic import BaseModel, ConfigDict


class DynamoDBConfig(BaseModel):
    """
    Configuration for DynamoDBBackend event store integration.

    Attributes:
        table (str): Name of the DynamoDB table keeping all streams.
        endpoint_url (str | None): Optional endpoint URL for DynamoDB, useful for
            local development or testing. Used only by `create_client`.
        region_name (str | None): AWS region name for DynamoDB. Used only by
            `create_client`.
        consistent_read (bool): Whether reading a stream uses strongly
            consistent reads, so it sees every write committed before it.
        wait_for_table (bool): Whether provisioning waits until the table
            becomes active.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    table: str = "event_streams"

    endpoint_url: str | None = None
    region_name: str | None = None

    consistent_read: bool = True
    wait_for_table: bool = True
