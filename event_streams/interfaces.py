from event_streams.records import Operation, Record


class StorageStrategy:
    def transact_write(self, operations: list[Operation]) -> None:
        """Applies all operations or none of them.

        Raises:
            ConditionFailed: when a condition attached to an operation did not hold
                or a `PutEvent` would overwrite an existing record.
            BackendError: on any other failure with no effect on stored data.
            IndeterminateOutcome: when it is unknown whether the write happened.
        """
        raise NotImplementedError()

    def query(self, stream: str) -> list[Record]:
        """Returns all records of a stream sorted by their sort keys."""
        raise NotImplementedError()

    def create_keyspace(self) -> None:
        raise NotImplementedError()
