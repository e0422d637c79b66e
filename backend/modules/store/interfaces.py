"""
Record store module interface.

Repositories depend on IRecordStore, not on a concrete backend. This lets
tests run against the in-memory store while the CLI uses JSON files.
"""

from typing import Any, ContextManager, Protocol, runtime_checkable


@runtime_checkable
class IRecordStore(Protocol):
    """
    Interface for whole-collection key-value persistence.

    There are no partial updates: a save overwrites the entire value
    stored under a key, and the last writer wins.
    """

    def load(self, key: str) -> Any:
        """
        Load the value stored under a key.

        Args:
            key: Record store key (see CollectionKey)

        Returns:
            The stored value, or the key's default (empty list for
            collections, None for singletons) if it is missing or cannot
            be parsed. Never raises for unreadable data.
        """
        ...

    def save(self, key: str, value: Any) -> None:
        """
        Overwrite the value stored under a key.

        Raises:
            StorageFailureError: If the value cannot be written. Nothing
                is stored in that case.
        """
        ...

    def delete(self, key: str) -> None:
        """Remove a key. Removing a missing key is a no-op."""
        ...

    def transaction(self) -> ContextManager["IRecordStore"]:
        """
        Group several saves and deletes into one critical section.

        Writes are staged and committed together when the block exits
        normally; if the block raises, nothing is written.
        """
        ...
