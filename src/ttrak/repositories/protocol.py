"""Repository protocol for the persisted task collection."""

from typing import Protocol

from ..models import DataStore


class TaskStoreProtocol(Protocol):
    """Interface for task collection storage.

    The collection is always loaded and saved whole: every mutation is
    followed by a full save before it counts as complete.
    """

    def load(self) -> DataStore:
        """Load the task collection.

        Returns:
            The stored collection, or an empty one if nothing is stored yet.
        """
        ...

    def save(self, store: DataStore) -> None:
        """Persist the full task collection.

        Raises:
            OSError: If the collection could not be written. A failed save
                must never be reported as success.
        """
        ...
