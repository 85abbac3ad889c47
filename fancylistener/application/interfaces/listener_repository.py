"""Abstract repository interface (port) for ListenerRecord persistence."""

from abc import ABC, abstractmethod

from fancylistener.domain.entities import ListenerRecord


class ListenerRepository(ABC):
    """Port for listener record storage — implemented in the infrastructure layer.

    Methods are synchronous on purpose: callers running on the event loop
    complete each mutation, including its write to the backing store, without
    yielding, so two mutations are never in flight at once.
    """

    @abstractmethod
    def load(self) -> int:
        """Replace the in-memory sequence with the persisted one. Returns the record count."""
        ...

    @abstractmethod
    def append(self, record: ListenerRecord) -> ListenerRecord:
        """Add a record at the end of the sequence and persist."""
        ...

    @abstractmethod
    def list(self) -> list[ListenerRecord]:
        """Return all records in arrival order."""
        ...

    @abstractmethod
    def delete_by_id(self, record_id: float) -> bool:
        """Delete a record. Returns True if deleted, False if not found."""
        ...

    @abstractmethod
    def clear(self) -> int:
        """Delete every record and persist. Returns the number removed."""
        ...

    @abstractmethod
    def persist(self) -> bool:
        """Write the whole sequence to the backing store. Returns False on failure."""
        ...
