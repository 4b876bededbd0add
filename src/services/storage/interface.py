"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the ledger manager ignorant of file formats and paths
2. Use in-memory storage for testing
3. Swap the JSON file for another backend later

The snapshot interface is whole-ledger: every save writes all accounts,
every load reads all accounts. There are no partial updates.
"""

from abc import ABC, abstractmethod
from typing import Iterable

from src.models.account import Account
from src.models.audit import AuditEvent


class SnapshotStorageInterface(ABC):
    """
    Abstract interface for ledger snapshot storage.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Whether a snapshot has been written."""
        pass

    @abstractmethod
    def save(self, accounts: Iterable[Account]) -> None:
        """
        Replace the stored snapshot with the given accounts.

        Args:
            accounts: Accounts in creation order

        Raises:
            StorageError: If the snapshot could not be written
        """
        pass

    @abstractmethod
    def load(self) -> list[Account]:
        """
        Read every account from the stored snapshot.

        Returns:
            Accounts in the order they were saved

        Raises:
            SnapshotNotFoundError: No snapshot has been written
            CorruptSnapshotError: The snapshot exists but is not valid
            StorageError: The snapshot could not be read
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass

    @abstractmethod
    def get_events_for_account(self, account_id: int) -> list[AuditEvent]:
        """
        Get all events about one account.

        Returns:
            List of events in chronological order
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class SnapshotNotFoundError(StorageError):
    """No snapshot has been written yet."""
    pass


class CorruptSnapshotError(StorageError):
    """The stored snapshot cannot be parsed or violates the ledger invariants."""
    pass
