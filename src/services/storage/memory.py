"""
In-Memory Storage

Used by tests and by ledgers created without a snapshot file.
The snapshot store keeps the serialized JSON document rather than the
Account objects, so a load always returns fresh copies and goes through
the same format checks as the file backend.
"""

from collections import deque
from typing import Iterable, Optional

from src.models.account import Account
from src.models.audit import AuditEvent
from src.services.storage.interface import (
    AuditStorageInterface,
    SnapshotNotFoundError,
    SnapshotStorageInterface,
)
from src.services.storage.json_file import dump_snapshot, parse_snapshot


class InMemorySnapshotStorage(SnapshotStorageInterface):

    def __init__(self, document: Optional[str] = None):
        self.document = document
        self.save_count = 0

    def exists(self) -> bool:
        return self.document is not None

    def save(self, accounts: Iterable[Account]) -> None:
        self.document = dump_snapshot(accounts)
        self.save_count += 1

    def load(self) -> list[Account]:
        if self.document is None:
            raise SnapshotNotFoundError("No snapshot has been saved")
        return parse_snapshot(self.document)


class InMemoryAuditStorage(AuditStorageInterface):
    """Audit store holding the most recent events, oldest dropped first."""

    def __init__(self, max_events: int = 1000):
        self._events: deque[AuditEvent] = deque(maxlen=max_events)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]

    def get_events_for_account(self, account_id: int) -> list[AuditEvent]:
        return [e for e in self._events if e.account_id == account_id]
