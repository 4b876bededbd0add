"""
Storage Services Package

Provides abstract interfaces and concrete implementations for persisting
the ledger snapshot and the audit trail.
"""

from src.services.storage.interface import (
    AuditStorageInterface,
    CorruptSnapshotError,
    SnapshotNotFoundError,
    SnapshotStorageInterface,
    StorageError,
)
from src.services.storage.json_file import (
    JsonFileSnapshotStorage,
    dump_snapshot,
    parse_snapshot,
)
from src.services.storage.memory import (
    InMemoryAuditStorage,
    InMemorySnapshotStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "SnapshotStorageInterface",
    # Exceptions
    "CorruptSnapshotError",
    "SnapshotNotFoundError",
    "StorageError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemorySnapshotStorage",
    "JsonFileSnapshotStorage",
    "dump_snapshot",
    "parse_snapshot",
]
