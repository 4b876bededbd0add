"""Services package."""

from src.services.storage import (
    AuditStorageInterface,
    CorruptSnapshotError,
    InMemoryAuditStorage,
    InMemorySnapshotStorage,
    JsonFileSnapshotStorage,
    SnapshotNotFoundError,
    SnapshotStorageInterface,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "CorruptSnapshotError",
    "InMemoryAuditStorage",
    "InMemorySnapshotStorage",
    "JsonFileSnapshotStorage",
    "SnapshotNotFoundError",
    "SnapshotStorageInterface",
    "StorageError",
]
