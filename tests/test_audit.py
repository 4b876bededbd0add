"""
Tests for the AuditLogger.
"""

import pytest

from src.audit import AuditLogger
from src.models.audit import AuditEvent, AuditEventBuilder
from src.services.storage import AuditStorageInterface, InMemoryAuditStorage


class BrokenAuditStorage(AuditStorageInterface):

    def append_event(self, event: AuditEvent) -> bool:
        raise RuntimeError("audit store offline")

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return []

    def get_events_for_account(self, account_id: int) -> list[AuditEvent]:
        return []


class TestAuditLogger:

    def test_local_only_logging_succeeds(self):
        assert AuditLogger().log(AuditEventBuilder.snapshot_loaded(3)) is True

    @pytest.mark.parametrize("event", [
        AuditEventBuilder.snapshot_saved(1),
        AuditEventBuilder.account_created(1, "Alice", "0.00"),
        AuditEventBuilder.account_deletion_rejected(7),
        AuditEventBuilder.snapshot_save_failed("disk full"),
    ])
    def test_every_severity_reaches_storage(self, event):
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)

        assert logger.log(event) is True
        assert storage.get_recent_events() == [event]

    def test_storage_failure_is_swallowed(self):
        logger = AuditLogger(BrokenAuditStorage())
        assert logger.log(AuditEventBuilder.snapshot_loaded(0)) is False
