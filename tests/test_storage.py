"""
Tests for snapshot and audit storage.
"""

import json
import pytest
from decimal import Decimal

from src.models.account import Account
from src.models.audit import AuditEventBuilder
from src.services.storage import (
    CorruptSnapshotError,
    InMemoryAuditStorage,
    InMemorySnapshotStorage,
    JsonFileSnapshotStorage,
    SnapshotNotFoundError,
    StorageError,
)


def sample_accounts():
    alice = Account.open(100, "Alice", "50.00")
    bob = Account.open(200, "Bob")
    alice.withdraw("20.00")
    bob.credit("20.00")
    return [alice, bob]


class TestJsonFileSnapshotStorage:
    """Tests for the JSON file backend."""

    def test_save_then_load_is_lossless(self, tmp_path):
        storage = JsonFileSnapshotStorage(tmp_path / "ledger.json")
        accounts = sample_accounts()

        storage.save(accounts)
        loaded = storage.load()

        assert [a.model_dump() for a in loaded] == [a.model_dump() for a in accounts]
        assert loaded[0].history[0].timestamp == accounts[0].history[0].timestamp

    def test_file_is_versioned_json(self, tmp_path):
        path = tmp_path / "ledger.json"
        JsonFileSnapshotStorage(path).save(sample_accounts())

        document = json.loads(path.read_text(encoding="utf-8"))

        assert document["format_version"] == 1
        assert [a["id"] for a in document["accounts"]] == [100, 200]
        assert document["accounts"][0]["balance"] == "30.00"

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "ledger.json"
        storage = JsonFileSnapshotStorage(path)
        assert storage.exists() is False

        storage.save([])

        assert storage.exists() is True
        assert storage.load() == []

    def test_no_temp_files_left_behind(self, tmp_path):
        storage = JsonFileSnapshotStorage(tmp_path / "ledger.json")
        storage.save(sample_accounts())
        storage.save(sample_accounts())
        assert [p.name for p in tmp_path.iterdir()] == ["ledger.json"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(SnapshotNotFoundError):
            JsonFileSnapshotStorage(tmp_path / "missing.json").load()

    @pytest.mark.parametrize("content", [
        "",
        "not json",
        '{"format_version": 2, "accounts": []}',
        '{"format_version": 1, "accounts": [{"id": 1}]}',
    ])
    def test_corrupt_file(self, tmp_path, content):
        path = tmp_path / "ledger.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(CorruptSnapshotError):
            JsonFileSnapshotStorage(path).load()

    def test_tampered_balance_is_corrupt(self, tmp_path):
        path = tmp_path / "ledger.json"
        JsonFileSnapshotStorage(path).save(sample_accounts())
        document = json.loads(path.read_text(encoding="utf-8"))
        document["accounts"][0]["balance"] = "1000.00"
        path.write_text(json.dumps(document), encoding="utf-8")

        with pytest.raises(CorruptSnapshotError, match="does not match"):
            JsonFileSnapshotStorage(path).load()

    def test_binary_garbage_is_corrupt(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_bytes(b"\xff\xfe\x00\x81")
        with pytest.raises(CorruptSnapshotError):
            JsonFileSnapshotStorage(path).load()

    def test_write_failure_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        storage = JsonFileSnapshotStorage(
            blocker / "ledger.json",
            write_attempts=2,
            retry_wait_seconds=0,
        )

        with pytest.raises(StorageError, match="Failed to write snapshot"):
            storage.save(sample_accounts())

    def test_failed_write_keeps_previous_snapshot(self, tmp_path, monkeypatch):
        path = tmp_path / "ledger.json"
        storage = JsonFileSnapshotStorage(path, write_attempts=1, retry_wait_seconds=0)
        storage.save(sample_accounts())

        def broken_replace(src, dst):
            raise OSError("simulated crash")

        monkeypatch.setattr("src.services.storage.json_file.os.replace", broken_replace)
        with pytest.raises(StorageError):
            storage.save([])

        monkeypatch.undo()
        assert [a.id for a in storage.load()] == [100, 200]
        assert [p.name for p in tmp_path.iterdir()] == ["ledger.json"]


class TestInMemorySnapshotStorage:
    """Tests for the in-memory snapshot backend."""

    def test_load_before_save(self):
        with pytest.raises(SnapshotNotFoundError):
            InMemorySnapshotStorage().load()

    def test_load_returns_fresh_copies(self):
        storage = InMemorySnapshotStorage()
        accounts = sample_accounts()
        storage.save(accounts)

        loaded = storage.load()
        loaded[0].deposit(5)

        assert storage.load()[0].balance == Decimal("30.00")
        assert storage.save_count == 1


class TestInMemoryAuditStorage:
    """Tests for the in-memory audit backend."""

    def test_recent_events_newest_first(self):
        storage = InMemoryAuditStorage()
        first = AuditEventBuilder.snapshot_loaded(0)
        second = AuditEventBuilder.account_created(1, "Alice", "0.00")
        storage.append_event(first)
        storage.append_event(second)

        assert storage.get_recent_events() == [second, first]
        assert storage.get_recent_events(limit=1) == [second]

    def test_events_for_account(self):
        storage = InMemoryAuditStorage()
        storage.append_event(AuditEventBuilder.account_created(1, "Alice", "0.00"))
        storage.append_event(AuditEventBuilder.account_created(2, "Bob", "0.00"))
        storage.append_event(AuditEventBuilder.deposit_recorded(1, "5.00", "5.00"))

        events = storage.get_events_for_account(1)

        assert [e.details.get("amount") for e in events] == [None, "5.00"]

    def test_oldest_events_dropped(self):
        storage = InMemoryAuditStorage(max_events=2)
        for account_id in (1, 2, 3):
            storage.append_event(
                AuditEventBuilder.account_created(account_id, "X", "0.00")
            )
        assert [e.account_id for e in storage.get_recent_events()] == [3, 2]
