"""
Tests for settings loading.
"""

import pytest
from pathlib import Path

from src.config import AppSettings, get_settings, validate_all_settings
from src.manager import create_ledger_manager


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch, tmp_path):
    # Keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:

    def test_defaults(self):
        settings = get_settings()
        assert settings.storage.snapshot_path == Path("ledger_snapshot.json")
        assert settings.storage.write_attempts == 3
        assert settings.app.currency_symbol == "€"
        assert settings.app.timestamp_format == "%Y-%m-%d %H:%M:%S"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("LEDGER_STORAGE_SNAPSHOT_PATH", "data/bank.json")
        monkeypatch.setenv("LEDGER_STORAGE_WRITE_ATTEMPTS", "5")
        monkeypatch.setenv("CURRENCY_SYMBOL", "$")

        settings = get_settings()

        assert settings.storage.snapshot_path == Path("data/bank.json")
        assert settings.storage.write_attempts == 5
        assert settings.app.currency_symbol == "$"

    def test_env_file_is_read(self, tmp_path):
        (tmp_path / ".env").write_text(
            "LEDGER_STORAGE_SNAPSHOT_PATH=from_dotenv.json\n", encoding="utf-8"
        )
        assert get_settings().storage.snapshot_path == Path("from_dotenv.json")

    def test_validate_all_settings(self):
        assert validate_all_settings() == {"storage": True, "app": True}

    def test_validate_reports_bad_values(self, monkeypatch):
        monkeypatch.setenv("LEDGER_STORAGE_WRITE_ATTEMPTS", "0")
        results = validate_all_settings()
        assert results["storage"] is False
        assert "storage_error" in results
        assert results["app"] is True

    def test_snapshot_path_cannot_be_directory(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LEDGER_STORAGE_SNAPSHOT_PATH", str(tmp_path))
        assert validate_all_settings()["storage"] is False

    def test_app_settings_fields_are_all_consumed(self, monkeypatch):
        assert set(AppSettings.model_fields) == {
            "currency_symbol",
            "timestamp_format",
            "audit_history_limit",
        }

        monkeypatch.setenv("CURRENCY_SYMBOL", "£")
        monkeypatch.setenv("TIMESTAMP_FORMAT", "%d/%m/%Y")
        ledger = create_ledger_manager(use_storage=False)
        ledger.create_account(1, "Alice", 5)

        header, line = ledger.statement(1)
        assert header.endswith("5.00 £")
        assert line.startswith("[") and line[3] == "/" and line[6] == "/"
