"""
Configuration Management for the Personal Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The ledger core never reads the environment itself; the factory in
src.manager reads these settings and injects the resulting collaborators.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Snapshot storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    snapshot_path: Path = Field(
        default=Path("ledger_snapshot.json"),
        description="File holding the serialized account collection"
    )
    write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a snapshot write is attempted"
    )
    retry_wait_seconds: float = Field(
        default=0.5,
        ge=0.0,
        le=30.0,
        description="Base delay for exponential backoff between write attempts"
    )

    @field_validator('snapshot_path')
    @classmethod
    def validate_snapshot_path(cls, v: Path) -> Path:
        """The snapshot must name a file, not an existing directory."""
        if v.is_dir():
            raise ValueError(f"Snapshot path {v} is a directory")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Display
    currency_symbol: str = Field(
        default="€",
        min_length=1,
        max_length=5,
        description="Symbol appended to formatted amounts"
    )
    timestamp_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="strftime pattern for transaction timestamps"
    )

    # Audit
    audit_history_limit: int = Field(
        default=1000,
        ge=10,
        description="Maximum audit events kept by the in-memory audit store"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with an extra
    "<name>_error" entry for each section that failed to load.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
