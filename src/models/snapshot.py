"""
Snapshot Model

The on-disk form of a ledger: a versioned, self-describing JSON document
holding every account with its full transaction history.

Layout (format_version 1):

    {
      "format_version": 1,
      "saved_at": "2026-10-19T10:00:00.123456Z",
      "accounts": [
        {"id": 100, "holder_name": "Alice", "balance": "30.00",
         "history": [{"amount": "50.00", "kind": "initial_deposit",
                      "timestamp": "..."}, ...]},
        ...
      ]
    }

Amounts are written as strings and timestamps keep their microseconds,
so loading a snapshot reproduces the accounts exactly.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from src.models.account import Account


SNAPSHOT_FORMAT_VERSION = 1


class LedgerSnapshot(BaseModel):
    """Serialized state of a whole ledger, in account creation order."""

    format_version: int = Field(
        default=SNAPSHOT_FORMAT_VERSION,
        description="Layout version of this document"
    )
    saved_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the snapshot was written"
    )
    accounts: list[Account] = Field(default_factory=list)

    @field_validator('format_version')
    @classmethod
    def validate_format_version(cls, v: int) -> int:
        if v != SNAPSHOT_FORMAT_VERSION:
            raise ValueError(f"Unsupported snapshot format version: {v}")
        return v

    @field_validator('accounts')
    @classmethod
    def validate_unique_ids(cls, v: list[Account]) -> list[Account]:
        seen = set()
        for account in v:
            if account.id in seen:
                raise ValueError(f"Duplicate account id in snapshot: {account.id}")
            seen.add(account.id)
        return v
