"""
Data Models Package

This package contains all Pydantic models used by the personal ledger.
All data flowing through the system must conform to these schemas.
"""

from src.models.transaction import (
    CREDIT_KINDS,
    DEBIT_KINDS,
    InvalidArgumentError,
    Transaction,
    TransactionKind,
    to_amount,
)
from src.models.account import Account
from src.models.snapshot import SNAPSHOT_FORMAT_VERSION, LedgerSnapshot
from src.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    RejectionReason,
)

__all__ = [
    # Ledger models
    "Account",
    "CREDIT_KINDS",
    "DEBIT_KINDS",
    "InvalidArgumentError",
    "LedgerSnapshot",
    "SNAPSHOT_FORMAT_VERSION",
    "Transaction",
    "TransactionKind",
    "to_amount",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    "RejectionReason",
]
