"""
Audit Models for the Personal Ledger

Every operation on the ledger, accepted or rejected, produces an audit
event. Transactions record what happened to the money; audit events
record what the user asked for and why a request was turned down.

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Account lifecycle
    ACCOUNT_CREATED = "account_created"
    ACCOUNT_CREATION_REJECTED = "account_creation_rejected"
    ACCOUNT_DELETED = "account_deleted"
    ACCOUNT_DELETION_REJECTED = "account_deletion_rejected"

    # Balance operations
    DEPOSIT_RECORDED = "deposit_recorded"
    DEPOSIT_REJECTED = "deposit_rejected"
    WITHDRAWAL_RECORDED = "withdrawal_recorded"
    WITHDRAWAL_REJECTED = "withdrawal_rejected"
    TRANSFER_COMPLETED = "transfer_completed"
    TRANSFER_REJECTED = "transfer_rejected"

    # Persistence
    SNAPSHOT_SAVED = "snapshot_saved"
    SNAPSHOT_SAVE_FAILED = "snapshot_save_failed"
    SNAPSHOT_LOADED = "snapshot_loaded"
    SNAPSHOT_LOAD_FAILED = "snapshot_load_failed"
    LEDGER_CLOSED = "ledger_closed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class RejectionReason(str, Enum):
    """
    Why an operation was refused.

    These outcomes are expected and recoverable; the ledger reports them
    by returning False and records the reason here.
    """
    DUPLICATE_ACCOUNT = "duplicate_account"
    ACCOUNT_NOT_FOUND = "account_not_found"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INVALID_AMOUNT = "invalid_amount"
    SAME_ACCOUNT = "same_account"


class AuditEvent(BaseModel):
    """A single audit event."""

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Which account this is about, if any
    account_id: Optional[int] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "account_id": self.account_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.account_created(100, "Alice", "50.00")
        event = AuditEventBuilder.transfer_rejected(100, 200, "1000.00", reason)
    """

    @staticmethod
    def account_created(
        account_id: int,
        holder_name: str,
        initial_balance: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_CREATED,
            account_id=account_id,
            description=f"Account {account_id} opened for {holder_name}",
            details={
                "holder_name": holder_name,
                "initial_balance": initial_balance,
            },
        )

    @staticmethod
    def account_creation_rejected(
        account_id: int,
        reason: RejectionReason,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_CREATION_REJECTED,
            severity=AuditSeverity.WARNING,
            account_id=account_id,
            description=f"Account {account_id} not created: {reason.value}",
            details={"reason": reason.value},
        )

    @staticmethod
    def account_deleted(account_id: int, final_balance: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_DELETED,
            account_id=account_id,
            description=f"Account {account_id} deleted",
            details={"final_balance": final_balance},
        )

    @staticmethod
    def account_deletion_rejected(account_id: Optional[int]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_DELETION_REJECTED,
            severity=AuditSeverity.WARNING,
            account_id=account_id,
            description=f"Account {account_id} is not held by this ledger",
            details={"reason": RejectionReason.ACCOUNT_NOT_FOUND.value},
        )

    @staticmethod
    def deposit_recorded(account_id: int, amount: str, balance: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEPOSIT_RECORDED,
            account_id=account_id,
            description=f"Deposit of {amount} into account {account_id}",
            details={"amount": amount, "balance": balance},
        )

    @staticmethod
    def deposit_rejected(
        account_id: Optional[int],
        amount: str,
        reason: RejectionReason,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEPOSIT_REJECTED,
            severity=AuditSeverity.WARNING,
            account_id=account_id,
            description=f"Deposit of {amount} refused: {reason.value}",
            details={"amount": amount, "reason": reason.value},
        )

    @staticmethod
    def withdrawal_recorded(account_id: int, amount: str, balance: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WITHDRAWAL_RECORDED,
            account_id=account_id,
            description=f"Withdrawal of {amount} from account {account_id}",
            details={"amount": amount, "balance": balance},
        )

    @staticmethod
    def withdrawal_rejected(
        account_id: Optional[int],
        amount: str,
        reason: RejectionReason,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WITHDRAWAL_REJECTED,
            severity=AuditSeverity.WARNING,
            account_id=account_id,
            description=f"Withdrawal of {amount} refused: {reason.value}",
            details={"amount": amount, "reason": reason.value},
        )

    @staticmethod
    def transfer_completed(source_id: int, target_id: int, amount: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSFER_COMPLETED,
            account_id=source_id,
            description=f"Transferred {amount} from {source_id} to {target_id}",
            details={
                "source_id": source_id,
                "target_id": target_id,
                "amount": amount,
            },
        )

    @staticmethod
    def transfer_rejected(
        source_id: Optional[int],
        target_id: Optional[int],
        amount: str,
        reason: RejectionReason,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSFER_REJECTED,
            severity=AuditSeverity.WARNING,
            account_id=source_id,
            description=f"Transfer from {source_id} to {target_id} refused: {reason.value}",
            details={
                "source_id": source_id,
                "target_id": target_id,
                "amount": amount,
                "reason": reason.value,
            },
        )

    @staticmethod
    def snapshot_saved(account_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_SAVED,
            severity=AuditSeverity.DEBUG,
            description=f"Snapshot saved with {account_count} accounts",
            details={"account_count": account_count},
        )

    @staticmethod
    def snapshot_save_failed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            description="Snapshot could not be written; changes are kept in memory",
            error_message=error_message,
        )

    @staticmethod
    def snapshot_loaded(account_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOADED,
            description=f"Snapshot loaded with {account_count} accounts",
            details={"account_count": account_count},
        )

    @staticmethod
    def snapshot_load_failed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            description="Snapshot unreadable; starting with an empty ledger",
            error_message=error_message,
        )

    @staticmethod
    def ledger_closed(account_count: int, saved: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_CLOSED,
            description="Ledger closed",
            details={"account_count": account_count, "saved": saved},
        )
