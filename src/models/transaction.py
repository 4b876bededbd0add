"""
Transaction Model

A transaction is one immutable entry in an account's history.
Accounts create them as a side effect of every balance change;
nothing else creates, edits or deletes them.

DESIGN DECISION: Amounts are always stored positive. The direction of
the money movement comes from the transaction kind, so the history
cannot contain a "negative deposit".
"""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


CENTS = Decimal("0.01")


class InvalidArgumentError(ValueError):
    """Malformed input: empty name, non-positive id or amount, negative balance."""
    pass


def to_amount(value: Any) -> Decimal:
    """
    Convert a user-supplied number into a two-decimal monetary amount.

    Floats go through str() so 0.1 becomes Decimal("0.10") rather than
    its binary approximation. The sign is NOT checked here; callers
    decide whether zero or negative values are acceptable.

    Raises:
        InvalidArgumentError: value is not a finite number or has more
            than two decimal places
    """
    if isinstance(value, bool):
        raise InvalidArgumentError(f"Not an amount: {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise InvalidArgumentError(f"Not an amount: {value!r}") from e

    if not amount.is_finite():
        raise InvalidArgumentError(f"Amount must be finite, got {value!r}")

    try:
        quantized = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise InvalidArgumentError(f"Amount {value!r} is too large") from e
    if quantized != amount:
        raise InvalidArgumentError(
            f"Amount {value!r} has more than two decimal places"
        )
    return quantized


class TransactionKind(str, Enum):
    """
    What kind of balance change a transaction records.

    TRANSFER_IN / TRANSFER_OUT are kept separate from DEPOSIT / WITHDRAWAL
    so the audit trail shows where the money came from.
    """
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    TRANSFER_IN = "transfer_in"
    TRANSFER_OUT = "transfer_out"
    INITIAL_DEPOSIT = "initial_deposit"

    @property
    def is_credit(self) -> bool:
        """Credits increase the balance, debits decrease it."""
        return self in CREDIT_KINDS


CREDIT_KINDS = frozenset({
    TransactionKind.DEPOSIT,
    TransactionKind.TRANSFER_IN,
    TransactionKind.INITIAL_DEPOSIT,
})
DEBIT_KINDS = frozenset({
    TransactionKind.WITHDRAWAL,
    TransactionKind.TRANSFER_OUT,
})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Transaction(BaseModel):
    """
    A single ledger entry.

    Frozen: once recorded, a transaction never changes.
    """
    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(
        ...,
        gt=0,
        decimal_places=2,
        description="Amount moved, always positive"
    )
    kind: TransactionKind = Field(
        ...,
        description="Direction and origin of the balance change"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the transaction was recorded (UTC)"
    )

    @classmethod
    def create(cls, amount: Decimal, kind: TransactionKind) -> "Transaction":
        """Record a transaction at the current instant."""
        return cls(amount=amount, kind=kind)

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign implied by the kind."""
        return self.amount if self.kind.is_credit else -self.amount

    def formatted_amount(self, currency_symbol: str = "€") -> str:
        prefix = "+ " if self.kind.is_credit else "- "
        return f"{prefix}{self.amount:.2f} {currency_symbol}"

    def formatted_timestamp(self, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
        return self.timestamp.strftime(fmt)

    def __str__(self) -> str:
        return (
            f"[{self.formatted_timestamp()}] "
            f"{self.kind.name} : {self.formatted_amount()}"
        )
