"""
Account Model

An account owns its balance and the ordered history of transactions
that produced it.

INVARIANTS (checked on every construction, including snapshot load):
1. balance == sum of signed transaction amounts in history
2. balance >= 0 (no overdraft)

Mutating methods check first and mutate second, with nothing in between,
so a failed call leaves both balance and history untouched.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from src.models.transaction import (
    DEBIT_KINDS,
    InvalidArgumentError,
    Transaction,
    TransactionKind,
    to_amount,
)


class Account(BaseModel):
    """
    A named holder of a non-negative balance.

    Use Account.open() to create a new account; the plain constructor is
    for rebuilding accounts from a snapshot.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: int = Field(
        ...,
        gt=0,
        description="Account number, unique within a ledger"
    )
    holder_name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Name of the account holder"
    )
    balance: Decimal = Field(
        default=Decimal("0.00"),
        ge=0,
        decimal_places=2,
        description="Current balance"
    )
    history: list[Transaction] = Field(
        default_factory=list,
        description="Transactions in chronological order"
    )

    @model_validator(mode='after')
    def validate_balance_matches_history(self) -> 'Account':
        """Balance and history must never diverge."""
        if not self.is_consistent():
            raise ValueError(
                f"Balance {self.balance} of account {self.id} does not match "
                f"its history total {self.computed_balance()}"
            )
        return self

    @classmethod
    def open(
        cls,
        id: int,
        holder_name: str,
        initial_balance: Any = 0,
    ) -> "Account":
        """
        Create a new account.

        A positive initial balance is recorded as an INITIAL_DEPOSIT
        transaction; a zero balance leaves the history empty.

        Raises:
            InvalidArgumentError: empty name, id <= 0 or negative balance
        """
        initial = to_amount(initial_balance)
        if initial < 0:
            raise InvalidArgumentError(
                f"Initial balance cannot be negative: {initial}"
            )

        try:
            account = cls(id=id, holder_name=holder_name)
        except ValidationError as e:
            raise InvalidArgumentError(str(e)) from e

        if initial > 0:
            account._apply(initial, TransactionKind.INITIAL_DEPOSIT)
        return account

    # -------------------------------------------------------------------------
    # Balance operations
    # -------------------------------------------------------------------------

    def deposit(self, amount: Any) -> None:
        """
        Add money to the account.

        Raises:
            InvalidArgumentError: amount is not strictly positive
        """
        self._apply(self._positive(amount), TransactionKind.DEPOSIT)

    def credit(self, amount: Any) -> None:
        """
        Receive the incoming half of a transfer.

        Same mechanics as deposit(), recorded as TRANSFER_IN.
        """
        self._apply(self._positive(amount), TransactionKind.TRANSFER_IN)

    def withdraw(
        self,
        amount: Any,
        kind: TransactionKind = TransactionKind.WITHDRAWAL,
    ) -> bool:
        """
        Take money out of the account.

        Insufficient funds is an expected outcome, so it is reported
        by returning False instead of raising.

        Args:
            amount: Strictly positive amount to withdraw
            kind: WITHDRAWAL or TRANSFER_OUT

        Returns:
            True if the balance was debited, False if funds were insufficient

        Raises:
            InvalidArgumentError: non-positive amount or a credit kind
        """
        if kind not in DEBIT_KINDS:
            raise InvalidArgumentError(f"{kind.value} is not a debit")
        value = self._positive(amount)
        if self.balance < value:
            return False
        self._apply(value, kind)
        return True

    def _apply(self, amount: Decimal, kind: TransactionKind) -> None:
        transaction = Transaction.create(amount, kind)
        self.balance = self.balance + transaction.signed_amount
        self.history.append(transaction)

    @staticmethod
    def _positive(amount: Any) -> Decimal:
        value = to_amount(amount)
        if value <= 0:
            raise InvalidArgumentError(f"Amount must be positive, got {value}")
        return value

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_history(self) -> list[Transaction]:
        """Copy of the history, oldest first."""
        return list(self.history)

    def computed_balance(self) -> Decimal:
        """Balance implied by the history alone."""
        return sum(
            (t.signed_amount for t in self.history),
            Decimal("0.00"),
        )

    def is_consistent(self) -> bool:
        return self.balance >= 0 and self.balance == self.computed_balance()

    def formatted_balance(self, currency_symbol: str = "€") -> str:
        return f"{self.balance:.2f} {currency_symbol}"

    def __str__(self) -> str:
        return (
            f"N°: {self.id} | Holder: {self.holder_name} | "
            f"Balance: {self.formatted_balance()}"
        )
