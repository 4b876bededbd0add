"""
Ledger Manager for the Personal Ledger

This module owns the account collection and defines the operations a
front end (graphical, terminal or scripted) drives:
1. Account lifecycle (create → find → delete)
2. Balance operations (deposit, withdraw, transfer)
3. Persistence (snapshot after every change, reload on startup)

DESIGN DECISION: The manager is an ordinary object built by the caller,
never a process-wide singleton. Tests build isolated ledgers on
in-memory storage; the application builds one on the configured file.

Failure model:
- Malformed input raises InvalidArgumentError before anything changes.
- Expected refusals (duplicate id, unknown account, insufficient funds)
  return False and leave every account untouched.
- Snapshot write failures are logged and audited but do NOT undo the
  in-memory change; snapshot read failures start an empty ledger.
"""

from decimal import Decimal
from pathlib import Path
from typing import Any, Optional, Union

import structlog
from pydantic import TypeAdapter, ValidationError

from src.audit import AuditLogger
from src.config import get_settings
from src.models.account import Account
from src.models.audit import AuditEvent, AuditEventBuilder, RejectionReason
from src.models.transaction import (
    InvalidArgumentError,
    Transaction,
    TransactionKind,
    to_amount,
)
from src.services.storage import (
    InMemoryAuditStorage,
    JsonFileSnapshotStorage,
    SnapshotNotFoundError,
    SnapshotStorageInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)

_ACCOUNT_ID = TypeAdapter(int)


def normalize_account_id(value: Any) -> Optional[int]:
    """
    The id an Account would store for this value ("100" -> 100),
    or None if the value cannot be an account id at all.
    """
    try:
        return _ACCOUNT_ID.validate_python(value)
    except ValidationError:
        return None


class LedgerManager:
    """
    Owns every account and coordinates multi-account operations.

    Everything runs synchronously on the caller's thread. The two steps
    of a transfer are never interleaved with another operation because
    nothing else can run in between; adding concurrent callers would
    require a ledger-wide lock around each public method.
    """

    def __init__(
        self,
        snapshot_storage: Optional[SnapshotStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        load: bool = True,
        currency_symbol: str = "€",
        timestamp_format: str = "%Y-%m-%d %H:%M:%S",
    ):
        """
        Args:
            snapshot_storage: Where snapshots are written. If None, the
                ledger lives in memory only.
            audit_logger: Audit trail; a local-only logger if None.
            load: Load the existing snapshot on construction.
            currency_symbol: Used by statement()
            timestamp_format: Used by statement()
        """
        self._storage = snapshot_storage
        self._audit_logger = audit_logger or AuditLogger()
        self._currency_symbol = currency_symbol
        self._timestamp_format = timestamp_format
        self._accounts: dict[int, Account] = {}

        if load:
            self.load_snapshot()

    def _audit(self, event: AuditEvent) -> None:
        self._audit_logger.log(event)

    # =========================================================================
    # Account lifecycle
    # =========================================================================

    def create_account(
        self,
        account_id: int,
        holder_name: str,
        initial_balance: Any = 0,
    ) -> bool:
        """
        Open a new account and persist the ledger.

        Returns:
            True on success, False if the id is already taken

        Raises:
            InvalidArgumentError: empty name, id <= 0 or negative balance
        """
        key = normalize_account_id(account_id)
        if key is not None and key in self._accounts:
            self._audit(AuditEventBuilder.account_creation_rejected(
                key, RejectionReason.DUPLICATE_ACCOUNT,
            ))
            return False

        account = Account.open(account_id, holder_name, initial_balance)
        self._accounts[account.id] = account

        self._audit(AuditEventBuilder.account_created(
            account.id, account.holder_name, str(account.balance),
        ))
        self.save_snapshot()
        return True

    def find_account(self, account_id: int) -> Optional[Account]:
        key = normalize_account_id(account_id)
        if key is None:
            return None
        return self._accounts.get(key)

    def delete_account(self, account: Union[Account, int]) -> bool:
        """
        Remove an account from the ledger.

        Accepts the Account object itself or its id. An Account object
        that is not the one held by this ledger is not removed.

        Returns:
            Whether an account was removed
        """
        if isinstance(account, Account):
            account_id = account.id
            member = self._accounts.get(account_id) is account
        else:
            account_id = normalize_account_id(account)
            member = account_id is not None and account_id in self._accounts

        if not member:
            self._audit(AuditEventBuilder.account_deletion_rejected(account_id))
            return False

        removed = self._accounts.pop(account_id)
        self._audit(AuditEventBuilder.account_deleted(
            removed.id, str(removed.balance),
        ))
        self.save_snapshot()
        return True

    def list_accounts(self) -> list[Account]:
        """All accounts, in creation order."""
        return list(self._accounts.values())

    def get_history(self, account: Union[Account, int]) -> list[Transaction]:
        """
        Chronological transactions of an account.

        Returns an empty list for an unknown account id.
        """
        if not isinstance(account, Account):
            account = self.find_account(account)
            if account is None:
                return []
        return account.get_history()

    def statement(self, account_id: int) -> list[str]:
        """
        Printable account statement: a header line, then one line per
        transaction, oldest first. Empty for an unknown account.
        """
        account = self.find_account(account_id)
        if account is None:
            return []

        lines = [
            f"N°: {account.id} | Holder: {account.holder_name} | "
            f"Balance: {account.formatted_balance(self._currency_symbol)}"
        ]
        for transaction in account.history:
            lines.append(
                f"[{transaction.formatted_timestamp(self._timestamp_format)}] "
                f"{transaction.kind.name} : "
                f"{transaction.formatted_amount(self._currency_symbol)}"
            )
        return lines

    def _is_member(self, account: Optional[Account]) -> bool:
        if not isinstance(account, Account):
            return False
        return self._accounts.get(account.id) is account

    # =========================================================================
    # Balance operations
    # =========================================================================

    def deposit(self, account: Optional[Account], amount: Any) -> bool:
        """
        Deposit into an account held by this ledger.

        Returns:
            True on success, False if the account is None or not in
            this ledger

        Raises:
            InvalidArgumentError: amount is not strictly positive
        """
        if not self._is_member(account):
            self._audit(AuditEventBuilder.deposit_rejected(
                getattr(account, "id", None), str(amount),
                RejectionReason.ACCOUNT_NOT_FOUND,
            ))
            return False

        account.deposit(amount)
        self._audit(AuditEventBuilder.deposit_recorded(
            account.id, str(account.history[-1].amount), str(account.balance),
        ))
        self.save_snapshot()
        return True

    def withdraw(self, account: Optional[Account], amount: Any) -> bool:
        """
        Withdraw from an account held by this ledger.

        Returns:
            True on success, False for a None or unknown account or
            insufficient funds

        Raises:
            InvalidArgumentError: amount is not strictly positive
        """
        if not self._is_member(account):
            self._audit(AuditEventBuilder.withdrawal_rejected(
                getattr(account, "id", None), str(amount),
                RejectionReason.ACCOUNT_NOT_FOUND,
            ))
            return False

        if not account.withdraw(amount, TransactionKind.WITHDRAWAL):
            self._audit(AuditEventBuilder.withdrawal_rejected(
                account.id, str(amount), RejectionReason.INSUFFICIENT_FUNDS,
            ))
            return False

        self._audit(AuditEventBuilder.withdrawal_recorded(
            account.id, str(account.history[-1].amount), str(account.balance),
        ))
        self.save_snapshot()
        return True

    def transfer(self, source_id: int, target_id: int, amount: Any) -> bool:
        """
        Move money from one account to another.

        Debits the source first; the target is credited only if the debit
        went through. With the amount validated up front the credit cannot
        fail, so the pair is all-or-nothing without a rollback path.

        Returns:
            True if both accounts changed, False if neither did
        """
        source_id = normalize_account_id(source_id)
        target_id = normalize_account_id(target_id)

        reason = self._transfer_rejection(source_id, target_id, amount)
        if reason is not None:
            self._audit(AuditEventBuilder.transfer_rejected(
                source_id, target_id, str(amount), reason,
            ))
            return False

        value = to_amount(amount)
        source = self._accounts[source_id]
        target = self._accounts[target_id]

        if not source.withdraw(value, TransactionKind.TRANSFER_OUT):
            self._audit(AuditEventBuilder.transfer_rejected(
                source_id, target_id, str(value),
                RejectionReason.INSUFFICIENT_FUNDS,
            ))
            return False

        target.credit(value)

        self._audit(AuditEventBuilder.transfer_completed(
            source_id, target_id, str(value),
        ))
        self.save_snapshot()
        return True

    def _transfer_rejection(
        self,
        source_id: Optional[int],
        target_id: Optional[int],
        amount: Any,
    ) -> Optional[RejectionReason]:
        if source_id not in self._accounts or target_id not in self._accounts:
            return RejectionReason.ACCOUNT_NOT_FOUND
        if source_id == target_id:
            return RejectionReason.SAME_ACCOUNT
        try:
            value = to_amount(amount)
        except InvalidArgumentError:
            return RejectionReason.INVALID_AMOUNT
        if value <= 0:
            return RejectionReason.INVALID_AMOUNT
        return None

    # =========================================================================
    # Integrity
    # =========================================================================

    def verify_integrity(self) -> list[int]:
        """
        Ids of accounts whose balance no longer matches their history
        or has gone negative. Empty when the ledger is sound.
        """
        return [
            account.id
            for account in self._accounts.values()
            if not account.is_consistent()
        ]

    def total_balance(self) -> Decimal:
        return sum(
            (account.balance for account in self._accounts.values()),
            Decimal("0.00"),
        )

    # =========================================================================
    # Persistence
    # =========================================================================

    def save_snapshot(self) -> bool:
        """
        Write every account to the snapshot store.

        Returns:
            True if written (or no store configured), False on failure.
            A failure never undoes the in-memory state.
        """
        if self._storage is None:
            return True

        try:
            self._storage.save(self._accounts.values())
        except StorageError as e:
            self._audit(AuditEventBuilder.snapshot_save_failed(str(e)))
            return False

        self._audit(AuditEventBuilder.snapshot_saved(len(self._accounts)))
        return True

    def load_snapshot(self) -> int:
        """
        Replace the in-memory accounts with the stored snapshot.

        A missing, unreadable or corrupt snapshot leaves an empty ledger.

        Returns:
            Number of accounts loaded
        """
        self._accounts = {}
        if self._storage is None:
            return 0

        try:
            accounts = self._storage.load()
        except SnapshotNotFoundError:
            logger.info("snapshot_missing_starting_empty")
            return 0
        except StorageError as e:
            self._audit(AuditEventBuilder.snapshot_load_failed(str(e)))
            return 0

        self._accounts = {account.id: account for account in accounts}
        self._audit(AuditEventBuilder.snapshot_loaded(len(self._accounts)))
        return len(self._accounts)

    def close(self) -> bool:
        """Save a final snapshot at shutdown."""
        saved = self.save_snapshot()
        self._audit(AuditEventBuilder.ledger_closed(len(self._accounts), saved))
        return saved

    def __enter__(self) -> "LedgerManager":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, account_id: int) -> bool:
        return account_id in self._accounts


def create_ledger_manager(
    snapshot_path: Optional[Union[str, Path]] = None,
    use_storage: bool = True,
) -> LedgerManager:
    """
    Factory function to create a ledger wired from settings.

    Args:
        snapshot_path: Overrides the configured snapshot file.
        use_storage: Set to False for an in-memory ledger with no file.

    Returns:
        A LedgerManager with its snapshot already loaded
    """
    settings = get_settings()
    audit_logger = AuditLogger(
        InMemoryAuditStorage(max_events=settings.app.audit_history_limit)
    )

    snapshot_storage = None
    if use_storage:
        storage_settings = settings.storage
        snapshot_storage = JsonFileSnapshotStorage(
            snapshot_path or storage_settings.snapshot_path,
            write_attempts=storage_settings.write_attempts,
            retry_wait_seconds=storage_settings.retry_wait_seconds,
        )

    return LedgerManager(
        snapshot_storage=snapshot_storage,
        audit_logger=audit_logger,
        currency_symbol=settings.app.currency_symbol,
        timestamp_format=settings.app.timestamp_format,
    )
