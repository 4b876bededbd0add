"""
JSON File Snapshot Storage

DESIGN DECISION: The whole ledger lives in one JSON file, rewritten on
every change. A personal ledger holds a handful of accounts, so a full
rewrite is cheap and keeps the file trivially inspectable.

Writes go to a temporary file in the same directory which then replaces
the snapshot with os.replace(). A crash mid-write leaves the previous
snapshot intact instead of a truncated one.

Transient OS errors (locked file, full disk being cleaned up, network
drive hiccup) are retried with exponential backoff before giving up.
"""

import os
import tempfile
from pathlib import Path
from typing import Iterable, Union

import structlog
from pydantic import ValidationError
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.models.account import Account
from src.models.snapshot import LedgerSnapshot
from src.services.storage.interface import (
    CorruptSnapshotError,
    SnapshotNotFoundError,
    SnapshotStorageInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)


def dump_snapshot(accounts: Iterable[Account]) -> str:
    """Serialize accounts into the versioned snapshot document."""
    return LedgerSnapshot(accounts=list(accounts)).model_dump_json(indent=2)


def parse_snapshot(text: Union[str, bytes]) -> list[Account]:
    """
    Parse a snapshot document.

    Raises:
        CorruptSnapshotError: not JSON, wrong layout, unsupported version,
            duplicate ids, or an account whose balance and history disagree
    """
    try:
        snapshot = LedgerSnapshot.model_validate_json(text)
    except ValidationError as e:
        raise CorruptSnapshotError(f"Invalid snapshot: {e}") from e
    return snapshot.accounts


class JsonFileSnapshotStorage(SnapshotStorageInterface):
    """
    Snapshot storage backed by a single JSON file.
    """

    def __init__(
        self,
        path: Union[str, Path],
        write_attempts: int = 3,
        retry_wait_seconds: float = 0.5,
    ):
        """
        Args:
            path: Snapshot file; parent directories are created on first save
            write_attempts: Attempts per save before StorageError is raised
            retry_wait_seconds: Base delay of the exponential backoff
        """
        self._path = Path(path)
        self._write_attempts = write_attempts
        self._retry_wait_seconds = retry_wait_seconds

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def save(self, accounts: Iterable[Account]) -> None:
        """Write all accounts, replacing the previous snapshot atomically."""
        payload = dump_snapshot(accounts)

        retrying = Retrying(
            stop=stop_after_attempt(self._write_attempts),
            wait=wait_exponential(
                multiplier=self._retry_wait_seconds,
                max=self._retry_wait_seconds * 8,
            ),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    self._write(payload)
        except OSError as e:
            raise StorageError(f"Failed to write snapshot {self._path}: {e}") from e

        logger.debug("snapshot_written", path=str(self._path), size=len(payload))

    def _write(self, payload: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except OSError:
            logger.warning("snapshot_write_attempt_failed", path=str(self._path))
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def load(self) -> list[Account]:
        """Read all accounts from the snapshot file."""
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise SnapshotNotFoundError(f"No snapshot at {self._path}") from e
        except UnicodeDecodeError as e:
            raise CorruptSnapshotError(f"Snapshot {self._path} is not UTF-8 text") from e
        except OSError as e:
            raise StorageError(f"Failed to read snapshot {self._path}: {e}") from e

        return parse_snapshot(text)
