"""
File-backed notification ledger for PushLedger.

Keeps every :class:`NotificationRecord` in memory and mirrors the whole
collection to a single YAML file after each mutation.

Storage policy
--------------
* Loading is fail-open: an unreadable or malformed file yields an empty
  (or partial) ledger and a logged error, never an exception.
* Every write rewrites the full file.  :meth:`Ledger.persist` returns a
  :class:`PersistResult` instead of raising, so mutations still return
  their in-memory result when the disk write fails.  The in-memory and
  on-disk states diverge until the next successful write.
* A single lock serialises mutation and persistence so concurrent
  callers on worker threads cannot interleave writes.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path

import pydantic
import structlog
import yaml

from pn_common.metrics import ledger_persist_failures_total
from pn_common.models.notification import NotificationRecord

from .errors import StorageConfigurationError, StorageError

logger = structlog.get_logger()


@dataclass(frozen=True)
class PersistResult:
    """Outcome of a ledger write.

    Attributes:
        error: The failure, or ``None`` when the file was written.
        count: Number of records the write covered.
    """

    error: StorageError | None = None
    count: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


class Ledger:
    """Durable CRUD over notification records.

    The ledger owns both the in-memory list and the file; nothing else
    should mutate either.  Use :meth:`open` to create the file if needed
    and load its contents.

    Args:
        path: Location of the YAML ledger file.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._records: list[NotificationRecord] = []
        self._lock = threading.RLock()
        self.last_persist: PersistResult | None = None

    @classmethod
    def open(cls, path: str | Path) -> Ledger:
        """Create a ledger for *path*, initialising and loading the file.

        Raises:
            StorageConfigurationError: *path* is a directory.
        """
        ledger = cls(path)
        try:
            ledger.ensure_store_exists()
        except StorageConfigurationError:
            raise
        except StorageError as exc:
            logger.error("ledger_init_failed", path=str(ledger.path), error=str(exc))
        ledger.reload()
        return ledger

    # ── file handling ──

    def ensure_store_exists(self) -> None:
        """Create the parent directory and an empty ledger file if absent.

        Raises:
            StorageConfigurationError: The ledger path is a directory.
            StorageError: The directory or file could not be created.
        """
        if self.path.is_dir():
            raise StorageConfigurationError(
                f"Path {self.path} is a directory, expected a file",
            )
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self.path.write_text(yaml.safe_dump([]), encoding="utf-8")
                logger.info("ledger_file_created", path=str(self.path))
        except OSError as exc:
            raise StorageError(f"Cannot initialise {self.path}: {exc}") from exc

    def load(self) -> list[NotificationRecord]:
        """Read the ledger file and return its records.

        Anything other than a YAML sequence reads as "no data yet".
        Entries that are not valid records are skipped with a warning.
        """
        try:
            if not self.path.exists():
                return []
            raw = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            logger.error("ledger_load_failed", path=str(self.path), error=str(exc))
            return []

        if not isinstance(raw, list):
            return []

        records: list[NotificationRecord] = []
        for index, entry in enumerate(raw):
            try:
                records.append(NotificationRecord.model_validate(entry))
            except pydantic.ValidationError as exc:
                logger.warning(
                    "ledger_entry_skipped",
                    path=str(self.path),
                    index=index,
                    errors=exc.error_count(),
                )
        return records

    def reload(self) -> None:
        """Replace the in-memory collection with the file's contents."""
        records = self.load()
        with self._lock:
            self._records = records
        logger.info("ledger_loaded", path=str(self.path), count=len(records))

    def persist(self) -> PersistResult:
        """Overwrite the file with the full in-memory collection."""
        with self._lock:
            documents = [record.to_document() for record in self._records]
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text(
                    yaml.safe_dump(documents, sort_keys=False, allow_unicode=True, indent=4),
                    encoding="utf-8",
                )
            except (OSError, yaml.YAMLError) as exc:
                error = StorageError(f"Cannot write {self.path}: {exc}")
                ledger_persist_failures_total.inc()
                logger.error("ledger_persist_failed", path=str(self.path), error=str(exc))
                result = PersistResult(error=error, count=len(documents))
            else:
                result = PersistResult(count=len(documents))
            self.last_persist = result
            return result

    # ── queries ──

    def __len__(self) -> int:
        return len(self._records)

    def ids(self) -> list[str]:
        with self._lock:
            return [record.id for record in self._records]

    def list_for_recipient(self, recipient: str) -> list[NotificationRecord]:
        """Return *recipient*'s records, most recent first.

        Records sharing a ``created_at`` keep no guaranteed order.
        """
        with self._lock:
            matches = [r for r in self._records if r.recipient == recipient]
        return sorted(matches, key=lambda r: r.created_at, reverse=True)

    def get_by_id(self, notification_id: str) -> NotificationRecord | None:
        with self._lock:
            for record in self._records:
                if record.id == notification_id:
                    return record
        return None

    # ── mutations ──

    def append(self, record: NotificationRecord) -> PersistResult:
        """Add *record* and persist the ledger.

        Raises:
            ValueError: A record with the same id already exists.
        """
        with self._lock:
            if self.get_by_id(record.id) is not None:
                raise ValueError(f"Duplicate notification id {record.id}")
            self._records.append(record)
            return self.persist()

    def mark_read(self, notification_id: str) -> NotificationRecord | None:
        """Set ``read=True`` on the record and persist.

        Idempotent: marking an already-read record succeeds again.

        Returns:
            The updated record, or ``None`` if the id is unknown.
        """
        with self._lock:
            for index, record in enumerate(self._records):
                if record.id == notification_id:
                    updated = record.model_copy(update={"read": True})
                    self._records[index] = updated
                    self.persist()
                    return updated
        return None

    def delete(self, notification_id: str) -> bool:
        """Remove the record and persist.

        Returns:
            ``True`` if a record was removed; an unknown id leaves the
            ledger (and its file) untouched.
        """
        with self._lock:
            for index, record in enumerate(self._records):
                if record.id == notification_id:
                    del self._records[index]
                    self.persist()
                    return True
        return False

    def clear(self) -> PersistResult:
        """Remove every record and persist the empty ledger."""
        with self._lock:
            self._records = []
            return self.persist()
