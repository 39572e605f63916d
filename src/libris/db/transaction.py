# ABOUTME: Transactional boundary and serialization for the shared SQLite connection.
# ABOUTME: Maps raw storage faults to StorageUnavailableError before they leave the db layer.

import logging
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from libris.errors import StorageUnavailableError

logger = logging.getLogger(__name__)


def _translate(exc: BaseException) -> BaseException:
    """Classify a storage exception.

    IntegrityError is a constraint verdict, not a fault, and is left for the
    caller to interpret. Every other sqlite3 error becomes StorageUnavailableError.
    """
    if isinstance(exc, sqlite3.IntegrityError):
        return exc
    if isinstance(exc, sqlite3.Error):
        return StorageUnavailableError(f"Library database unavailable: {exc}")
    return exc


class TransactionManager:
    """Owns the lock and transaction scope for one sqlite3 connection.

    All repositories sharing a connection must share one TransactionManager.
    Every read and write holds the re-entrant lock, so work from different
    threads never interleaves on the connection. The outermost
    ``transaction()`` opens ``BEGIN IMMEDIATE``; nested scopes become
    savepoints, so an inner failure rolls back only its own work unless it
    propagates to the outer scope.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._lock = threading.RLock()
        self._depth = 0

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run the enclosed block atomically.

        Yields:
            The underlying connection, for executing statements.

        Raises:
            StorageUnavailableError: If SQLite fails for a reason other than
                a constraint violation. The transaction is rolled back.
        """
        with self._lock:
            savepoint = f"sp_{self._depth}" if self._depth else None
            self._begin(savepoint)
            self._depth += 1
            try:
                yield self._conn
            except BaseException as exc:
                self._depth -= 1
                self._rollback(savepoint)
                translated = _translate(exc)
                if translated is exc:
                    raise
                raise translated from exc
            self._depth -= 1
            self._commit(savepoint)

    @contextmanager
    def reading(self) -> Iterator[sqlite3.Connection]:
        """Hold the connection lock for a read-only block."""
        with self._lock:
            try:
                yield self._conn
            except sqlite3.Error as exc:
                translated = _translate(exc)
                if translated is exc:
                    raise
                raise translated from exc

    def _begin(self, savepoint: str | None) -> None:
        try:
            if savepoint is None:
                self._conn.execute("BEGIN IMMEDIATE")
            else:
                self._conn.execute(f"SAVEPOINT {savepoint}")
        except sqlite3.Error as exc:
            raise StorageUnavailableError(f"Could not start transaction: {exc}") from exc

    def _commit(self, savepoint: str | None) -> None:
        try:
            if savepoint is None:
                self._conn.execute("COMMIT")
            else:
                self._conn.execute(f"RELEASE {savepoint}")
        except sqlite3.Error as exc:
            self._rollback(savepoint)
            translated = _translate(exc)
            if translated is exc:
                raise
            raise translated from exc

    def _rollback(self, savepoint: str | None) -> None:
        if not self._conn.in_transaction:
            return
        try:
            if savepoint is None:
                self._conn.execute("ROLLBACK")
            else:
                self._conn.execute(f"ROLLBACK TO {savepoint}")
                self._conn.execute(f"RELEASE {savepoint}")
        except sqlite3.Error:
            logger.exception("Rollback failed")
        else:
            logger.debug("Rolled back %s", savepoint or "transaction")
