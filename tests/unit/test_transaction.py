# ABOUTME: Unit tests for TransactionManager.
# ABOUTME: Validates commit, rollback, savepoint nesting, and storage error translation.

import sqlite3
import threading
from collections.abc import Iterator
from pathlib import Path

import pytest

from libris.db.connection import open_library
from libris.db.transaction import TransactionManager
from libris.errors import StorageUnavailableError


@pytest.fixture()
def tx(db_path: Path) -> Iterator[TransactionManager]:
    """Provide a TransactionManager over a fresh database."""
    conn = open_library(db_path)
    yield TransactionManager(conn)
    conn.close()


def _count_books(tx: TransactionManager) -> int:
    with tx.reading() as conn:
        return conn.execute("SELECT COUNT(*) FROM books").fetchone()[0]


class TestTransaction:
    """Tests for TransactionManager.transaction()."""

    def test_commits_on_success(self, tx: TransactionManager) -> None:
        """Statements inside a successful block are committed."""
        with tx.transaction() as conn:
            conn.execute("INSERT INTO books (title) VALUES ('Dune')")
        assert _count_books(tx) == 1
        assert not tx.connection.in_transaction

    def test_rolls_back_on_exception(self, tx: TransactionManager) -> None:
        """An exception inside the block undoes its statements and propagates."""
        with pytest.raises(RuntimeError):
            with tx.transaction() as conn:
                conn.execute("INSERT INTO books (title) VALUES ('Dune')")
                raise RuntimeError("boom")
        assert _count_books(tx) == 0
        assert not tx.connection.in_transaction

    def test_nested_failure_rolls_back_inner_only(self, tx: TransactionManager) -> None:
        """A caught failure in a nested scope keeps the outer scope's work."""
        with tx.transaction() as conn:
            conn.execute("INSERT INTO books (title) VALUES ('outer')")
            with pytest.raises(RuntimeError):
                with tx.transaction() as inner:
                    inner.execute("INSERT INTO books (title) VALUES ('inner')")
                    raise RuntimeError("boom")
        with tx.reading() as conn:
            titles = [r[0] for r in conn.execute("SELECT title FROM books").fetchall()]
        assert titles == ["outer"]

    def test_outer_failure_discards_committed_inner(self, tx: TransactionManager) -> None:
        """Work released by an inner scope is still undone when the outer scope fails."""
        with pytest.raises(RuntimeError):
            with tx.transaction():
                with tx.transaction() as inner:
                    inner.execute("INSERT INTO books (title) VALUES ('inner')")
                raise RuntimeError("boom")
        assert _count_books(tx) == 0

    def test_integrity_error_passes_through(self, tx: TransactionManager) -> None:
        """Constraint violations are not reported as storage faults."""
        with tx.transaction() as conn:
            conn.execute("INSERT INTO users (username, password_hash) VALUES ('alice', 'x')")
        with pytest.raises(sqlite3.IntegrityError):
            with tx.transaction() as conn:
                conn.execute("INSERT INTO users (username, password_hash) VALUES ('alice', 'y')")

    def test_operational_error_becomes_storage_unavailable(
        self, tx: TransactionManager
    ) -> None:
        """Other sqlite3 errors surface as StorageUnavailableError."""
        with pytest.raises(StorageUnavailableError) as excinfo:
            with tx.transaction() as conn:
                conn.execute("INSERT INTO no_such_table VALUES (1)")
        assert excinfo.value.retryable is True
        assert isinstance(excinfo.value.__cause__, sqlite3.OperationalError)

    def test_reading_translates_errors(self, tx: TransactionManager) -> None:
        """reading() maps storage faults the same way."""
        with pytest.raises(StorageUnavailableError):
            with tx.reading() as conn:
                conn.execute("SELECT * FROM no_such_table")

    def test_closed_connection_is_unavailable(self, tx: TransactionManager) -> None:
        """A closed connection is a storage fault, not a crash."""
        tx.connection.close()
        with pytest.raises(StorageUnavailableError):
            with tx.transaction() as conn:
                conn.execute("SELECT 1")


class TestSerialization:
    """Tests for cross-thread serialization on a shared connection."""

    def test_threads_do_not_interleave(self, tx: TransactionManager) -> None:
        """Concurrent transactions each commit exactly their own rows."""
        errors: list[BaseException] = []

        def worker(n: int) -> None:
            try:
                for i in range(20):
                    with tx.transaction() as conn:
                        conn.execute("INSERT INTO books (title) VALUES (?)", (f"{n}-{i}",))
            except BaseException as exc:  # pragma: no cover - reported below
                errors.append(exc)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert _count_books(tx) == 80
