# ABOUTME: Wires one database connection into every Libris component.
# ABOUTME: Library.open() is the entry point for the CLI and for embedding callers.

import sqlite3
from pathlib import Path

from libris.auth.credentials import CredentialStore
from libris.auth.sessions import SessionManager
from libris.config import DEFAULT_BCRYPT_ROUNDS, DEFAULT_BUSY_TIMEOUT
from libris.core.access import AccessControlService
from libris.core.accounts import AccountService
from libris.db.books import BookRepository
from libris.db.connection import open_library
from libris.db.ownership import OwnershipIndex
from libris.db.transaction import TransactionManager
from libris.errors import StorageUnavailableError


class Library:
    """The assembled core: stores, session manager, and the two services.

    All components share one TransactionManager, and therefore one lock and
    one transaction scope. Use as a context manager to close the connection.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        *,
        bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
    ) -> None:
        self.tx = TransactionManager(conn)
        self.books = BookRepository(self.tx)
        self.ownership = OwnershipIndex(self.tx)
        self.credentials = CredentialStore(self.tx, rounds=bcrypt_rounds)
        self.sessions = SessionManager(self.tx, self.credentials, self.ownership)
        self.access = AccessControlService(self.tx, self.sessions, self.books, self.ownership)
        self.accounts = AccountService(self.credentials, self.sessions, self.ownership)

    @classmethod
    def open(
        cls,
        path: Path | None = None,
        *,
        bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
        busy_timeout: float = DEFAULT_BUSY_TIMEOUT,
    ) -> "Library":
        """Open (creating if needed) the database at path and wire the core.

        Raises:
            StorageUnavailableError: If the database cannot be opened or migrated.
        """
        try:
            conn = open_library(path, busy_timeout=busy_timeout)
        except (sqlite3.Error, OSError) as exc:
            raise StorageUnavailableError(f"Cannot open library database: {exc}") from exc
        return cls(conn, bcrypt_rounds=bcrypt_rounds)

    def close(self) -> None:
        self.tx.connection.close()

    def __enter__(self) -> "Library":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
