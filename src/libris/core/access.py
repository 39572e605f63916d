# ABOUTME: Access-Control Service: the owner-scoped book operations every caller goes through.
# ABOUTME: Resolves the session, authorizes against the ownership index, then reads or mutates.

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager

from libris.auth.sessions import Identity, SessionManager
from libris.db.books import BookRepository
from libris.db.mapping import Book, BookFields, BookUpdate
from libris.db.ownership import OwnershipIndex
from libris.db.transaction import TransactionManager
from libris.errors import (
    BookNotFoundError,
    ForbiddenError,
    IntegrityAnomaly,
    UnauthenticatedError,
)

logger = logging.getLogger(__name__)


class AccessControlService:
    """Combines sessions, ownership and book storage into authorized results.

    Every operation raises UnauthenticatedError when the token does not
    resolve. For a specific book, existence is checked before ownership, so a
    missing book is BookNotFoundError for every caller and ForbiddenError only
    ever means "exists, but not yours".

    Create (insert + grant) and delete (delete + revoke) each run as a single
    transaction: either both steps land or neither does.
    """

    def __init__(
        self,
        tx: TransactionManager,
        sessions: SessionManager,
        books: BookRepository,
        ownership: OwnershipIndex,
    ) -> None:
        self._tx = tx
        self._sessions = sessions
        self._books = books
        self._ownership = ownership

    def list_my_books(self, token: str | None) -> list[Book]:
        """All books the caller owns, oldest first.

        An ownership entry whose book is missing is logged and skipped rather
        than failing the whole listing.
        """
        identity = self._identify(token)
        books: list[Book] = []
        with self._tx.reading():
            for book_id in self._ownership.list_owned(identity.user_id):
                book = self._books.get(book_id)
                if book is None:
                    logger.error(
                        "Ownership index lists missing book %d for user %d",
                        book_id,
                        identity.user_id,
                    )
                    continue
                books.append(book)
        return books

    def create_book(self, token: str | None, book_fields: BookFields) -> int:
        """Store a new book owned by the caller and return its id."""
        identity = self._identify(token)
        with self._atomic("create", identity):
            book_id = self._books.create(book_fields)
            self._ownership.grant(identity.user_id, book_id)
        logger.info("User %d created book %d", identity.user_id, book_id)
        return book_id

    def view_book(self, token: str | None, book_id: int) -> Book:
        """Return one of the caller's books.

        Raises:
            BookNotFoundError: If no such book exists.
            ForbiddenError: If it exists but belongs to someone else.
        """
        identity = self._identify(token)
        with self._tx.reading():
            self._authorize(identity, book_id)
            book = self._books.get(book_id)
        if book is None:
            raise BookNotFoundError(book_id)
        return book

    def edit_book(self, token: str | None, book_id: int, update: BookUpdate) -> Book:
        """Apply a partial update to one of the caller's books and return the result."""
        identity = self._identify(token)
        with self._atomic("edit", identity):
            self._authorize(identity, book_id)
            book = self._books.update(book_id, update)
        if book is None:
            raise BookNotFoundError(book_id)
        logger.info(
            "User %d edited book %d (%s)",
            identity.user_id,
            book_id,
            ", ".join(update.changes()) or "no changes",
        )
        return book

    def delete_book(self, token: str | None, book_id: int) -> None:
        """Permanently delete one of the caller's books and drop it from their set."""
        identity = self._identify(token)
        with self._atomic("delete", identity):
            self._authorize(identity, book_id)
            self._books.delete(book_id)
            self._ownership.revoke(identity.user_id, book_id)
        logger.info("User %d deleted book %d", identity.user_id, book_id)

    def _identify(self, token: str | None) -> Identity:
        identity = self._sessions.resolve(token)
        if identity is None:
            raise UnauthenticatedError("You must be logged in")
        return identity

    def _authorize(self, identity: Identity, book_id: int) -> None:
        if not self._books.exists(book_id):
            raise BookNotFoundError(book_id)
        if not self._ownership.owns(identity.user_id, book_id):
            logger.info("User %d denied access to book %d", identity.user_id, book_id)
            raise ForbiddenError(f"You do not have access to book {book_id}")

    @contextmanager
    def _atomic(self, action: str, identity: Identity) -> Iterator[None]:
        """Transaction scope that reports consistency failures as anomalies."""
        try:
            with self._tx.transaction():
                yield
        except sqlite3.IntegrityError as exc:
            logger.error(
                "Book %s by user %d violated a storage constraint",
                action,
                identity.user_id,
                exc_info=True,
            )
            raise IntegrityAnomaly(f"Book {action} failed a consistency check") from exc
        except IntegrityAnomaly:
            logger.error(
                "Book %s by user %d rolled back on an integrity anomaly",
                action,
                identity.user_id,
                exc_info=True,
            )
            raise
