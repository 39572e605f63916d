# ABOUTME: Book Repository: durable CRUD for book records keyed by id.
# ABOUTME: Knows nothing about users; ownership lives in libris.db.ownership.

import logging
import sqlite3

from libris.db.mapping import (
    Book,
    BookFields,
    BookUpdate,
    fields_to_row,
    is_storable_id,
    row_to_book,
)
from libris.db.transaction import TransactionManager
from libris.errors import IntegrityAnomaly

logger = logging.getLogger(__name__)

_TIMESTAMP_SQL = "strftime('%Y-%m-%dT%H:%M:%S', 'now')"


class BookRepository:
    """Typed CRUD for the books table.

    Performs no validation of rating range or genre vocabulary; fields are
    stored exactly as supplied.
    """

    def __init__(self, tx: TransactionManager) -> None:
        self._tx = tx

    def create(self, book_fields: BookFields) -> int:
        """Insert a book and return its freshly assigned id."""
        row = fields_to_row(book_fields)
        columns = ", ".join(row.keys())
        placeholders = ", ".join("?" for _ in row)

        with self._tx.transaction() as conn:
            cursor = conn.execute(
                f"INSERT INTO books ({columns}) VALUES ({placeholders})",
                list(row.values()),
            )
        logger.debug("Created book %d", cursor.lastrowid)
        return cursor.lastrowid  # type: ignore[return-value]

    def get(self, book_id: int) -> Book | None:
        """Retrieve a book by id, or None if it does not exist."""
        if not is_storable_id(book_id):
            return None
        with self._tx.reading() as conn:
            row = conn.execute("SELECT * FROM books WHERE id = ?", (book_id,)).fetchone()
        return row_to_book(row) if row else None

    def exists(self, book_id: int) -> bool:
        if not is_storable_id(book_id):
            return False
        with self._tx.reading() as conn:
            row = conn.execute("SELECT 1 FROM books WHERE id = ?", (book_id,)).fetchone()
        return row is not None

    def list_all(self) -> list[Book]:
        """Return every book, ordered by id."""
        with self._tx.reading() as conn:
            rows = conn.execute("SELECT * FROM books ORDER BY id").fetchall()
        return [row_to_book(row) for row in rows]

    def update(self, book_id: int, update: BookUpdate) -> Book | None:
        """Apply a partial update.

        Only fields supplied in ``update`` are written; an empty update still
        returns the current record. updated_at is refreshed whenever at least
        one field is written.

        Returns:
            The updated Book, or None if book_id does not exist.
        """
        if not is_storable_id(book_id):
            return None
        changes = update.changes()
        with self._tx.transaction() as conn:
            if changes:
                set_clause = ", ".join(f"{column} = ?" for column in changes)
                set_clause += f", updated_at = {_TIMESTAMP_SQL}"
                cursor = conn.execute(
                    f"UPDATE books SET {set_clause} WHERE id = ?",
                    [*changes.values(), book_id],
                )
                if cursor.rowcount == 0:
                    return None
            row = conn.execute("SELECT * FROM books WHERE id = ?", (book_id,)).fetchone()
        return row_to_book(row) if row else None

    def delete(self, book_id: int) -> bool:
        """Permanently delete a book. Returns False if it did not exist.

        Outside an enclosing transaction the ownership foreign key is checked
        immediately, so deleting a book that still has an owner is refused.
        Inside one, the owner must be revoked before the outer commit.

        Raises:
            IntegrityAnomaly: If the book is still owned at commit time.
        """
        if not is_storable_id(book_id):
            return False
        try:
            with self._tx.transaction() as conn:
                cursor = conn.execute("DELETE FROM books WHERE id = ?", (book_id,))
        except sqlite3.IntegrityError as exc:
            raise IntegrityAnomaly(f"Book {book_id} is still owned; revoke it first") from exc
        deleted = cursor.rowcount > 0
        if deleted:
            logger.debug("Deleted book %d", book_id)
        return deleted
