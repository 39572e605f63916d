# ABOUTME: Ownership Index: the durable (user, book) relation that scopes access.
# ABOUTME: Each book has at most one owner; listings come back in insertion order.

import logging

from libris.db.mapping import is_storable_id
from libris.db.transaction import TransactionManager
from libris.errors import OwnershipConflictError, UnknownBookError, UnknownUserError

logger = logging.getLogger(__name__)


class OwnershipIndex:
    """Maps users to the books they own, backed by the ownership table."""

    def __init__(self, tx: TransactionManager) -> None:
        self._tx = tx

    def grant(self, user_id: int, book_id: int) -> None:
        """Make user_id the owner of book_id.

        Granting a pair that already exists is a no-op.

        Raises:
            UnknownUserError: If the user does not exist.
            UnknownBookError: If the book does not exist.
            OwnershipConflictError: If another user already owns the book.
        """
        if not is_storable_id(book_id):
            raise UnknownBookError(book_id)
        with self._tx.transaction() as conn:
            if conn.execute("SELECT 1 FROM users WHERE id = ?", (user_id,)).fetchone() is None:
                raise UnknownUserError(user_id)
            if conn.execute("SELECT 1 FROM books WHERE id = ?", (book_id,)).fetchone() is None:
                raise UnknownBookError(book_id)

            current = self.owner_of(book_id)
            if current == user_id:
                return
            if current is not None:
                raise OwnershipConflictError(book_id, current)

            conn.execute(
                "INSERT INTO ownership (user_id, book_id) VALUES (?, ?)",
                (user_id, book_id),
            )
        logger.debug("Granted book %d to user %d", book_id, user_id)

    def revoke(self, user_id: int, book_id: int) -> None:
        """Remove book_id from the user's set. No-op if the pair is absent."""
        if not is_storable_id(book_id):
            return
        with self._tx.transaction() as conn:
            conn.execute(
                "DELETE FROM ownership WHERE user_id = ? AND book_id = ?",
                (user_id, book_id),
            )

    def owns(self, user_id: int, book_id: int) -> bool:
        if not is_storable_id(book_id):
            return False
        with self._tx.reading() as conn:
            row = conn.execute(
                "SELECT 1 FROM ownership WHERE user_id = ? AND book_id = ?",
                (user_id, book_id),
            ).fetchone()
        return row is not None

    def owner_of(self, book_id: int) -> int | None:
        """Return the owning user's id, or None if the book has no owner."""
        if not is_storable_id(book_id):
            return None
        with self._tx.reading() as conn:
            row = conn.execute(
                "SELECT user_id FROM ownership WHERE book_id = ?", (book_id,)
            ).fetchone()
        return row[0] if row else None

    def list_owned(self, user_id: int) -> list[int]:
        """Book ids owned by user_id, oldest grant first.

        Returns a new list each call, so callers may iterate as often as they like.
        """
        with self._tx.reading() as conn:
            rows = conn.execute(
                "SELECT book_id FROM ownership WHERE user_id = ? ORDER BY id",
                (user_id,),
            ).fetchall()
        return [row[0] for row in rows]

    def count_owned(self, user_id: int) -> int:
        with self._tx.reading() as conn:
            row = conn.execute(
                "SELECT COUNT(*) FROM ownership WHERE user_id = ?", (user_id,)
            ).fetchone()
        return row[0]

    def dangling(self) -> list[tuple[int, int]]:
        """(user_id, book_id) pairs whose book no longer exists."""
        with self._tx.reading() as conn:
            rows = conn.execute(
                "SELECT o.user_id, o.book_id FROM ownership o "
                "LEFT JOIN books b ON b.id = o.book_id "
                "WHERE b.id IS NULL "
                "ORDER BY o.id"
            ).fetchall()
        return [(row[0], row[1]) for row in rows]

    def unowned_books(self) -> list[int]:
        """Ids of books that no user owns."""
        with self._tx.reading() as conn:
            rows = conn.execute(
                "SELECT b.id FROM books b "
                "LEFT JOIN ownership o ON o.book_id = b.id "
                "WHERE o.id IS NULL "
                "ORDER BY b.id"
            ).fetchall()
        return [row[0] for row in rows]
