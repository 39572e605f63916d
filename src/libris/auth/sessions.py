# ABOUTME: Session Manager: opaque bearer tokens mapped to identity snapshots.
# ABOUTME: Tokens are random, stored only as SHA-256 digests, and never expire on their own.

import hashlib
import json
import logging
import secrets
from dataclasses import dataclass

from libris.auth.credentials import CredentialStore
from libris.db.ownership import OwnershipIndex
from libris.db.transaction import TransactionManager
from libris.errors import UnknownUserError

logger = logging.getLogger(__name__)

_TOKEN_BYTES = 32


@dataclass(frozen=True)
class Identity:
    """Who a session belongs to, as captured when the session was created.

    owned_at_login is a snapshot and is not refreshed; authorization always
    consults the live ownership index instead.
    """

    user_id: int
    username: str
    owned_at_login: tuple[int, ...]
    session_created: str


def _digest(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class SessionManager:
    """Creates, resolves and destroys login sessions.

    Lifecycle: a session is Absent until create_session, Active until
    destroy or reset, then Absent again. There is no expiry.
    """

    def __init__(
        self,
        tx: TransactionManager,
        credentials: CredentialStore,
        ownership: OwnershipIndex,
    ) -> None:
        self._tx = tx
        self._credentials = credentials
        self._ownership = ownership

    def create_session(self, user_id: int) -> str:
        """Open a session for an existing user and return its token.

        Raises:
            UnknownUserError: If user_id does not exist.
        """
        token = secrets.token_urlsafe(_TOKEN_BYTES)
        with self._tx.transaction() as conn:
            user = self._credentials.get_user(user_id)
            if user is None:
                raise UnknownUserError(user_id)
            owned = self._ownership.list_owned(user_id)
            conn.execute(
                "INSERT INTO sessions (token_hash, user_id, username, owned_books) "
                "VALUES (?, ?, ?, ?)",
                (_digest(token), user.id, user.username, json.dumps(owned)),
            )
        logger.info("Opened session for user %d", user_id)
        return token

    def resolve(self, token: str | None) -> Identity | None:
        """Look up the identity behind a token.

        Returns None for a missing, empty or unknown token; never raises for
        bad input and never modifies state.
        """
        if not token:
            return None
        with self._tx.reading() as conn:
            row = conn.execute(
                "SELECT user_id, username, owned_books, created_at "
                "FROM sessions WHERE token_hash = ?",
                (_digest(token),),
            ).fetchone()
        if row is None:
            return None
        return Identity(
            user_id=row["user_id"],
            username=row["username"],
            owned_at_login=tuple(json.loads(row["owned_books"])),
            session_created=row["created_at"],
        )

    def destroy(self, token: str | None) -> None:
        """End a session. Unknown or empty tokens are ignored."""
        if not token:
            return
        with self._tx.transaction() as conn:
            cursor = conn.execute("DELETE FROM sessions WHERE token_hash = ?", (_digest(token),))
        if cursor.rowcount:
            logger.info("Closed session")

    def reset(self) -> int:
        """Destroy every session. Returns how many were removed."""
        with self._tx.transaction() as conn:
            cursor = conn.execute("DELETE FROM sessions")
        logger.warning("Session store reset, %d session(s) removed", cursor.rowcount)
        return cursor.rowcount
