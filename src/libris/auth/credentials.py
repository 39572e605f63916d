# ABOUTME: Credential Store: usernames and bcrypt password hashes.
# ABOUTME: Registration and constant-time verification that never reveals which check failed.

import base64
import hashlib
import logging
import sqlite3
from dataclasses import dataclass

import bcrypt

from libris.config import DEFAULT_BCRYPT_ROUNDS
from libris.db.transaction import TransactionManager
from libris.errors import DuplicateUsernameError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class User:
    """A registered user. The password hash never leaves the store."""

    id: int
    username: str
    created_at: str


def _prehash(raw_password: str) -> bytes:
    """SHA-256 then base64 the password so bcrypt's 72-byte input limit never truncates it."""
    digest = hashlib.sha256(raw_password.encode("utf-8")).digest()
    return base64.b64encode(digest)


class CredentialStore:
    """Registers users and verifies their passwords.

    Passwords are stored as salted bcrypt hashes. Usernames match exactly,
    case included.
    """

    def __init__(self, tx: TransactionManager, *, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        self._tx = tx
        self._rounds = rounds
        # Compared against when the username is unknown
        self._dummy_hash = bcrypt.hashpw(
            _prehash("libris-dummy-password"), bcrypt.gensalt(rounds=rounds)
        )

    def register(self, username: str, raw_password: str) -> int:
        """Create a user and return its id.

        Raises:
            DuplicateUsernameError: If the username is already registered.
        """
        password_hash = bcrypt.hashpw(_prehash(raw_password), bcrypt.gensalt(rounds=self._rounds))
        try:
            with self._tx.transaction() as conn:
                cursor = conn.execute(
                    "INSERT INTO users (username, password_hash) VALUES (?, ?)",
                    (username, password_hash.decode("ascii")),
                )
        except sqlite3.IntegrityError as exc:
            if "UNIQUE constraint failed: users.username" in str(exc):
                raise DuplicateUsernameError(f"Username '{username}' is already taken") from exc
            raise

        logger.info("Registered user %d", cursor.lastrowid)
        return cursor.lastrowid  # type: ignore[return-value]

    def verify(self, username: str, raw_password: str) -> int | None:
        """Check a username/password pair.

        Returns:
            The user's id on a match, otherwise None. Unknown usernames and
            wrong passwords are indistinguishable, in result and in timing.
        """
        with self._tx.reading() as conn:
            row = conn.execute(
                "SELECT id, password_hash FROM users WHERE username = ?", (username,)
            ).fetchone()

        candidate = _prehash(raw_password)
        if row is None:
            bcrypt.checkpw(candidate, self._dummy_hash)
            return None
        if bcrypt.checkpw(candidate, row["password_hash"].encode("ascii")):
            return row["id"]
        return None

    def get_user(self, user_id: int) -> User | None:
        with self._tx.reading() as conn:
            row = conn.execute(
                "SELECT id, username, created_at FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        return User(row["id"], row["username"], row["created_at"]) if row else None

    def get_by_username(self, username: str) -> User | None:
        with self._tx.reading() as conn:
            row = conn.execute(
                "SELECT id, username, created_at FROM users WHERE username = ?", (username,)
            ).fetchone()
        return User(row["id"], row["username"], row["created_at"]) if row else None

    def exists(self, user_id: int) -> bool:
        return self.get_user(user_id) is not None
