# ABOUTME: Account Service: registration, login, logout, and the profile summary.
# ABOUTME: Turns credential checks into sessions and reports failures without detail.

import logging
from dataclasses import dataclass

from libris.auth.credentials import CredentialStore
from libris.auth.sessions import SessionManager
from libris.db.ownership import OwnershipIndex
from libris.errors import AuthenticationError, UnauthenticatedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Profile:
    """What the profile page shows: who you are and how many books you own."""

    user_id: int
    username: str
    book_count: int


class AccountService:
    """User-facing account operations built on the credential and session stores."""

    def __init__(
        self,
        credentials: CredentialStore,
        sessions: SessionManager,
        ownership: OwnershipIndex,
    ) -> None:
        self._credentials = credentials
        self._sessions = sessions
        self._ownership = ownership

    def register(self, username: str, password: str) -> int:
        """Create an account. Raises DuplicateUsernameError if the name is taken."""
        return self._credentials.register(username, password)

    def login(self, username: str, password: str) -> str:
        """Verify credentials and open a session.

        Raises:
            AuthenticationError: On an unknown username or a wrong password,
                without saying which.
        """
        user_id = self._credentials.verify(username, password)
        if user_id is None:
            logger.info("Failed login attempt")
            raise AuthenticationError()
        return self._sessions.create_session(user_id)

    def logout(self, token: str | None) -> None:
        self._sessions.destroy(token)

    def profile(self, token: str | None) -> Profile:
        """Summarize the logged-in user; the book count is read live, not from the snapshot."""
        identity = self._sessions.resolve(token)
        if identity is None:
            raise UnauthenticatedError("You must be logged in")
        return Profile(
            user_id=identity.user_id,
            username=identity.username,
            book_count=self._ownership.count_owned(identity.user_id),
        )
