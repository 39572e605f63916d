# ABOUTME: Error taxonomy for the Libris core.
# ABOUTME: Every failure the access-control layer reports is one of these kinds.


class LibraryError(Exception):
    """Base class for every error raised by the Libris core."""

    retryable = False


class UnauthenticatedError(LibraryError):
    """Raised when a session token does not resolve to an identity."""


class ForbiddenError(LibraryError):
    """Raised when an authenticated user acts on a book they do not own."""


class BookNotFoundError(LibraryError):
    """Raised when the requested book does not exist."""

    def __init__(self, book_id: int) -> None:
        super().__init__(f"Book {book_id} not found")
        self.book_id = book_id


class DuplicateUsernameError(LibraryError):
    """Raised when registering a username that is already taken."""


class AuthenticationError(LibraryError):
    """Raised on failed login.

    Deliberately carries no detail: an unknown username and a wrong
    password are indistinguishable to the caller.
    """

    def __init__(self) -> None:
        super().__init__("Invalid username or password")


class IntegrityAnomaly(LibraryError):
    """Internal consistency failure between users, books and ownership.

    These indicate a bug or a race, not a routine user error.
    """


class UnknownUserError(IntegrityAnomaly):
    """Raised when an ownership change names a user that does not exist."""

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User {user_id} does not exist")
        self.user_id = user_id


class UnknownBookError(IntegrityAnomaly):
    """Raised when an ownership change names a book that does not exist."""

    def __init__(self, book_id: int) -> None:
        super().__init__(f"Book {book_id} does not exist")
        self.book_id = book_id


class OwnershipConflictError(IntegrityAnomaly):
    """Raised when granting a book that already belongs to another user."""

    def __init__(self, book_id: int, owner_id: int) -> None:
        super().__init__(f"Book {book_id} is already owned by user {owner_id}")
        self.book_id = book_id
        self.owner_id = owner_id


class StorageUnavailableError(LibraryError):
    """The database could not complete the operation (I/O, lock timeout, corruption).

    The only kind of failure a caller may retry.
    """

    retryable = True
