# ABOUTME: Identity layer for Libris: credentials and login sessions.
# ABOUTME: Exports the Credential Store and Session Manager.

from libris.auth.credentials import CredentialStore, User
from libris.auth.sessions import Identity, SessionManager

__all__ = [
    "CredentialStore",
    "Identity",
    "SessionManager",
    "User",
]
