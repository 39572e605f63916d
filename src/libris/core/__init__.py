# ABOUTME: Libris core services: access control, accounts, wiring, and integrity checks.
# ABOUTME: Exports the services and the Library entry point.

from libris.core.access import AccessControlService
from libris.core.accounts import AccountService, Profile
from libris.core.library import Library
from libris.core.verifier import VerifyResult, verify_library

__all__ = [
    "AccessControlService",
    "AccountService",
    "Library",
    "Profile",
    "VerifyResult",
    "verify_library",
]
