# ABOUTME: Unit tests for the CredentialStore.
# ABOUTME: Validates registration, bcrypt verification, and duplicate detection.

import bcrypt
import pytest

from libris.core.library import Library
from libris.errors import DuplicateUsernameError


class TestRegister:
    """Tests for CredentialStore.register."""

    def test_returns_distinct_ids(self, library: Library) -> None:
        a = library.credentials.register("alice", "pw1")
        b = library.credentials.register("bob", "pw2")
        assert isinstance(a, int)
        assert a != b

    def test_duplicate_username(self, library: Library) -> None:
        library.credentials.register("alice", "pw1")
        with pytest.raises(DuplicateUsernameError):
            library.credentials.register("alice", "different")

    def test_usernames_are_case_sensitive(self, library: Library) -> None:
        """'Alice' is a different account from 'alice'."""
        a = library.credentials.register("alice", "pw1")
        b = library.credentials.register("Alice", "pw1")
        assert a != b

    def test_password_is_not_stored_in_plain_text(self, library: Library) -> None:
        """The stored value is a bcrypt hash, never the password itself."""
        library.credentials.register("alice", "pw1")
        with library.tx.reading() as conn:
            stored = conn.execute("SELECT password_hash FROM users").fetchone()[0]
        assert stored != "pw1"
        assert stored.startswith("$2")

    def test_same_password_gets_different_salts(self, library: Library) -> None:
        library.credentials.register("alice", "same")
        library.credentials.register("bob", "same")
        with library.tx.reading() as conn:
            hashes = [r[0] for r in conn.execute("SELECT password_hash FROM users")]
        assert hashes[0] != hashes[1]

    def test_lookup_helpers(self, library: Library) -> None:
        user_id = library.credentials.register("alice", "pw1")
        user = library.credentials.get_user(user_id)
        assert user is not None
        assert user.username == "alice"
        assert library.credentials.get_by_username("alice") == user
        assert library.credentials.exists(user_id)
        assert library.credentials.get_user(user_id + 100) is None
        assert library.credentials.get_by_username("nobody") is None


class TestVerify:
    """Tests for CredentialStore.verify."""

    def test_correct_password_returns_id(self, library: Library) -> None:
        user_id = library.credentials.register("alice", "pw1")
        assert library.credentials.verify("alice", "pw1") == user_id

    def test_wrong_password_returns_none(self, library: Library) -> None:
        library.credentials.register("alice", "pw1")
        assert library.credentials.verify("alice", "wrong") is None

    def test_unknown_user_returns_none(self, library: Library) -> None:
        assert library.credentials.verify("ghost", "pw1") is None

    def test_username_must_match_case(self, library: Library) -> None:
        library.credentials.register("alice", "pw1")
        assert library.credentials.verify("ALICE", "pw1") is None

    def test_long_passwords_are_not_truncated(self, library: Library) -> None:
        """Passwords differing only after byte 72 are distinct."""
        base = "x" * 80
        library.credentials.register("alice", base + "a")
        assert library.credentials.verify("alice", base + "b") is None
        assert library.credentials.verify("alice", base + "a") is not None

    def test_empty_password(self, library: Library) -> None:
        """An empty password is allowed and must match exactly."""
        user_id = library.credentials.register("alice", "")
        assert library.credentials.verify("alice", "") == user_id
        assert library.credentials.verify("alice", " ") is None

    def test_unknown_user_costs_one_bcrypt_check(
        self, library: Library, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The comparison hash for unknown users exists before the first verify."""
        calls: list[str] = []
        real_checkpw = bcrypt.checkpw

        def no_hashing(*args: object) -> bytes:
            calls.append("hashpw")
            raise AssertionError("verify must not hash")

        def counting_checkpw(password: bytes, hashed: bytes) -> bool:
            calls.append("checkpw")
            return real_checkpw(password, hashed)

        monkeypatch.setattr(bcrypt, "hashpw", no_hashing)
        monkeypatch.setattr(bcrypt, "checkpw", counting_checkpw)

        assert library.credentials.verify("ghost", "pw1") is None
        assert calls == ["checkpw"]
