# ABOUTME: Shared pytest fixtures for Libris tests.
# ABOUTME: Provides temporary libraries, registered users, and logged-in sessions.

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from libris.core.library import Library
from libris.db.mapping import BookFields

# bcrypt's minimum cost keeps the suite fast
TEST_BCRYPT_ROUNDS = 4


@pytest.fixture(autouse=True)
def _fast_hashing(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make every library the CLI opens during tests use cheap bcrypt hashing."""
    monkeypatch.setenv("LIBRIS_BCRYPT_ROUNDS", str(TEST_BCRYPT_ROUNDS))


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path."""
    return tmp_path / "library.db"


@pytest.fixture()
def library(db_path: Path) -> Iterator[Library]:
    """Provide a Library backed by a temporary database."""
    lib = Library.open(db_path, bcrypt_rounds=TEST_BCRYPT_ROUNDS)
    yield lib
    lib.close()


@pytest.fixture()
def alice(library: Library) -> int:
    """Register alice/pw1 and return the user id."""
    return library.accounts.register("alice", "pw1")


@pytest.fixture()
def bob(library: Library) -> int:
    """Register bob/pw2 and return the user id."""
    return library.accounts.register("bob", "pw2")


@pytest.fixture()
def alice_token(library: Library, alice: int) -> str:
    """A live session token for alice."""
    return library.accounts.login("alice", "pw1")


@pytest.fixture()
def bob_token(library: Library, bob: int) -> str:
    """A live session token for bob."""
    return library.accounts.login("bob", "pw2")


@pytest.fixture()
def dune() -> BookFields:
    """A fully-populated set of book fields."""
    return BookFields(
        title="Dune",
        author="Frank Herbert",
        content="Spice, sandworms, and politics on Arrakis.",
        genre="Science Fiction",
        rating=4.5,
        cover_image="1700000000000.jpg",
    )


@pytest.fixture()
def cover_image(tmp_path: Path) -> Path:
    """A small stand-in image file for cover uploads."""
    path = tmp_path / "Cover.JPG"
    path.write_bytes(b"\xff\xd8\xff\xe0fake jpeg")
    return path


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    """Undo the root-logger setup the CLI performs on each invocation."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
