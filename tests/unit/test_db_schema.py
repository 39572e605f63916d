# ABOUTME: Unit tests for database schema creation and connection management.
# ABOUTME: Validates table structure, constraints, WAL mode, and pragmas.

import sqlite3
from pathlib import Path

import pytest

from libris.db.connection import open_library


class TestOpenLibrary:
    """Tests for open_library() connection factory."""

    def test_creates_database_file(self, db_path: Path) -> None:
        """Calling open_library creates a .db file at the given path."""
        conn = open_library(db_path)
        conn.close()
        assert db_path.exists()

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        """Creates parent directories if they don't exist."""
        nested = tmp_path / "deep" / "nested" / "library.db"
        conn = open_library(nested)
        conn.close()
        assert nested.exists()

    def test_creates_books_table(self, db_path: Path) -> None:
        """The books table exists with expected columns."""
        conn = open_library(db_path)
        columns = {row[1] for row in conn.execute("PRAGMA table_info(books)").fetchall()}
        conn.close()

        assert columns == {
            "id",
            "title",
            "author",
            "content",
            "genre",
            "rating",
            "cover_image",
            "created_at",
            "updated_at",
        }

    def test_creates_users_and_ownership_tables(self, db_path: Path) -> None:
        """The users and ownership tables exist."""
        conn = open_library(db_path)
        tables = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
        conn.close()
        assert {"users", "books", "ownership", "sessions", "schema_version"} <= tables

    def test_wal_mode_enabled(self, db_path: Path) -> None:
        """Database uses WAL journal mode."""
        conn = open_library(db_path)
        mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
        conn.close()
        assert mode == "wal"

    def test_foreign_keys_enabled(self, db_path: Path) -> None:
        """Foreign key enforcement is on."""
        conn = open_library(db_path)
        enabled = conn.execute("PRAGMA foreign_keys").fetchone()[0]
        conn.close()
        assert enabled == 1

    def test_autocommit_mode(self, db_path: Path) -> None:
        """The connection leaves transaction control to the caller."""
        conn = open_library(db_path)
        assert conn.isolation_level is None
        conn.close()

    def test_reopen_preserves_data(self, db_path: Path) -> None:
        """Reopening an existing database keeps its rows."""
        conn = open_library(db_path)
        conn.execute("INSERT INTO books (title) VALUES ('Dune')")
        conn.close()

        conn = open_library(db_path)
        count = conn.execute("SELECT COUNT(*) FROM books").fetchone()[0]
        conn.close()
        assert count == 1


class TestConstraints:
    """Tests for the constraints that back the ownership model."""

    def test_username_is_unique(self, db_path: Path) -> None:
        """Two users cannot share a username."""
        conn = open_library(db_path)
        conn.execute("INSERT INTO users (username, password_hash) VALUES ('alice', 'x')")
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute("INSERT INTO users (username, password_hash) VALUES ('alice', 'y')")
        conn.close()

    def test_username_is_case_sensitive(self, db_path: Path) -> None:
        """'Alice' and 'alice' are different usernames."""
        conn = open_library(db_path)
        conn.execute("INSERT INTO users (username, password_hash) VALUES ('alice', 'x')")
        conn.execute("INSERT INTO users (username, password_hash) VALUES ('Alice', 'y')")
        count = conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]
        conn.close()
        assert count == 2

    def test_book_has_at_most_one_owner(self, db_path: Path) -> None:
        """The ownership table refuses a second owner for the same book."""
        conn = open_library(db_path)
        conn.execute("INSERT INTO users (username, password_hash) VALUES ('alice', 'x')")
        conn.execute("INSERT INTO users (username, password_hash) VALUES ('bob', 'y')")
        conn.execute("INSERT INTO books (title) VALUES ('Dune')")
        conn.execute("INSERT INTO ownership (user_id, book_id) VALUES (1, 1)")
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute("INSERT INTO ownership (user_id, book_id) VALUES (2, 1)")
        conn.close()

    def test_ownership_of_missing_book_rejected(self, db_path: Path) -> None:
        """Outside a transaction the deferred book reference is checked at once."""
        conn = open_library(db_path)
        conn.execute("INSERT INTO users (username, password_hash) VALUES ('alice', 'x')")
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute("INSERT INTO ownership (user_id, book_id) VALUES (1, 99)")
        conn.close()

    def test_book_ids_never_reused(self, db_path: Path) -> None:
        """Deleting the newest book does not free its id."""
        conn = open_library(db_path)
        conn.execute("INSERT INTO books (title) VALUES ('first')")
        conn.execute("DELETE FROM books WHERE id = 1")
        cursor = conn.execute("INSERT INTO books (title) VALUES ('second')")
        conn.close()
        assert cursor.lastrowid == 2
