# ABOUTME: SQL DDL statements for the Libris library database schema.
# ABOUTME: Defines users, books, the ownership relation, sessions, and migrations.

SCHEMA_V1 = """
-- Registered users; username comparison is case-sensitive (BINARY collation)
CREATE TABLE users (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    username      TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    created_at    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

-- Book records; AUTOINCREMENT guarantees ids are never reused after delete
CREATE TABLE books (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    title       TEXT,
    author      TEXT,
    content     TEXT,
    genre       TEXT,
    rating      REAL,
    cover_image TEXT,
    created_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    updated_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

-- Ownership relation: one owner per book, rowid order is insertion order.
-- The book reference is checked at COMMIT so delete+revoke can run in
-- either order inside one transaction.
CREATE TABLE ownership (
    id       INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id  INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    book_id  INTEGER NOT NULL UNIQUE
             REFERENCES books(id) DEFERRABLE INITIALLY DEFERRED,
    added_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

CREATE INDEX idx_ownership_user ON ownership(user_id);

-- Schema versioning for future migrations
CREATE TABLE schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

INSERT INTO schema_version (version) VALUES (1);
"""

MIGRATION_V2 = """
-- Durable login sessions; only the SHA-256 digest of each token is stored
CREATE TABLE sessions (
    token_hash  TEXT PRIMARY KEY,
    user_id     INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    username    TEXT NOT NULL,
    owned_books TEXT NOT NULL DEFAULT '[]',
    created_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
);

CREATE INDEX idx_sessions_user ON sessions(user_id);

INSERT INTO schema_version (version) VALUES (2);
"""

# Ordered (version, sql) pairs applied by the connection layer on open.
MIGRATIONS: list[tuple[int, str]] = [
    (2, MIGRATION_V2),
]
