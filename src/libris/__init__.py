# ABOUTME: Libris - a personal library catalog with per-user book ownership.
# ABOUTME: Package root; the core lives in libris.core, storage in libris.db.

__version__ = "0.1.0"
