# ABOUTME: Public API for the Libris database layer.
# ABOUTME: Exports connection management, repositories, transactions, and data types.

from libris.db.books import BookRepository
from libris.db.connection import open_library
from libris.db.mapping import UNSET, Book, BookFields, BookUpdate
from libris.db.ownership import OwnershipIndex
from libris.db.transaction import TransactionManager

__all__ = [
    "UNSET",
    "Book",
    "BookFields",
    "BookRepository",
    "BookUpdate",
    "OwnershipIndex",
    "TransactionManager",
    "open_library",
]
