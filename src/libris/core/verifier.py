# ABOUTME: Library integrity verification for the Libris catalog.
# ABOUTME: Finds books with no owner and ownership entries pointing at missing books.

from dataclasses import dataclass, field

from libris.db.books import BookRepository
from libris.db.mapping import Book
from libris.db.ownership import OwnershipIndex


@dataclass
class VerifyResult:
    """Aggregated results from a library verification run."""

    ok: int = 0
    orphaned: list[Book] = field(default_factory=list)
    dangling: list[tuple[int, int]] = field(default_factory=list)

    @property
    def total_issues(self) -> int:
        """Total number of issues found across all categories."""
        return len(self.orphaned) + len(self.dangling)


def verify_library(books: BookRepository, ownership: OwnershipIndex) -> VerifyResult:
    """Check that the ownership relation and the book table agree.

    1. Every book should have exactly one owner; books with none are orphaned
       and unreachable through the access-control service.
    2. Every ownership entry should reference an existing book.

    Args:
        books: The book repository to scan.
        ownership: The ownership index to cross-check.

    Returns:
        A VerifyResult with the count of healthy books and the problems found.
    """
    result = VerifyResult()

    unowned = set(ownership.unowned_books())
    for book in books.list_all():
        if book.id in unowned:
            result.orphaned.append(book)
        else:
            result.ok += 1

    result.dangling = ownership.dangling()
    return result
