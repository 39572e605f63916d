# ABOUTME: Book data types and conversion between them and SQLite rows.
# ABOUTME: BookUpdate carries explicit "field supplied" markers for partial updates.

from dataclasses import dataclass, fields
from typing import Any

BOOK_FIELDS = ("title", "author", "content", "genre", "rating", "cover_image")

# SQLite INTEGER is a signed 64-bit value
_MIN_ID = -(2**63)
_MAX_ID = 2**63 - 1


class _Unset:
    """Marker type for a field omitted from a partial update."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


@dataclass(frozen=True)
class BookFields:
    """User-supplied content of a book record.

    Every field is optional and stored verbatim. cover_image is an opaque
    reference produced by the upload layer, never image bytes.
    """

    title: str | None = None
    author: str | None = None
    content: str | None = None
    genre: str | None = None
    rating: float | None = None
    cover_image: str | None = None


@dataclass(frozen=True)
class BookUpdate:
    """A partial update: fields left as UNSET are not touched.

    Anything else, including "" and 0 and None, replaces the stored value.
    """

    title: Any = UNSET
    author: Any = UNSET
    content: Any = UNSET
    genre: Any = UNSET
    rating: Any = UNSET
    cover_image: Any = UNSET

    def changes(self) -> dict[str, Any]:
        """Return only the supplied fields, keyed by column name."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    @property
    def is_empty(self) -> bool:
        return not self.changes()


@dataclass(frozen=True)
class Book:
    """A stored book: its fields plus the id and timestamps the repository assigns."""

    id: int
    title: str | None
    author: str | None
    content: str | None
    genre: str | None
    rating: float | None
    cover_image: str | None
    created_at: str
    updated_at: str

    @property
    def as_fields(self) -> BookFields:
        """The user-supplied part of this record."""
        return BookFields(**{name: getattr(self, name) for name in BOOK_FIELDS})


def is_storable_id(book_id: int) -> bool:
    """True if book_id fits in an SQLite INTEGER; larger ids cannot name a stored row."""
    return _MIN_ID <= book_id <= _MAX_ID


def fields_to_row(book_fields: BookFields) -> dict[str, Any]:
    """Convert BookFields to a dict suitable for INSERT."""
    return {name: getattr(book_fields, name) for name in BOOK_FIELDS}


def row_to_book(row: Any) -> Book:
    """Convert a full books row (dict-like) to a Book."""
    return Book(
        id=row["id"],
        title=row["title"],
        author=row["author"],
        content=row["content"],
        genre=row["genre"],
        rating=row["rating"],
        cover_image=row["cover_image"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
