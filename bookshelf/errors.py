"""Exception types raised by the bookshelf core."""

from __future__ import annotations

from typing import Any


class BookshelfError(Exception):
    """Base class for all bookshelf errors."""


class DuplicateIdError(BookshelfError):
    def __init__(self, book_id: Any) -> None:
        super().__init__(f"A book with id {book_id!r} already exists")
        self.book_id = book_id


class BookNotFoundError(BookshelfError):
    def __init__(self, book_id: Any) -> None:
        super().__init__(f"Book {book_id!r} not found")
        self.book_id = book_id


class RejectedMutationError(BookshelfError):
    """The confirmation step refused a mutation.

    Instances are returned inside a ``Rejected`` outcome rather than
    raised; the reason is shown to the user as-is.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class CorruptStorageError(BookshelfError):
    """A storage slot holds something that is not a list of books."""
