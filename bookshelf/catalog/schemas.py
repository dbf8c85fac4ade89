"""
Pydantic schema definitions for the catalog routes.

``Book`` itself lives in ``bookshelf.models``; this module holds the
shapes that only exist at the HTTP boundary: the paginated listing, the
result of a confirmed (or rejected) mutation, the collection statistics
shown next to the list, and the validated update body.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..models import Book, BookPatch


class PaginatedBooks(BaseModel):
    """A wrapper for paginated results returned from ``/books`` endpoint."""

    page: int
    page_size: int
    total: int
    total_pages: int
    items: List[Book]


class MutationResult(BaseModel):
    """Outcome of an add or update request.

    ``success`` is ``False`` when the confirmation step rejected the
    request; ``message`` then carries the reason. ``book`` is the stored
    record after a successful change, or ``None`` when nothing matched.
    """

    success: bool
    message: str
    book: Optional[Book] = None


class CatalogStats(BaseModel):
    count: int
    average_rating: float
    authors: List[str]
    genres: List[str]
    genre_counts: Dict[str, int]


class UpdateBookRequest(BookPatch):
    # Same fields as BookPatch, with the checks applied to form input.
    title: Optional[str] = Field(default=None, min_length=1)
    author: Optional[str] = Field(default=None, min_length=1)
    genre: Optional[str] = Field(default=None, min_length=1)
    rating: Optional[float] = Field(default=None, ge=0, le=5)
