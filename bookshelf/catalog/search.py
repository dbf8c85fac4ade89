"""
Listing queries for the catalogue.

``list_books()`` is what the ``/books`` route runs: free-text search on
title and author, an optional genre filter, optional sorting and finally
pagination. Pagination happens after filtering and sorting so that
``total`` and ``total_pages`` describe the filtered list.
"""

from __future__ import annotations

from typing import List, Optional

from ..models import Book
from ..storage import CollectionStore, _norm, sort_books
from .schemas import PaginatedBooks


def paginate(books: List[Book], page: int, page_size: int) -> PaginatedBooks:
    """Slice ``books`` for the requested page.

    ``page_size`` is clamped to at least 1 and ``page`` into
    ``[1, total_pages]``; an empty list still has one (empty) page.
    """
    ps = max(1, int(page_size))
    total = len(books)
    total_pages = max(1, (total + ps - 1) // ps)
    p = min(max(1, int(page)), total_pages)
    start = (p - 1) * ps
    return PaginatedBooks(
        page=p,
        page_size=ps,
        total=total,
        total_pages=total_pages,
        items=books[start:start + ps],
    )


def list_books(
    store: CollectionStore,
    q: Optional[str] = None,
    genre: Optional[str] = None,
    sort: Optional[str] = None,
    descending: bool = True,
    page: int = 1,
    page_size: int = 5,
) -> PaginatedBooks:
    """Search, filter, sort and paginate the store.

    Parameters
    ----------
    store : CollectionStore
        The collection to query. It is never modified.
    q : Optional[str]
        Case-insensitive substring matched against title and author.
    genre : Optional[str]
        Case-insensitive exact genre match. Empty means all genres.
    sort : Optional[str]
        Any key accepted by ``CollectionStore.sorted_by``; ``None`` or
        ``"none"`` keeps insertion order.
    descending : bool
        Sort direction; ignored when not sorting.
    page, page_size : int
        1-indexed page and number of books per page.
    """
    items = store.search(q)

    wanted = _norm(genre)
    if wanted:
        items = [b for b in items if _norm(b.genre) == wanted]

    if sort and sort != "none":
        items = sort_books(items, sort, descending)

    return paginate(items, page, page_size)
