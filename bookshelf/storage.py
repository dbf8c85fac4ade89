# bookshelf/storage.py
"""
In-memory collection of books.

``CollectionStore`` is the single owner of the book list. It hands out
ids from its own counter, keeps insertion order for the default listing
and computes every derived view (genre counts, authors, average rating)
from the current list on each call.
"""

from __future__ import annotations

import unicodedata
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from .errors import BookNotFoundError, DuplicateIdError
from .models import Book, BookPatch, StoredBook


# Accepted sort keys, mapped to Book attribute names.
SORT_KEYS: Dict[str, str] = {
    "title": "title",
    "author": "author",
    "genre": "genre",
    "publishedYear": "published_year",
    "published_year": "published_year",
    "rating": "rating",
}
NUMERIC_FIELDS = {"published_year", "rating"}


def _norm(s: Optional[str]) -> str:
    return (s or "").strip().casefold()


def _collation_key(text: str) -> Tuple[str, str, str]:
    """Sort key approximating a locale-aware string comparison.

    Primary level ignores accents and case, secondary level ignores only
    case, and the last level puts lowercase before uppercase.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), text.casefold(), text.swapcase()


def _coerce_id(raw: Any) -> Optional[int]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, str) and raw.strip().isdecimal():
        return int(raw.strip())
    return None


class CollectionStore:
    def __init__(self, strict_missing_ids: bool = False) -> None:
        self._books: List[Book] = []
        self._index: Dict[int, Book] = {}
        self._next_id = 1
        self.strict_missing_ids = strict_missing_ids

    def __len__(self) -> int:
        return len(self._books)

    def __iter__(self) -> Iterator[Book]:
        return iter(list(self._books))

    def __contains__(self, book_id: object) -> bool:
        return book_id in self._index

    def _allocate_id(self) -> int:
        book_id = self._next_id
        self._next_id += 1
        return book_id

    # -- records ---------------------------------------------------------

    def create_book(
        self,
        title: str,
        author: str,
        genre: str,
        published_year: int,
        rating: float,
    ) -> Book:
        """Build a new book with a fresh id. The book is not added."""
        return Book(
            id=self._allocate_id(),
            title=title,
            author=author,
            genre=genre,
            published_year=published_year,
            rating=rating,
        )

    def add(self, book: Book) -> None:
        if book.id in self._index:
            raise DuplicateIdError(book.id)
        self._books.append(book)
        self._index[book.id] = book
        if book.id >= self._next_id:
            self._next_id = book.id + 1

    def remove(self, book_id: int) -> None:
        if book_id not in self._index:
            if self.strict_missing_ids:
                raise BookNotFoundError(book_id)
            return
        del self._index[book_id]
        self._books = [b for b in self._books if b.id != book_id]

    def update(
        self, book_id: int, patch: Union[BookPatch, Mapping[str, Any]]
    ) -> Optional[Book]:
        book = self._index.get(book_id)
        if book is None:
            if self.strict_missing_ids:
                raise BookNotFoundError(book_id)
            return None
        book.apply_patch(patch)
        return book

    def get(self, book_id: int) -> Optional[Book]:
        return self._index.get(book_id)

    def all(self) -> List[Book]:
        return list(self._books)

    def clear(self) -> None:
        self._books = []
        self._index = {}

    def replace_all(self, records: Iterable[Union[Book, StoredBook]]) -> None:
        """Replace the whole collection, e.g. after a load from storage.

        Integer ids (including ``"12"`` or ``12.0``) are kept when they
        are unique within ``records``; any other id, and every repeat,
        gets a fresh one. Order is preserved.
        """
        entries = list(records)
        wanted: List[Optional[int]] = []
        seen = set()
        for rec in entries:
            book_id = _coerce_id(rec.id)
            if book_id is not None and book_id not in seen:
                seen.add(book_id)
                wanted.append(book_id)
            else:
                wanted.append(None)

        self.clear()
        self._next_id = max(self._next_id, max(seen, default=0) + 1)
        for rec, book_id in zip(entries, wanted):
            book = Book(
                id=book_id if book_id is not None else self._allocate_id(),
                title=rec.title,
                author=rec.author,
                genre=rec.genre,
                published_year=rec.published_year,
                rating=rec.rating,
            )
            self._books.append(book)
            self._index[book.id] = book

    # -- queries ---------------------------------------------------------

    def find_by_genre(self, genre: str) -> List[Book]:
        wanted = genre.casefold()
        return [b for b in self._books if b.genre.casefold() == wanted]

    def search(self, text: Optional[str]) -> List[Book]:
        """Books whose title or author contains ``text``, ignoring case."""
        needle = _norm(text)
        if not needle:
            return list(self._books)
        return [
            b for b in self._books
            if needle in b.title.casefold() or needle in b.author.casefold()
        ]

    def sorted_by(self, key: str, descending: bool = True) -> List[Book]:
        return sort_books(self._books, key, descending)

    # -- aggregates ------------------------------------------------------

    def average_rating(self) -> float:
        if not self._books:
            return 0.0
        total = sum(b.rating for b in self._books)
        return round(total / len(self._books), 2)

    def unique_authors(self) -> List[str]:
        return list(dict.fromkeys(b.author for b in self._books))

    def unique_genres(self) -> List[str]:
        return list(dict.fromkeys(b.genre for b in self._books))

    def genre_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for b in self._books:
            counts[b.genre] = counts.get(b.genre, 0) + 1
        return counts


def sort_books(books: Iterable[Book], key: str, descending: bool = True) -> List[Book]:
    """Return ``books`` ordered by ``key``.

    Numbers compare numerically and text through ``_collation_key``.
    ``sorted`` is stable for ``reverse=True`` as well, so books that
    compare equal keep their relative order in both directions.
    """
    try:
        field = SORT_KEYS[key]
    except KeyError:
        raise ValueError(
            f"Cannot sort by {key!r}; expected one of {sorted(set(SORT_KEYS))}"
        ) from None
    if field in NUMERIC_FIELDS:
        return sorted(books, key=lambda b: getattr(b, field), reverse=descending)
    return sorted(books, key=lambda b: _collation_key(getattr(b, field)), reverse=descending)
