from typing import List, Tuple

import pytest

from bookshelf.catalog.service import BookCatalog
from bookshelf.gateway import StaticConfirmationGateway
from bookshelf.models import Book
from bookshelf.persistence import MemorySlotStorage
from bookshelf.storage import CollectionStore


SAMPLE: List[Tuple[str, str, str, int, float]] = [
    ("Dune", "Frank Herbert", "Sci-Fi", 1965, 4.5),
    ("The Hobbit", "J.R.R. Tolkien", "Fantasy", 1937, 4.7),
    ("Neuromancer", "William Gibson", "Sci-Fi", 1984, 3.9),
    ("Emma", "Jane Austen", "Romance", 1815, 4.0),
]


def fill(store: CollectionStore, rows=SAMPLE) -> List[Book]:
    books = []
    for row in rows:
        book = store.create_book(*row)
        store.add(book)
        books.append(book)
    return books


@pytest.fixture
def store() -> CollectionStore:
    return CollectionStore()


@pytest.fixture
def sample_store() -> CollectionStore:
    s = CollectionStore()
    fill(s)
    return s


@pytest.fixture
def catalog() -> BookCatalog:
    return BookCatalog(
        CollectionStore(),
        StaticConfirmationGateway(confirm=True),
        {"session": MemorySlotStorage()},
    )
