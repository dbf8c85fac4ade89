from bookshelf.catalog.search import list_books, paginate
from bookshelf.storage import CollectionStore


def test_genre_filter_ignores_surrounding_spaces(sample_store: CollectionStore) -> None:
    page = list_books(sample_store, genre=" fantasy ")
    assert [b.title for b in page.items] == ["The Hobbit"]


def test_blank_genre_means_all(sample_store: CollectionStore) -> None:
    assert list_books(sample_store, genre="   ").total == 4


def test_search_filter_sort_then_paginate(sample_store: CollectionStore) -> None:
    page = list_books(sample_store, q="ne", sort="publishedYear",
                      descending=False, page=1, page_size=2)
    assert page.total == 3
    assert page.total_pages == 2
    assert [b.title for b in page.items] == ["Emma", "Dune"]


def test_paginate_empty_list() -> None:
    page = paginate([], page=3, page_size=5)
    assert page.page == 1
    assert page.total_pages == 1
    assert page.items == []
