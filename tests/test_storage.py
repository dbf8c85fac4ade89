import pytest

from bookshelf.errors import BookNotFoundError, DuplicateIdError
from bookshelf.models import Book, StoredBook
from bookshelf.storage import CollectionStore

from .conftest import fill


def _rated(store: CollectionStore, ratings):
    return fill(store, [(f"Book {i}", f"Author {i}", "Misc", 2000 + i, r)
                        for i, r in enumerate(ratings)])


def test_add_and_get(store: CollectionStore) -> None:
    books = fill(store)
    assert len(store) == len(books)
    for b in books:
        assert store.get(b.id) is b
    assert len({b.id for b in books}) == len(books)


def test_add_duplicate_id_raises(store: CollectionStore) -> None:
    book = store.create_book("Dune", "Frank Herbert", "Sci-Fi", 1965, 4.5)
    store.add(book)
    with pytest.raises(DuplicateIdError):
        store.add(Book(id=book.id, title="Other", author="X", genre="Y",
                       publishedYear=1, rating=1))
    assert len(store) == 1
    assert store.get(book.id).title == "Dune"


def test_create_does_not_insert(store: CollectionStore) -> None:
    book = store.create_book("Dune", "Frank Herbert", "Sci-Fi", 1965, 4.5)
    assert len(store) == 0
    assert book.id not in store


def test_ids_are_not_reused_after_delete(store: CollectionStore) -> None:
    first = fill(store)[-1]
    store.remove(first.id)
    again = store.create_book("New", "A", "G", 2020, 3.0)
    assert again.id > first.id


def test_remove_missing_id_is_noop(sample_store: CollectionStore) -> None:
    before = sample_store.all()
    sample_store.remove(12345)
    assert sample_store.all() == before


def test_remove(sample_store: CollectionStore) -> None:
    target = sample_store.all()[1]
    sample_store.remove(target.id)
    assert target.id not in sample_store
    assert [b.title for b in sample_store] == ["Dune", "Neuromancer", "Emma"]


def test_update(sample_store: CollectionStore) -> None:
    target = sample_store.all()[0]
    updated = sample_store.update(target.id, {"rating": 5.0})
    assert updated is target
    assert sample_store.get(target.id).rating == 5.0


def test_update_missing_id_is_noop(sample_store: CollectionStore) -> None:
    before = [b.model_dump() for b in sample_store]
    assert sample_store.update(999, {"title": "Nope"}) is None
    assert [b.model_dump() for b in sample_store] == before


def test_update_with_unknown_keys_only(sample_store: CollectionStore) -> None:
    target = sample_store.all()[2]
    before = target.model_dump()
    sample_store.update(target.id, {"publisher": "Ace", "pages": 271})
    assert sample_store.get(target.id).model_dump() == before


def test_strict_mode_reports_missing_ids() -> None:
    store = CollectionStore(strict_missing_ids=True)
    with pytest.raises(BookNotFoundError):
        store.remove(1)
    with pytest.raises(BookNotFoundError):
        store.update(1, {"title": "x"})


def test_find_by_genre_is_case_insensitive(sample_store: CollectionStore) -> None:
    found = sample_store.find_by_genre("sci-fi")
    assert [b.title for b in found] == ["Dune", "Neuromancer"]
    assert sample_store.find_by_genre("Horror") == []


def test_search_title_and_author(sample_store: CollectionStore) -> None:
    assert [b.title for b in sample_store.search("TOLKIEN")] == ["The Hobbit"]
    assert [b.title for b in sample_store.search("ne")] == ["Dune", "Neuromancer", "Emma"]
    assert len(sample_store.search("")) == 4


def test_sorted_by_rating_is_stable(store: CollectionStore) -> None:
    books = _rated(store, [3.5, 4.0, 3.5, 5.0])
    ordered = store.sorted_by("rating", True)
    assert [b.rating for b in ordered] == [5.0, 4.0, 3.5, 3.5]
    assert ordered[2] is books[0]
    assert ordered[3] is books[2]


def test_sorted_ascending_keeps_ties_in_order(store: CollectionStore) -> None:
    books = _rated(store, [3.5, 4.0, 3.5, 5.0])
    ordered = store.sorted_by("rating", descending=False)
    assert ordered == [books[0], books[2], books[1], books[3]]


def test_sorted_by_does_not_mutate(sample_store: CollectionStore) -> None:
    before = sample_store.all()
    sample_store.sorted_by("title")
    assert sample_store.all() == before


def test_sorted_by_text_ignores_case_and_accents(store: CollectionStore) -> None:
    fill(store, [
        ("zebra", "A", "G", 1, 1.0),
        ("Émile", "A", "G", 1, 1.0),
        ("apple", "A", "G", 1, 1.0),
        ("Banana", "A", "G", 1, 1.0),
    ])
    titles = [b.title for b in store.sorted_by("title", descending=False)]
    assert titles == ["apple", "Banana", "Émile", "zebra"]
    titles = [b.title for b in store.sorted_by("title")]
    assert titles == ["zebra", "Émile", "Banana", "apple"]


def test_sorted_by_published_year_alias(sample_store: CollectionStore) -> None:
    years = [b.published_year for b in sample_store.sorted_by("publishedYear")]
    assert years == [1984, 1965, 1937, 1815]


def test_sorted_by_unknown_key(sample_store: CollectionStore) -> None:
    with pytest.raises(ValueError):
        sample_store.sorted_by("isbn")


def test_average_rating(store: CollectionStore) -> None:
    assert store.average_rating() == 0
    _rated(store, [4, 5])
    assert store.average_rating() == 4.5


def test_average_rating_rounds(store: CollectionStore) -> None:
    _rated(store, [1, 1, 2])
    assert store.average_rating() == 1.33


def test_genre_counts(store: CollectionStore) -> None:
    fill(store, [
        ("A", "x", "Sci-Fi", 1, 1.0),
        ("B", "y", "Fantasy", 1, 1.0),
        ("C", "x", "Sci-Fi", 1, 1.0),
    ])
    assert store.genre_counts() == {"Sci-Fi": 2, "Fantasy": 1}
    assert list(store.genre_counts()) == ["Sci-Fi", "Fantasy"]
    assert store.unique_genres() == ["Sci-Fi", "Fantasy"]
    assert store.unique_authors() == ["x", "y"]


def test_genre_counts_follow_mutations(sample_store: CollectionStore) -> None:
    emma = sample_store.all()[3]
    sample_store.update(emma.id, {"genre": "Sci-Fi"})
    assert sample_store.genre_counts() == {"Sci-Fi": 3, "Fantasy": 1}


def _stored(book_id, title):
    return StoredBook(id=book_id, title=title, author="A", genre="G",
                      publishedYear=2000, rating=3.0)


def test_replace_all_keeps_unique_integer_ids(store: CollectionStore) -> None:
    store.replace_all([_stored(7, "a"), _stored("3", "b"), _stored(12.0, "c")])
    assert [b.id for b in store] == [7, 3, 12]
    assert store.create_book("d", "A", "G", 1, 1.0).id == 13


def test_replace_all_rederives_foreign_and_repeated_ids(store: CollectionStore) -> None:
    store.replace_all([
        _stored(1700000000000.25, "a"),
        _stored(5, "b"),
        _stored(5, "c"),
        _stored("x-1", "d"),
        _stored("\u00b2", "e"),
    ])
    ids = [b.id for b in store]
    assert [b.title for b in store] == ["a", "b", "c", "d", "e"]
    assert ids[1] == 5
    assert len(set(ids)) == 5
    assert all(i > 5 for i in (ids[0], ids[2], ids[3], ids[4]))


def test_replace_all_discards_previous_contents(sample_store: CollectionStore) -> None:
    sample_store.replace_all([_stored(None, "only")])
    assert [b.title for b in sample_store] == ["only"]
