"""
Catalogue operations used by the routes.

``BookCatalog`` ties together the in-memory ``CollectionStore``, the
``ConfirmationGateway`` that gates adds and updates, and the storage
backends used for save/load/clear. Adds and updates wait for the
gateway and only touch the store once the change is confirmed;
deletes and every read go straight to the store.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Union

from ..errors import DuplicateIdError
from ..gateway import ConfirmationGateway, Rejected
from ..models import Book, BookPatch
from ..persistence import SlotStorage, dump_books
from ..storage import CollectionStore
from .schemas import MutationResult


logger = logging.getLogger(__name__)


class BookCatalog:
    def __init__(
        self,
        store: CollectionStore,
        gateway: ConfirmationGateway,
        storages: Optional[Dict[str, SlotStorage]] = None,
    ) -> None:
        self.store = store
        self.gateway = gateway
        self.storages: Dict[str, SlotStorage] = dict(storages or {})

    # -- confirmed mutations ----------------------------------------------

    async def add_book(
        self,
        title: str,
        author: str,
        genre: str,
        published_year: int,
        rating: float,
    ) -> MutationResult:
        book = self.store.create_book(title, author, genre, published_year, rating)
        logger.debug("Requesting confirmation to add book %s", book.id)
        outcome = await self.gateway.confirm_mutation(book)
        if isinstance(outcome, Rejected):
            logger.warning("Add of %r rejected: %s", book.title, outcome.reason)
            return MutationResult(success=False, message=f"Error: {outcome.reason}")
        try:
            self.store.add(book)
        except DuplicateIdError as e:
            # A load replaced the collection while this add was pending.
            logger.warning("Add of %r dropped: %s", book.title, e)
            return MutationResult(success=False, message=f"Error: {e}")
        logger.info("Added book %s: %s", book.id, book.summary())
        return MutationResult(success=True, message=f"Book added: {book.title}", book=book)

    async def update_book(
        self, book_id: int, patch: Union[BookPatch, Mapping[str, Any]]
    ) -> MutationResult:
        if not isinstance(patch, BookPatch):
            patch = BookPatch.model_validate(dict(patch))
        logger.debug("Requesting confirmation to update book %s", book_id)
        outcome = await self.gateway.confirm_mutation(patch)
        if isinstance(outcome, Rejected):
            logger.warning("Update of book %s rejected: %s", book_id, outcome.reason)
            return MutationResult(success=False, message=f"Error: {outcome.reason}")
        book = self.store.update(book_id, patch)
        if book is None:
            logger.info("Update confirmed for unknown book %s; nothing changed", book_id)
        else:
            logger.info("Updated book %s", book_id)
        return MutationResult(success=True, message="Book updated.", book=book)

    # -- unconfirmed operations --------------------------------------------

    def delete_book(self, book_id: int) -> None:
        self.store.remove(book_id)
        logger.info("Deleted book %s", book_id)

    def get_book(self, book_id: int) -> Optional[Book]:
        return self.store.get(book_id)

    # -- storage -------------------------------------------------------------

    def _storage(self, backend: str) -> SlotStorage:
        try:
            return self.storages[backend]
        except KeyError:
            raise ValueError(f"Unknown storage backend {backend!r}") from None

    def save(self, backend: str = "local") -> int:
        books = self.store.all()
        self._storage(backend).save(books)
        return len(books)

    def load(self, backend: str = "local") -> bool:
        """Replace the collection with the saved one.

        Returns ``False`` (and leaves the store alone) when the backend
        has nothing saved.
        """
        records = self._storage(backend).load()
        if records is None:
            return False
        self.store.replace_all(records)
        return True

    def clear_storage(self, backend: str = "local") -> None:
        self._storage(backend).clear()

    def export(self) -> bytes:
        return dump_books(self.store.all(), indent=2)
