"""
Saving and loading the whole collection to a named storage slot.

A slot holds the collection as a UTF-8 JSON array of
``{id, title, author, genre, publishedYear, rating}`` objects, the same
shape as the JSON export. Two backends are provided:

* ``FileSlotStorage`` writes ``<directory>/<slot>.json`` and survives a
  restart (the ``local`` backend).
* ``MemorySlotStorage`` keeps the bytes in the process (the ``session``
  backend).

``load()`` returns ``None`` when nothing was saved, which callers must
tell apart from a saved empty list.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from pydantic import TypeAdapter, ValidationError

from .errors import CorruptStorageError
from .models import Book, StoredBook


logger = logging.getLogger(__name__)

_stored_books = TypeAdapter(List[StoredBook])


def dump_books(books: Iterable[Book], indent: Optional[int] = None) -> bytes:
    data = [b.model_dump(by_alias=True) for b in books]
    return json.dumps(data, ensure_ascii=False, indent=indent).encode("utf-8")


def parse_books(raw: bytes) -> List[StoredBook]:
    try:
        return _stored_books.validate_json(raw)
    except ValidationError as exc:
        raise CorruptStorageError(f"Stored collection is not a list of books: {exc}") from exc


class SlotStorage(ABC):
    """A single named slot in a key-value byte store."""

    def __init__(self, slot: str = "books") -> None:
        self.slot = slot

    @abstractmethod
    def _read(self) -> Optional[bytes]:
        ...

    @abstractmethod
    def _write(self, data: bytes) -> None:
        ...

    @abstractmethod
    def _remove(self) -> None:
        ...

    def save(self, books: Iterable[Book]) -> None:
        data = dump_books(books)
        self._write(data)
        logger.info("Saved collection to slot %r (%d bytes)", self.slot, len(data))

    def load(self) -> Optional[List[StoredBook]]:
        raw = self._read()
        if raw is None:
            logger.info("Slot %r is empty", self.slot)
            return None
        try:
            records = parse_books(raw)
        except CorruptStorageError:
            logger.error("Slot %r holds malformed data", self.slot)
            raise
        logger.info("Loaded %d books from slot %r", len(records), self.slot)
        return records

    def clear(self) -> None:
        self._remove()
        logger.info("Cleared slot %r", self.slot)


class FileSlotStorage(SlotStorage):
    def __init__(self, directory: Path, slot: str = "books") -> None:
        super().__init__(slot)
        self.directory = Path(directory)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self.directory / f"{self.slot}.json"

    def _read(self) -> Optional[bytes]:
        with self._lock:
            if not self.path.exists():
                return None
            return self.path.read_bytes()

    def _write(self, data: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        with self._lock:
            tmp = self.path.with_suffix(".json.tmp")
            tmp.write_bytes(data)
            os.replace(tmp, self.path)

    def _remove(self) -> None:
        with self._lock:
            self.path.unlink(missing_ok=True)


class MemorySlotStorage(SlotStorage):
    def __init__(self, slot: str = "books") -> None:
        super().__init__(slot)
        self._slots: Dict[str, bytes] = {}

    def _read(self) -> Optional[bytes]:
        return self._slots.get(self.slot)

    def _write(self, data: bytes) -> None:
        self._slots[self.slot] = data

    def _remove(self) -> None:
        self._slots.pop(self.slot, None)
