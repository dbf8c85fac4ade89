# bookshelf/models.py
from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Book(BaseModel):
    """A single catalogue entry.

    ``id`` is handed out by the owning ``CollectionStore`` and is frozen
    once the record exists. ``published_year`` is exchanged as
    ``publishedYear``, which is the shape written to storage and exports.
    ``rating`` carries no range check here: stored data is taken as-is,
    request bodies are validated in ``catalog.schemas``.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(frozen=True)
    title: str
    author: str
    genre: str
    published_year: int = Field(alias="publishedYear")
    rating: float

    def summary(self) -> str:
        return (
            f"{self.title} by {self.author}, Genre: {self.genre}, "
            f"Published: {self.published_year}"
        )

    def apply_patch(self, patch: Union["BookPatch", Mapping[str, Any]]) -> None:
        """Overwrite the fields that ``patch`` sets, in place.

        A plain mapping is first read into a ``BookPatch``: unknown keys
        are dropped there, so they never become attributes of the book.
        Fields set to ``None`` are skipped.
        """
        if not isinstance(patch, BookPatch):
            patch = BookPatch.model_validate(dict(patch))
        for name, value in patch.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(self, name, value)


class BookPatch(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Optional[str] = None
    author: Optional[str] = None
    genre: Optional[str] = None
    published_year: Optional[int] = Field(default=None, alias="publishedYear")
    rating: Optional[float] = None

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_unset=True, exclude_none=True)


class StoredBook(BaseModel):
    """One entry of a saved collection.

    Older saves used fractional timestamps or strings as ids, so ``id``
    is kept loose here; ``CollectionStore.replace_all`` decides which
    ids survive a load.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Union[int, float, str, None] = None
    title: str
    author: str
    genre: str
    published_year: int = Field(alias="publishedYear")
    rating: float


class CreateBookRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    author: str = Field(min_length=1)
    genre: str = Field(min_length=1)
    published_year: int = Field(alias="publishedYear")
    rating: float = Field(ge=0, le=5)
