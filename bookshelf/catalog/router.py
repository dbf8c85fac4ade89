"""
Route definitions for the catalogue API.

Endpoints under /api/catalog:
- GET    /books                   : search, filter, sort and paginate books
- GET    /books/{book_id}         : get one book
- POST   /books                   : add a book (after server confirmation)
- PATCH  /books/{book_id}         : update a book (after server confirmation)
- DELETE /books/{book_id}         : delete a book immediately
- GET    /genres                  : number of books per genre
- GET    /stats                   : collection statistics
- GET    /export                  : download the collection as books.json
- POST   /storage/{backend}/save  : save the collection (local | session)
- POST   /storage/{backend}/load  : replace the collection with the saved one
- DELETE /storage/{backend}       : forget the saved collection
"""

from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from typing_extensions import Literal

from ..config import Settings
from ..errors import BookNotFoundError, CorruptStorageError
from ..models import Book, CreateBookRequest
from .schemas import CatalogStats, MutationResult, PaginatedBooks, UpdateBookRequest
from .search import list_books
from .service import BookCatalog


SortField = Literal["none", "title", "author", "genre", "publishedYear", "rating"]
StorageBackend = Literal["local", "session"]

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


def get_catalog(request: Request) -> BookCatalog:
    return request.app.state.catalog


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.get("/books", response_model=PaginatedBooks)
async def list_books_route(
    q: Optional[str] = Query(default=None, description="Search in title and author"),
    genre: Optional[str] = Query(default=None, description="Filter by genre"),
    sort: SortField = Query(default="none", description="Sort field"),
    descending: bool = Query(default=True, description="Sort direction"),
    page: int = Query(default=1, ge=1, description="Current page (1-indexed)"),
    page_size: Optional[int] = Query(default=None, ge=1, description="Page size"),
    catalog: BookCatalog = Depends(get_catalog),
    cfg: Settings = Depends(get_settings),
) -> PaginatedBooks:
    size = min(page_size or cfg.page_size, cfg.max_page_size)
    return list_books(
        catalog.store,
        q=q,
        genre=genre,
        sort=sort,
        descending=descending,
        page=page,
        page_size=size,
    )


@router.get("/books/{book_id}", response_model=Book)
async def get_book(book_id: int, catalog: BookCatalog = Depends(get_catalog)) -> Book:
    book = catalog.get_book(book_id)
    if book is None:
        raise HTTPException(status_code=404, detail="Book not found")
    return book


@router.post("/books", response_model=MutationResult, status_code=201)
async def add_book(
    req: CreateBookRequest,
    response: Response,
    catalog: BookCatalog = Depends(get_catalog),
) -> MutationResult:
    result = await catalog.add_book(
        req.title, req.author, req.genre, req.published_year, req.rating
    )
    if not result.success:
        response.status_code = 503
    return result


@router.patch("/books/{book_id}", response_model=MutationResult)
async def update_book(
    book_id: int,
    req: UpdateBookRequest,
    response: Response,
    catalog: BookCatalog = Depends(get_catalog),
) -> MutationResult:
    try:
        result = await catalog.update_book(book_id, req)
    except BookNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if not result.success:
        response.status_code = 503
    return result


@router.delete("/books/{book_id}", status_code=204)
async def delete_book(book_id: int, catalog: BookCatalog = Depends(get_catalog)) -> Response:
    try:
        catalog.delete_book(book_id)
    except BookNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


@router.get("/genres", response_model=Dict[str, int])
async def genre_counts(catalog: BookCatalog = Depends(get_catalog)) -> Dict[str, int]:
    return catalog.store.genre_counts()


@router.get("/stats", response_model=CatalogStats)
async def stats(catalog: BookCatalog = Depends(get_catalog)) -> CatalogStats:
    store = catalog.store
    return CatalogStats(
        count=len(store),
        average_rating=store.average_rating(),
        authors=store.unique_authors(),
        genres=store.unique_genres(),
        genre_counts=store.genre_counts(),
    )


@router.get("/export")
async def export_books(catalog: BookCatalog = Depends(get_catalog)) -> Response:
    return Response(
        content=catalog.export(),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="books.json"'},
    )


# ---------------------------------------------------------------------------
# Storage endpoints
#
# "local" is a JSON file under the configured data directory and
# survives restarts; "session" lives only as long as the process.

@router.post("/storage/{backend}/save")
async def save_storage(backend: StorageBackend, catalog: BookCatalog = Depends(get_catalog)):
    saved = catalog.save(backend)
    return {"status": "ok", "saved": saved, "message": f"Books saved to {backend} storage"}


@router.post("/storage/{backend}/load")
async def load_storage(backend: StorageBackend, catalog: BookCatalog = Depends(get_catalog)):
    try:
        loaded = catalog.load(backend)
    except CorruptStorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if not loaded:
        raise HTTPException(status_code=404, detail=f"No books found in {backend} storage")
    return {
        "status": "ok",
        "loaded": len(catalog.store),
        "message": f"Books loaded from {backend} storage",
    }


@router.delete("/storage/{backend}")
async def clear_storage(backend: StorageBackend, catalog: BookCatalog = Depends(get_catalog)):
    catalog.clear_storage(backend)
    return {"status": "ok", "message": f"{backend} storage cleared"}
