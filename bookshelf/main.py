# bookshelf/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .catalog import catalog_router
from .catalog.service import BookCatalog
from .config import Settings, settings
from .errors import CorruptStorageError
from .gateway import ConfirmationGateway, gateway_from_settings
from .persistence import FileSlotStorage, MemorySlotStorage
from .storage import CollectionStore


logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger("bookshelf")


def build_catalog(cfg: Settings, gateway: Optional[ConfirmationGateway] = None) -> BookCatalog:
    store = CollectionStore(strict_missing_ids=cfg.strict_missing_ids)
    storages = {
        "local": FileSlotStorage(cfg.data_dir, cfg.storage_slot),
        "session": MemorySlotStorage(cfg.storage_slot),
    }
    return BookCatalog(store, gateway or gateway_from_settings(cfg), storages)


def create_app(
    cfg: Optional[Settings] = None, gateway: Optional[ConfirmationGateway] = None
) -> FastAPI:
    cfg = cfg or settings
    catalog = build_catalog(cfg, gateway)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "bookshelf.startup gateway_mode=%s data_dir=%s", cfg.gateway_mode, cfg.data_dir
        )
        if cfg.load_on_startup:
            try:
                if catalog.load("local"):
                    logger.info("Restored %d books from local storage", len(catalog.store))
            except CorruptStorageError:
                logger.exception("Local storage is unreadable; starting with an empty catalogue")
        yield

    app = FastAPI(
        title=cfg.app_name,
        description="Book catalogue with search, sorting, pagination and confirmed writes.",
        version=cfg.app_version,
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.catalog = catalog

    @app.get("/")
    def health_check():
        return {"status": "ok", "books": len(catalog.store)}

    app.include_router(catalog_router)
    return app


app = create_app()
