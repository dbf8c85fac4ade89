"""
Runtime settings for the bookshelf service.

Values are read from ``BOOKSHELF_*`` environment variables (for example
``BOOKSHELF_CONFIRM_DELAY_SECONDS=0``). ``create_app()`` in ``main.py``
also accepts an explicit ``Settings`` instance so tests can run with a
temporary data directory and no confirmation delay.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Literal


GatewayMode = Literal["random", "always", "never"]


class Settings(BaseSettings):
    app_name: str = "Bookshelf"
    app_version: str = "1.0.0"
    log_level: str = "INFO"

    # Simulated server round-trip for add/update.
    confirm_delay_seconds: float = 1.0
    rejection_rate: float = 0.2
    gateway_mode: GatewayMode = "random"  # random | always | never
    random_seed: Optional[int] = None

    # Persistence: the "local" backend writes <data_dir>/<storage_slot>.json
    data_dir: Path = Path("data")
    storage_slot: str = "books"
    load_on_startup: bool = True

    page_size: int = 5
    max_page_size: int = 100

    # When True, update/delete on an unknown id is reported instead of ignored.
    strict_missing_ids: bool = False

    model_config = SettingsConfigDict(env_prefix="BOOKSHELF_", extra="ignore")


settings = Settings()
