# -*- coding: utf-8 -*-
"""App storage — spreadsheet backend selection and per-sheet stores."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .config import settings
from .sheets.adapter import GoogleSheetsStorage, MemoryStorage, TabularStorage
from .sheets.ids import make_allocator
from .sheets.mapper import SCHEMAS
from .sheets.store import RecordStore

logger = logging.getLogger(__name__)

_storage: Optional[TabularStorage] = None
_allocator: Any = None


def connect() -> TabularStorage:
    backend = settings.sheets_backend
    if backend == "memory":
        return MemoryStorage()
    if backend == "google":
        return GoogleSheetsStorage(
            settings.spreadsheet_id,
            service_account_json=settings.service_account_json,
            service_account_file=str(settings.service_account_file),
        )
    raise ValueError(f"Unknown sheets backend: {backend}")


def get_storage() -> TabularStorage:
    global _storage
    if _storage is None:
        _storage = connect()
    return _storage


def set_storage(storage: Optional[TabularStorage]) -> None:
    """Swap the process-wide storage (tests, scripts)."""
    global _storage, _allocator
    _storage = storage
    _allocator = None


def _get_allocator() -> Any:
    global _allocator
    if _allocator is None:
        _allocator = make_allocator(settings.id_strategy)
    return _allocator


def get_store(sheet: str) -> RecordStore:
    return RecordStore(get_storage(), sheet, id_allocator=_get_allocator())


def init_app_db(storage: Optional[TabularStorage] = None) -> Dict[str, bool]:
    """Create any missing entity worksheet with its header row."""
    target = storage or get_storage()
    created: Dict[str, bool] = {}
    for name, schema in SCHEMAS.items():
        created[name] = target.ensure_sheet(name, schema.header)
        if created[name]:
            logger.info("Initialized sheet %s", name)
    return created
