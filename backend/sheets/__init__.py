# -*- coding: utf-8 -*-
"""Spreadsheet-backed record store.

Adapter (remote read/append/update/delete of rows), mapper (header row as
schema) and store (id-based CRUD on top of both).
"""

from .adapter import GoogleSheetsStorage, MemoryStorage, TabularStorage
from .errors import NotFound, RecordStoreError, SchemaError, StorageUnavailable, UniquenessViolation
from .store import RecordStore

__all__ = [
    "GoogleSheetsStorage",
    "MemoryStorage",
    "NotFound",
    "RecordStore",
    "RecordStoreError",
    "SchemaError",
    "StorageUnavailable",
    "TabularStorage",
    "UniquenessViolation",
]
