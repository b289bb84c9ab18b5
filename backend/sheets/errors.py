# -*- coding: utf-8 -*-
"""Record store — error taxonomy.

These carry no HTTP semantics; ``backend/api.py`` maps them to status codes.
"""

from __future__ import annotations

from typing import Any, Optional


class RecordStoreError(Exception):
    """Base class for every failure raised by the spreadsheet record store."""

    def __init__(self, sheet: str, message: str) -> None:
        super().__init__(f"[{sheet}] {message}")
        self.sheet = sheet
        self.message = message


class StorageUnavailable(RecordStoreError):
    """The remote spreadsheet could not be reached or rejected the call."""

    def __init__(self, sheet: str, detail: str = "storage unavailable") -> None:
        super().__init__(sheet, detail)
        self.detail = detail


class SchemaError(RecordStoreError):
    """A sheet is missing, empty where a header was expected, or lacks a column."""

    def __init__(self, sheet: str, detail: str) -> None:
        super().__init__(sheet, detail)
        self.detail = detail


class NotFound(RecordStoreError):
    def __init__(self, sheet: str, record_id: Any) -> None:
        super().__init__(sheet, f"record {record_id!r} not found")
        self.record_id = record_id


class UniquenessViolation(RecordStoreError):
    """Raised by caller-side uniqueness checks before an insert or update."""

    def __init__(self, sheet: str, column: str, value: Any, detail: Optional[str] = None) -> None:
        super().__init__(sheet, detail or f"{column} {value!r} already exists")
        self.column = column
        self.value = value
        self.detail = detail or f"{column} already exists"
