# -*- coding: utf-8 -*-
"""Record store — CRUD semantics over one worksheet.

Every call re-reads the sheet; nothing is cached between operations. Updates
and deletes locate the row from a fresh read immediately before writing, so a
concurrent insert or delete in between can still shift the target row. That
window is accepted, not masked.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .adapter import TabularStorage
from .errors import NotFound, RecordStoreError, SchemaError, StorageUnavailable, UniquenessViolation
from .ids import ScanIdAllocator
from .mapper import (
    ID_COLUMN,
    Record,
    Row,
    find_column_index,
    header_of,
    record_to_row,
    row_to_record,
    same_id,
    to_records,
)

logger = logging.getLogger(__name__)

Fields = Union[Mapping[str, Any], Sequence[Any]]


class RecordStore:
    def __init__(self, storage: TabularStorage, sheet: str, *, id_allocator: Any = None) -> None:
        self.storage = storage
        self.sheet = sheet
        self.id_allocator = id_allocator or ScanIdAllocator()

    # ---- reads ----

    def _read(self, context: str) -> List[Row]:
        try:
            return self.storage.read_all(self.sheet)
        except StorageUnavailable as exc:
            raise StorageUnavailable(self.sheet, f"{context}: {exc.detail}") from exc
        except RecordStoreError:
            raise
        except Exception as exc:
            raise StorageUnavailable(self.sheet, f"{context}: read failed") from exc

    def _header(self, rows: Sequence[Sequence[Any]]) -> Tuple[List[str], int]:
        if not rows:
            raise SchemaError(self.sheet, "sheet is empty, header row expected")
        header = header_of(rows)
        id_idx = find_column_index(header, ID_COLUMN)
        if id_idx is None:
            raise SchemaError(self.sheet, "sheet has no 'id' column")
        return header, id_idx

    def list_all(self) -> List[Record]:
        return to_records(self._read("list"))

    def find_by_id(self, record_id: Any) -> Optional[Record]:
        rows = self._read(f"find id={record_id}")
        self._header(rows)
        for record in to_records(rows):
            if same_id(record.get(ID_COLUMN), record_id):
                return record
        return None

    def get_by_id(self, record_id: Any) -> Record:
        record = self.find_by_id(record_id)
        if record is None:
            raise NotFound(self.sheet, record_id)
        return record

    def find_where(self, column: str, value: Any) -> List[Record]:
        """Records whose ``column`` equals ``value`` (trimmed, case-insensitive)."""
        needle = str(value).strip().lower()
        return [
            r for r in self.list_all()
            if r.get(column) is not None and str(r.get(column)).strip().lower() == needle
        ]

    def ensure_unique(self, column: str, value: Any, *, exclude_id: Any = None) -> None:
        # Read-then-write: a concurrent writer can still slip a duplicate in after this check.
        for record in self.find_where(column, value):
            if exclude_id is not None and same_id(record.get(ID_COLUMN), exclude_id):
                continue
            raise UniquenessViolation(self.sheet, column, value)

    def _locate(self, record_id: Any) -> Tuple[List[str], int, Row]:
        """Fresh read; returns (header, data_index, row) for ``record_id``."""
        rows = self._read(f"locate id={record_id}")
        header, id_idx = self._header(rows)
        for data_index, row in enumerate(rows[1:]):
            cell = row[id_idx] if id_idx < len(row) else None
            if same_id(cell, record_id):
                return header, data_index, list(row)
        raise NotFound(self.sheet, record_id)

    # ---- writes ----

    def insert(self, fields: Fields) -> Tuple[int, Record]:
        rows = self._read("insert")
        header, id_idx = self._header(rows)
        new_id = self.id_allocator.next_id(self.sheet, to_records(rows))

        if isinstance(fields, Mapping):
            record: Dict[str, Any] = {col: fields.get(col) for col in header}
        else:
            values = list(fields)
            others = [col for col in header if col != ID_COLUMN]
            if len(values) > len(others):
                raise SchemaError(self.sheet, f"expected at most {len(others)} values, got {len(values)}")
            record = dict.fromkeys(header)
            record.update(zip(others, values))
        record[ID_COLUMN] = new_id

        row = record_to_row(header, record)
        row[id_idx] = new_id
        self._write("append", lambda: self.storage.append(self.sheet, row), new_id)
        logger.info("Inserted %s id=%s", self.sheet, new_id)
        return new_id, row_to_record(header, row)

    def update_by_id(self, record_id: Any, partial: Mapping[str, Any]) -> Record:
        self.get_by_id(record_id)
        # Position recomputed from a fresh read taken right before the write.
        header, data_index, current = self._locate(record_id)
        unknown = [col for col in partial if find_column_index(header, col) is None]
        if unknown:
            raise SchemaError(self.sheet, f"unknown column(s): {', '.join(sorted(unknown))}")

        merged = list(current) + [""] * (len(header) - len(current))
        for col, value in partial.items():
            if col == ID_COLUMN:
                continue
            idx = find_column_index(header, col)
            merged[idx] = "" if value is None else value

        sheet_row = data_index + 2
        self._write("update", lambda: self.storage.update_range(self.sheet, sheet_row, merged), record_id)
        logger.info("Updated %s id=%s row=%s fields=%s", self.sheet, record_id, sheet_row, sorted(partial))
        return row_to_record(header, merged)

    def delete_by_id(self, record_id: Any) -> Record:
        self.get_by_id(record_id)
        header, data_index, current = self._locate(record_id)
        sheet_index = data_index + 1
        self._write("delete", lambda: self.storage.delete_range(self.sheet, sheet_index), record_id)
        logger.info("Deleted %s id=%s row=%s", self.sheet, record_id, sheet_index)
        return row_to_record(header, current)

    def _write(self, action: str, func, record_id: Any) -> None:
        try:
            func()
        except StorageUnavailable as exc:
            raise StorageUnavailable(self.sheet, f"{action} id={record_id}: {exc.detail}") from exc
        except RecordStoreError:
            raise
        except Exception as exc:
            raise StorageUnavailable(self.sheet, f"{action} id={record_id} failed") from exc
