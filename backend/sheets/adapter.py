# -*- coding: utf-8 -*-
"""Tabular storage adapters.

Four primitives over a header-plus-rows spreadsheet:

- read_all       every row, header included
- append         raw positional append after the last row
- update_range   overwrite one row at an absolute 1-based position
- delete_range   remove one row at a 0-based position (header is 0)

No primitive checks ids, schemas or positions. Anything smarter lives in
``store.py``.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

import gspread
import requests
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials

from .errors import SchemaError, StorageUnavailable

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

_REMOTE_ERRORS = (gspread.exceptions.GSpreadException, GoogleAuthError, requests.exceptions.RequestException)


class TabularStorage(ABC):
    @abstractmethod
    def read_all(self, sheet: str) -> List[List[Any]]:
        ...

    @abstractmethod
    def append(self, sheet: str, row: Sequence[Any]) -> None:
        ...

    @abstractmethod
    def update_range(self, sheet: str, row_index: int, row: Sequence[Any]) -> None:
        """Overwrite the row at ``row_index`` (1-based, header is row 1)."""

    @abstractmethod
    def delete_range(self, sheet: str, row_index: int) -> None:
        """Remove the row at ``row_index`` (0-based, header is row 0)."""

    @abstractmethod
    def ensure_sheet(self, sheet: str, header: Sequence[str]) -> bool:
        """Create ``sheet`` with ``header`` when missing. Returns True if created."""


# =========================
# Google Sheets
# =========================

def build_credentials(*, info_json: Optional[str], file_path: Optional[str]) -> Credentials:
    if info_json:
        return Credentials.from_service_account_info(json.loads(info_json), scopes=SCOPES)
    if file_path:
        return Credentials.from_service_account_file(str(file_path), scopes=SCOPES)
    raise ValueError("Google credentials not configured")


def _a1_row(row_index: int) -> str:
    return f"A{int(row_index)}"


class GoogleSheetsStorage(TabularStorage):
    """gspread-backed storage. One instance per spreadsheet."""

    def __init__(
        self,
        spreadsheet_id: Optional[str],
        *,
        credentials: Optional[Credentials] = None,
        service_account_json: Optional[str] = None,
        service_account_file: Optional[str] = None,
        spreadsheet: Any = None,
    ) -> None:
        self.spreadsheet_id = spreadsheet_id
        self._credentials = credentials
        self._service_account_json = service_account_json
        self._service_account_file = service_account_file
        self._spreadsheet = spreadsheet
        self._worksheets: Dict[str, Any] = {}
        self._lock = threading.Lock()

    # ---- connection ----

    def _get_spreadsheet(self) -> Any:
        if self._spreadsheet is not None:
            return self._spreadsheet
        with self._lock:
            if self._spreadsheet is not None:
                return self._spreadsheet
            if not self.spreadsheet_id:
                raise StorageUnavailable("*", "spreadsheet id not configured")
            try:
                creds = self._credentials or build_credentials(
                    info_json=self._service_account_json,
                    file_path=self._service_account_file,
                )
                client = gspread.authorize(creds)
                self._spreadsheet = client.open_by_key(self.spreadsheet_id)
            except (OSError, ValueError) as exc:
                logger.error("Google credentials could not be loaded: %s", exc)
                raise StorageUnavailable("*", "credentials unavailable") from exc
            except _REMOTE_ERRORS as exc:
                logger.error("Failed to open spreadsheet %s: %s", self.spreadsheet_id, exc)
                raise StorageUnavailable("*", "could not open spreadsheet") from exc
        return self._spreadsheet

    def _worksheet(self, sheet: str) -> Any:
        # Resolve by title and keep the handle; its sheetId is stable across tab reordering.
        ws = self._worksheets.get(sheet)
        if ws is not None:
            return ws
        spreadsheet = self._get_spreadsheet()
        try:
            ws = spreadsheet.worksheet(sheet)
        except gspread.exceptions.WorksheetNotFound as exc:
            raise SchemaError(sheet, "worksheet not found") from exc
        except _REMOTE_ERRORS as exc:
            logger.error("Failed to resolve worksheet %s: %s", sheet, exc)
            raise StorageUnavailable(sheet, "could not resolve worksheet") from exc
        self._worksheets[sheet] = ws
        return ws

    def _call(self, sheet: str, action: str, func, *args, **kwargs) -> Any:
        try:
            return func(*args, **kwargs)
        except _REMOTE_ERRORS as exc:
            logger.error("Sheets %s on %s failed: %s", action, sheet, exc)
            # Drop the cached handle; the next call re-resolves the worksheet by title.
            self._worksheets.pop(sheet, None)
            raise StorageUnavailable(sheet, f"{action} failed") from exc

    # ---- primitives ----

    def read_all(self, sheet: str) -> List[List[Any]]:
        ws = self._worksheet(sheet)
        values = self._call(sheet, "read", ws.get_all_values)
        return [list(row) for row in (values or [])]

    def append(self, sheet: str, row: Sequence[Any]) -> None:
        ws = self._worksheet(sheet)
        self._call(
            sheet,
            "append",
            ws.append_row,
            list(row),
            value_input_option="RAW",
            insert_data_option="INSERT_ROWS",
        )

    def update_range(self, sheet: str, row_index: int, row: Sequence[Any]) -> None:
        ws = self._worksheet(sheet)
        self._call(sheet, "update", ws.update, range_name=_a1_row(row_index), values=[list(row)], raw=True)

    def delete_range(self, sheet: str, row_index: int) -> None:
        ws = self._worksheet(sheet)
        body = {
            "requests": [
                {
                    "deleteDimension": {
                        "range": {
                            "sheetId": ws.id,
                            "dimension": "ROWS",
                            "startIndex": int(row_index),
                            "endIndex": int(row_index) + 1,
                        }
                    }
                }
            ]
        }
        spreadsheet = self._get_spreadsheet()
        self._call(sheet, "delete", spreadsheet.batch_update, body)

    def ensure_sheet(self, sheet: str, header: Sequence[str]) -> bool:
        try:
            ws = self._worksheet(sheet)
        except SchemaError:
            spreadsheet = self._get_spreadsheet()
            ws = self._call(sheet, "create", spreadsheet.add_worksheet, title=sheet, rows=1000, cols=max(len(header), 1))
            self._call(sheet, "create", ws.append_row, list(header), value_input_option="RAW")
            self._worksheets[sheet] = ws
            logger.info("Created worksheet %s with header %s", sheet, list(header))
            return True
        first = self._call(sheet, "read", ws.row_values, 1)
        if not first:
            self._call(sheet, "create", ws.append_row, list(header), value_input_option="RAW")
            logger.info("Wrote missing header to worksheet %s", sheet)
            return True
        return False


# =========================
# In-memory
# =========================

class MemoryStorage(TabularStorage):
    """Process-local sheets for tests and local development.

    Each primitive is atomic on its own, like a single remote call; sequences of
    primitives are not.
    """

    def __init__(self, sheets: Optional[Dict[str, List[List[Any]]]] = None) -> None:
        self._sheets: Dict[str, List[List[Any]]] = {
            name: [list(r) for r in rows] for name, rows in (sheets or {}).items()
        }
        self._lock = threading.Lock()

    def _rows(self, sheet: str) -> List[List[Any]]:
        rows = self._sheets.get(sheet)
        if rows is None:
            raise SchemaError(sheet, "worksheet not found")
        return rows

    def read_all(self, sheet: str) -> List[List[Any]]:
        with self._lock:
            return copy.deepcopy(self._rows(sheet))

    def append(self, sheet: str, row: Sequence[Any]) -> None:
        with self._lock:
            self._rows(sheet).append(list(row))

    def update_range(self, sheet: str, row_index: int, row: Sequence[Any]) -> None:
        with self._lock:
            rows = self._rows(sheet)
            idx = int(row_index) - 1
            if idx < 0:
                raise StorageUnavailable(sheet, f"invalid row {row_index}")
            while len(rows) <= idx:
                rows.append([])
            rows[idx] = list(row)

    def delete_range(self, sheet: str, row_index: int) -> None:
        with self._lock:
            rows = self._rows(sheet)
            idx = int(row_index)
            if 0 <= idx < len(rows):
                del rows[idx]

    def ensure_sheet(self, sheet: str, header: Sequence[str]) -> bool:
        with self._lock:
            rows = self._sheets.get(sheet)
            if rows is None:
                self._sheets[sheet] = [list(header)]
                return True
            if not rows:
                rows.append(list(header))
                return True
            return False
