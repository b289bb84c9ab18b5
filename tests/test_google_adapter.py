# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

import gspread
import requests

from backend.sheets.adapter import GoogleSheetsStorage
from backend.sheets.errors import SchemaError, StorageUnavailable


class _FakeWorksheet:
    def __init__(self, title: str, sheet_id: int, rows=None) -> None:
        self.title = title
        self.id = sheet_id
        self.rows = [list(r) for r in (rows or [])]
        self.calls = []
        self.fail_with = None

    def _maybe_fail(self):
        if self.fail_with is not None:
            raise self.fail_with

    def get_all_values(self):
        self._maybe_fail()
        return [list(r) for r in self.rows]

    def append_row(self, values, value_input_option=None, insert_data_option=None):
        self._maybe_fail()
        self.calls.append(("append_row", list(values), value_input_option, insert_data_option))
        self.rows.append(list(values))

    def update(self, range_name=None, values=None, raw=True):
        self._maybe_fail()
        self.calls.append(("update", range_name, values, raw))

    def row_values(self, row):
        self._maybe_fail()
        return list(self.rows[row - 1]) if len(self.rows) >= row else []


class _FakeSpreadsheet:
    def __init__(self, worksheets) -> None:
        self.worksheets = {ws.title: ws for ws in worksheets}
        self.batch_requests = []
        self.lookups = 0

    def worksheet(self, title):
        self.lookups += 1
        if title not in self.worksheets:
            raise gspread.exceptions.WorksheetNotFound(title)
        return self.worksheets[title]

    def batch_update(self, body):
        self.batch_requests.append(body)
        return {}

    def add_worksheet(self, title, rows, cols):
        ws = _FakeWorksheet(title, 900 + len(self.worksheets))
        self.worksheets[title] = ws
        return ws


class TestGoogleSheetsStorage(unittest.TestCase):
    def setUp(self) -> None:
        self.products = _FakeWorksheet("products", 1234, [["id", "name"], ["1", "Tea"]])
        self.orders = _FakeWorksheet("orders", 77, [["id", "user_id"]])
        self.spreadsheet = _FakeSpreadsheet([self.orders, self.products])
        self.storage = GoogleSheetsStorage("sheet-key", spreadsheet=self.spreadsheet)

    def test_read_all_returns_rows(self) -> None:
        self.assertEqual(self.storage.read_all("products"), [["id", "name"], ["1", "Tea"]])

    def test_worksheet_handle_is_cached(self) -> None:
        self.storage.read_all("products")
        self.storage.read_all("products")
        self.assertEqual(self.spreadsheet.lookups, 1)

    def test_append_is_raw_insert_rows(self) -> None:
        self.storage.append("products", [2, "Coffee"])
        self.assertEqual(self.products.calls[-1], ("append_row", [2, "Coffee"], "RAW", "INSERT_ROWS"))

    def test_update_range_targets_one_based_row(self) -> None:
        self.storage.update_range("products", 2, [1, "Green tea"])
        self.assertEqual(self.products.calls[-1], ("update", "A2", [[1, "Green tea"]], True))

    def test_delete_range_uses_stable_sheet_id(self) -> None:
        self.storage.delete_range("products", 1)
        body = self.spreadsheet.batch_requests[-1]
        dim = body["requests"][0]["deleteDimension"]["range"]
        # products is the second tab; its sheetId is used, never its position.
        self.assertEqual(dim, {"sheetId": 1234, "dimension": "ROWS", "startIndex": 1, "endIndex": 2})

    def test_missing_worksheet_is_schema_error(self) -> None:
        with self.assertRaises(SchemaError):
            self.storage.read_all("users")

    def test_remote_errors_become_storage_unavailable(self) -> None:
        self.products.fail_with = gspread.exceptions.GSpreadException("quota exceeded")
        with self.assertRaises(StorageUnavailable) as ctx:
            self.storage.read_all("products")
        self.assertEqual(ctx.exception.sheet, "products")

    def test_transport_errors_become_storage_unavailable(self) -> None:
        self.products.fail_with = requests.exceptions.ConnectionError("down")
        with self.assertRaises(StorageUnavailable):
            self.storage.append("products", [2, "Coffee"])

    def test_failure_drops_cached_worksheet(self) -> None:
        self.storage.read_all("products")
        self.products.fail_with = gspread.exceptions.GSpreadException("boom")
        with self.assertRaises(StorageUnavailable):
            self.storage.read_all("products")
        self.products.fail_with = None
        self.storage.read_all("products")
        self.assertEqual(self.spreadsheet.lookups, 2)

    def test_ensure_sheet_creates_missing_worksheet(self) -> None:
        created = self.storage.ensure_sheet("users", ["id", "email"])
        self.assertTrue(created)
        self.assertEqual(self.spreadsheet.worksheets["users"].rows, [["id", "email"]])

    def test_ensure_sheet_leaves_existing_header(self) -> None:
        self.assertFalse(self.storage.ensure_sheet("products", ["id", "name"]))
        self.assertEqual(len(self.products.rows), 2)

    def test_missing_spreadsheet_id(self) -> None:
        storage = GoogleSheetsStorage(None)
        with self.assertRaises(StorageUnavailable):
            storage.read_all("products")

    def test_missing_credentials_file(self) -> None:
        storage = GoogleSheetsStorage("sheet-key", service_account_file="/nonexistent/creds.json")
        with self.assertRaises(StorageUnavailable):
            storage.read_all("products")


if __name__ == "__main__":
    unittest.main()
