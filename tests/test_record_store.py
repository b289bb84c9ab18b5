# -*- coding: utf-8 -*-

from __future__ import annotations

import threading
import unittest
from concurrent.futures import ThreadPoolExecutor

from backend.sheets.adapter import MemoryStorage
from backend.sheets.errors import NotFound, SchemaError, StorageUnavailable, UniquenessViolation
from backend.sheets.ids import CounterIdAllocator
from backend.sheets.mapper import PRODUCTS
from backend.sheets.store import RecordStore

HEADER = PRODUCTS.header


def _product_row(pid, name, price):
    return [pid, name, "desc", price, "", "drinks", "", True, "2024-01-01T00:00:00Z"]


class _BarrierStorage(MemoryStorage):
    """Holds every read until ``parties`` readers have arrived."""

    def __init__(self, sheets, parties: int) -> None:
        super().__init__(sheets)
        self.barrier = threading.Barrier(parties, timeout=5)

    def read_all(self, sheet):
        rows = super().read_all(sheet)
        self.barrier.wait()
        return rows


class _FailingStorage(MemoryStorage):
    def __init__(self, sheets, fail_on: str) -> None:
        super().__init__(sheets)
        self.fail_on = fail_on

    def read_all(self, sheet):
        if self.fail_on == "read":
            raise StorageUnavailable(sheet, "read failed")
        return super().read_all(sheet)

    def append(self, sheet, row):
        if self.fail_on == "append":
            raise StorageUnavailable(sheet, "append failed")
        super().append(sheet, row)

    def update_range(self, sheet, row_index, row):
        if self.fail_on == "update":
            raise ConnectionError("socket closed")
        super().update_range(sheet, row_index, row)

    def delete_range(self, sheet, row_index):
        if self.fail_on == "delete":
            raise StorageUnavailable(sheet, "delete failed")
        super().delete_range(sheet, row_index)


class TestRecordStore(unittest.TestCase):
    def setUp(self) -> None:
        self.storage = MemoryStorage({"products": [list(HEADER)]})
        self.store = RecordStore(self.storage, "products")

    def test_list_all_on_header_only_sheet_is_empty(self) -> None:
        self.assertEqual(self.store.list_all(), [])

    def test_list_all_on_empty_sheet_is_empty(self) -> None:
        store = RecordStore(MemoryStorage({"products": []}), "products")
        self.assertEqual(store.list_all(), [])

    def test_first_insert_gets_id_1(self) -> None:
        new_id, record = self.store.insert({"name": "Tea", "price": 9.99})
        self.assertEqual(new_id, 1)
        self.assertEqual(record["id"], 1)

    def test_next_id_is_max_plus_one_without_gap_filling(self) -> None:
        for pid in (1, 3, 5):
            self.storage.append("products", _product_row(pid, f"p{pid}", 1))
        new_id, _ = self.store.insert({"name": "Next", "price": 1})
        self.assertEqual(new_id, 6)

    def test_non_numeric_ids_count_as_zero(self) -> None:
        self.storage.append("products", _product_row("abc", "odd", 1))
        self.storage.append("products", _product_row("", "blank", 1))
        new_id, _ = self.store.insert({"name": "Next", "price": 1})
        self.assertEqual(new_id, 1)

    def test_insert_then_find_round_trip(self) -> None:
        new_id, record = self.store.insert({"name": "Tea", "price": 9.99, "is_active": True})
        found = self.store.find_by_id(new_id)
        self.assertEqual(found, record)
        self.assertEqual(found["name"], "Tea")
        self.assertEqual(found["price"], 9.99)

    def test_insert_accepts_values_in_schema_order(self) -> None:
        new_id, record = self.store.insert(["Tea", "green", 3.5])
        self.assertEqual(record["name"], "Tea")
        self.assertEqual(record["description"], "green")
        self.assertEqual(record["price"], 3.5)
        self.assertEqual(self.storage.read_all("products")[1][0], new_id)

    def test_insert_rejects_too_many_values(self) -> None:
        with self.assertRaises(SchemaError):
            self.store.insert(["x"] * len(HEADER))

    def test_insert_ignores_caller_supplied_id(self) -> None:
        new_id, record = self.store.insert({"id": 99, "name": "Tea"})
        self.assertEqual(new_id, 1)
        self.assertEqual(record["id"], 1)

    def test_coffee_scenario(self) -> None:
        self.storage.append("products", _product_row(1, "Tea", 9.99))
        new_id, _ = self.store.insert({"name": "Coffee", "price": 5})
        self.assertEqual(new_id, 2)
        records = self.store.list_all()
        self.assertEqual(len(records), 2)
        coffee = records[1]
        self.assertEqual(coffee["id"], 2)
        self.assertEqual(coffee["name"], "Coffee")
        self.assertEqual(coffee["price"], 5)

    def test_find_by_id_compares_as_strings(self) -> None:
        self.storage.append("products", ["7", "Tea", "", "1"])
        self.assertEqual(self.store.find_by_id(7)["name"], "Tea")
        self.assertEqual(self.store.find_by_id("7")["name"], "Tea")
        self.assertIsNone(self.store.find_by_id(8))

    def test_update_is_partial(self) -> None:
        self.store.insert({"name": "Tea", "price": 9.99, "category": "drinks"})
        new_id, _ = self.store.insert({"name": "Coffee", "price": 5, "category": "drinks"})
        before = self.store.find_by_id(new_id)

        self.store.update_by_id(new_id, {"price": 6})

        after = self.store.find_by_id(new_id)
        self.assertEqual(after["price"], 6)
        for col in HEADER:
            if col != "price":
                self.assertEqual(after[col], before[col], col)
        self.assertEqual(self.store.find_by_id(1)["price"], 9.99)

    def test_update_never_changes_id(self) -> None:
        new_id, _ = self.store.insert({"name": "Tea"})
        updated = self.store.update_by_id(new_id, {"id": 50, "name": "Green tea"})
        self.assertEqual(updated["id"], new_id)
        self.assertIsNone(self.store.find_by_id(50))
        self.assertEqual(self.store.find_by_id(new_id)["name"], "Green tea")

    def test_update_pads_short_rows(self) -> None:
        self.storage.append("products", ["1", "Tea"])
        updated = self.store.update_by_id(1, {"is_active": False})
        self.assertEqual(updated["name"], "Tea")
        self.assertIs(updated["is_active"], False)
        self.assertEqual(len(self.storage.read_all("products")[1]), len(HEADER))

    def test_update_unknown_column_is_schema_error(self) -> None:
        new_id, _ = self.store.insert({"name": "Tea"})
        with self.assertRaises(SchemaError):
            self.store.update_by_id(new_id, {"colour": "green"})

    def test_update_missing_record(self) -> None:
        with self.assertRaises(NotFound) as ctx:
            self.store.update_by_id(42, {"name": "x"})
        self.assertEqual(ctx.exception.sheet, "products")
        self.assertEqual(ctx.exception.record_id, 42)

    def test_update_targets_current_position(self) -> None:
        for name in ("a", "b", "c"):
            self.store.insert({"name": name})
        self.store.delete_by_id(1)
        self.store.update_by_id(3, {"name": "C"})
        names = [r["name"] for r in self.store.list_all()]
        self.assertEqual(names, ["b", "C"])

    def test_delete_then_find_is_not_found(self) -> None:
        new_id, _ = self.store.insert({"name": "Tea"})
        deleted = self.store.delete_by_id(new_id)
        self.assertEqual(deleted["name"], "Tea")
        self.assertIsNone(self.store.find_by_id(new_id))
        with self.assertRaises(NotFound):
            self.store.get_by_id(new_id)
        with self.assertRaises(NotFound):
            self.store.delete_by_id(new_id)

    def test_delete_shifts_later_rows_up(self) -> None:
        for name in ("a", "b", "c"):
            self.store.insert({"name": name})
        self.store.delete_by_id(2)
        rows = self.storage.read_all("products")
        self.assertEqual(rows[0], HEADER)
        self.assertEqual([r[1] for r in rows[1:]], ["a", "c"])

    def test_deleted_max_id_is_handed_out_again(self) -> None:
        self.store.insert({"name": "a"})
        second, _ = self.store.insert({"name": "b"})
        self.store.delete_by_id(second)
        third, _ = self.store.insert({"name": "c"})
        # max+1 over the rows that remain; no high-water mark is kept.
        self.assertEqual(third, 2)

    def test_ensure_unique(self) -> None:
        self.store.insert({"name": "Tea"})
        with self.assertRaises(UniquenessViolation) as ctx:
            self.store.ensure_unique("name", " tea ")
        self.assertEqual(ctx.exception.column, "name")
        self.store.ensure_unique("name", "Tea", exclude_id=1)
        self.store.ensure_unique("name", "Coffee")


class TestRecordStoreSchema(unittest.TestCase):
    def test_missing_id_column(self) -> None:
        store = RecordStore(MemoryStorage({"products": [["name", "price"], ["Tea", "1"]]}), "products")
        with self.assertRaises(SchemaError):
            store.insert({"name": "Coffee"})
        with self.assertRaises(SchemaError):
            store.find_by_id(1)
        with self.assertRaises(SchemaError):
            store.update_by_id(1, {"name": "x"})

    def test_insert_into_sheet_without_header(self) -> None:
        store = RecordStore(MemoryStorage({"products": []}), "products")
        with self.assertRaises(SchemaError):
            store.insert({"name": "Coffee"})
        with self.assertRaises(SchemaError):
            store.find_by_id(1)
        with self.assertRaises(SchemaError):
            store.update_by_id(1, {"name": "x"})
        with self.assertRaises(SchemaError):
            store.delete_by_id(1)

    def test_unknown_sheet(self) -> None:
        store = RecordStore(MemoryStorage({}), "products")
        with self.assertRaises(SchemaError):
            store.list_all()


class TestRecordStoreFailures(unittest.TestCase):
    def _store(self, fail_on: str) -> RecordStore:
        storage = _FailingStorage({"products": [list(HEADER), _product_row(1, "Tea", 9.99)]}, fail_on)
        return RecordStore(storage, "products")

    def test_read_failure_propagates(self) -> None:
        with self.assertRaises(StorageUnavailable):
            self._store("read").list_all()

    def test_read_failure_carries_record_id(self) -> None:
        store = self._store("read")
        for call in (
            lambda: store.find_by_id(7),
            lambda: store.update_by_id(7, {"price": 1}),
            lambda: store.delete_by_id(7),
        ):
            with self.assertRaises(StorageUnavailable) as ctx:
                call()
            self.assertEqual(ctx.exception.sheet, "products")
            self.assertIn("id=7", str(ctx.exception))
            self.assertIn("read failed", ctx.exception.detail)

    def test_delete_failure_carries_context(self) -> None:
        store = self._store("delete")
        with self.assertRaises(StorageUnavailable) as ctx:
            store.delete_by_id(1)
        self.assertIn("delete id=1", str(ctx.exception))
        self.assertEqual(store.find_by_id(1)["name"], "Tea")

    def test_append_failure_carries_context(self) -> None:
        with self.assertRaises(StorageUnavailable) as ctx:
            self._store("append").insert({"name": "Coffee"})
        self.assertEqual(ctx.exception.sheet, "products")
        self.assertIn("id=2", str(ctx.exception))

    def test_unexpected_write_error_is_wrapped(self) -> None:
        store = self._store("update")
        with self.assertRaises(StorageUnavailable) as ctx:
            store.update_by_id(1, {"price": 1})
        self.assertIsInstance(ctx.exception.__cause__, ConnectionError)
        self.assertEqual(store.find_by_id(1)["price"], 9.99)


class TestConcurrentInsert(unittest.TestCase):
    def _race(self, allocator=None):
        storage = _BarrierStorage({"products": [list(HEADER)]}, parties=2)
        store = RecordStore(storage, "products", id_allocator=allocator)
        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = [pool.submit(store.insert, {"name": n}) for n in ("Tea", "Coffee")]
            ids = sorted(f.result()[0] for f in futures)
        storage.barrier = threading.Barrier(1)
        return ids, store.list_all()

    def test_interleaved_reads_allocate_duplicate_ids(self) -> None:
        # Both inserts read the empty sheet before either appends.
        ids, records = self._race()
        self.assertEqual(ids, [1, 1])
        self.assertEqual(len(records), 2)
        self.assertEqual([r["id"] for r in records], [1, 1])

    def test_counter_allocator_avoids_duplicates_in_process(self) -> None:
        ids, records = self._race(CounterIdAllocator())
        self.assertEqual(ids, [1, 2])
        self.assertEqual(sorted(r["id"] for r in records), [1, 2])


class TestCounterAllocator(unittest.TestCase):
    def test_seeds_from_existing_rows(self) -> None:
        allocator = CounterIdAllocator()
        self.assertEqual(allocator.next_id("products", [{"id": "4"}, {"id": "2"}]), 5)
        self.assertEqual(allocator.next_id("products", [{"id": "4"}]), 6)
        self.assertEqual(allocator.next_id("orders", []), 1)

    def test_catches_up_with_rows_added_elsewhere(self) -> None:
        allocator = CounterIdAllocator()
        allocator.next_id("products", [])
        self.assertEqual(allocator.next_id("products", [{"id": 10}]), 11)

    def test_reset(self) -> None:
        allocator = CounterIdAllocator()
        allocator.next_id("products", [{"id": 3}])
        allocator.reset("products")
        self.assertEqual(allocator.next_id("products", []), 1)


if __name__ == "__main__":
    unittest.main()
