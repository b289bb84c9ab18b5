# -*- coding: utf-8 -*-
"""Id allocation for spreadsheet records.

``ScanIdAllocator`` is the default: ``1 + max(existing ids)`` from the rows the
caller just read. Two concurrent inserts that read before either appends get
the same id; nothing here prevents that.

``CounterIdAllocator`` keeps a per-sheet counter in process memory, seeded from
a scan on first use. It closes the race between threads of one process only.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Iterable, Mapping

from .mapper import ID_COLUMN, parse_int


def max_id(records: Iterable[Mapping[str, Any]]) -> int:
    current = 0
    for record in records:
        value = parse_int(record.get(ID_COLUMN)) or 0
        if value > current:
            current = value
    return current


class ScanIdAllocator:
    def next_id(self, sheet: str, records: Iterable[Mapping[str, Any]]) -> int:
        return max_id(records) + 1


class CounterIdAllocator:
    def __init__(self) -> None:
        self._counters: Dict[str, int] = {}
        self._lock = threading.Lock()

    def next_id(self, sheet: str, records: Iterable[Mapping[str, Any]]) -> int:
        with self._lock:
            seen = max_id(records)
            # Never hand out an id below what the sheet already holds (e.g. rows added by hand).
            current = max(self._counters.get(sheet, 0), seen)
            self._counters[sheet] = current + 1
            return current + 1

    def reset(self, sheet: str | None = None) -> None:
        with self._lock:
            if sheet is None:
                self._counters.clear()
            else:
                self._counters.pop(sheet, None)


def make_allocator(strategy: str):
    if strategy == "counter":
        return CounterIdAllocator()
    if strategy == "scan":
        return ScanIdAllocator()
    raise ValueError(f"unknown id strategy: {strategy}")
