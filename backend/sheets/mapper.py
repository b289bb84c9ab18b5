# -*- coding: utf-8 -*-
"""Row <-> record mapping.

The header row is the schema: every data row is zipped positionally against it.
Sheet cells come back untyped (Google returns strings for everything), so the
coercion helpers here are used by the domain ``_row_to_*`` functions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

Record = Dict[str, Any]
Row = List[Any]

ID_COLUMN = "id"


@dataclass(frozen=True)
class SheetSchema:
    name: str
    columns: Tuple[str, ...]

    @property
    def header(self) -> List[str]:
        return list(self.columns)


USERS = SheetSchema(
    "users",
    ("id", "username", "email", "password_hash", "full_name", "role", "created_at"),
)
PRODUCTS = SheetSchema(
    "products",
    ("id", "name", "description", "price", "file_url", "category", "image_url", "is_active", "created_at"),
)
NUTRITION_PLANS = SheetSchema(
    "nutrition_plans",
    ("id", "name", "description", "price", "duration_minutes", "is_active", "created_at"),
)
APPOINTMENTS = SheetSchema(
    "appointments",
    ("id", "user_id", "plan_id", "appointment_date", "appointment_time", "status", "notes", "created_at"),
)
ORDERS = SheetSchema(
    "orders",
    ("id", "user_id", "total_amount", "status", "payment_id", "created_at"),
)
ORDER_ITEMS = SheetSchema(
    "order_items",
    ("id", "order_id", "product_id", "quantity", "price_at_purchase", "created_at"),
)

SCHEMAS: Dict[str, SheetSchema] = {
    s.name: s for s in (USERS, PRODUCTS, NUTRITION_PLANS, APPOINTMENTS, ORDERS, ORDER_ITEMS)
}


def header_of(rows: Sequence[Sequence[Any]]) -> List[str]:
    if not rows:
        return []
    return [str(cell).strip() for cell in rows[0]]


def row_to_record(header: Sequence[str], row: Sequence[Any]) -> Record:
    # Short rows (trailing blank cells trimmed by the API) map missing columns to None.
    return {col: (row[idx] if idx < len(row) else None) for idx, col in enumerate(header)}


def to_records(rows: Sequence[Sequence[Any]]) -> List[Record]:
    if not rows:
        return []
    header = header_of(rows)
    return [row_to_record(header, row) for row in rows[1:]]


def find_column_index(header: Sequence[str], column: str) -> Optional[int]:
    try:
        return list(header).index(column)
    except ValueError:
        return None


def record_to_row(header: Sequence[str], record: Mapping[str, Any]) -> Row:
    row: Row = []
    for col in header:
        value = record.get(col)
        row.append("" if value is None else value)
    return row


def same_id(left: Any, right: Any) -> bool:
    # 7 and "7" are the same id; the medium has no column types.
    if left is None or right is None:
        return False
    return str(left).strip() == str(right).strip()


def parse_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    s = str(value).strip()
    if not s:
        return None
    try:
        return int(s)
    except ValueError:
        pass
    try:
        f = float(s)
    except ValueError:
        return None
    return int(f) if f.is_integer() else None


# ---- Coercion helpers for the domain layer ----

def blank_to_none(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def as_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    parsed = parse_int(blank_to_none(value))
    return default if parsed is None else parsed


def as_float(value: Any, default: Optional[float] = None) -> Optional[float]:
    value = blank_to_none(value)
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(str(value).strip().replace(",", "."))
    except ValueError:
        return default


def as_bool(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    value = blank_to_none(value)
    if value is None:
        return default
    if isinstance(value, (int, float)):
        return value != 0
    s = str(value).strip().lower()
    if s in {"true", "1", "yes", "y", "t", "on", "verdadero"}:
        return True
    if s in {"false", "0", "no", "n", "f", "off", "falso"}:
        return False
    return default


def as_str(value: Any, default: str = "") -> str:
    value = blank_to_none(value)
    return default if value is None else str(value)
