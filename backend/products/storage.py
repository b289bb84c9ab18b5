# -*- coding: utf-8 -*-
"""Products — sheet storage helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..app_db import get_store
from ..sheets.mapper import PRODUCTS, as_bool, as_float, as_int, as_str, blank_to_none

_SHEET = PRODUCTS.name


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _row_to_product(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": as_int(row.get("id")),
        "name": as_str(row.get("name")),
        "description": as_str(row.get("description")),
        "price": as_float(row.get("price"), 0.0),
        "file_url": blank_to_none(row.get("file_url")),
        "category": blank_to_none(row.get("category")),
        "image_url": blank_to_none(row.get("image_url")),
        # Rows typed in by hand often leave is_active blank; treat that as active.
        "is_active": as_bool(row.get("is_active"), True),
        "created_at": as_str(row.get("created_at")),
    }


def list_products(*, include_inactive: bool = False, category: Optional[str] = None) -> List[Dict[str, Any]]:
    items = [_row_to_product(r) for r in get_store(_SHEET).list_all()]
    if not include_inactive:
        items = [p for p in items if p["is_active"]]
    if category:
        wanted = category.strip().lower()
        items = [p for p in items if (p.get("category") or "").strip().lower() == wanted]
    return items


def get_product(product_id: Any) -> Dict[str, Any]:
    return _row_to_product(get_store(_SHEET).get_by_id(product_id))


def create_product(payload: Dict[str, Any]) -> Dict[str, Any]:
    store = get_store(_SHEET)
    store.ensure_unique("name", payload["name"])
    _, row = store.insert(
        {
            "name": payload["name"],
            "description": payload.get("description") or "",
            "price": float(payload["price"]),
            "file_url": payload.get("file_url") or "",
            "category": payload.get("category") or "",
            "image_url": payload.get("image_url") or "",
            "is_active": bool(payload.get("is_active", True)),
            "created_at": _utc_now(),
        }
    )
    return _row_to_product(row)


def update_product(product_id: Any, changes: Dict[str, Any]) -> Dict[str, Any]:
    store = get_store(_SHEET)
    if "name" in changes:
        store.ensure_unique("name", changes["name"], exclude_id=product_id)
    if "price" in changes:
        changes["price"] = float(changes["price"])
    return _row_to_product(store.update_by_id(product_id, changes))


def delete_product(product_id: Any) -> Dict[str, Any]:
    return _row_to_product(get_store(_SHEET).delete_by_id(product_id))
