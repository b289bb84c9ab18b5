# -*- coding: utf-8 -*-
"""Orders — sheet storage helpers (orders + order_items).

An order is one row in ``orders`` plus one row per line in ``order_items``,
written as separate appends. A failure part-way leaves the order with missing
lines; there is no cross-sheet transaction to roll back.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..app_db import get_store
from ..sheets.mapper import ORDER_ITEMS, ORDERS, as_float, as_int, as_str, blank_to_none, same_id

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _row_to_item(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": as_int(row.get("id")),
        "order_id": as_int(row.get("order_id")),
        "product_id": as_int(row.get("product_id")),
        "quantity": as_int(row.get("quantity"), 0),
        "price_at_purchase": as_float(row.get("price_at_purchase"), 0.0),
        "created_at": as_str(row.get("created_at")),
    }


def _row_to_order(row: Dict[str, Any], items: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    return {
        "id": as_int(row.get("id")),
        "user_id": as_int(row.get("user_id")),
        "total_amount": as_float(row.get("total_amount"), 0.0),
        "status": as_str(row.get("status"), STATUS_PENDING),
        "payment_id": blank_to_none(row.get("payment_id")),
        "created_at": as_str(row.get("created_at")),
        "items": items or [],
    }


def _items_by_order() -> Dict[str, List[Dict[str, Any]]]:
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for row in get_store(ORDER_ITEMS.name).list_all():
        item = _row_to_item(row)
        grouped.setdefault(str(item["order_id"]), []).append(item)
    return grouped


def list_orders(*, user_id: Any = None) -> List[Dict[str, Any]]:
    rows = get_store(ORDERS.name).list_all()
    if user_id is not None:
        rows = [r for r in rows if same_id(r.get("user_id"), user_id)]
    grouped = _items_by_order()
    return [_row_to_order(r, grouped.get(str(as_int(r.get("id"))), [])) for r in rows]


def get_order_items(order_id: Any) -> List[Dict[str, Any]]:
    rows = get_store(ORDER_ITEMS.name).list_all()
    return [_row_to_item(r) for r in rows if same_id(r.get("order_id"), order_id)]


def get_order(order_id: Any) -> Dict[str, Any]:
    row = get_store(ORDERS.name).get_by_id(order_id)
    return _row_to_order(row, get_order_items(order_id))


def create_order(
    *,
    user_id: Any,
    lines: Iterable[Tuple[Any, int, float]],
    payment_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Create an order from ``(product_id, quantity, unit_price)`` lines."""
    lines = list(lines)
    total = round(sum(qty * price for _, qty, price in lines), 2)
    now = _utc_now()

    order_id, order_row = get_store(ORDERS.name).insert(
        {
            "user_id": user_id,
            "total_amount": total,
            "status": STATUS_PENDING,
            "payment_id": payment_id or "",
            "created_at": now,
        }
    )

    items_store = get_store(ORDER_ITEMS.name)
    items: List[Dict[str, Any]] = []
    for product_id, qty, price in lines:
        try:
            _, item_row = items_store.insert(
                {
                    "order_id": order_id,
                    "product_id": product_id,
                    "quantity": qty,
                    "price_at_purchase": price,
                    "created_at": now,
                }
            )
        except Exception:
            logger.error(
                "Order %s left partial: %d of %d line items written",
                order_id,
                len(items),
                len(lines),
            )
            raise
        items.append(_row_to_item(item_row))

    return _row_to_order(order_row, items)


def update_order(order_id: Any, changes: Dict[str, Any]) -> Dict[str, Any]:
    row = get_store(ORDERS.name).update_by_id(order_id, changes)
    return _row_to_order(row, get_order_items(order_id))


def delete_order(order_id: Any) -> Dict[str, Any]:
    orders = get_store(ORDERS.name)
    orders.get_by_id(order_id)
    items_store = get_store(ORDER_ITEMS.name)
    # Lines first: a failure part-way leaves an order with fewer lines, never orphan lines.
    for item in get_order_items(order_id):
        items_store.delete_by_id(item["id"])
    return _row_to_order(orders.delete_by_id(order_id))
