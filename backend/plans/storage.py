# -*- coding: utf-8 -*-
"""Nutrition plan storage helpers (sheet: nutrition_plans)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

from ..app_db import get_store
from ..sheets.mapper import NUTRITION_PLANS, as_bool, as_float, as_int, as_str

_SHEET = NUTRITION_PLANS.name


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _row_to_plan(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": as_int(row.get("id")),
        "name": as_str(row.get("name")),
        "description": as_str(row.get("description")),
        "price": as_float(row.get("price"), 0.0),
        "duration_minutes": as_int(row.get("duration_minutes")),
        "is_active": as_bool(row.get("is_active"), True),
        "created_at": as_str(row.get("created_at")),
    }


def list_plans(*, include_inactive: bool = False) -> List[Dict[str, Any]]:
    plans = [_row_to_plan(r) for r in get_store(_SHEET).list_all()]
    if include_inactive:
        return plans
    return [p for p in plans if p["is_active"]]


def get_plan(plan_id: Any) -> Dict[str, Any]:
    return _row_to_plan(get_store(_SHEET).get_by_id(plan_id))


def create_plan(payload: Dict[str, Any]) -> Dict[str, Any]:
    store = get_store(_SHEET)
    store.ensure_unique("name", payload["name"])
    _, row = store.insert(
        [
            payload["name"],
            payload.get("description") or "",
            float(payload["price"]),
            int(payload["duration_minutes"]),
            bool(payload.get("is_active", True)),
            _iso_now(),
        ]
    )
    return _row_to_plan(row)


def update_plan(plan_id: Any, changes: Dict[str, Any]) -> Dict[str, Any]:
    store = get_store(_SHEET)
    if "name" in changes:
        store.ensure_unique("name", changes["name"], exclude_id=plan_id)
    return _row_to_plan(store.update_by_id(plan_id, changes))


def delete_plan(plan_id: Any) -> Dict[str, Any]:
    return _row_to_plan(get_store(_SHEET).delete_by_id(plan_id))
