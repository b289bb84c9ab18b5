# -*- coding: utf-8 -*-
"""Appointments — sheet storage helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..app_db import get_store
from ..sheets.mapper import APPOINTMENTS, as_int, as_str, same_id

_SHEET = APPOINTMENTS.name

STATUS_PENDING = "pending"
STATUS_CANCELLED = "cancelled"
STATUS_COMPLETED = "completed"
CLOSED_STATUSES = {STATUS_CANCELLED, STATUS_COMPLETED}


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _row_to_appointment(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": as_int(row.get("id")),
        "user_id": as_int(row.get("user_id")),
        "plan_id": as_int(row.get("plan_id")),
        "appointment_date": as_str(row.get("appointment_date")),
        "appointment_time": as_str(row.get("appointment_time")),
        "status": as_str(row.get("status"), STATUS_PENDING),
        "notes": as_str(row.get("notes")),
        "created_at": as_str(row.get("created_at")),
    }


def list_appointments(*, user_id: Any = None, status: Optional[str] = None) -> List[Dict[str, Any]]:
    items = [_row_to_appointment(r) for r in get_store(_SHEET).list_all()]
    if user_id is not None:
        items = [a for a in items if same_id(a["user_id"], user_id)]
    if status:
        items = [a for a in items if a["status"] == status]
    items.sort(key=lambda a: (a["appointment_date"], a["appointment_time"]))
    return items


def get_appointment(appointment_id: Any) -> Dict[str, Any]:
    return _row_to_appointment(get_store(_SHEET).get_by_id(appointment_id))


def create_appointment(
    *,
    user_id: Any,
    plan_id: Any,
    appointment_date: str,
    appointment_time: str,
    notes: Optional[str] = None,
) -> Dict[str, Any]:
    _, row = get_store(_SHEET).insert(
        {
            "user_id": user_id,
            "plan_id": plan_id,
            "appointment_date": appointment_date,
            "appointment_time": appointment_time,
            "status": STATUS_PENDING,
            "notes": notes or "",
            "created_at": _utc_now(),
        }
    )
    return _row_to_appointment(row)


def update_appointment(appointment_id: Any, changes: Dict[str, Any]) -> Dict[str, Any]:
    return _row_to_appointment(get_store(_SHEET).update_by_id(appointment_id, changes))


def delete_appointment(appointment_id: Any) -> Dict[str, Any]:
    return _row_to_appointment(get_store(_SHEET).delete_by_id(appointment_id))
