# -*- coding: utf-8 -*-
"""Auth — user sheet helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..app_db import get_store
from ..sheets.mapper import USERS, as_int, as_str

_SHEET = USERS.name


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _row_to_user(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": as_int(row.get("id")),
        "username": as_str(row.get("username")),
        "email": as_str(row.get("email")),
        "password_hash": as_str(row.get("password_hash")),
        "full_name": as_str(row.get("full_name")),
        "role": as_str(row.get("role"), "client"),
        "created_at": as_str(row.get("created_at")),
    }


def list_users() -> List[Dict[str, Any]]:
    return [_row_to_user(r) for r in get_store(_SHEET).list_all()]


def get_user_by_id(user_id: Any) -> Optional[Dict[str, Any]]:
    row = get_store(_SHEET).find_by_id(user_id)
    return _row_to_user(row) if row else None


def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    rows = get_store(_SHEET).find_where("email", email.lower().strip())
    return _row_to_user(rows[0]) if rows else None


def ensure_unique_identity(*, email: Optional[str] = None, username: Optional[str] = None, exclude_id: Any = None) -> None:
    store = get_store(_SHEET)
    if email is not None:
        store.ensure_unique("email", email.lower().strip(), exclude_id=exclude_id)
    if username is not None:
        store.ensure_unique("username", username.strip(), exclude_id=exclude_id)


def create_user(
    *,
    username: str,
    email: str,
    password_hash: str,
    full_name: str = "",
    role: str = "client",
) -> Dict[str, Any]:
    ensure_unique_identity(email=email, username=username)
    _, row = get_store(_SHEET).insert(
        {
            "username": username.strip(),
            "email": email.lower().strip(),
            "password_hash": password_hash,
            "full_name": full_name or "",
            "role": role,
            "created_at": _utc_now(),
        }
    )
    return _row_to_user(row)


def update_user(user_id: Any, changes: Dict[str, Any]) -> Dict[str, Any]:
    if "email" in changes:
        changes["email"] = str(changes["email"]).lower().strip()
    ensure_unique_identity(
        email=changes.get("email"),
        username=changes.get("username"),
        exclude_id=user_id,
    )
    row = get_store(_SHEET).update_by_id(user_id, changes)
    return _row_to_user(row)


def delete_user(user_id: Any) -> Dict[str, Any]:
    return _row_to_user(get_store(_SHEET).delete_by_id(user_id))
