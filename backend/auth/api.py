# -*- coding: utf-8 -*-
"""Users / auth — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from ..config import settings
from .models import AuthResponse, LoginRequest, RegisterRequest, UserListResponse, UserPublic, UserUpdateRequest
from .security import (
    ROLE_CLIENT,
    TOKEN_COOKIE_NAME,
    create_access_token,
    ensure_owner_or_admin,
    get_current_user,
    hash_password,
    is_admin,
    require_admin,
    verify_password,
)
from .storage import create_user, delete_user, get_user_by_email, get_user_by_id, list_users, update_user

router = APIRouter(prefix="/api/users", tags=["Users"])


def _user_public(row: dict) -> UserPublic:
    return UserPublic(
        id=row["id"],
        username=row["username"],
        email=row["email"],
        full_name=row.get("full_name") or "",
        role=row["role"],
        created_at=row["created_at"],
    )


def _set_auth_cookie(resp: Response, token: str) -> None:
    max_age = int(settings.token_ttl_days) * 24 * 60 * 60
    resp.set_cookie(
        TOKEN_COOKIE_NAME,
        token,
        httponly=True,
        samesite="lax",
        max_age=max_age,
        path="/",
    )


@router.post("/register", response_model=AuthResponse, status_code=201, summary="Register a new user")
def register(request: RegisterRequest, response: Response):
    user = create_user(
        username=request.username,
        email=request.email,
        password_hash=hash_password(request.password),
        full_name=request.full_name or "",
        role=ROLE_CLIENT,
    )
    token = create_access_token(user_id=user["id"], role=user["role"])
    _set_auth_cookie(response, token)
    return AuthResponse(user=_user_public(user), token=token)


@router.post("/login", response_model=AuthResponse, summary="Login")
def login(request: LoginRequest, response: Response):
    user = get_user_by_email(request.email)
    if not user or not verify_password(request.password, user["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token(user_id=user["id"], role=user["role"])
    _set_auth_cookie(response, token)
    return AuthResponse(user=_user_public(user), token=token)


@router.post("/logout", summary="Logout")
def logout(response: Response):
    response.delete_cookie(TOKEN_COOKIE_NAME, path="/")
    return {"status": "ok"}


@router.get("/me", response_model=UserPublic, summary="Get current user")
def me(user: dict = Depends(get_current_user)):
    return _user_public(user)


@router.get("", response_model=UserListResponse, summary="List users (admin)")
def list_users_api(_admin: dict = Depends(require_admin)):
    items = [_user_public(u) for u in list_users()]
    return UserListResponse(count=len(items), items=items)


@router.get("/{user_id}", response_model=UserPublic, summary="Get a user")
def get_user_api(user_id: int, user: dict = Depends(get_current_user)):
    ensure_owner_or_admin(user, user_id)
    found = get_user_by_id(user_id)
    if not found:
        raise HTTPException(status_code=404, detail="User not found")
    return _user_public(found)


@router.patch("/{user_id}", response_model=UserPublic, summary="Update a user")
def update_user_api(user_id: int, request: UserUpdateRequest, user: dict = Depends(get_current_user)):
    ensure_owner_or_admin(user, user_id)
    changes = request.model_dump(exclude_unset=True, exclude_none=True)
    if "role" in changes and not is_admin(user):
        raise HTTPException(status_code=403, detail="Only admins can change roles")
    password = changes.pop("password", None)
    if password:
        changes["password_hash"] = hash_password(password)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    return _user_public(update_user(user_id, changes))


@router.delete("/{user_id}", summary="Delete a user (admin)")
def delete_user_api(user_id: int, _admin: dict = Depends(require_admin)):
    deleted = delete_user(user_id)
    return {"status": "ok", "id": deleted["id"]}
