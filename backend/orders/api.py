# -*- coding: utf-8 -*-
"""Orders — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..auth.security import ensure_owner_or_admin, get_current_user, is_admin, require_admin
from ..products.storage import get_product
from ..sheets.errors import NotFound
from .models import Order, OrderCreateRequest, OrderListResponse, OrderUpdateRequest
from .storage import create_order, delete_order, get_order, list_orders, update_order

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.post("", response_model=Order, status_code=201, summary="Place an order")
def create_order_api(request: OrderCreateRequest, user: dict = Depends(get_current_user)):
    lines = []
    for item in request.items:
        try:
            product = get_product(item.product_id)
        except NotFound:
            raise HTTPException(status_code=400, detail=f"Unknown product {item.product_id}")
        if not product["is_active"]:
            raise HTTPException(status_code=400, detail=f"Product {item.product_id} is not available")
        lines.append((product["id"], item.quantity, product["price"]))

    order = create_order(user_id=user["id"], lines=lines, payment_id=request.payment_id)
    return Order(**order)


@router.get("", response_model=OrderListResponse, summary="List orders")
def list_orders_api(user: dict = Depends(get_current_user)):
    owner = None if is_admin(user) else user["id"]
    items = [Order(**o) for o in list_orders(user_id=owner)]
    return OrderListResponse(count=len(items), items=items)


@router.get("/{order_id}", response_model=Order, summary="Get an order with its line items")
def get_order_api(order_id: int, user: dict = Depends(get_current_user)):
    order = get_order(order_id)
    ensure_owner_or_admin(user, order["user_id"])
    return Order(**order)


@router.patch("/{order_id}", response_model=Order, summary="Update order status / payment (admin)")
def update_order_api(order_id: int, request: OrderUpdateRequest, _admin: dict = Depends(require_admin)):
    changes = request.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    return Order(**update_order(order_id, changes))


@router.delete("/{order_id}", summary="Delete an order and its line items (admin)")
def delete_order_api(order_id: int, _admin: dict = Depends(require_admin)):
    deleted = delete_order(order_id)
    return {"status": "ok", "id": deleted["id"]}
