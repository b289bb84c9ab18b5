# -*- coding: utf-8 -*-
"""Orders — Pydantic models."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

OrderStatus = Literal["pending", "paid", "completed", "cancelled"]


class OrderItemRequest(BaseModel):
    product_id: int
    quantity: int = Field(1, ge=1, le=1000)


class OrderCreateRequest(BaseModel):
    items: List[OrderItemRequest] = Field(..., min_length=1)
    payment_id: Optional[str] = Field(default=None, max_length=200)


class OrderUpdateRequest(BaseModel):
    status: Optional[OrderStatus] = None
    payment_id: Optional[str] = Field(default=None, max_length=200)


class OrderItem(BaseModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    price_at_purchase: float
    created_at: str = ""


class Order(BaseModel):
    id: int
    user_id: int
    total_amount: float
    status: str
    payment_id: Optional[str] = None
    created_at: str = ""
    items: List[OrderItem] = Field(default_factory=list)


class OrderListResponse(BaseModel):
    count: int
    items: List[Order]
