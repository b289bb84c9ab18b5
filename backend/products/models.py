# -*- coding: utf-8 -*-
"""Products — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ProductCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    file_url: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    is_active: bool = True


class ProductUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    file_url: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    is_active: Optional[bool] = None


class Product(BaseModel):
    id: int
    name: str
    description: str = ""
    price: float
    file_url: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    is_active: bool = True
    created_at: str = ""


class ProductListResponse(BaseModel):
    count: int
    items: List[Product]
