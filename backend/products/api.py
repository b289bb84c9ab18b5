# -*- coding: utf-8 -*-
"""Products — API endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from ..auth.security import get_optional_user, is_admin, require_admin
from .models import Product, ProductCreateRequest, ProductListResponse, ProductUpdateRequest
from .storage import create_product, delete_product, get_product, list_products, update_product

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=ProductListResponse, summary="List products")
def list_products_api(
    request: Request,
    category: Optional[str] = Query(default=None),
    include_inactive: bool = Query(default=False, description="Admins only"),
):
    if include_inactive and not is_admin(get_optional_user(request)):
        raise HTTPException(status_code=403, detail="Admin role required")
    items = [Product(**p) for p in list_products(include_inactive=include_inactive, category=category)]
    return ProductListResponse(count=len(items), items=items)


@router.get("/{product_id}", response_model=Product, summary="Get a product")
def get_product_api(product_id: int, request: Request):
    product = get_product(product_id)
    if not product["is_active"] and not is_admin(get_optional_user(request)):
        raise HTTPException(status_code=404, detail="Product not found")
    return Product(**product)


@router.post("", response_model=Product, status_code=201, summary="Create a product (admin)")
def create_product_api(request: ProductCreateRequest, _admin: dict = Depends(require_admin)):
    return Product(**create_product(request.model_dump()))


@router.patch("/{product_id}", response_model=Product, summary="Update a product (admin)")
def update_product_api(product_id: int, request: ProductUpdateRequest, _admin: dict = Depends(require_admin)):
    changes = request.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    return Product(**update_product(product_id, changes))


@router.delete("/{product_id}", summary="Delete a product (admin)")
def delete_product_api(product_id: int, _admin: dict = Depends(require_admin)):
    deleted = delete_product(product_id)
    return {"status": "ok", "id": deleted["id"]}
