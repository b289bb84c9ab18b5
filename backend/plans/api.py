# -*- coding: utf-8 -*-
"""Nutrition plan endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from ..auth.security import get_optional_user, is_admin, require_admin
from .models import NutritionPlan, PlanCreateRequest, PlanListResponse, PlanUpdateRequest
from .storage import create_plan, delete_plan, get_plan, list_plans, update_plan

router = APIRouter(prefix="/api/plans", tags=["Plans"])


@router.get("", response_model=PlanListResponse, summary="List nutrition plans")
def list_plans_api(
    request: Request,
    include_inactive: bool = Query(default=False, description="Admins only"),
):
    if include_inactive and not is_admin(get_optional_user(request)):
        raise HTTPException(status_code=403, detail="Admin role required")
    items = [NutritionPlan(**p) for p in list_plans(include_inactive=include_inactive)]
    return PlanListResponse(count=len(items), items=items)


@router.get("/{plan_id}", response_model=NutritionPlan, summary="Get a nutrition plan")
def get_plan_api(plan_id: int):
    return NutritionPlan(**get_plan(plan_id))


@router.post("", response_model=NutritionPlan, status_code=201, summary="Create a nutrition plan (admin)")
def create_plan_api(request: PlanCreateRequest, _admin: dict = Depends(require_admin)):
    return NutritionPlan(**create_plan(request.model_dump()))


@router.patch("/{plan_id}", response_model=NutritionPlan, summary="Update a nutrition plan (admin)")
def update_plan_api(plan_id: int, request: PlanUpdateRequest, _admin: dict = Depends(require_admin)):
    changes = request.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    return NutritionPlan(**update_plan(plan_id, changes))


@router.delete("/{plan_id}", summary="Delete a nutrition plan (admin)")
def delete_plan_api(plan_id: int, _admin: dict = Depends(require_admin)):
    deleted = delete_plan(plan_id)
    return {"status": "ok", "id": deleted["id"]}
