# -*- coding: utf-8 -*-
"""Nutrition plan models for API payloads."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class PlanCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    duration_minutes: int = Field(..., gt=0, le=24 * 60)
    is_active: bool = True


class PlanUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    duration_minutes: Optional[int] = Field(default=None, gt=0, le=24 * 60)
    is_active: Optional[bool] = None


class NutritionPlan(BaseModel):
    id: int
    name: str
    description: str = ""
    price: float
    duration_minutes: Optional[int] = None
    is_active: bool = True
    created_at: str = ""


class PlanListResponse(BaseModel):
    count: int
    items: List[NutritionPlan]
