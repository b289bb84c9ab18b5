# -*- coding: utf-8 -*-
"""Appointments — Pydantic models."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

AppointmentStatus = Literal["pending", "confirmed", "completed", "cancelled"]


class AppointmentCreateRequest(BaseModel):
    plan_id: int
    appointment_date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="YYYY-MM-DD")
    appointment_time: str = Field(..., pattern=r"^\d{2}:\d{2}$", description="HH:MM")
    notes: Optional[str] = Field(default=None, max_length=2000)


class AppointmentUpdateRequest(BaseModel):
    appointment_date: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    appointment_time: Optional[str] = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = Field(default=None, max_length=2000)


class Appointment(BaseModel):
    id: int
    user_id: int
    plan_id: int
    appointment_date: str
    appointment_time: str
    status: str
    notes: str = ""
    created_at: str = ""


class AppointmentListResponse(BaseModel):
    count: int
    items: List[Appointment]
