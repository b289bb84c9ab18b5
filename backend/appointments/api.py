# -*- coding: utf-8 -*-
"""Appointments — API endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import ensure_owner_or_admin, get_current_user, is_admin, require_admin
from ..plans.storage import get_plan
from ..sheets.errors import NotFound
from .models import Appointment, AppointmentCreateRequest, AppointmentListResponse, AppointmentUpdateRequest
from .storage import (
    CLOSED_STATUSES,
    STATUS_CANCELLED,
    create_appointment,
    delete_appointment,
    get_appointment,
    list_appointments,
    update_appointment,
)

router = APIRouter(prefix="/api/appointments", tags=["Appointments"])


@router.post("", response_model=Appointment, status_code=201, summary="Book an appointment")
def create_appointment_api(request: AppointmentCreateRequest, user: dict = Depends(get_current_user)):
    try:
        plan = get_plan(request.plan_id)
    except NotFound:
        raise HTTPException(status_code=400, detail="Unknown nutrition plan")
    if not plan["is_active"]:
        raise HTTPException(status_code=400, detail="Nutrition plan is not available")

    appointment = create_appointment(
        user_id=user["id"],
        plan_id=plan["id"],
        appointment_date=request.appointment_date,
        appointment_time=request.appointment_time,
        notes=request.notes,
    )
    return Appointment(**appointment)


@router.get("", response_model=AppointmentListResponse, summary="List appointments")
def list_appointments_api(
    status: Optional[str] = Query(default=None, description="pending | confirmed | completed | cancelled"),
    user: dict = Depends(get_current_user),
):
    owner = None if is_admin(user) else user["id"]
    items = [Appointment(**a) for a in list_appointments(user_id=owner, status=status)]
    return AppointmentListResponse(count=len(items), items=items)


@router.get("/{appointment_id}", response_model=Appointment, summary="Get an appointment")
def get_appointment_api(appointment_id: int, user: dict = Depends(get_current_user)):
    appointment = get_appointment(appointment_id)
    ensure_owner_or_admin(user, appointment["user_id"])
    return Appointment(**appointment)


@router.patch("/{appointment_id}", response_model=Appointment, summary="Update an appointment")
def update_appointment_api(
    appointment_id: int,
    request: AppointmentUpdateRequest,
    user: dict = Depends(get_current_user),
):
    appointment = get_appointment(appointment_id)
    ensure_owner_or_admin(user, appointment["user_id"])
    changes = request.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")

    if not is_admin(user):
        if appointment["status"] in CLOSED_STATUSES:
            raise HTTPException(status_code=400, detail=f"Appointment is {appointment['status']}")
        # Clients may only cancel; confirming and completing belong to staff.
        if "status" in changes and changes["status"] != STATUS_CANCELLED:
            raise HTTPException(status_code=403, detail="Only admins can change this status")

    return Appointment(**update_appointment(appointment_id, changes))


@router.delete("/{appointment_id}", summary="Delete an appointment (admin)")
def delete_appointment_api(appointment_id: int, _admin: dict = Depends(require_admin)):
    deleted = delete_appointment(appointment_id)
    return {"status": "ok", "id": deleted["id"]}
