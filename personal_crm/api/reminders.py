"""Reminder API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from personal_crm.api.common import data_response, ensure_found, get_service
from personal_crm.schemas import ReminderCreate, ReminderRead
from personal_crm.services.crm import CrmService

router = APIRouter(prefix="/reminders", tags=["reminders"])

UPCOMING_DAYS_DEFAULT = 30


@router.get("")
async def list_reminders(
    contact_id: int | None = Query(None, ge=1),
    service: CrmService = Depends(get_service),
) -> dict[str, list[ReminderRead]]:
    reminders = await service.list_reminders(contact_id)
    return data_response([ReminderRead.model_validate(item) for item in reminders])


@router.get("/upcoming")
async def list_upcoming_reminders(
    days: int = Query(UPCOMING_DAYS_DEFAULT, ge=0, le=3650),
    service: CrmService = Depends(get_service),
) -> dict[str, list[ReminderRead]]:
    """Reminders due within ``days`` days, including overdue ones."""

    reminders = await service.list_upcoming_reminders(days)
    return data_response([ReminderRead.model_validate(item) for item in reminders])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_reminder(
    payload: ReminderCreate, service: CrmService = Depends(get_service)
) -> dict[str, ReminderRead]:
    ensure_found(await service.get_contact(payload.contact_id), "Contact")
    reminder = await service.create_reminder(payload)
    return data_response(ReminderRead.model_validate(reminder))


@router.delete("/{reminder_id}")
async def delete_reminder(
    reminder_id: int, service: CrmService = Depends(get_service)
) -> dict[str, dict[str, bool]]:
    ensure_found(await service.delete_reminder(reminder_id) or None, "Reminder")
    return data_response({"deleted": True})
