"""Pydantic schemas for reminder resources."""
from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from personal_crm.models.reminder import ReminderType


class ReminderCreate(BaseModel):
    contact_id: int = Field(gt=0)
    reminder_type: ReminderType
    reminder_date: date
    message: str | None = None


class ReminderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    contact_id: int
    reminder_type: ReminderType
    reminder_date: date
    message: str | None = None
    created_at: datetime
    first_name: str | None = None
    last_name: str | None = None
