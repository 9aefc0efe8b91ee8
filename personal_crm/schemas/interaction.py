"""Pydantic schemas for interaction resources."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class InteractionCreate(BaseModel):
    contact_id: int = Field(gt=0)
    interaction_type: str = Field(min_length=1, max_length=50)
    summary: str = Field(min_length=1)
    notes: str | None = None
    happened_at: datetime | None = None


class InteractionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    contact_id: int
    interaction_type: str
    summary: str
    notes: str | None = None
    happened_at: datetime
    created_at: datetime
    first_name: str | None = None
    last_name: str | None = None
