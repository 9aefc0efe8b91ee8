"""Pydantic schemas for contact relationships."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RelationshipCreate(BaseModel):
    contact_id: int = Field(gt=0)
    related_contact_id: int = Field(gt=0)
    relationship_type: str = Field(min_length=1, max_length=100)
    notes: str | None = None


class RelationshipRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    contact_id: int
    related_contact_id: int
    relationship_type: str
    notes: str | None = None
    created_at: datetime
    first_name: str | None = None
    last_name: str | None = None
