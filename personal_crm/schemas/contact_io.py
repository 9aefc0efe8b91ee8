"""Result shapes for contact CSV import and detail views."""
from __future__ import annotations

from pydantic import BaseModel, Field

from personal_crm.schemas.contact import ContactRead
from personal_crm.schemas.extension_field import ExtensionFieldRead
from personal_crm.schemas.group import GroupRead
from personal_crm.schemas.interaction import InteractionRead
from personal_crm.schemas.relationship import RelationshipRead
from personal_crm.schemas.reminder import ReminderRead


class ImportDuplicate(BaseModel):
    row: int
    existing: ContactRead
    incoming: str


class ImportResult(BaseModel):
    created: int = 0
    skipped: int = 0
    errors: list[str] = Field(default_factory=list)
    duplicates: list[ImportDuplicate] = Field(default_factory=list)


class ContactDetail(BaseModel):
    contact: ContactRead
    interactions: list[InteractionRead] = Field(default_factory=list)
    reminders: list[ReminderRead] = Field(default_factory=list)
    relationships: list[RelationshipRead] = Field(default_factory=list)
    groups: list[GroupRead] = Field(default_factory=list)
    extension_fields: list[ExtensionFieldRead] = Field(default_factory=list)
