"""Pydantic schemas for contact resources."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from personal_crm.schemas._validators import (
    clean_optional,
    iso_date_string,
    join_tags,
    json_text,
)

FirstName = Annotated[str, Field(min_length=1, max_length=120)]


class ContactBase(BaseModel):
    last_name: str | None = None
    nickname: str | None = None
    email: str | None = None
    phone: str | None = None
    company_id: int | None = Field(default=None, gt=0)
    birthday: str | None = None
    anniversary: str | None = None
    notes: str | None = None
    avatar_url: str | None = None
    tags: str | None = None
    custom_fields: str | None = None

    @field_validator("last_name", "nickname", "email", "phone", "notes", "avatar_url", mode="before")
    @classmethod
    def strip_optional(cls, value: Any) -> Any:
        return clean_optional(value)

    @field_validator("birthday", "anniversary", mode="before")
    @classmethod
    def validate_dates(cls, value: Any) -> str | None:
        return iso_date_string(value)

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, value: Any) -> str | None:
        return join_tags(value)

    @field_validator("custom_fields", mode="before")
    @classmethod
    def validate_custom_fields(cls, value: Any) -> str | None:
        return json_text(value)


class ContactCreate(ContactBase):
    first_name: FirstName

    @field_validator("first_name", mode="before")
    @classmethod
    def strip_first_name(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class ContactUpdate(ContactBase):
    first_name: FirstName | None = None

    @field_validator("first_name", mode="before")
    @classmethod
    def strip_first_name(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class ContactRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str | None = None
    nickname: str | None = None
    email: str | None = None
    phone: str | None = None
    company_id: int | None = None
    company_name: str | None = None
    birthday: str | None = None
    anniversary: str | None = None
    notes: str | None = None
    avatar_url: str | None = None
    tags: str | None = None
    custom_fields: str | None = None
    created_at: datetime
    updated_at: datetime


class DuplicateCandidate(BaseModel):
    """Identity fields of a contact that is about to be created."""

    first_name: FirstName
    last_name: str | None = None
    email: str | None = None

    @field_validator("first_name", "last_name", "email", mode="before")
    @classmethod
    def strip_values(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value
