"""Pydantic schemas for company resources."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from personal_crm.schemas._validators import clean_optional, sanitize_url

CompanyName = Annotated[str, Field(min_length=1, max_length=255)]


class CompanyBase(BaseModel):
    website: str | None = None
    industry: str | None = None
    notes: str | None = None

    @field_validator("website", mode="before")
    @classmethod
    def validate_website(cls, value: Any) -> str | None:
        return sanitize_url(value)

    @field_validator("industry", "notes", mode="before")
    @classmethod
    def strip_optional(cls, value: Any) -> Any:
        return clean_optional(value)


class CompanyCreate(CompanyBase):
    name: CompanyName

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class CompanyUpdate(CompanyBase):
    name: CompanyName | None = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class CompanyRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    website: str | None = None
    industry: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
