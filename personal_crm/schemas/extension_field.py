"""Pydantic schemas for extension fields written by other tools."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from personal_crm.models.extension_field import ExtensionFieldType

VALID_FIELD_TYPES = tuple(field_type.value for field_type in ExtensionFieldType)


class ExtensionFieldSet(BaseModel):
    """Upsert payload keyed by ``source`` and ``field_name``."""

    source: str = Field(min_length=1, max_length=100)
    field_name: str = Field(min_length=1, max_length=100)
    field_value: str
    label: str | None = None
    field_type: str = ExtensionFieldType.TEXT.value

    @field_validator("field_value", mode="before")
    @classmethod
    def stringify_value(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class ExtensionFieldRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    contact_id: int | None = None
    company_id: int | None = None
    source: str
    field_name: str
    field_value: str
    label: str | None = None
    field_type: str
    created_at: datetime
    updated_at: datetime
