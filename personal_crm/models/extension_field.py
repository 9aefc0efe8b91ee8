"""Read-only annotations attached to contacts or companies by other tools."""
from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from personal_crm.models.base import Base, utcnow


class ExtensionFieldType(str, Enum):
    """Supported extension field value types."""

    TEXT = "text"
    URL = "url"
    DATE = "date"
    NUMBER = "number"
    JSON = "json"


class ExtensionField(Base):
    """A value keyed by owner, ``source`` and ``field_name``."""

    __tablename__ = "crm_extension_fields"
    __table_args__ = (
        UniqueConstraint("contact_id", "source", "field_name", name="uq_crm_ext_contact_field"),
        UniqueConstraint("company_id", "source", "field_name", name="uq_crm_ext_company_field"),
        CheckConstraint(
            "field_type IN ('text', 'url', 'date', 'number', 'json')",
            name="ck_crm_ext_field_type",
        ),
        CheckConstraint(
            "(contact_id IS NULL) <> (company_id IS NULL)",
            name="ck_crm_ext_single_owner",
        ),
        Index("ix_crm_ext_contact_source", "contact_id", "source"),
        Index("ix_crm_ext_company_source", "company_id", "source"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    contact_id: Mapped[int | None] = mapped_column(
        ForeignKey("crm_contacts.id", ondelete="CASCADE")
    )
    company_id: Mapped[int | None] = mapped_column(
        ForeignKey("crm_companies.id", ondelete="CASCADE")
    )
    source: Mapped[str] = mapped_column(String(100), nullable=False)
    field_name: Mapped[str] = mapped_column(String(100), nullable=False)
    field_value: Mapped[str] = mapped_column(Text(), nullable=False)
    label: Mapped[str | None] = mapped_column(String(255))
    field_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ExtensionFieldType.TEXT.value
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), default=utcnow, onupdate=utcnow, nullable=False
    )
