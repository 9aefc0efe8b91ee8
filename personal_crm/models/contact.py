"""Contact model definition."""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from personal_crm.models.base import Base, utcnow

if TYPE_CHECKING:
    from personal_crm.models.company import Company


class Contact(Base):
    """A person tracked by the CRM."""

    __tablename__ = "crm_contacts"
    __table_args__ = (
        CheckConstraint("length(trim(first_name)) > 0", name="ck_crm_contacts_first_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    first_name: Mapped[str] = mapped_column(String(120), nullable=False)
    last_name: Mapped[str | None] = mapped_column(String(120))
    nickname: Mapped[str | None] = mapped_column(String(120))
    email: Mapped[str | None] = mapped_column(String(255), index=True)
    phone: Mapped[str | None] = mapped_column(String(64))
    company_id: Mapped[int | None] = mapped_column(
        ForeignKey("crm_companies.id", ondelete="SET NULL"), index=True
    )
    birthday: Mapped[str | None] = mapped_column(String(10))
    anniversary: Mapped[str | None] = mapped_column(String(10))
    notes: Mapped[str | None] = mapped_column(Text())
    avatar_url: Mapped[str | None] = mapped_column(String(500))
    tags: Mapped[str | None] = mapped_column(Text(), index=True)
    custom_fields: Mapped[str | None] = mapped_column(Text())
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), default=utcnow, onupdate=utcnow, nullable=False
    )

    company: Mapped[Optional["Company"]] = relationship("Company", lazy="joined")

    @property
    def company_name(self) -> str | None:
        return self.company.name if self.company is not None else None

    @property
    def display_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)
