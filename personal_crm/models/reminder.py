"""Reminder model definition."""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from personal_crm.models.base import Base, utcnow

if TYPE_CHECKING:
    from personal_crm.models.contact import Contact


class ReminderType(str, Enum):
    """Permitted reminder categories."""

    BIRTHDAY = "birthday"
    ANNIVERSARY = "anniversary"
    CUSTOM = "custom"


class Reminder(Base):
    """A dated reminder associated with a contact."""

    __tablename__ = "crm_reminders"
    __table_args__ = (
        CheckConstraint(
            "reminder_type IN ('birthday', 'anniversary', 'custom')",
            name="ck_crm_reminders_type",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    contact_id: Mapped[int] = mapped_column(
        ForeignKey("crm_contacts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    reminder_type: Mapped[str] = mapped_column(String(20), nullable=False)
    reminder_date: Mapped[date] = mapped_column(Date(), nullable=False, index=True)
    message: Mapped[str | None] = mapped_column(Text())
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), default=utcnow, nullable=False
    )

    contact: Mapped["Contact"] = relationship(lazy="joined")

    @property
    def first_name(self) -> str | None:
        return self.contact.first_name if self.contact is not None else None

    @property
    def last_name(self) -> str | None:
        return self.contact.last_name if self.contact is not None else None
