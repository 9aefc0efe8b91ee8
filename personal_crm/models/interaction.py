"""Interaction model definition."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from personal_crm.models.base import Base, utcnow

if TYPE_CHECKING:
    from personal_crm.models.contact import Contact


class InteractionType(str, Enum):
    """Common interaction categories. Other values are accepted as-is."""

    CALL = "call"
    MEETING = "meeting"
    EMAIL = "email"
    NOTE = "note"
    GIFT = "gift"
    MESSAGE = "message"


class Interaction(Base):
    """A recorded touch point with a contact."""

    __tablename__ = "crm_interactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    contact_id: Mapped[int] = mapped_column(
        ForeignKey("crm_contacts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    interaction_type: Mapped[str] = mapped_column(String(50), nullable=False)
    summary: Mapped[str] = mapped_column(Text(), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text())
    happened_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), default=utcnow, nullable=False, index=True
    )
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
