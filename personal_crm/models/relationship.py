"""Directed relationship between two contacts."""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from personal_crm.models.base import Base, utcnow

if TYPE_CHECKING:
    from personal_crm.models.contact import Contact


class Relationship(Base):
    """An edge from ``contact_id`` to ``related_contact_id``."""

    __tablename__ = "crm_relationships"
    __table_args__ = (
        UniqueConstraint(
            "contact_id",
            "related_contact_id",
            "relationship_type",
            name="uq_crm_relationships_triple",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    contact_id: Mapped[int] = mapped_column(
        ForeignKey("crm_contacts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    related_contact_id: Mapped[int] = mapped_column(
        ForeignKey("crm_contacts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    relationship_type: Mapped[str] = mapped_column(String(100), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text())
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), default=utcnow, nullable=False
    )

    related_contact: Mapped["Contact"] = relationship(
        foreign_keys=[related_contact_id], lazy="joined"
    )

    @property
    def first_name(self) -> str | None:
        return self.related_contact.first_name if self.related_contact is not None else None

    @property
    def last_name(self) -> str | None:
        return self.related_contact.last_name if self.related_contact is not None else None
