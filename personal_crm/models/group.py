"""Contact groups and their membership join table."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from personal_crm.models.base import Base, utcnow


class Group(Base):
    """A named collection of contacts."""

    __tablename__ = "crm_groups"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text())
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), default=utcnow, nullable=False
    )


class GroupMember(Base):
    """Membership of a contact in a group."""

    __tablename__ = "crm_group_members"

    group_id: Mapped[int] = mapped_column(
        ForeignKey("crm_groups.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    contact_id: Mapped[int] = mapped_column(
        ForeignKey("crm_contacts.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), default=utcnow, nullable=False
    )
