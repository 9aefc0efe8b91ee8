"""Shared SQLAlchemy base class for ORM models."""
from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    """Return the current UTC time as a naive timestamp, as SQLite stores it."""

    return datetime.now(UTC).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Declarative base class for ORM models."""

    pass
