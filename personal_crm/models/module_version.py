"""Schema version bookkeeping."""
from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from personal_crm.models.base import Base


class ModuleVersion(Base):
    """Number of migrations applied for a schema module."""

    __tablename__ = "crm_module_versions"

    module: Mapped[str] = mapped_column(String(100), primary_key=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
