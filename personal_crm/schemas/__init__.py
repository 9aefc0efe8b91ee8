"""Pydantic schemas for the personal CRM."""

from .company import CompanyCreate, CompanyRead, CompanyUpdate
from .contact import ContactCreate, ContactRead, ContactUpdate, DuplicateCandidate
from .contact_io import ContactDetail, ImportDuplicate, ImportResult
from .extension_field import VALID_FIELD_TYPES, ExtensionFieldRead, ExtensionFieldSet
from .group import GroupCreate, GroupRead
from .interaction import InteractionCreate, InteractionRead
from .relationship import RelationshipCreate, RelationshipRead
from .reminder import ReminderCreate, ReminderRead

__all__ = [
    "CompanyCreate",
    "CompanyRead",
    "CompanyUpdate",
    "ContactCreate",
    "ContactDetail",
    "ContactRead",
    "ContactUpdate",
    "DuplicateCandidate",
    "ExtensionFieldRead",
    "ExtensionFieldSet",
    "GroupCreate",
    "GroupRead",
    "ImportDuplicate",
    "ImportResult",
    "InteractionCreate",
    "InteractionRead",
    "RelationshipCreate",
    "RelationshipRead",
    "ReminderCreate",
    "ReminderRead",
    "VALID_FIELD_TYPES",
]
