"""Database models package for the personal CRM."""

from .base import Base, utcnow
from .company import Company
from .contact import Contact
from .extension_field import ExtensionField, ExtensionFieldType
from .group import Group, GroupMember
from .interaction import Interaction, InteractionType
from .module_version import ModuleVersion
from .relationship import Relationship
from .reminder import Reminder, ReminderType

__all__ = [
    "Base",
    "Company",
    "Contact",
    "ExtensionField",
    "ExtensionFieldType",
    "Group",
    "GroupMember",
    "Interaction",
    "InteractionType",
    "ModuleVersion",
    "Relationship",
    "Reminder",
    "ReminderType",
    "utcnow",
]
