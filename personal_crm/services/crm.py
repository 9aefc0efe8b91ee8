"""CRUD and query operations over the CRM tables.

``CrmService`` wraps one ``AsyncSession``. Every mutating call commits before
it returns, and deletes are issued as single ``DELETE`` statements so the
database carries out cascades and ``SET NULL`` rules.
"""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any

from sqlalchemy import Select, delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from personal_crm.core.config import Settings, get_settings
from personal_crm.core.errors import CrmValidationError
from personal_crm.core.events import CrmEvent, EventBus
from personal_crm.models import (
    Company,
    Contact,
    ExtensionField,
    Group,
    GroupMember,
    Interaction,
    Relationship,
    Reminder,
    utcnow,
)
from personal_crm.schemas import (
    VALID_FIELD_TYPES,
    CompanyCreate,
    CompanyUpdate,
    ContactCreate,
    ContactDetail,
    ContactRead,
    ContactUpdate,
    DuplicateCandidate,
    ExtensionFieldRead,
    ExtensionFieldSet,
    GroupCreate,
    GroupRead,
    ImportResult,
    InteractionCreate,
    InteractionRead,
    RelationshipCreate,
    RelationshipRead,
    ReminderCreate,
    ReminderRead,
)
from personal_crm.services import contact_io, duplicates, search

logger = logging.getLogger(__name__)

RECENT_INTERACTIONS_LIMIT = 50


class CrmService:
    """Entity operations bound to a single database session."""

    def __init__(
        self,
        session: AsyncSession,
        events: EventBus | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.session = session
        self.events = events
        self.settings = settings or get_settings()

    # Contacts

    async def list_contacts(
        self,
        query: str | None = None,
        limit: int | None = None,
        company_id: int | None = None,
    ) -> list[Contact]:
        """List contacts filtered by company, else by smart search, else all."""

        limit = limit or self.settings.contact_list_limit
        if company_id is not None:
            stmt = _contacts_ordered(select(Contact).where(Contact.company_id == company_id))
            return await self._all(stmt.limit(limit))
        if query and query.strip():
            return await search.search_contacts(self.session, query, limit)
        return await self._all(_contacts_ordered(select(Contact)).limit(limit))

    async def search_contacts(self, query: str, limit: int | None = None) -> list[Contact]:
        return await search.search_contacts(
            self.session, query, limit or self.settings.search_limit
        )

    async def get_contact(self, contact_id: int) -> Contact | None:
        return await self._one(select(Contact).where(Contact.id == contact_id))

    async def get_contact_detail(self, contact_id: int) -> ContactDetail | None:
        contact = await self.get_contact(contact_id)
        if contact is None:
            return None
        interactions = await self.list_interactions(contact_id)
        reminders = await self.list_reminders(contact_id)
        relationships = await self.list_relationships(contact_id)
        groups = await self.list_contact_groups(contact_id)
        extension_fields = await self.list_extension_fields(contact_id)
        return ContactDetail(
            contact=ContactRead.model_validate(contact),
            interactions=[InteractionRead.model_validate(item) for item in interactions],
            reminders=[ReminderRead.model_validate(item) for item in reminders],
            relationships=[RelationshipRead.model_validate(item) for item in relationships],
            groups=[GroupRead.model_validate(item) for item in groups],
            extension_fields=[
                ExtensionFieldRead.model_validate(item) for item in extension_fields
            ],
        )

    async def create_contact(self, data: ContactCreate) -> Contact:
        contact = Contact(**data.model_dump())
        self.session.add(contact)
        await self._commit()
        created = await self._reload_contact(contact.id)
        logger.info("Contact created", extra={"contact_id": created.id})
        self._emit(CrmEvent.CONTACT_CREATED, ContactRead.model_validate(created))
        return created

    async def update_contact(self, contact_id: int, data: ContactUpdate) -> Contact | None:
        """Apply only the fields present in ``data``."""

        contact = await self.get_contact(contact_id)
        if contact is None:
            return None

        updates = data.model_dump(exclude_unset=True)
        if "first_name" in updates and updates["first_name"] is None:
            msg = "first_name cannot be empty"
            raise CrmValidationError(msg)
        for field, value in updates.items():
            setattr(contact, field, value)

        await self._commit()
        updated = await self._reload_contact(contact_id)
        logger.info(
            "Contact updated", extra={"contact_id": contact_id, "fields": sorted(updates)}
        )
        self._emit(CrmEvent.CONTACT_UPDATED, ContactRead.model_validate(updated))
        return updated

    async def delete_contact(self, contact_id: int) -> bool:
        contact = await self.get_contact(contact_id)
        if contact is None:
            return False
        snapshot = ContactRead.model_validate(contact)
        deleted = await self._delete(delete(Contact).where(Contact.id == contact_id))
        if deleted:
            logger.info("Contact deleted", extra={"contact_id": contact_id})
            self._emit(
                CrmEvent.CONTACT_DELETED, {"id": contact_id, "contact": snapshot}
            )
        return deleted > 0

    # Companies

    async def list_companies(
        self, query: str | None = None, limit: int | None = None
    ) -> list[Company]:
        limit = limit or self.settings.contact_list_limit
        if query and query.strip():
            return await search.search_companies(self.session, query, limit)
        return await self._all(select(Company).order_by(Company.name, Company.id).limit(limit))

    async def search_companies(self, query: str, limit: int | None = None) -> list[Company]:
        return await search.search_companies(
            self.session, query, limit or self.settings.search_limit
        )

    async def get_company(self, company_id: int) -> Company | None:
        return await self._one(select(Company).where(Company.id == company_id))

    async def find_company_by_name(self, name: str) -> Company | None:
        """Case-insensitive exact lookup; the oldest company wins on ties."""

        stmt = (
            select(Company)
            .where(func.lower(Company.name) == func.lower(name.strip()))
            .order_by(Company.id)
            .limit(1)
        )
        return await self._one(stmt)

    async def resolve_company(self, name: str) -> Company:
        company = await self.find_company_by_name(name)
        if company is not None:
            return company
        return await self.create_company(CompanyCreate(name=name))

    async def create_company(self, data: CompanyCreate) -> Company:
        company = Company(**data.model_dump())
        self.session.add(company)
        await self._commit()
        logger.info("Company created", extra={"company_id": company.id})
        return company

    async def update_company(self, company_id: int, data: CompanyUpdate) -> Company | None:
        company = await self.get_company(company_id)
        if company is None:
            return None
        updates = data.model_dump(exclude_unset=True)
        if "name" in updates and updates["name"] is None:
            msg = "Company name cannot be empty"
            raise CrmValidationError(msg)
        for field, value in updates.items():
            setattr(company, field, value)
        await self._commit()
        return company

    async def delete_company(self, company_id: int) -> bool:
        deleted = await self._delete(delete(Company).where(Company.id == company_id))
        if deleted:
            logger.info("Company deleted", extra={"company_id": company_id})
        return deleted > 0

    # Interactions

    async def list_interactions(self, contact_id: int) -> list[Interaction]:
        stmt = (
            select(Interaction)
            .where(Interaction.contact_id == contact_id)
            .order_by(Interaction.happened_at.desc(), Interaction.id.desc())
        )
        return await self._all(stmt)

    async def list_all_interactions(
        self, limit: int = RECENT_INTERACTIONS_LIMIT
    ) -> list[Interaction]:
        stmt = (
            select(Interaction)
            .order_by(Interaction.happened_at.desc(), Interaction.id.desc())
            .limit(limit)
        )
        return await self._all(stmt)

    async def create_interaction(self, data: InteractionCreate) -> Interaction:
        interaction = Interaction(**data.model_dump(exclude_none=True))
        self.session.add(interaction)
        await self._commit()
        created = await self._one(select(Interaction).where(Interaction.id == interaction.id))
        assert created is not None
        logger.info(
            "Interaction logged",
            extra={"interaction_id": created.id, "contact_id": created.contact_id},
        )
        self._emit(CrmEvent.INTERACTION_LOGGED, InteractionRead.model_validate(created))
        return created

    async def delete_interaction(self, interaction_id: int) -> bool:
        deleted = await self._delete(delete(Interaction).where(Interaction.id == interaction_id))
        return deleted > 0

    # Reminders

    async def list_reminders(self, contact_id: int | None = None) -> list[Reminder]:
        stmt = select(Reminder).order_by(Reminder.reminder_date, Reminder.id)
        if contact_id is not None:
            stmt = stmt.where(Reminder.contact_id == contact_id)
        return await self._all(stmt)

    async def list_upcoming_reminders(self, days: int | None = None) -> list[Reminder]:
        """Reminders dated on or before ``today + days``, overdue ones included."""

        if days is None:
            days = self.settings.upcoming_reminder_days
        cutoff = date.today() + timedelta(days=days)
        stmt = (
            select(Reminder)
            .where(Reminder.reminder_date <= cutoff)
            .order_by(Reminder.reminder_date, Reminder.id)
        )
        return await self._all(stmt)

    async def create_reminder(self, data: ReminderCreate) -> Reminder:
        reminder = Reminder(
            contact_id=data.contact_id,
            reminder_type=data.reminder_type.value,
            reminder_date=data.reminder_date,
            message=data.message,
        )
        self.session.add(reminder)
        await self._commit()
        created = await self._one(select(Reminder).where(Reminder.id == reminder.id))
        assert created is not None
        return created

    async def delete_reminder(self, reminder_id: int) -> bool:
        deleted = await self._delete(delete(Reminder).where(Reminder.id == reminder_id))
        return deleted > 0

    # Relationships

    async def list_relationships(self, contact_id: int) -> list[Relationship]:
        stmt = (
            select(Relationship)
            .where(Relationship.contact_id == contact_id)
            .order_by(Relationship.created_at, Relationship.id)
        )
        return await self._all(stmt)

    async def create_relationship(self, data: RelationshipCreate) -> Relationship:
        """Link two contacts. A repeated (contact, related, type) triple raises
        ``IntegrityError``."""

        relationship = Relationship(**data.model_dump())
        self.session.add(relationship)
        await self._commit()
        created = await self._one(select(Relationship).where(Relationship.id == relationship.id))
        assert created is not None
        return created

    async def delete_relationship(self, relationship_id: int) -> bool:
        deleted = await self._delete(
            delete(Relationship).where(Relationship.id == relationship_id)
        )
        return deleted > 0

    # Groups

    async def list_groups(self) -> list[Group]:
        return await self._all(select(Group).order_by(Group.name))

    async def get_group(self, group_id: int) -> Group | None:
        return await self._one(select(Group).where(Group.id == group_id))

    async def create_group(self, data: GroupCreate) -> Group:
        group = Group(**data.model_dump())
        self.session.add(group)
        await self._commit()
        return group

    async def delete_group(self, group_id: int) -> bool:
        deleted = await self._delete(delete(Group).where(Group.id == group_id))
        return deleted > 0

    async def list_group_members(self, group_id: int) -> list[Contact]:
        stmt = _contacts_ordered(
            select(Contact)
            .join(GroupMember, GroupMember.contact_id == Contact.id)
            .where(GroupMember.group_id == group_id)
        )
        return await self._all(stmt)

    async def list_contact_groups(self, contact_id: int) -> list[Group]:
        stmt = (
            select(Group)
            .join(GroupMember, GroupMember.group_id == Group.id)
            .where(GroupMember.contact_id == contact_id)
            .order_by(Group.name)
        )
        return await self._all(stmt)

    async def add_group_member(self, group_id: int, contact_id: int) -> bool:
        """Add a contact to a group; ``False`` when it is already a member."""

        existing = await self.session.scalar(
            select(GroupMember.group_id).where(
                GroupMember.group_id == group_id, GroupMember.contact_id == contact_id
            )
        )
        if existing is not None:
            return False
        self.session.add(GroupMember(group_id=group_id, contact_id=contact_id))
        await self._commit()
        return True

    async def remove_group_member(self, group_id: int, contact_id: int) -> bool:
        deleted = await self._delete(
            delete(GroupMember).where(
                GroupMember.group_id == group_id, GroupMember.contact_id == contact_id
            )
        )
        return deleted > 0

    # Extension fields

    async def list_extension_fields(
        self, contact_id: int, source: str | None = None
    ) -> list[ExtensionField]:
        stmt = select(ExtensionField).where(ExtensionField.contact_id == contact_id)
        if source is not None:
            stmt = stmt.where(ExtensionField.source == source)
        return await self._all(stmt.order_by(ExtensionField.source, ExtensionField.field_name))

    async def list_company_extension_fields(
        self, company_id: int, source: str | None = None
    ) -> list[ExtensionField]:
        stmt = select(ExtensionField).where(ExtensionField.company_id == company_id)
        if source is not None:
            stmt = stmt.where(ExtensionField.source == source)
        return await self._all(stmt.order_by(ExtensionField.source, ExtensionField.field_name))

    async def set_extension_field(self, contact_id: int, data: ExtensionFieldSet) -> ExtensionField:
        return await self._upsert_extension_field({"contact_id": contact_id}, data)

    async def set_company_extension_field(
        self, company_id: int, data: ExtensionFieldSet
    ) -> ExtensionField:
        return await self._upsert_extension_field({"company_id": company_id}, data)

    async def delete_extension_fields(self, contact_id: int, source: str) -> int:
        return await self._delete(
            delete(ExtensionField).where(
                ExtensionField.contact_id == contact_id, ExtensionField.source == source
            )
        )

    async def delete_company_extension_fields(self, company_id: int, source: str) -> int:
        return await self._delete(
            delete(ExtensionField).where(
                ExtensionField.company_id == company_id, ExtensionField.source == source
            )
        )

    # Duplicates and CSV

    async def find_duplicates(self, candidate: DuplicateCandidate) -> list[Contact]:
        return await duplicates.find_duplicates(self.session, candidate)

    async def export_contacts_csv(self) -> str:
        return await contact_io.export_contacts_csv(self.session)

    async def import_contacts_csv(self, text: str) -> ImportResult:
        return await contact_io.import_contacts_csv(self.session, text, self)

    # Helpers

    async def _upsert_extension_field(
        self, owner: dict[str, int], data: ExtensionFieldSet
    ) -> ExtensionField:
        if data.field_type not in VALID_FIELD_TYPES:
            msg = f"Invalid field_type: must be one of {', '.join(VALID_FIELD_TYPES)}"
            raise CrmValidationError(msg)

        owner_column, owner_id = next(iter(owner.items()))
        field = await self._one(
            select(ExtensionField).where(
                getattr(ExtensionField, owner_column) == owner_id,
                ExtensionField.source == data.source,
                ExtensionField.field_name == data.field_name,
            )
        )
        if field is None:
            field = ExtensionField(**owner, **data.model_dump())
            self.session.add(field)
        else:
            field.field_value = data.field_value
            field.label = data.label
            field.field_type = data.field_type
            field.updated_at = utcnow()
        await self._commit()
        return field

    async def _reload_contact(self, contact_id: int) -> Contact:
        contact = await self.get_contact(contact_id)
        assert contact is not None
        return contact

    async def _one(self, stmt: Select[Any]) -> Any:
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        return result.scalars().first()

    async def _all(self, stmt: Select[Any]) -> list[Any]:
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        return list(result.scalars().all())

    async def _delete(self, stmt: Any) -> int:
        result = await self.session.execute(stmt)
        await self._commit()
        return result.rowcount or 0

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise

    def _emit(self, event: CrmEvent, payload: Any) -> None:
        if self.events is not None:
            self.events.emit(event, payload)


def _contacts_ordered(stmt: Select[Any]) -> Select[Any]:
    return stmt.order_by(Contact.first_name, Contact.last_name, Contact.id)
