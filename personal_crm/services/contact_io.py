"""CSV export and import of contacts."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from personal_crm.core.errors import CrmValidationError
from personal_crm.models import Contact
from personal_crm.schemas import (
    ContactCreate,
    ContactRead,
    DuplicateCandidate,
    ImportDuplicate,
    ImportResult,
)
from personal_crm.services.csv_codec import encode_rows, parse_csv
from personal_crm.services.duplicates import find_duplicates

if TYPE_CHECKING:
    from personal_crm.services.crm import CrmService

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "first_name",
    "last_name",
    "email",
    "phone",
    "company_name",
    "birthday",
    "anniversary",
    "tags",
    "notes",
]

HEADER_SYNONYMS: dict[str, tuple[str, ...]] = {
    "first_name": ("first_name", "firstname", "first", "given_name"),
    "last_name": ("last_name", "lastname", "last", "surname", "family_name"),
    "nickname": ("nickname", "nick"),
    "email": ("email", "e-mail", "email_address", "mail"),
    "phone": ("phone", "phone_number", "telephone", "tel", "mobile"),
    "company_name": ("company_name", "company", "organization", "organisation", "org"),
    "birthday": ("birthday", "dob", "birth_date", "date_of_birth"),
    "anniversary": ("anniversary",),
    "tags": ("tags", "labels"),
    "notes": ("notes", "note", "comments"),
}

_SYNONYM_LOOKUP = {
    synonym: field for field, synonyms in HEADER_SYNONYMS.items() for synonym in synonyms
}


async def export_contacts_csv(session: AsyncSession) -> str:
    """Serialise every contact as CSV text with a fixed header."""

    result = await session.execute(
        select(Contact)
        .order_by(Contact.first_name, Contact.last_name, Contact.id)
        .execution_options(populate_existing=True)
    )
    rows: list[list[object]] = [list(EXPORT_COLUMNS)]
    for contact in result.scalars():
        rows.append([getattr(contact, column) for column in EXPORT_COLUMNS])
    return encode_rows(rows)


def normalize_header(value: str) -> str:
    return "_".join(value.strip().lower().split())


def map_columns(header: list[str]) -> dict[str, int]:
    """Map canonical field names to column positions, first occurrence wins."""

    columns: dict[str, int] = {}
    for index, raw in enumerate(header):
        field = _SYNONYM_LOOKUP.get(normalize_header(raw))
        if field is not None and field not in columns:
            columns[field] = index
    return columns


async def import_contacts_csv(
    session: AsyncSession, text: str, service: CrmService
) -> ImportResult:
    """Create contacts from CSV text.

    Rows whose email or full name already exists are reported as duplicates
    instead of being created. Company names are resolved to existing
    companies case-insensitively and created when missing. Each row commits
    on its own; a failing row is recorded and the import carries on.
    """

    rows = parse_csv(text)
    if len(rows) < 2:
        msg = "CSV must contain a header row and at least one data row"
        raise CrmValidationError(msg)

    columns = map_columns(rows[0])
    if "first_name" not in columns:
        msg = "CSV header must include a first_name column"
        raise CrmValidationError(msg)

    result = ImportResult()
    for row_number, row in enumerate(rows[1:], start=2):
        if not any(value.strip() for value in row):
            continue

        values = {
            field: row[index].strip() if index < len(row) else ""
            for field, index in columns.items()
        }
        first_name = values.get("first_name", "")
        if not first_name:
            result.errors.append(f"Row {row_number}: first_name is required")
            result.skipped += 1
            continue

        last_name = values.get("last_name") or None
        email = values.get("email") or None
        try:
            candidate = DuplicateCandidate(
                first_name=first_name, last_name=last_name, email=email
            )
        except ValidationError as exc:
            result.errors.append(f"Row {row_number}: {exc}")
            result.skipped += 1
            continue

        matches = await find_duplicates(session, candidate)
        if matches:
            result.duplicates.append(
                ImportDuplicate(
                    row=row_number,
                    existing=ContactRead.model_validate(matches[0]),
                    incoming=" ".join(part for part in (first_name, last_name) if part),
                )
            )
            continue

        try:
            company_id = None
            company_name = values.get("company_name")
            if company_name:
                company = await service.resolve_company(company_name)
                company_id = company.id
            payload = ContactCreate(
                first_name=first_name,
                last_name=last_name,
                nickname=values.get("nickname"),
                email=email,
                phone=values.get("phone"),
                company_id=company_id,
                birthday=values.get("birthday"),
                anniversary=values.get("anniversary"),
                tags=values.get("tags"),
                notes=values.get("notes"),
            )
            await service.create_contact(payload)
        except (SQLAlchemyError, ValueError) as exc:
            await session.rollback()
            result.errors.append(f"Row {row_number}: {exc}")
            continue
        result.created += 1

    logger.info(
        "Imported contacts",
        extra={
            "imported": result.created,
            "skipped": result.skipped,
            "errors": len(result.errors),
            "duplicates": len(result.duplicates),
        },
    )
    return result
