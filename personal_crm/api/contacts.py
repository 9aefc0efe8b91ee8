"""Contact API routes."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import Response

from personal_crm.api.common import data_response, ensure_found, get_service
from personal_crm.schemas import (
    ContactCreate,
    ContactDetail,
    ContactRead,
    ContactUpdate,
    DuplicateCandidate,
    ExtensionFieldRead,
    ExtensionFieldSet,
    ImportResult,
)
from personal_crm.services.crm import CrmService

router = APIRouter(prefix="/contacts", tags=["contacts"])


class ContactCreateRequest(ContactCreate):
    company_name: str | None = None


class ContactUpdateRequest(ContactUpdate):
    company_name: str | None = None


@router.get("")
async def list_contacts(
    q: str | None = None,
    limit: int | None = Query(None, ge=1, le=1000),
    company_id: int | None = Query(None, ge=1),
    service: CrmService = Depends(get_service),
) -> dict[str, list[ContactRead]]:
    """List contacts, optionally filtered by company or a search query."""

    contacts = await service.list_contacts(query=q, limit=limit, company_id=company_id)
    return data_response([ContactRead.model_validate(contact) for contact in contacts])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_contact(
    payload: ContactCreateRequest, service: CrmService = Depends(get_service)
) -> dict[str, ContactRead]:
    """Create a contact, resolving ``company_name`` to a company when given."""

    data = payload.model_dump(exclude={"company_name"})
    if payload.company_name and payload.company_name.strip():
        company = await service.resolve_company(payload.company_name)
        data["company_id"] = company.id
    contact = await service.create_contact(ContactCreate.model_validate(data))
    return data_response(ContactRead.model_validate(contact))


@router.get("/export.csv")
async def export_contacts(service: CrmService = Depends(get_service)) -> Response:
    content = await service.export_contacts_csv()
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="contacts.csv"'},
    )


@router.post("/import")
async def import_contacts(
    request: Request, service: CrmService = Depends(get_service)
) -> dict[str, ImportResult]:
    """Import contacts from a raw CSV request body."""

    body = await request.body()
    result = await service.import_contacts_csv(body.decode("utf-8-sig"))
    return data_response(result)


@router.post("/check-duplicates")
async def check_duplicates(
    payload: DuplicateCandidate, service: CrmService = Depends(get_service)
) -> dict[str, list[ContactRead]]:
    matches = await service.find_duplicates(payload)
    return data_response([ContactRead.model_validate(contact) for contact in matches])


@router.get("/{contact_id}")
async def retrieve_contact(
    contact_id: int, service: CrmService = Depends(get_service)
) -> dict[str, ContactDetail]:
    """Return a contact with its interactions, reminders and other links."""

    detail = ensure_found(await service.get_contact_detail(contact_id), "Contact")
    return data_response(detail)


@router.patch("/{contact_id}")
async def update_contact(
    contact_id: int,
    payload: ContactUpdateRequest,
    service: CrmService = Depends(get_service),
) -> dict[str, ContactRead]:
    updates: dict[str, Any] = payload.model_dump(exclude_unset=True, exclude={"company_name"})
    if "company_name" in payload.model_fields_set:
        name = (payload.company_name or "").strip()
        if name:
            company = await service.resolve_company(name)
            updates["company_id"] = company.id
        else:
            updates["company_id"] = None
    contact = await service.update_contact(contact_id, ContactUpdate(**updates))
    return data_response(ContactRead.model_validate(ensure_found(contact, "Contact")))


@router.delete("/{contact_id}")
async def delete_contact(
    contact_id: int, service: CrmService = Depends(get_service)
) -> dict[str, dict[str, bool]]:
    ensure_found(await service.delete_contact(contact_id) or None, "Contact")
    return data_response({"deleted": True})


@router.get("/{contact_id}/extension-fields")
async def list_extension_fields(
    contact_id: int,
    source: str | None = None,
    service: CrmService = Depends(get_service),
) -> dict[str, list[ExtensionFieldRead]]:
    fields = await service.list_extension_fields(contact_id, source=source)
    return data_response([ExtensionFieldRead.model_validate(field) for field in fields])


@router.put("/{contact_id}/extension-fields")
async def set_extension_field(
    contact_id: int,
    payload: ExtensionFieldSet,
    service: CrmService = Depends(get_service),
) -> dict[str, ExtensionFieldRead]:
    """Create or overwrite one extension field on a contact."""

    ensure_found(await service.get_contact(contact_id), "Contact")
    field = await service.set_extension_field(contact_id, payload)
    return data_response(ExtensionFieldRead.model_validate(field))


@router.delete("/{contact_id}/extension-fields")
async def delete_extension_fields(
    contact_id: int,
    source: str = Query(..., min_length=1),
    service: CrmService = Depends(get_service),
) -> dict[str, dict[str, int]]:
    deleted = await service.delete_extension_fields(contact_id, source)
    return data_response({"deleted": deleted})
