"""Company API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from personal_crm.api.common import data_response, ensure_found, get_service
from personal_crm.schemas import (
    CompanyCreate,
    CompanyRead,
    CompanyUpdate,
    ContactRead,
    ExtensionFieldRead,
    ExtensionFieldSet,
)
from personal_crm.services.crm import CrmService

router = APIRouter(prefix="/companies", tags=["companies"])


@router.get("")
async def list_companies(
    q: str | None = None,
    limit: int | None = Query(None, ge=1, le=1000),
    service: CrmService = Depends(get_service),
) -> dict[str, list[CompanyRead]]:
    companies = await service.list_companies(query=q, limit=limit)
    return data_response([CompanyRead.model_validate(company) for company in companies])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_company(
    payload: CompanyCreate, service: CrmService = Depends(get_service)
) -> dict[str, CompanyRead]:
    company = await service.create_company(payload)
    return data_response(CompanyRead.model_validate(company))


@router.get("/{company_id}")
async def retrieve_company(
    company_id: int, service: CrmService = Depends(get_service)
) -> dict[str, CompanyRead]:
    company = ensure_found(await service.get_company(company_id), "Company")
    return data_response(CompanyRead.model_validate(company))


@router.patch("/{company_id}")
async def update_company(
    company_id: int,
    payload: CompanyUpdate,
    service: CrmService = Depends(get_service),
) -> dict[str, CompanyRead]:
    company = ensure_found(await service.update_company(company_id, payload), "Company")
    return data_response(CompanyRead.model_validate(company))


@router.delete("/{company_id}")
async def delete_company(
    company_id: int, service: CrmService = Depends(get_service)
) -> dict[str, dict[str, bool]]:
    """Delete a company; its contacts stay but lose the company link."""

    ensure_found(await service.delete_company(company_id) or None, "Company")
    return data_response({"deleted": True})


@router.get("/{company_id}/contacts")
async def list_company_contacts(
    company_id: int, service: CrmService = Depends(get_service)
) -> dict[str, list[ContactRead]]:
    ensure_found(await service.get_company(company_id), "Company")
    contacts = await service.list_contacts(company_id=company_id)
    return data_response([ContactRead.model_validate(contact) for contact in contacts])


@router.get("/{company_id}/extension-fields")
async def list_extension_fields(
    company_id: int,
    source: str | None = None,
    service: CrmService = Depends(get_service),
) -> dict[str, list[ExtensionFieldRead]]:
    fields = await service.list_company_extension_fields(company_id, source=source)
    return data_response([ExtensionFieldRead.model_validate(field) for field in fields])


@router.put("/{company_id}/extension-fields")
async def set_extension_field(
    company_id: int,
    payload: ExtensionFieldSet,
    service: CrmService = Depends(get_service),
) -> dict[str, ExtensionFieldRead]:
    ensure_found(await service.get_company(company_id), "Company")
    field = await service.set_company_extension_field(company_id, payload)
    return data_response(ExtensionFieldRead.model_validate(field))


@router.delete("/{company_id}/extension-fields")
async def delete_extension_fields(
    company_id: int,
    source: str = Query(..., min_length=1),
    service: CrmService = Depends(get_service),
) -> dict[str, dict[str, int]]:
    deleted = await service.delete_company_extension_fields(company_id, source)
    return data_response({"deleted": deleted})
