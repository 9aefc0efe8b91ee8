"""Relationship API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from personal_crm.api.common import data_response, ensure_found, get_service
from personal_crm.schemas import RelationshipCreate, RelationshipRead
from personal_crm.services.crm import CrmService

router = APIRouter(prefix="/relationships", tags=["relationships"])


@router.get("")
async def list_relationships(
    contact_id: int = Query(..., ge=1),
    service: CrmService = Depends(get_service),
) -> dict[str, list[RelationshipRead]]:
    relationships = await service.list_relationships(contact_id)
    return data_response([RelationshipRead.model_validate(item) for item in relationships])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_relationship(
    payload: RelationshipCreate, service: CrmService = Depends(get_service)
) -> dict[str, RelationshipRead]:
    ensure_found(await service.get_contact(payload.contact_id), "Contact")
    ensure_found(await service.get_contact(payload.related_contact_id), "Related contact")
    relationship = await service.create_relationship(payload)
    return data_response(RelationshipRead.model_validate(relationship))


@router.delete("/{relationship_id}")
async def delete_relationship(
    relationship_id: int, service: CrmService = Depends(get_service)
) -> dict[str, dict[str, bool]]:
    ensure_found(await service.delete_relationship(relationship_id) or None, "Relationship")
    return data_response({"deleted": True})
