"""Interaction API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from personal_crm.api.common import data_response, ensure_found, get_service
from personal_crm.schemas import InteractionCreate, InteractionRead
from personal_crm.services.crm import RECENT_INTERACTIONS_LIMIT, CrmService

router = APIRouter(prefix="/interactions", tags=["interactions"])


@router.get("")
async def list_interactions(
    contact_id: int | None = Query(None, ge=1),
    limit: int = Query(RECENT_INTERACTIONS_LIMIT, ge=1, le=500),
    service: CrmService = Depends(get_service),
) -> dict[str, list[InteractionRead]]:
    """List a contact's interactions, or the most recent ones overall."""

    if contact_id is not None:
        interactions = await service.list_interactions(contact_id)
    else:
        interactions = await service.list_all_interactions(limit=limit)
    return data_response([InteractionRead.model_validate(item) for item in interactions])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_interaction(
    payload: InteractionCreate, service: CrmService = Depends(get_service)
) -> dict[str, InteractionRead]:
    ensure_found(await service.get_contact(payload.contact_id), "Contact")
    interaction = await service.create_interaction(payload)
    return data_response(InteractionRead.model_validate(interaction))


@router.delete("/{interaction_id}")
async def delete_interaction(
    interaction_id: int, service: CrmService = Depends(get_service)
) -> dict[str, dict[str, bool]]:
    ensure_found(await service.delete_interaction(interaction_id) or None, "Interaction")
    return data_response({"deleted": True})
