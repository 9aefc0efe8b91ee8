"""Contact group API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from personal_crm.api.common import data_response, ensure_found, get_service
from personal_crm.schemas import ContactRead, GroupCreate, GroupRead
from personal_crm.services.crm import CrmService

router = APIRouter(prefix="/groups", tags=["groups"])


@router.get("")
async def list_groups(service: CrmService = Depends(get_service)) -> dict[str, list[GroupRead]]:
    groups = await service.list_groups()
    return data_response([GroupRead.model_validate(group) for group in groups])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_group(
    payload: GroupCreate, service: CrmService = Depends(get_service)
) -> dict[str, GroupRead]:
    group = await service.create_group(payload)
    return data_response(GroupRead.model_validate(group))


@router.delete("/{group_id}")
async def delete_group(
    group_id: int, service: CrmService = Depends(get_service)
) -> dict[str, dict[str, bool]]:
    ensure_found(await service.delete_group(group_id) or None, "Group")
    return data_response({"deleted": True})


@router.get("/{group_id}/members")
async def list_group_members(
    group_id: int, service: CrmService = Depends(get_service)
) -> dict[str, list[ContactRead]]:
    ensure_found(await service.get_group(group_id), "Group")
    members = await service.list_group_members(group_id)
    return data_response([ContactRead.model_validate(contact) for contact in members])


@router.put("/{group_id}/members/{contact_id}")
async def add_group_member(
    group_id: int, contact_id: int, service: CrmService = Depends(get_service)
) -> dict[str, dict[str, bool]]:
    """Add a contact to a group; ``added`` is false when it was already a member."""

    ensure_found(await service.get_group(group_id), "Group")
    ensure_found(await service.get_contact(contact_id), "Contact")
    added = await service.add_group_member(group_id, contact_id)
    return data_response({"added": added})


@router.delete("/{group_id}/members/{contact_id}")
async def remove_group_member(
    group_id: int, contact_id: int, service: CrmService = Depends(get_service)
) -> dict[str, dict[str, bool]]:
    ensure_found(await service.remove_group_member(group_id, contact_id) or None, "Membership")
    return data_response({"removed": True})
