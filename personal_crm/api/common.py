"""Shared helpers for the CRM REST routes."""
from __future__ import annotations

from typing import TypeVar

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from personal_crm.core.db import get_session
from personal_crm.core.events import EventBus
from personal_crm.services.crm import CrmService

T = TypeVar("T")


def data_response(payload: T) -> dict[str, T]:
    """Wrap a payload in the standard data envelope."""

    return {"data": payload}


def get_event_bus(request: Request) -> EventBus | None:
    return getattr(request.app.state, "events", None)


async def get_service(
    session: AsyncSession = Depends(get_session),
    events: EventBus | None = Depends(get_event_bus),
) -> CrmService:
    return CrmService(session, events=events)


def ensure_found(item: T | None, label: str) -> T:
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return item
