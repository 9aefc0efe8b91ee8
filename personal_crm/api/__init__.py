"""REST routes for the personal CRM."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from personal_crm.api.companies import router as companies_router
from personal_crm.api.contacts import router as contacts_router
from personal_crm.api.groups import router as groups_router
from personal_crm.api.interactions import router as interactions_router
from personal_crm.api.relationships import router as relationships_router
from personal_crm.api.reminders import router as reminders_router
from personal_crm.core.config import Settings, get_settings

router = APIRouter()
router.include_router(contacts_router)
router.include_router(companies_router)
router.include_router(interactions_router)
router.include_router(reminders_router)
router.include_router(relationships_router)
router.include_router(groups_router)


@router.get("/health", tags=["health"])
async def health_check(settings: Settings = Depends(get_settings)) -> dict[str, dict[str, str]]:
    """Report the service health information."""
    return {"data": {"status": "ok", "version": settings.version}}
