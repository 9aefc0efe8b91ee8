"""Application entrypoint for the personal CRM REST service."""

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from personal_crm.api import router as crm_router
from personal_crm.core.config import Settings, get_settings
from personal_crm.core.db import engine
from personal_crm.core.errors import CrmValidationError
from personal_crm.core.events import EventBus
from personal_crm.core.logging import configure_logging
from personal_crm.core.migrations import run_migrations

logger = logging.getLogger(__name__)

ERROR_CODE_MAP: dict[int, str] = {
    404: "RESOURCE_NOT_FOUND",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
}


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = get_settings()
    configure_logging(settings)

    application = FastAPI(title="Personal CRM", version=settings.version)
    application.state.events = EventBus()

    _configure_cors(application, settings)
    _configure_exception_handlers(application)

    application.include_router(crm_router, prefix="/api/crm")

    @application.on_event("startup")
    async def _on_startup() -> None:
        await run_migrations(engine)

    return application


def _configure_cors(application: FastAPI, settings: Settings) -> None:
    if not settings.cors_origins:
        return

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _configure_exception_handlers(application: FastAPI) -> None:
    application.add_exception_handler(HTTPException, _http_exception_handler)
    application.add_exception_handler(RequestValidationError, _validation_exception_handler)
    application.add_exception_handler(CrmValidationError, _crm_validation_handler)
    application.add_exception_handler(ValidationError, _crm_validation_handler)
    application.add_exception_handler(IntegrityError, _integrity_error_handler)
    application.add_exception_handler(Exception, _unhandled_exception_handler)


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, HTTPException)
    if isinstance(exc.detail, dict):
        message = str(exc.detail.get("message", "")) or str(exc.detail)
        code = exc.detail.get(
            "code", ERROR_CODE_MAP.get(exc.status_code, f"HTTP_{exc.status_code}")
        )
    else:
        message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        code = ERROR_CODE_MAP.get(exc.status_code, f"HTTP_{exc.status_code}")
    return _error_response(code, message, exc.status_code)


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, RequestValidationError)
    logger.info("Validation error", extra={"errors": exc.errors()})
    return _error_response("VALIDATION_ERROR", "Validation error", status_code=422)


async def _crm_validation_handler(_: Request, exc: Exception) -> JSONResponse:
    logger.info("Rejected invalid data", extra={"error": str(exc)})
    return _error_response("VALIDATION_ERROR", str(exc), status_code=422)


async def _integrity_error_handler(_: Request, exc: Exception) -> JSONResponse:
    logger.info("Integrity conflict", extra={"error": str(exc.__cause__ or exc)})
    return _error_response("CONFLICT", "Conflicts with existing data", status_code=409)


async def _unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled application error")
    return _error_response("INTERNAL_SERVER_ERROR", "Internal server error", status_code=500)


def _error_response(code: str, message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": {"code": code, "message": message}})


app = create_app()
