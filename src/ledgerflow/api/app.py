"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ledgerflow.api.routes import router
from ledgerflow.config import Settings, load_settings
from ledgerflow.domain.errors import (
    ExternalServiceError,
    PersistenceError,
    PostingRuleViolation,
    ValidationError,
)
from ledgerflow.services import Services, build_services

logger = logging.getLogger(__name__)

_SERVER_ERROR_SUMMARIES = {
    PersistenceError: "Database operation failed",
    PostingRuleViolation: "Failed to post transactions",
    ExternalServiceError: "External service unavailable",
}


def create_app(settings: Optional[Settings] = None, services: Optional[Services] = None) -> FastAPI:
    """Create the HTTP application.

    When ``services`` is not supplied they are built from ``settings`` at
    startup, and the training corpus is fully loaded before the first
    request is accepted.

    Args:
        settings: Application settings (defaults to the environment)
        services: Pre-built services, e.g. with fake collaborators

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = getattr(app.state, "services", None) is None
        if owned:
            app.state.services = build_services(settings or load_settings())
        logger.info(
            "ledgerflow API ready (%d training transactions)", len(app.state.services.corpus)
        )
        try:
            yield
        finally:
            if owned:
                app.state.services.close()

    app = FastAPI(title="ledgerflow API", version="0.1.0", lifespan=lifespan)
    app.state.services = services
    app.include_router(router)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
        )

    async def server_error_handler(request: Request, exc: Exception):
        summary = next(
            (text for error_type, text in _SERVER_ERROR_SUMMARIES.items() if isinstance(exc, error_type)),
            "Internal server error",
        )
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": summary, "details": str(exc)})

    for error_type in _SERVER_ERROR_SUMMARIES:
        app.add_exception_handler(error_type, server_error_handler)
    app.add_exception_handler(Exception, server_error_handler)

    return app
