"""
FastAPI application entry point for the catalog API.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from sitecatalog.config import get_settings
from sitecatalog.errors import StoreError, ValidationError
from sitecatalog.routes import router

logger = logging.getLogger(__name__)


async def _store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("API error during %s: %s", exc.operation, exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": str(exc)},
    )


async def _validation_error_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"detail": [{"loc": ["body", exc.field], "msg": exc.message}]},
    )


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Site Catalog API", version="0.1.0")
    app.include_router(router, prefix=settings.api_prefix)
    app.add_exception_handler(StoreError, _store_error_handler)
    app.add_exception_handler(ValidationError, _validation_error_handler)
    return app


app = create_app()
