"""FastAPI application factory and bootstrap helpers."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.routes import include_api_routes
from src.config import settings
from src.errors import PortalError
from src.services.auth.email import create_email_sender
from src.services.indexing.index_client import create_document_index
from src.services.indexing.synchronizer import IndexSynchronizer
from src.services.repository.factory import create_repository
from src.services.storage.blob_storage import create_blob_storage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Select backends on startup and release them on shutdown."""

    app.state.repository = await create_repository()
    app.state.blob_storage = create_blob_storage()
    index_client = create_document_index()
    app.state.index_synchronizer = IndexSynchronizer(index_client)
    app.state.email_sender = create_email_sender()
    logger.info(
        "Portal started with store=%s index=%s",
        app.state.repository.backend_name,
        app.state.index_synchronizer.backend_name,
    )

    try:
        yield
    finally:
        if index_client is not None:
            await index_client.aclose()
        await app.state.email_sender.aclose()
        await app.state.repository.aclose()


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    """Render domain errors as ``{"success": false, "error": ...}``."""

    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Supplier Portal API",
        description="Supplier onboarding, product assets and search index sync",
        version="1.0.0",
        lifespan=lifespan,
    )

    _configure_cors(app)
    app.add_exception_handler(PortalError, portal_error_handler)
    include_api_routes(app)

    return app


def _configure_cors(app: FastAPI) -> None:
    """Allow broad access in non-production environments."""

    if settings.is_production:
        return

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
