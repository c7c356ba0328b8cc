"""System-level routes such as health checks."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.dependencies import RepositoryDependency, get_index_synchronizer
from src.config import settings
from src.services.indexing.synchronizer import IndexSynchronizer

router = APIRouter(tags=["system"])


@router.get("/")
async def read_root() -> dict[str, str]:
    """Landing endpoint used by smoke tests."""

    return {"message": f"{settings.PLATFORM_NAME} API"}


@router.get("/health")
async def health_check(
    repository: RepositoryDependency,
    synchronizer: Annotated[IndexSynchronizer, Depends(get_index_synchronizer)],
) -> dict[str, str]:
    """Health check reporting the active store and index backends."""

    store_status = "connected" if await repository.ping() else "disconnected"
    return {
        "status": "healthy",
        "store": repository.backend_name,
        "storeStatus": store_status,
        "index": synchronizer.backend_name,
        "environment": settings.ENVIRONMENT,
    }
