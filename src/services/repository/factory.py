"""Startup selection of the repository backend."""

from __future__ import annotations

import logging

from src.config import settings
from src.services.repository.base import Repository
from src.services.repository.memory import InMemoryRepository
from src.services.repository.redis_store import create_redis_repository

logger = logging.getLogger(__name__)


async def create_repository(
    backend: str | None = None,
    *,
    memory_fallback: bool | None = None,
) -> Repository:
    """Build the configured repository.

    When redis is selected but does not answer a ping and the fallback is
    enabled, an in-memory repository is returned instead. Data written to it
    is lost on restart.
    """

    backend = (backend or settings.STORE_BACKEND).lower()
    if memory_fallback is None:
        memory_fallback = settings.STORE_MEMORY_FALLBACK

    if backend == "memory":
        logger.info("Using in-memory repository")
        return InMemoryRepository()

    if backend != "redis":
        raise ValueError(f"Unknown STORE_BACKEND: {backend}")

    repository = create_redis_repository()
    if await repository.ping():
        logger.info("Using redis repository at %s", settings.REDIS_URL)
        return repository

    await repository.aclose()
    if not memory_fallback:
        raise RuntimeError(f"Redis is unreachable at {settings.REDIS_URL}")

    logger.warning(
        "Redis unreachable at %s, falling back to in-memory repository",
        settings.REDIS_URL,
    )
    return InMemoryRepository()
