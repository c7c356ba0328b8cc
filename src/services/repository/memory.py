"""In-memory repository used in development and when redis is unreachable."""

from __future__ import annotations

import logging
from threading import RLock

from src.models.base import StoredModel
from src.services.repository.base import M, Repository

logger = logging.getLogger(__name__)


class InMemoryRepository(Repository):
    """Naive process-local store. Documents are copied in and out so callers
    never share mutable instances with the store."""

    backend_name = "memory"

    def __init__(self) -> None:
        self._lock = RLock()
        self._storage: dict[str, dict[str, StoredModel]] = {}

    async def get(self, model: type[M], entity_id: str) -> M | None:
        with self._lock:
            entity = self._storage.get(model.collection, {}).get(entity_id)
        if entity is None:
            return None
        return model.model_validate(entity.model_dump())

    async def list(self, model: type[M]) -> list[M]:
        with self._lock:
            entities = list(self._storage.get(model.collection, {}).values())
        return [model.model_validate(entity.model_dump()) for entity in entities]

    async def save(self, entity: M) -> M:
        with self._lock:
            bucket = self._storage.setdefault(entity.collection, {})
            bucket[entity.id] = entity.model_copy(deep=True)
        logger.debug("Stored %s/%s in memory", entity.collection, entity.id)
        return entity

    async def delete(self, model: type[M], entity_id: str) -> bool:
        with self._lock:
            removed = self._storage.get(model.collection, {}).pop(entity_id, None)
        return removed is not None

    async def ping(self) -> bool:
        return True
