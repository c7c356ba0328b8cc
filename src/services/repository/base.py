"""Document repository interface shared by the redis and in-memory stores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TypeVar

from src.models.base import StoredModel

M = TypeVar("M", bound=StoredModel)


class Repository(ABC):
    """Stores pydantic documents keyed by ``(collection, id)``.

    Writes replace the whole document; there is no version check, so two
    concurrent updates of the same document resolve as last-write-wins.
    """

    backend_name: str = "abstract"

    @abstractmethod
    async def get(self, model: type[M], entity_id: str) -> M | None:
        """Return the stored document or None."""

    @abstractmethod
    async def list(self, model: type[M]) -> list[M]:
        """Return every document of the collection, in no particular order."""

    @abstractmethod
    async def save(self, entity: M) -> M:
        """Insert or replace ``entity``."""

    @abstractmethod
    async def delete(self, model: type[M], entity_id: str) -> bool:
        """Delete a document. Returns False when nothing was stored under the id."""

    @abstractmethod
    async def ping(self) -> bool:
        """Return True when the backing store is reachable."""

    async def aclose(self) -> None:
        return None

    async def find(self, model: type[M], predicate: Callable[[M], bool]) -> list[M]:
        return [entity for entity in await self.list(model) if predicate(entity)]

    async def find_one(
        self, model: type[M], predicate: Callable[[M], bool]
    ) -> M | None:
        for entity in await self.list(model):
            if predicate(entity):
                return entity
        return None
