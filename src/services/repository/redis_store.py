"""Redis-backed document repository."""

from __future__ import annotations

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from src.config import settings
from src.services.repository.base import M, Repository

logger = logging.getLogger(__name__)


class RedisRepository(Repository):
    """Keeps each collection in one redis hash: ``{prefix}:{collection}`` maps
    document id to its JSON."""

    backend_name = "redis"

    def __init__(self, client: redis.Redis, key_prefix: str = "portal") -> None:
        self._client = client
        self._key_prefix = key_prefix

    def _key(self, collection: str) -> str:
        return f"{self._key_prefix}:{collection}"

    async def get(self, model: type[M], entity_id: str) -> M | None:
        raw = await self._client.hget(self._key(model.collection), entity_id)
        if raw is None:
            return None
        return model.model_validate_json(raw)

    async def list(self, model: type[M]) -> list[M]:
        values = await self._client.hvals(self._key(model.collection))
        return [model.model_validate_json(raw) for raw in values]

    async def save(self, entity: M) -> M:
        await self._client.hset(
            self._key(entity.collection),
            entity.id,
            entity.model_dump_json(),
        )
        logger.debug("Stored %s/%s in redis", entity.collection, entity.id)
        return entity

    async def delete(self, model: type[M], entity_id: str) -> bool:
        removed = await self._client.hdel(self._key(model.collection), entity_id)
        return bool(removed)

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except (RedisError, OSError) as exc:
            logger.warning("Redis ping failed: %s", exc)
            return False

    async def aclose(self) -> None:
        await self._client.aclose()


def create_redis_repository(url: str | None = None) -> RedisRepository:
    """Factory function to create a redis repository from settings."""
    client = redis.from_url(
        url or settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        health_check_interval=30,
    )
    return RedisRepository(client, settings.STORE_KEY_PREFIX)
