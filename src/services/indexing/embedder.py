"""Vector embeddings for chunks stored in the Qdrant index."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from openai import AsyncOpenAI

from src.config import settings

logger = logging.getLogger(__name__)


class ChunkEmbedder(ABC):
    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """Return the vector for one chunk of product text."""

    async def aclose(self) -> None:
        return None


class OpenAIChunkEmbedder(ChunkEmbedder):
    """Embeds chunk text through the OpenAI embeddings endpoint."""

    def __init__(self, client: AsyncOpenAI, model: str) -> None:
        self._client = client
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    async def embed(self, text: str) -> list[float]:
        response = await self._client.embeddings.create(model=self._model, input=text)
        if not response.data:
            raise RuntimeError(f"Embedding model {self._model} returned no vector")
        return list(response.data[0].embedding)

    async def aclose(self) -> None:
        await self._client.close()


def create_chunk_embedder() -> ChunkEmbedder | None:
    """Build the OpenAI embedder, or None when embeddings are not configured."""

    if not settings.embeddings_enabled:
        return None

    logger.info("Embedding chunks with %s", settings.OPENAI_EMBEDDING_MODEL)
    return OpenAIChunkEmbedder(
        AsyncOpenAI(api_key=settings.OPENAI_API_KEY),
        settings.OPENAI_EMBEDDING_MODEL,
    )
