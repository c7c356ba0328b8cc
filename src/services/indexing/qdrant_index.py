"""Qdrant-backed document index: chunks are embedded and stored as points."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any

from qdrant_client import QdrantClient  # type: ignore[import]
from qdrant_client.http import models as qmodels  # type: ignore[import]

from src.config import settings
from src.services.indexing.embedder import ChunkEmbedder, create_chunk_embedder
from src.services.indexing.index_client import DocumentIndexClient

logger = logging.getLogger(__name__)

# Qdrant point ids must be UUIDs or integers; chunk ids are mapped onto a
# fixed namespace so the same chunk always lands on the same point.
_POINT_NAMESPACE = uuid.UUID("6f1c2a4e-2f59-4d5a-9a57-0d3f3c1b8e21")


def point_id_for(document_id: str) -> str:
    return str(uuid.uuid5(_POINT_NAMESPACE, document_id))


class QdrantIndexClient(DocumentIndexClient):
    """Stores each chunk as a point whose payload carries the chunk text."""

    backend_name = "qdrant"

    def __init__(
        self,
        client: QdrantClient,
        collection_name: str,
        embedder: ChunkEmbedder,
    ):
        self.client = client
        self.collection_name = collection_name
        self.embedder = embedder
        self._collection_ready = False

    async def ensure_collection(self, vector_size: int) -> None:
        """Ensure the collection exists with the correct configuration."""
        if self._collection_ready:
            return
        try:
            await asyncio.to_thread(
                self.client.get_collection,
                collection_name=self.collection_name,
            )
            self._collection_ready = True
            return
        except Exception:
            logger.info("Creating Qdrant collection %s", self.collection_name)

        await asyncio.to_thread(
            self.client.create_collection,
            collection_name=self.collection_name,
            vectors_config=qmodels.VectorParams(
                size=vector_size,
                distance=qmodels.Distance.COSINE,
            ),
        )
        self._collection_ready = True

    async def upsert_document(
        self, document_id: str, content: str, metadata: dict[str, Any]
    ) -> None:
        vector = await self.embedder.embed(content)
        await self.ensure_collection(len(vector))

        point = qmodels.PointStruct(
            id=point_id_for(document_id),
            vector=vector,
            payload={"document_id": document_id, "content": content, **metadata},
        )
        await asyncio.to_thread(
            self.client.upsert,
            collection_name=self.collection_name,
            points=[point],
        )

    async def delete_document(self, document_id: str) -> None:
        await asyncio.to_thread(
            self.client.delete,
            collection_name=self.collection_name,
            points_selector=qmodels.PointIdsList(points=[point_id_for(document_id)]),
        )

    async def aclose(self) -> None:
        await asyncio.to_thread(self.client.close)
        await self.embedder.aclose()


def create_qdrant_index(collection_name: str | None = None) -> QdrantIndexClient | None:
    """Factory function to create the Qdrant index, None without embeddings."""
    embedder = create_chunk_embedder()
    if embedder is None:
        logger.warning(
            "Qdrant index selected but OpenAI embeddings are not configured; "
            "product indexing disabled"
        )
        return None

    client = QdrantClient(url=settings.QDRANT_URL)
    collection = collection_name or settings.QDRANT_COLLECTION
    return QdrantIndexClient(client, collection, embedder)
