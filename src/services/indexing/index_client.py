"""Document index client abstractions and the AutoRAG HTTP implementation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from src.config import settings

logger = logging.getLogger(__name__)


class DocumentIndexClient(ABC):
    """Abstract external index that stores product chunks by document id."""

    backend_name: str = "abstract"

    @abstractmethod
    async def upsert_document(
        self, document_id: str, content: str, metadata: dict[str, Any]
    ) -> None:
        """Create or overwrite a document. Raises on failure."""

    @abstractmethod
    async def delete_document(self, document_id: str) -> None:
        """Delete a document. Deleting an absent document is not an error."""

    async def aclose(self) -> None:
        return None


class AutoRAGIndexClient(DocumentIndexClient):
    """Cloudflare AutoRAG documents API accessed over HTTPS."""

    backend_name = "autorag"

    def __init__(
        self,
        *,
        account_id: str,
        api_token: str,
        index_name: str,
        api_base: str = "https://api.cloudflare.com/client/v4",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not (account_id and api_token and index_name):
            raise ValueError("AutoRAG account id, API token and index name are required")

        self._documents_url = (
            f"{api_base.rstrip('/')}/accounts/{account_id}/ai/autorag/"
            f"{index_name}/documents"
        )
        self._client = http_client or httpx.AsyncClient(timeout=30.0)
        self._headers = {"Authorization": f"Bearer {api_token}"}

    async def upsert_document(
        self, document_id: str, content: str, metadata: dict[str, Any]
    ) -> None:
        response = await self._client.post(
            self._documents_url,
            headers=self._headers,
            json={
                "documents": [
                    {"id": document_id, "content": content, "metadata": metadata}
                ]
            },
        )
        if response.is_error:
            logger.error(
                "AutoRAG ingestion error for %s: %s", document_id, response.text
            )
        response.raise_for_status()

    async def delete_document(self, document_id: str) -> None:
        response = await self._client.delete(
            f"{self._documents_url}/{document_id}",
            headers=self._headers,
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            logger.debug("AutoRAG document %s already absent", document_id)
            return
        response.raise_for_status()

    async def aclose(self) -> None:
        await self._client.aclose()


def create_document_index(backend: str | None = None) -> DocumentIndexClient | None:
    """Build the configured index client, or None when indexing is disabled."""

    backend = (backend or settings.INDEX_BACKEND).lower()

    if backend == "autorag":
        if not settings.autorag_configured:
            logger.warning("AutoRAG credentials missing; product indexing disabled")
            return None
        return AutoRAGIndexClient(
            account_id=settings.CLOUDFLARE_ACCOUNT_ID,
            api_token=settings.CLOUDFLARE_API_TOKEN,
            index_name=settings.CLOUDFLARE_AUTORAG_INDEX,
            api_base=settings.CLOUDFLARE_API_BASE,
        )

    if backend == "qdrant":
        from src.services.indexing.qdrant_index import create_qdrant_index

        return create_qdrant_index()

    if backend == "disabled":
        return None

    raise ValueError(f"Unknown INDEX_BACKEND: {backend}")
