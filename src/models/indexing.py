"""Models describing product chunks pushed to the document index."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ChunkMetadata(BaseModel):
    product_id: str
    supplier_id: str
    title: str
    tags: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    pdf_files: list[str] = Field(default_factory=list)
    context: str | None = None

    def as_index_payload(self, *, timestamp_ms: int) -> dict[str, Any]:
        """Metadata in the camelCase shape the index stores, stamped for ingestion."""

        return {
            "productId": self.product_id,
            "supplierId": self.supplier_id,
            "title": self.title,
            "tags": list(self.tags),
            "images": list(self.images),
            "pdfFiles": list(self.pdf_files),
            "context": self.context,
            "timestamp": timestamp_ms,
            "folder": f"products/{self.supplier_id}/",
        }


class IndexChunk(BaseModel):
    """A fragment of product text identified as ``{productId}-chunk-{n}``."""

    id: str = Field(..., min_length=1)
    content: str
    metadata: ChunkMetadata
