"""Product domain models and API schemas."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from pydantic import Field, field_validator

from src.models.base import PortalModel, StoredModel


class ProductStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


def normalize_tags(values: list[str]) -> list[str]:
    """Strip, drop blanks and de-duplicate while keeping first-seen order."""

    seen: set[str] = set()
    tags: list[str] = []
    for raw in values:
        tag = raw.strip()
        if tag and tag not in seen:
            seen.add(tag)
            tags.append(tag)
    return tags


class Product(StoredModel):
    """Product listing owned by exactly one supplier."""

    collection: ClassVar[str] = "products"

    supplier_id: str
    title: str
    short_description: str
    full_description: str
    specifications: str | None = None
    category: str | None = None
    sub_category: str | None = None
    tags: list[str] = Field(default_factory=list)
    price_range: str | None = None
    capacity: str | None = None
    youtube_url: str | None = None
    images: list[str] = Field(default_factory=list)
    pdf_files: list[str] = Field(default_factory=list)
    status: ProductStatus = ProductStatus.PENDING
    view_count: int = Field(default=0, ge=0)
    match_count: int = Field(default=0, ge=0)

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, values: list[str]) -> list[str]:
        return normalize_tags(values)


class ProductDraft(PortalModel):
    """Text fields submitted with a create form. Required fields are checked by
    the coordinator so a missing one surfaces as a 400 rather than a 422."""

    title: str | None = None
    short_description: str | None = None
    full_description: str | None = None
    specifications: str | None = None
    category: str | None = None
    sub_category: str | None = None
    tags: list[str] = Field(default_factory=list)
    price_range: str | None = None
    capacity: str | None = None
    youtube_url: str | None = None
    supplier_id: str | None = None
    image_urls: list[str] = Field(default_factory=list)
    file_urls: list[str] = Field(default_factory=list)


class ProductPatch(PortalModel):
    """Partial update. ``None`` means "keep the stored value"."""

    title: str | None = None
    description: str | None = None
    short_description: str | None = None
    full_description: str | None = None
    specifications: str | None = None
    category: str | None = None
    sub_category: str | None = None
    tags: list[str] | None = None
    price_range: str | None = None
    capacity: str | None = None
    youtube_url: str | None = None
    deleted_images: list[str] = Field(default_factory=list)
    deleted_files: list[str] = Field(default_factory=list)


@dataclass(frozen=True)
class UploadedAsset:
    """A file received in a multipart request, already read into memory."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class ProductView(Product):
    """Product returned to clients with time-limited URLs next to the base ones."""

    signed_images: list[str] = Field(default_factory=list)
    signed_pdf_files: list[str] = Field(default_factory=list)


class ProductEnvelope(PortalModel):
    message: str | None = None
    product: ProductView


class ProductListResponse(PortalModel):
    products: list[ProductView]


class ProductStatusUpdate(PortalModel):
    status: ProductStatus
