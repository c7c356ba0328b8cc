"""Schemas for file uploads and signed URL requests."""

from __future__ import annotations

from enum import Enum

from pydantic import Field, field_validator

from src.models.base import PortalModel


class AssetKind(str, Enum):
    """What a stored asset is used for; drives which product array it lives in."""

    IMAGE = "image"
    DOCUMENT = "document"


class UploadType(str, Enum):
    IMAGE = "image"
    PDF = "pdf"

    @property
    def kind(self) -> AssetKind:
        return AssetKind.IMAGE if self is UploadType.IMAGE else AssetKind.DOCUMENT


class SignedUrlType(str, Enum):
    IMAGES = "images"
    PDFS = "pdfs"

    @property
    def kind(self) -> AssetKind:
        return AssetKind.IMAGE if self is SignedUrlType.IMAGES else AssetKind.DOCUMENT


class UploadResponse(PortalModel):
    success: bool = True
    url: str
    filename: str
    size: int


class SignedUrlRequest(PortalModel):
    type: SignedUrlType
    urls: list[str]
    expires_in: int | None = Field(default=None, gt=0)

    @field_validator("urls", mode="before")
    @classmethod
    def _wrap_single_url(cls, value: object) -> object:
        if isinstance(value, str):
            return [value]
        return value


class SignedUrlResponse(PortalModel):
    signed_urls: list[str]
    expires_in: int
    type: SignedUrlType
