"""Direct file uploads and URL signing for stored assets."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile

from src.api.dependencies import BatcherDependency, BlobStorageDependency, CurrentUser
from src.config import settings
from src.errors import ValidationError
from src.models.files import (
    SignedUrlRequest,
    SignedUrlResponse,
    UploadResponse,
    UploadType,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["files"])


def _check_upload(upload_type: UploadType, content_type: str, size: int) -> None:
    if size == 0:
        raise ValidationError("No file provided")
    if upload_type is UploadType.IMAGE:
        if not content_type.startswith("image/"):
            raise ValidationError("Invalid image file")
        limit, label = settings.MAX_IMAGE_BYTES, "10MB"
    else:
        if content_type != "application/pdf":
            raise ValidationError("Invalid PDF file")
        limit, label = settings.MAX_PDF_BYTES, "50MB"
    if size > limit:
        raise ValidationError(f"File too large. Max size: {label}")


@router.post("/upload", response_model=UploadResponse)
async def upload_file(
    user: CurrentUser,
    storage: BlobStorageDependency,
    file: Annotated[UploadFile, File()],
    type: Annotated[UploadType, Form()] = UploadType.IMAGE,
) -> UploadResponse:
    """Store one image or PDF and return its base URL."""

    data = await file.read()
    content_type = file.content_type or ""
    filename = file.filename or "upload"
    _check_upload(type, content_type, len(data))

    url = await storage.upload(data, filename, content_type, owner_id=user.id)
    logger.info("Uploaded %s (%d bytes) for user %s", filename, len(data), user.id)
    return UploadResponse(url=url, filename=filename, size=len(data))


@router.post("/files/signed-url", response_model=SignedUrlResponse)
async def sign_urls(
    payload: SignedUrlRequest,
    _: CurrentUser,
    batcher: BatcherDependency,
) -> SignedUrlResponse:
    expires_in = payload.expires_in or batcher.default_expires_in
    signed = await batcher.batch_sign(payload.urls, payload.type.kind, expires_in)
    return SignedUrlResponse(signed_urls=signed, expires_in=expires_in, type=payload.type)
