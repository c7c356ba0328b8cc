"""Supplier product management and the public product catalog."""

from __future__ import annotations

import json
import logging
from typing import Annotated

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from src.api.dependencies import (
    AdminUser,
    BatcherDependency,
    CatalogDependency,
    CoordinatorDependency,
    CurrentUser,
)
from src.models.auth import MessageResponse
from src.models.product import (
    ProductDraft,
    ProductEnvelope,
    ProductListResponse,
    ProductPatch,
    ProductStatusUpdate,
    ProductView,
    UploadedAsset,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["products"])

OptionalText = Annotated[str | None, Form()]
UploadList = Annotated[list[UploadFile] | None, File()]


def split_csv(value: str | None) -> list[str]:
    """Split a comma-joined form value, dropping blank entries."""

    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def parse_url_list(value: str | None, field: str) -> list[str]:
    """Decode a JSON array of URLs sent as a form field.

    Malformed input is logged and treated as an empty list.
    """

    if not value:
        return []
    try:
        decoded = json.loads(value)
    except json.JSONDecodeError as exc:
        logger.warning("Ignoring malformed %s: %s", field, exc)
        return []
    if not isinstance(decoded, list):
        logger.warning("Ignoring %s, expected a JSON array", field)
        return []
    return [str(url) for url in decoded if isinstance(url, str)]


async def read_uploads(uploads: list[UploadFile] | None) -> list[UploadedAsset]:
    assets = []
    for upload in uploads or []:
        assets.append(
            UploadedAsset(
                filename=upload.filename or "upload",
                content_type=upload.content_type or "application/octet-stream",
                data=await upload.read(),
            )
        )
    return assets


@router.post(
    "/products",
    response_model=ProductEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product with its images and documents",
)
async def create_product(
    user: CurrentUser,
    coordinator: CoordinatorDependency,
    batcher: BatcherDependency,
    title: OptionalText = None,
    short_description: Annotated[str | None, Form(alias="shortDescription")] = None,
    full_description: Annotated[str | None, Form(alias="fullDescription")] = None,
    specifications: OptionalText = None,
    category: OptionalText = None,
    sub_category: Annotated[str | None, Form(alias="subCategory")] = None,
    tags: OptionalText = None,
    price_range: Annotated[str | None, Form(alias="priceRange")] = None,
    capacity: OptionalText = None,
    youtube_url: Annotated[str | None, Form(alias="youtubeUrl")] = None,
    supplier_id: Annotated[str | None, Form(alias="supplierId")] = None,
    image_urls: Annotated[str | None, Form(alias="imageUrls")] = None,
    file_urls: Annotated[str | None, Form(alias="fileUrls")] = None,
    images: UploadList = None,
    files: UploadList = None,
) -> ProductEnvelope:
    draft = ProductDraft(
        title=title,
        short_description=short_description,
        full_description=full_description,
        specifications=specifications,
        category=category,
        sub_category=sub_category,
        tags=split_csv(tags),
        price_range=price_range,
        capacity=capacity,
        youtube_url=youtube_url,
        supplier_id=supplier_id,
        image_urls=parse_url_list(image_urls, "imageUrls"),
        file_urls=parse_url_list(file_urls, "fileUrls"),
    )
    product = await coordinator.create_product(
        user, draft, await read_uploads(images), await read_uploads(files)
    )
    return ProductEnvelope(
        message="Product created successfully",
        product=await batcher.sign_product(product),
    )


@router.get("/products", response_model=ProductListResponse)
async def list_products(
    user: CurrentUser,
    coordinator: CoordinatorDependency,
    batcher: BatcherDependency,
) -> ProductListResponse:
    products = await coordinator.list_products(user)
    return ProductListResponse(products=await batcher.sign_products(products))


@router.get("/products/{product_id}", response_model=ProductView)
async def get_product(
    product_id: str,
    user: CurrentUser,
    coordinator: CoordinatorDependency,
    batcher: BatcherDependency,
) -> ProductView:
    product = await coordinator.get_product(user, product_id)
    return await batcher.sign_product(product)


@router.patch("/products/{product_id}", response_model=ProductEnvelope)
async def update_product(
    product_id: str,
    user: CurrentUser,
    coordinator: CoordinatorDependency,
    batcher: BatcherDependency,
    title: OptionalText = None,
    description: OptionalText = None,
    short_description: Annotated[str | None, Form(alias="shortDescription")] = None,
    full_description: Annotated[str | None, Form(alias="fullDescription")] = None,
    specifications: OptionalText = None,
    specs: OptionalText = None,
    category: OptionalText = None,
    sub_category: Annotated[str | None, Form(alias="subCategory")] = None,
    tags: OptionalText = None,
    price_range: Annotated[str | None, Form(alias="priceRange")] = None,
    capacity: OptionalText = None,
    youtube_url: Annotated[str | None, Form(alias="youtubeUrl")] = None,
    deleted_images: Annotated[str | None, Form(alias="deletedImages")] = None,
    deleted_files: Annotated[str | None, Form(alias="deletedFiles")] = None,
    new_images: Annotated[
        list[UploadFile] | None, File(alias="newImages")
    ] = None,
    new_files: Annotated[list[UploadFile] | None, File(alias="newFiles")] = None,
) -> ProductEnvelope:
    patch = ProductPatch(
        title=title,
        description=description,
        short_description=short_description,
        full_description=full_description,
        specifications=specifications if specifications is not None else specs,
        category=category,
        sub_category=sub_category,
        tags=split_csv(tags) if tags is not None else None,
        price_range=price_range,
        capacity=capacity,
        youtube_url=youtube_url,
        deleted_images=split_csv(deleted_images),
        deleted_files=split_csv(deleted_files),
    )
    product = await coordinator.update_product(
        user,
        product_id,
        patch,
        await read_uploads(new_images),
        await read_uploads(new_files),
    )
    return ProductEnvelope(
        message="Product updated successfully",
        product=await batcher.sign_product(product),
    )


@router.delete("/products/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: str,
    user: CurrentUser,
    coordinator: CoordinatorDependency,
) -> MessageResponse:
    await coordinator.delete_product(user, product_id)
    return MessageResponse(message="Product deleted successfully")


@router.patch("/products/{product_id}/status", response_model=ProductEnvelope)
async def update_product_status(
    product_id: str,
    payload: ProductStatusUpdate,
    _: AdminUser,
    catalog: CatalogDependency,
    batcher: BatcherDependency,
) -> ProductEnvelope:
    product = await catalog.set_status(product_id, payload.status)
    return ProductEnvelope(
        message=f"Product {payload.status.value.lower()}",
        product=await batcher.sign_product(product),
    )


@router.get("/catalog/products", response_model=ProductListResponse)
async def list_catalog(
    catalog: CatalogDependency,
    batcher: BatcherDependency,
    category: Annotated[str | None, Query()] = None,
) -> ProductListResponse:
    products = await catalog.list_public(category)
    return ProductListResponse(products=await batcher.sign_products(products))


@router.get("/catalog/products/{product_id}", response_model=ProductView)
async def view_catalog_product(
    product_id: str,
    catalog: CatalogDependency,
    batcher: BatcherDependency,
) -> ProductView:
    product = await catalog.view_public(product_id)
    return await batcher.sign_product(product)
