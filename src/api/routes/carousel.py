"""Homepage carousel banners."""

from __future__ import annotations

from fastapi import APIRouter, status

from src.api.dependencies import AdminUser, CarouselServiceDependency
from src.models.catalog import (
    ActionResult,
    CarouselImageCreate,
    CountResponse,
    ToggleRequest,
)

router = APIRouter(prefix="/carousel", tags=["carousel"])


@router.get("", response_model=ActionResult)
async def list_carousel(carousel: CarouselServiceDependency) -> ActionResult:
    """Public banners in display order with signed image URLs."""

    return ActionResult.of(await carousel.list_public_images())


@router.get("/all", response_model=ActionResult)
async def list_all_carousel(
    _: AdminUser, carousel: CarouselServiceDependency
) -> ActionResult:
    return ActionResult.of(await carousel.list_images(include_inactive=True))


@router.get("/count", response_model=CountResponse)
async def count_carousel(carousel: CarouselServiceDependency) -> CountResponse:
    return CountResponse(count=await carousel.count_active())


@router.post("", response_model=ActionResult, status_code=status.HTTP_201_CREATED)
async def add_carousel_image(
    payload: CarouselImageCreate, _: AdminUser, carousel: CarouselServiceDependency
) -> ActionResult:
    return ActionResult.of(await carousel.add_image(payload))


@router.delete("/{image_id}", response_model=ActionResult)
async def delete_carousel_image(
    image_id: str, _: AdminUser, carousel: CarouselServiceDependency
) -> ActionResult:
    await carousel.delete_image(image_id)
    return ActionResult.of()


@router.post("/{image_id}/toggle", response_model=ActionResult)
async def toggle_carousel_image(
    image_id: str,
    payload: ToggleRequest,
    _: AdminUser,
    carousel: CarouselServiceDependency,
) -> ActionResult:
    return ActionResult.of(await carousel.toggle_image(image_id, payload.is_active))
