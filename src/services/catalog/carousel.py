"""Homepage carousel banners."""

from __future__ import annotations

import logging

from src.errors import NotFound
from src.models.catalog import CarouselImage, CarouselImageCreate
from src.models.files import AssetKind
from src.services.repository.base import Repository
from src.services.storage.signed_urls import SignedUrlBatcher

logger = logging.getLogger(__name__)


class CarouselService:
    def __init__(self, repository: Repository, batcher: SignedUrlBatcher) -> None:
        self._repository = repository
        self._batcher = batcher

    async def list_images(self, *, include_inactive: bool = False) -> list[CarouselImage]:
        images = await self._repository.list(CarouselImage)
        if not include_inactive:
            images = [image for image in images if image.is_active]
        return sorted(images, key=lambda image: (image.order, image.created_at))

    async def list_public_images(self) -> list[CarouselImage]:
        """Active banners with their image URLs replaced by signed ones."""

        images = await self.list_images()
        signed = await self._batcher.batch_sign(
            [image.image_url for image in images], AssetKind.IMAGE
        )
        return [
            image.model_copy(update={"image_url": url})
            for image, url in zip(images, signed)
        ]

    async def count_active(self) -> int:
        return len(await self.list_images())

    async def add_image(self, payload: CarouselImageCreate) -> CarouselImage:
        existing = await self._repository.list(CarouselImage)
        image = CarouselImage(
            image_url=payload.image_url.strip(),
            title=payload.title or "",
            description=payload.description or "",
            link=payload.link or "/products",
            order=max((i.order for i in existing), default=0) + 1,
        )
        await self._repository.save(image)
        logger.info("Carousel image %s added", image.id)
        return image

    async def delete_image(self, image_id: str) -> None:
        if not await self._repository.delete(CarouselImage, image_id):
            raise NotFound("Carousel image not found")

    async def toggle_image(self, image_id: str, is_active: bool) -> CarouselImage:
        image = await self._repository.get(CarouselImage, image_id)
        if image is None:
            raise NotFound("Carousel image not found")
        image.is_active = is_active
        image.touch()
        await self._repository.save(image)
        return image
