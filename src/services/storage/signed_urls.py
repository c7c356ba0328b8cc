"""Batch signing of stored asset URLs for list and detail views."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from src.config import settings
from src.models.files import AssetKind
from src.models.product import Product, ProductView
from src.services.storage.blob_storage import BlobStorageGateway

logger = logging.getLogger(__name__)


class SignedUrlBatcher:
    """Turns base URLs into time-limited URLs with one gateway call per batch.

    Signing never breaks a listing: if the batch call fails in any way the
    original URLs are returned untouched.
    """

    def __init__(
        self,
        gateway: BlobStorageGateway,
        default_expires_in: int | None = None,
    ) -> None:
        self._gateway = gateway
        self._default_expires_in = (
            default_expires_in or settings.SIGNED_URL_EXPIRES_SECONDS
        )

    @property
    def default_expires_in(self) -> int:
        return self._default_expires_in

    async def batch_sign(
        self,
        urls: Sequence[str | None],
        kind: AssetKind,
        expires_in: int | None = None,
    ) -> list[str | None]:
        """Sign ``urls`` preserving length and order.

        Blank entries are not sent and come back as they were.
        """

        if not urls:
            return []

        positions = [
            index for index, url in enumerate(urls) if url is not None and url.strip()
        ]
        if not positions:
            return list(urls)

        to_sign = [urls[index] for index in positions]
        try:
            signed = await self._gateway.sign_urls(
                to_sign, expires_in or self._default_expires_in
            )
            if len(signed) != len(to_sign):
                raise ValueError(
                    f"Signer returned {len(signed)} URLs for {len(to_sign)} inputs"
                )
        except Exception as exc:
            logger.warning(
                "Signing %d %s URLs failed, returning originals: %s",
                len(to_sign),
                kind.value,
                exc,
            )
            return list(urls)

        result = list(urls)
        for index, signed_url in zip(positions, signed, strict=True):
            result[index] = signed_url
        return result

    async def sign_products(
        self,
        products: Sequence[Product],
        expires_in: int | None = None,
    ) -> list[ProductView]:
        """Sign every product's images and documents with two concurrent batches.

        Both arrays are flattened across products, signed, and split back using
        the index range recorded for each product.
        """

        image_ranges, flat_images = _flatten([p.images for p in products])
        file_ranges, flat_files = _flatten([p.pdf_files for p in products])

        signed_images, signed_files = await asyncio.gather(
            self.batch_sign(flat_images, AssetKind.IMAGE, expires_in),
            self.batch_sign(flat_files, AssetKind.DOCUMENT, expires_in),
        )

        views: list[ProductView] = []
        for product, (img_start, img_end), (file_start, file_end) in zip(
            products, image_ranges, file_ranges, strict=True
        ):
            views.append(
                ProductView(
                    **product.model_dump(),
                    signed_images=signed_images[img_start:img_end],
                    signed_pdf_files=signed_files[file_start:file_end],
                )
            )
        return views

    async def sign_product(
        self, product: Product, expires_in: int | None = None
    ) -> ProductView:
        views = await self.sign_products([product], expires_in)
        return views[0]


def _flatten(groups: Sequence[Sequence[str]]) -> tuple[list[tuple[int, int]], list[str]]:
    ranges: list[tuple[int, int]] = []
    flat: list[str] = []
    for group in groups:
        start = len(flat)
        flat.extend(group)
        ranges.append((start, len(flat)))
    return ranges, flat
