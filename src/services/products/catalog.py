"""Public product catalog and admin moderation."""

from __future__ import annotations

import logging

from src.errors import NotFound
from src.models.product import Product, ProductStatus
from src.models.supplier import Supplier
from src.services.repository.base import Repository

logger = logging.getLogger(__name__)


class ProductCatalog:
    """Read side for buyers plus status moderation for admins.

    Only approved products of approved, verified suppliers are public.
    """

    def __init__(self, repository: Repository) -> None:
        self._repository = repository

    async def _public_supplier_ids(self) -> set[str]:
        return {
            supplier.id
            for supplier in await self._repository.list(Supplier)
            if supplier.is_public
        }

    async def list_public(self, category: str | None = None) -> list[Product]:
        supplier_ids = await self._public_supplier_ids()
        products = await self._repository.find(
            Product,
            lambda p: p.status == ProductStatus.APPROVED
            and p.supplier_id in supplier_ids
            and (category is None or p.category == category),
        )
        return sorted(products, key=lambda p: p.created_at, reverse=True)

    async def view_public(self, product_id: str) -> Product:
        """Fetch a public product and count the view."""

        product = await self._repository.get(Product, product_id)
        if product is None or product.status != ProductStatus.APPROVED:
            raise NotFound("Product not found")
        if product.supplier_id not in await self._public_supplier_ids():
            raise NotFound("Product not found")

        product.view_count += 1
        await self._repository.save(product)
        return product

    async def set_status(self, product_id: str, status: ProductStatus) -> Product:
        product = await self._repository.get(Product, product_id)
        if product is None:
            raise NotFound("Product not found")
        product.status = status
        product.touch()
        await self._repository.save(product)
        logger.info("Product %s moderated to %s", product.id, status.value)
        return product
