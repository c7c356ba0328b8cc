"""Create, update and delete products together with their stored assets.

Persisted URL arrays only ever reference uploads that succeeded. Blob cleanup
and index synchronization are best-effort: they are awaited so failures can
be logged, but they never fail or roll back the product write.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from src.errors import NotFound, StorageWriteError, ValidationError
from src.models.files import AssetKind
from src.models.product import (
    Product,
    ProductDraft,
    ProductPatch,
    ProductStatus,
    UploadedAsset,
    normalize_tags,
)
from src.models.result import Err, Ok
from src.models.supplier import Supplier, User
from src.services.indexing.synchronizer import IndexSynchronizer
from src.services.repository.base import Repository
from src.services.storage.blob_storage import BlobStorageGateway

logger = logging.getLogger(__name__)

_PRODUCT_NOT_FOUND = "Product not found"


class ProductAssetCoordinator:
    """Runs the product write path: upload, merge, clean up, persist, then index."""

    def __init__(
        self,
        repository: Repository,
        storage: BlobStorageGateway,
        synchronizer: IndexSynchronizer,
    ) -> None:
        self._repository = repository
        self._storage = storage
        self._synchronizer = synchronizer

    async def resolve_supplier(
        self, user: User, supplier_id: str | None = None
    ) -> Supplier:
        """Supplier the user acts for. Admins may act for any supplier by id."""

        if supplier_id and user.is_admin:
            supplier = await self._repository.get(Supplier, supplier_id)
        else:
            supplier = await self._repository.find_one(
                Supplier, lambda s: s.user_id == user.id
            )
        if supplier is None:
            raise NotFound("Supplier profile not found. Please complete onboarding first.")
        return supplier

    async def list_products(self, user: User) -> list[Product]:
        supplier = await self.resolve_supplier(user)
        products = await self._repository.find(
            Product, lambda p: p.supplier_id == supplier.id
        )
        return sorted(products, key=lambda p: p.created_at, reverse=True)

    async def get_product(self, user: User, product_id: str) -> Product:
        supplier = await self.resolve_supplier(user)
        return await self._owned_product(supplier, product_id)

    async def create_product(
        self,
        user: User,
        draft: ProductDraft,
        images: Sequence[UploadedAsset] = (),
        files: Sequence[UploadedAsset] = (),
    ) -> Product:
        required = (draft.title, draft.short_description, draft.full_description)
        if not all(value and value.strip() for value in required):
            raise ValidationError(
                "Title, short description, and full description are required"
            )

        supplier = await self.resolve_supplier(user, draft.supplier_id)
        owner_id = _blob_owner(supplier)

        image_urls = [url for url in draft.image_urls if url.strip()]
        file_urls = [url for url in draft.file_urls if url.strip()]
        image_urls.extend(
            await self._upload_all(images, AssetKind.IMAGE, owner_id=owner_id)
        )
        file_urls.extend(
            await self._upload_all(files, AssetKind.DOCUMENT, owner_id=owner_id)
        )

        product = Product(
            supplier_id=supplier.id,
            title=draft.title.strip(),
            short_description=draft.short_description.strip(),
            full_description=draft.full_description.strip(),
            specifications=draft.specifications or None,
            category=draft.category or None,
            sub_category=draft.sub_category or None,
            tags=draft.tags,
            price_range=draft.price_range or None,
            capacity=draft.capacity or None,
            youtube_url=draft.youtube_url or None,
            images=image_urls,
            pdf_files=file_urls,
            status=ProductStatus.PENDING,
        )
        await self._repository.save(product)
        logger.info(
            "Product created",
            extra={
                "product_id": product.id,
                "supplier_id": supplier.id,
                "images": len(product.images),
                "pdf_files": len(product.pdf_files),
            },
        )

        await self._sync(product)
        return product

    async def update_product(
        self,
        user: User,
        product_id: str,
        patch: ProductPatch,
        new_images: Sequence[UploadedAsset] = (),
        new_files: Sequence[UploadedAsset] = (),
    ) -> Product:
        supplier = await self.resolve_supplier(user)
        product = await self._owned_product(supplier, product_id)
        previous = product.model_copy(deep=True)
        owner_id = _blob_owner(supplier)

        images = list(product.images)
        pdf_files = list(product.pdf_files)

        images.extend(
            await self._upload_all(
                new_images, AssetKind.IMAGE, owner_id=owner_id, product_id=product.id
            )
        )
        pdf_files.extend(
            await self._upload_all(
                new_files, AssetKind.DOCUMENT, owner_id=owner_id, product_id=product.id
            )
        )

        images = await self._remove_assets(images, patch.deleted_images)
        pdf_files = await self._remove_assets(pdf_files, patch.deleted_files)

        _apply_patch(product, patch)
        product.images = images
        product.pdf_files = pdf_files
        product.touch()
        await self._repository.save(product)
        logger.info("Product %s updated", product.id)

        await self._sync(product, previous)
        return product

    async def delete_product(self, user: User, product_id: str) -> None:
        supplier = await self.resolve_supplier(user)
        product = await self._owned_product(supplier, product_id)
        await self.purge(product)

    async def purge(self, product: Product) -> None:
        """Delete the record, then clean up blobs and index chunks best-effort."""

        await self._repository.delete(Product, product.id)
        logger.info("Product %s deleted", product.id)

        for url in [*product.images, *product.pdf_files]:
            match await self._storage.delete(url):
                case Err(error):
                    logger.warning(
                        "Orphaned blob left for deleted product %s: %s",
                        product.id,
                        error,
                    )

        match await self._synchronizer.remove_product(product):
            case Err(error):
                logger.warning(
                    "Index chunks left for deleted product %s: %s", product.id, error
                )

    async def _owned_product(self, supplier: Supplier, product_id: str) -> Product:
        product = await self._repository.get(Product, product_id)
        # Foreign products look exactly like missing ones.
        if product is None or product.supplier_id != supplier.id:
            raise NotFound(_PRODUCT_NOT_FOUND)
        return product

    async def _upload_all(
        self,
        assets: Sequence[UploadedAsset],
        kind: AssetKind,
        *,
        owner_id: str,
        product_id: str | None = None,
    ) -> list[str]:
        """Upload sequentially, dropping failures with a warning."""

        urls: list[str] = []
        for asset in assets:
            if asset.size == 0:
                continue
            try:
                url = await self._storage.upload(
                    asset.data,
                    asset.filename,
                    asset.content_type,
                    owner_id=owner_id,
                    product_id=product_id,
                )
            except StorageWriteError as exc:
                logger.warning(
                    "Dropping %s %s after failed upload: %s",
                    kind.value,
                    asset.filename,
                    exc,
                )
                continue
            urls.append(url)
        return urls

    async def _remove_assets(self, urls: list[str], deleted: Sequence[str]) -> list[str]:
        """Drop ``deleted`` entries from ``urls`` and delete their blobs.

        Only URLs the product actually references are deleted from storage.
        """

        targets = {url.strip() for url in deleted if url and url.strip()}
        referenced = [url for url in dict.fromkeys(urls) if url in targets]
        for url in referenced:
            match await self._storage.delete(url):
                case Err(error):
                    logger.warning("Blob cleanup failed for %s: %s", url, error)
        return [url for url in urls if url not in targets]

    async def _sync(self, product: Product, previous: Product | None = None) -> None:
        match await self._synchronizer.sync_product(product, previous):
            case Err(error):
                logger.warning("Index sync failed for product %s: %s", product.id, error)
            case Ok(chunks):
                logger.debug("Product %s synced as %d chunks", product.id, chunks)


def _blob_owner(supplier: Supplier) -> str:
    return supplier.user_id or supplier.id


def _apply_patch(product: Product, patch: ProductPatch) -> None:
    if patch.title:
        product.title = patch.title.strip()
    if patch.description:
        product.short_description = patch.description
        product.full_description = patch.description
    if patch.short_description:
        product.short_description = patch.short_description
    if patch.full_description:
        product.full_description = patch.full_description
    if patch.specifications is not None:
        product.specifications = patch.specifications or None
    if patch.category is not None:
        product.category = patch.category or None
    if patch.sub_category is not None:
        product.sub_category = patch.sub_category or None
    if patch.tags:
        product.tags = normalize_tags(patch.tags)
    if patch.price_range is not None:
        product.price_range = patch.price_range or None
    if patch.capacity is not None:
        product.capacity = patch.capacity or None
    if patch.youtube_url is not None:
        product.youtube_url = patch.youtube_url or None
