"""Tests for the product asset coordinator."""

from datetime import timedelta

import pytest

from src.errors import NotFound, ValidationError
from src.models.base import utcnow
from src.models.product import (
    Product,
    ProductDraft,
    ProductPatch,
    ProductStatus,
    UploadedAsset,
)
from src.models.supplier import UserRole
from src.services.products.coordinator import ProductAssetCoordinator
from tests.helpers import BLOB_BASE, make_product, make_supplier, make_user


def _draft(**overrides) -> ProductDraft:
    fields = {
        "title": "Industrial Mixer",
        "short_description": "200L planetary mixer",
        "full_description": "Planetary mixer for bakeries and food plants.",
        "tags": ["mixer", "bakery", "mixer"],
    }
    fields.update(overrides)
    return ProductDraft(**fields)


def _image(name: str = "front.png", data: bytes = b"png") -> UploadedAsset:
    return UploadedAsset(filename=name, content_type="image/png", data=data)


def _pdf(name: str = "spec.pdf") -> UploadedAsset:
    return UploadedAsset(filename=name, content_type="application/pdf", data=b"%PDF")


@pytest.fixture()
def coordinator(repository, blob_storage, synchronizer):
    return ProductAssetCoordinator(repository, blob_storage, synchronizer)


@pytest.mark.asyncio
async def test_create_uploads_assets_persists_and_indexes(
    coordinator, repository, blob_storage, index_client, supplier_account
):
    user, supplier, _ = supplier_account
    preuploaded = f"{BLOB_BASE}/suppliers/pre.png"

    product = await coordinator.create_product(
        user,
        _draft(image_urls=[preuploaded]),
        images=[_image()],
        files=[_pdf()],
    )

    stored = await repository.get(Product, product.id)
    assert stored is not None
    assert stored.supplier_id == supplier.id
    assert stored.status == ProductStatus.PENDING
    assert stored.tags == ["mixer", "bakery"]
    assert stored.images[0] == preuploaded
    assert stored.images[1] == blob_storage.uploads[0]["url"]
    assert stored.pdf_files == [blob_storage.uploads[1]["url"]]
    assert all(u["owner_id"] == user.id for u in blob_storage.uploads)
    assert all(u["product_id"] is None for u in blob_storage.uploads)
    assert f"{product.id}-chunk-0" in index_client.documents


@pytest.mark.asyncio
async def test_create_requires_text_fields_before_uploading(
    coordinator, blob_storage, supplier_account
):
    user, _, _ = supplier_account

    with pytest.raises(ValidationError):
        await coordinator.create_product(
            user, _draft(full_description="   "), images=[_image()]
        )
    assert blob_storage.uploads == []


@pytest.mark.asyncio
async def test_create_without_supplier_profile_is_not_found(coordinator, repository):
    user = await make_user(repository, email="new@example.com")

    with pytest.raises(NotFound):
        await coordinator.create_product(user, _draft())


@pytest.mark.asyncio
async def test_failed_and_empty_uploads_are_left_out(
    coordinator, blob_storage, supplier_account
):
    user, _, _ = supplier_account
    blob_storage.fail_uploads_for = {"broken.png"}

    product = await coordinator.create_product(
        user,
        _draft(),
        images=[_image("ok.png"), _image("broken.png"), _image("empty.png", b"")],
    )

    assert len(product.images) == 1
    assert product.images[0].endswith("_ok.png")


@pytest.mark.asyncio
async def test_update_keeps_only_successful_uploads(
    coordinator, repository, blob_storage, supplier_account
):
    user, supplier, _ = supplier_account
    existing = f"{BLOB_BASE}/suppliers/existing.png"
    product = await make_product(repository, supplier, images=[existing])
    blob_storage.fail_uploads_for = {"broken.png"}

    updated = await coordinator.update_product(
        user,
        product.id,
        ProductPatch(title="Still saved"),
        new_images=[_image("good.png"), _image("broken.png")],
    )

    good_url = blob_storage.uploads[0]["url"]
    assert [u["filename"] for u in blob_storage.uploads] == ["good.png"]
    assert updated.images == [existing, good_url]
    stored = await repository.get(Product, product.id)
    assert stored.images == [existing, good_url]
    assert stored.title == "Still saved"


@pytest.mark.asyncio
async def test_index_failure_does_not_fail_create(
    coordinator, repository, index_client, supplier_account
):
    user, _, _ = supplier_account
    index_client.fail_upserts = True

    product = await coordinator.create_product(user, _draft())

    assert await repository.get(Product, product.id) is not None
    assert index_client.documents == {}


@pytest.mark.asyncio
async def test_admin_can_create_for_any_supplier(
    coordinator, repository, blob_storage
):
    owner = await make_user(repository, email="owner@example.com")
    supplier = await make_supplier(repository, owner)
    admin = await make_user(repository, email="root@example.com", role=UserRole.ADMIN)

    product = await coordinator.create_product(
        admin, _draft(supplier_id=supplier.id), images=[_image()]
    )

    assert product.supplier_id == supplier.id
    assert blob_storage.uploads[0]["owner_id"] == owner.id
    assert f"/suppliers/{owner.id}_" in product.images[0]


@pytest.mark.asyncio
async def test_supplier_cannot_target_another_supplier(coordinator, repository):
    owner = await make_user(repository, email="owner@example.com")
    other = await make_supplier(repository, owner)
    user = await make_user(repository, email="me@example.com")
    mine = await make_supplier(repository, user)

    product = await coordinator.create_product(user, _draft(supplier_id=other.id))

    assert product.supplier_id == mine.id


@pytest.mark.asyncio
async def test_update_appends_uploads_and_removes_deleted_assets(
    coordinator, repository, blob_storage, supplier_account
):
    user, supplier, _ = supplier_account
    keep = f"{BLOB_BASE}/suppliers/keep.png"
    drop = f"{BLOB_BASE}/suppliers/drop.png"
    product = await make_product(repository, supplier, images=[keep, drop])

    updated = await coordinator.update_product(
        user,
        product.id,
        ProductPatch(deleted_images=[drop]),
        new_images=[_image("new.png")],
    )

    new_url = blob_storage.uploads[0]["url"]
    assert updated.images == [keep, new_url]
    assert blob_storage.deleted == [drop]
    assert blob_storage.uploads[0]["product_id"] == product.id
    stored = await repository.get(Product, product.id)
    assert stored.images == [keep, new_url]


@pytest.mark.asyncio
async def test_update_never_deletes_blobs_the_product_does_not_reference(
    coordinator, repository, blob_storage, supplier_account
):
    user, supplier, _ = supplier_account
    product = await make_product(repository, supplier, images=[f"{BLOB_BASE}/a.png"])

    await coordinator.update_product(
        user,
        product.id,
        ProductPatch(deleted_images=[f"{BLOB_BASE}/someone-elses.png"]),
    )

    assert blob_storage.deleted == []


@pytest.mark.asyncio
async def test_update_survives_blob_delete_failure(
    coordinator, repository, blob_storage, supplier_account
):
    user, supplier, _ = supplier_account
    url = f"{BLOB_BASE}/suppliers/doc.pdf"
    product = await make_product(repository, supplier, pdf_files=[url])
    blob_storage.fail_deletes = True

    updated = await coordinator.update_product(
        user, product.id, ProductPatch(deleted_files=[url])
    )

    assert updated.pdf_files == []


@pytest.mark.asyncio
async def test_legacy_description_sets_both_descriptions(
    coordinator, repository, supplier_account
):
    user, supplier, _ = supplier_account
    product = await make_product(repository, supplier)

    updated = await coordinator.update_product(
        user,
        product.id,
        ProductPatch(description="New copy", tags=[" a ", "b", "a"], youtube_url=""),
    )

    assert updated.short_description == "New copy"
    assert updated.full_description == "New copy"
    assert updated.tags == ["a", "b"]
    assert updated.youtube_url is None
    assert updated.title == product.title


@pytest.mark.asyncio
async def test_update_reindexes_and_drops_stale_chunks(
    coordinator, repository, synchronizer, index_client, supplier_account
):
    user, supplier, _ = supplier_account
    product = await make_product(repository, supplier, full_description="w" * 5000)
    await synchronizer.sync_product(product)
    assert f"{product.id}-chunk-2" in index_client.documents

    await coordinator.update_product(
        user, product.id, ProductPatch(full_description="Compact now")
    )

    assert set(index_client.documents) == {f"{product.id}-chunk-0"}


@pytest.mark.asyncio
async def test_foreign_product_looks_missing(coordinator, repository, supplier_account):
    user, _, _ = supplier_account
    other_user = await make_user(repository, email="other@example.com")
    other_supplier = await make_supplier(repository, other_user)
    foreign = await make_product(repository, other_supplier)

    with pytest.raises(NotFound, match="Product not found"):
        await coordinator.update_product(user, foreign.id, ProductPatch(title="Mine"))
    with pytest.raises(NotFound, match="Product not found"):
        await coordinator.delete_product(user, foreign.id)
    with pytest.raises(NotFound, match="Product not found"):
        await coordinator.get_product(user, "missing")


@pytest.mark.asyncio
async def test_delete_removes_record_blobs_and_chunks(
    coordinator,
    repository,
    blob_storage,
    synchronizer,
    index_client,
    supplier_account,
):
    user, supplier, _ = supplier_account
    image = f"{BLOB_BASE}/suppliers/a.png"
    doc = f"{BLOB_BASE}/suppliers/a.pdf"
    product = await make_product(repository, supplier, images=[image], pdf_files=[doc])
    await synchronizer.sync_product(product)

    await coordinator.delete_product(user, product.id)

    assert await repository.get(Product, product.id) is None
    assert blob_storage.deleted == [image, doc]
    assert index_client.documents == {}


@pytest.mark.asyncio
async def test_delete_succeeds_when_cleanup_fails(
    coordinator, repository, blob_storage, index_client, supplier_account
):
    user, supplier, _ = supplier_account
    product = await make_product(repository, supplier, images=[f"{BLOB_BASE}/a.png"])
    blob_storage.fail_deletes = True
    index_client.fail_deletes = True

    await coordinator.delete_product(user, product.id)

    assert await repository.get(Product, product.id) is None


@pytest.mark.asyncio
async def test_list_products_is_newest_first_and_scoped(
    coordinator, repository, supplier_account
):
    user, supplier, _ = supplier_account
    now = utcnow()
    first = await make_product(
        repository, supplier, title="First", created_at=now - timedelta(minutes=5)
    )
    second = await make_product(repository, supplier, title="Second", created_at=now)
    other_user = await make_user(repository, email="other@example.com")
    await make_product(repository, await make_supplier(repository, other_user))

    products = await coordinator.list_products(user)

    assert [p.id for p in products] == [second.id, first.id]
