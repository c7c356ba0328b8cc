"""Tests for onboarding, supplier profiles and admin supplier management."""

import pytest

from src.models.product import Product
from src.models.supplier import Supplier, SupplierStatus, User
from tests.helpers import (
    BLOB_BASE,
    login_headers,
    make_product,
    make_supplier,
    make_user,
)


@pytest.mark.asyncio
async def test_onboarding_requires_verified_email(client, repository):
    user = await make_user(repository, email="new@example.com", verified=False)
    headers = await login_headers(repository, user)

    response = await client.post(
        "/onboarding", headers=headers, json={"companyName": "Acme"}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Email not verified"


@pytest.mark.asyncio
async def test_onboarding_creates_profile_once(client, repository):
    user = await make_user(repository, email="new@example.com")
    headers = await login_headers(repository, user)

    first = await client.post(
        "/onboarding",
        headers=headers,
        json={"companyName": "Acme", "phone": "+1 555 0100"},
    )
    second = await client.post(
        "/onboarding", headers=headers, json={"companyName": "Acme Holdings"}
    )

    assert first.status_code == 200
    assert first.json()["message"] == "Onboarding completed successfully"
    assert second.json()["supplier"]["id"] == first.json()["supplier"]["id"]
    suppliers = await repository.list(Supplier)
    assert len(suppliers) == 1
    assert suppliers[0].company_name == "Acme Holdings"
    assert suppliers[0].status == SupplierStatus.PENDING


@pytest.mark.asyncio
async def test_profile_get_and_patch(client, supplier_account):
    _, supplier, headers = supplier_account

    fetched = await client.get("/supplier/profile", headers=headers)
    patched = await client.patch(
        "/supplier/profile", headers=headers, json={"address": "1 Dock Road"}
    )

    assert fetched.json()["supplier"]["companyName"] == supplier.company_name
    assert patched.status_code == 200
    body = patched.json()["supplier"]
    assert body["address"] == "1 Dock Road"
    assert body["companyName"] == supplier.company_name


@pytest.mark.asyncio
async def test_profile_without_onboarding_is_404(client, repository):
    user = await make_user(repository, email="new@example.com")
    headers = await login_headers(repository, user)

    response = await client.get("/supplier/profile", headers=headers)

    assert response.status_code == 404
    assert response.json()["error"] == (
        "Supplier profile not found. Please complete onboarding first."
    )


@pytest.mark.asyncio
async def test_admin_creates_supplier_that_can_log_in(client, admin_headers):
    response = await client.post(
        "/suppliers",
        headers=admin_headers,
        json={
            "name": "Sam Trader",
            "companyName": "Trader Co",
            "email": "Sam@Trader.example.com",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["supplier"]["status"] == "APPROVED"
    assert body["supplier"]["verified"] is True
    assert body["supplier"]["email"] == "sam@trader.example.com"

    login = await client.post(
        "/auth/login",
        json={
            "email": "sam@trader.example.com",
            "password": body["temporaryPassword"],
        },
    )
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_admin_create_rejects_existing_email(client, repository, admin_headers):
    await make_user(repository, email="taken@example.com")

    response = await client.post(
        "/suppliers",
        headers=admin_headers,
        json={"name": "X", "companyName": "X Co", "email": "taken@example.com"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "User with this email already exists."


@pytest.mark.asyncio
async def test_supplier_admin_routes_are_forbidden_for_suppliers(
    client, supplier_account
):
    _, _, headers = supplier_account

    response = await client.get("/suppliers", headers=headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_list_suppliers_includes_product_counts(
    client, repository, supplier_account, admin_headers
):
    _, supplier, _ = supplier_account
    await make_product(repository, supplier)
    await make_product(repository, supplier)

    response = await client.get("/suppliers", headers=admin_headers)

    assert response.status_code == 200
    [listed] = response.json()["suppliers"]
    assert listed["id"] == supplier.id
    assert listed["productCount"] == 2


@pytest.mark.asyncio
async def test_admin_updates_profile_and_status(
    client, repository, supplier_account, admin_headers
):
    _, supplier, _ = supplier_account

    updated = await client.patch(
        f"/suppliers/{supplier.id}",
        headers=admin_headers,
        json={"companyName": "Renamed Ltd"},
    )
    moderated = await client.patch(
        f"/suppliers/{supplier.id}/status",
        headers=admin_headers,
        json={"status": "REJECTED", "verified": False},
    )

    assert updated.json()["supplier"]["companyName"] == "Renamed Ltd"
    assert moderated.status_code == 200
    stored = await repository.get(Supplier, supplier.id)
    assert stored.status == SupplierStatus.REJECTED
    assert stored.verified is False


@pytest.mark.asyncio
async def test_unknown_supplier_is_404(client, admin_headers):
    response = await client.patch(
        "/suppliers/missing/status",
        headers=admin_headers,
        json={"status": "APPROVED"},
    )

    assert response.status_code == 404
    assert response.json()["error"] == "Supplier not found"


@pytest.mark.asyncio
async def test_delete_supplier_purges_products_and_keeps_user(
    client, repository, blob_storage, index_client, synchronizer, admin_headers
):
    user = await make_user(repository, email="gone@example.com")
    supplier = await make_supplier(repository, user)
    image = f"{BLOB_BASE}/suppliers/gone.png"
    product = await make_product(repository, supplier, images=[image])
    await synchronizer.sync_product(product)
    bystander = await make_supplier(
        repository, await make_user(repository, email="stay@example.com")
    )
    kept = await make_product(repository, bystander)

    response = await client.delete(f"/suppliers/{supplier.id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Supplier deleted along with 1 product(s)"
    assert await repository.get(Supplier, supplier.id) is None
    assert await repository.get(User, user.id) is not None
    assert [p.id for p in await repository.list(Product)] == [kept.id]
    assert blob_storage.deleted == [image]
    assert index_client.documents == {}
