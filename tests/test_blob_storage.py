"""Tests for the Azure blob storage gateway."""

import re
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError

from src.errors import StorageDeleteError, StorageSignError, StorageWriteError
from src.models.result import Err, Ok
from src.services.storage.blob_storage import (
    AzureBlobStorageGateway,
    DisabledBlobStorage,
    build_blob_name,
    display_filename,
    sanitize_filename,
)

CONTAINER_URL = "https://portal.blob.core.windows.net/supplier-assets"
SAS = "sv=2024-01-01&sp=r&sig=abc"


def _container(url: str = CONTAINER_URL) -> MagicMock:
    container = MagicMock()
    container.url = url
    container.account_name = "portal"
    container.container_name = "supplier-assets"

    def _blob_client(name):
        blob = MagicMock()
        blob.url = f"{CONTAINER_URL}/{name}?{SAS}"
        return blob

    container.get_blob_client.side_effect = _blob_client
    return container


def test_sanitize_filename_replaces_unsafe_characters():
    assert sanitize_filename("spec sheet (v2).pdf") == "spec_sheet__v2_.pdf"
    assert sanitize_filename("photo-1_final.JPG") == "photo-1_final.JPG"


def test_build_blob_name_layout():
    name = build_blob_name(
        "my photo.png", owner_id="user1", product_id="prod9", timestamp_ms=123
    )
    assert name == "suppliers/user1_prod9_123_my_photo.png"


def test_build_blob_name_defaults_for_unknown_owner_and_new_product():
    name = build_blob_name("a.pdf", timestamp_ms=5)
    assert name == "suppliers/unknown_new_5_a.pdf"


def test_display_filename_is_trailing_segment():
    url = f"{CONTAINER_URL}/suppliers/u_new_1_brochure.pdf?{SAS}"
    assert display_filename(url) == "u_new_1_brochure.pdf"


@pytest.mark.asyncio
async def test_upload_returns_base_url_without_query():
    container = _container()
    gateway = AzureBlobStorageGateway(container, sas_token=SAS)

    url = await gateway.upload(
        b"png-bytes", "front view.png", "image/png", owner_id="user1"
    )

    assert "?" not in url
    assert re.fullmatch(
        rf"{re.escape(CONTAINER_URL)}/suppliers/user1_new_\d+_front_view\.png", url
    )
    blob = container.get_blob_client.call_args
    assert blob.args[0].startswith("suppliers/user1_new_")


@pytest.mark.asyncio
async def test_upload_failure_raises_storage_write_error():
    container = _container()
    failing = MagicMock()
    failing.upload_blob.side_effect = HttpResponseError(message="boom")
    container.get_blob_client.side_effect = None
    container.get_blob_client.return_value = failing
    gateway = AzureBlobStorageGateway(container, sas_token=SAS)

    with pytest.raises(StorageWriteError):
        await gateway.upload(b"x", "a.png", "image/png", owner_id="u")


@pytest.mark.asyncio
async def test_delete_resolves_blob_name_from_signed_url():
    container = _container()
    gateway = AzureBlobStorageGateway(container, sas_token=SAS)

    result = await gateway.delete(f"{CONTAINER_URL}/suppliers/u_p_1_a%20b.png?{SAS}")

    assert result == Ok(None)
    container.delete_blob.assert_called_once_with("suppliers/u_p_1_a b.png")


@pytest.mark.asyncio
async def test_delete_of_missing_blob_counts_as_success():
    container = _container()
    container.delete_blob.side_effect = ResourceNotFoundError(message="gone")
    gateway = AzureBlobStorageGateway(container, sas_token=SAS)

    assert await gateway.delete(f"{CONTAINER_URL}/suppliers/x.png") == Ok(None)


@pytest.mark.asyncio
async def test_delete_failure_returns_err():
    container = _container()
    container.delete_blob.side_effect = HttpResponseError(message="denied")
    gateway = AzureBlobStorageGateway(container, sas_token=SAS)

    result = await gateway.delete(f"{CONTAINER_URL}/suppliers/x.png")

    assert isinstance(result, Err)
    assert isinstance(result.error, StorageDeleteError)


@pytest.mark.asyncio
async def test_sign_with_container_sas_appends_token():
    gateway = AzureBlobStorageGateway(_container(), sas_token=SAS)
    urls = [f"{CONTAINER_URL}/suppliers/a.png", f"{CONTAINER_URL}/suppliers/b.png?x=1"]

    signed = await gateway.sign_urls(urls, 3600)

    assert signed == [f"{urls[0]}?{SAS}", urls[1]]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "credentials", [{"sas_token": SAS}, {"account_key": "c2VjcmV0"}]
)
async def test_sign_leaves_urls_outside_the_container_untouched(credentials):
    container = _container(f"{CONTAINER_URL}?{SAS}")
    gateway = AzureBlobStorageGateway(container, **credentials)
    urls = [
        "https://attacker.example/x.png",
        "https://portal.blob.core.windows.net/supplier-assets-other/x.png",
        f"{CONTAINER_URL}/suppliers/a.png",
    ]

    signed = await gateway.sign_urls(urls, 60)

    assert signed[:2] == urls[:2]
    assert signed[2].startswith(f"{urls[2]}?")
    assert all("sig=" not in url for url in signed[:2])


@pytest.mark.asyncio
async def test_sign_with_account_key_generates_read_sas():
    gateway = AzureBlobStorageGateway(_container(), account_key="c2VjcmV0")
    url = f"{CONTAINER_URL}/suppliers/a.png"

    [signed] = await gateway.sign_urls([url], 900)

    base, query = signed.split("?", 1)
    assert base == url
    assert "sp=r" in query
    assert "sig=" in query


@pytest.mark.asyncio
async def test_sign_without_credentials_raises():
    gateway = AzureBlobStorageGateway(_container())

    with pytest.raises(StorageSignError):
        await gateway.sign_urls([f"{CONTAINER_URL}/a.png"], 60)


@pytest.mark.asyncio
async def test_signed_url_falls_back_to_base_url():
    gateway = AzureBlobStorageGateway(_container())
    url = f"{CONTAINER_URL}/a.png"

    assert await gateway.signed_url(url, 60) == url


@pytest.mark.asyncio
async def test_disabled_storage_rejects_writes_and_signing():
    storage = DisabledBlobStorage()

    with pytest.raises(StorageWriteError):
        await storage.upload(b"x", "a.png", "image/png")
    with pytest.raises(StorageSignError):
        await storage.sign_urls(["https://x/a.png"], 60)
    assert isinstance(await storage.delete("https://x/a.png"), Err)
