"""Blob storage gateway for product images and documents."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from urllib.parse import unquote, urlsplit

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.storage.blob import (
    BlobSasPermissions,
    ContainerClient,
    ContentSettings,
    generate_blob_sas,
)

from src.config import settings
from src.errors import (
    StorageDeleteError,
    StorageError,
    StorageSignError,
    StorageWriteError,
)
from src.models.result import Err, Ok, Result

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def sanitize_filename(filename: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", filename)


def build_blob_name(
    filename: str,
    *,
    owner_id: str | None = None,
    product_id: str | None = None,
    prefix: str = "suppliers",
    timestamp_ms: int | None = None,
) -> str:
    """Storage key: ``{prefix}/{owner}_{product}_{epoch_ms}_{filename}``."""

    stamp = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    owner = owner_id or "unknown"
    product = product_id or "new"
    return f"{prefix}/{owner}_{product}_{stamp}_{sanitize_filename(filename)}"


def strip_query(url: str) -> str:
    return url.split("?", 1)[0]


def display_filename(url: str) -> str:
    """Trailing path segment of a stored URL, used as the visible file name."""

    return unquote(urlsplit(url).path.rstrip("/").rsplit("/", 1)[-1])


class BlobStorageGateway(ABC):
    """Abstract blob store holding product assets under stable base URLs."""

    @abstractmethod
    async def upload(
        self,
        data: bytes,
        filename: str,
        content_type: str,
        owner_id: str | None = None,
        product_id: str | None = None,
    ) -> str:
        """Store ``data`` and return its base URL. Raises StorageWriteError."""

    @abstractmethod
    async def delete(self, url_or_key: str) -> Result[None, StorageError]:
        """Delete an object. Never raises; a missing object counts as deleted."""

    @abstractmethod
    async def sign_urls(self, urls: Sequence[str], expires_in: int) -> list[str]:
        """Return time-limited read URLs in input order. Raises StorageSignError."""

    async def signed_url(self, base_url: str, expires_in: int) -> str:
        """Sign one URL, degrading to the base URL when signing fails."""

        if not base_url:
            return base_url
        try:
            signed = await self.sign_urls([base_url], expires_in)
            return signed[0]
        except Exception as exc:
            logger.warning("Falling back to unsigned URL for %s: %s", base_url, exc)
            return base_url


class AzureBlobStorageGateway(BlobStorageGateway):
    """Gateway backed by an Azure Blob Storage container.

    Signing uses, in order of preference, the account key (per-blob read SAS
    with the requested expiry) or the SAS token of the container URL the
    gateway was configured with.
    """

    def __init__(
        self,
        container_client: ContainerClient,
        *,
        account_key: str | None = None,
        sas_token: str | None = None,
        key_prefix: str = "suppliers",
    ) -> None:
        self._container = container_client
        self._account_key = account_key
        self._sas_token = sas_token
        self._key_prefix = key_prefix

    @property
    def base_url(self) -> str:
        return strip_query(self._container.url).rstrip("/")

    def blob_name_from_url(self, url_or_key: str) -> str:
        """Resolve a stored URL, with or without SAS query, to its blob name."""

        url = strip_query(url_or_key)
        base_prefix = f"{self.base_url}/"
        if url.startswith(base_prefix):
            return unquote(url[len(base_prefix) :])

        parts = urlsplit(url)
        if parts.scheme and parts.netloc:
            # Path is /{container}/{blob name...}
            segments = parts.path.lstrip("/").split("/", 1)
            return unquote(segments[1] if len(segments) > 1 else segments[0])
        return url.lstrip("/")

    async def upload(
        self,
        data: bytes,
        filename: str,
        content_type: str,
        owner_id: str | None = None,
        product_id: str | None = None,
    ) -> str:
        blob_name = build_blob_name(
            filename,
            owner_id=owner_id,
            product_id=product_id,
            prefix=self._key_prefix,
        )
        blob_client = self._container.get_blob_client(blob_name)
        try:
            await asyncio.to_thread(
                blob_client.upload_blob,
                data,
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type),
            )
        except Exception as exc:
            logger.error(
                "Blob upload failed",
                extra={"blob_name": blob_name, "error": str(exc)},
            )
            raise StorageWriteError(f"Upload failed: {exc}") from exc

        url = strip_query(blob_client.url)
        logger.info("Uploaded %s (%d bytes) to %s", filename, len(data), url)
        return url

    async def delete(self, url_or_key: str) -> Result[None, StorageError]:
        blob_name = self.blob_name_from_url(url_or_key)
        try:
            await asyncio.to_thread(self._container.delete_blob, blob_name)
        except ResourceNotFoundError:
            logger.debug("Blob %s already deleted", blob_name)
            return Ok(None)
        except Exception as exc:
            logger.warning("Blob delete failed for %s: %s", blob_name, exc)
            return Err(StorageDeleteError(f"Delete failed for {blob_name}: {exc}"))

        logger.info("Deleted blob %s", blob_name)
        return Ok(None)

    async def sign_urls(self, urls: Sequence[str], expires_in: int) -> list[str]:
        if not self._account_key and not self._sas_token:
            raise StorageSignError("No signing credentials configured")

        expiry = datetime.now(UTC) + timedelta(seconds=expires_in)
        try:
            return [self._sign(url, expiry) for url in urls]
        except (AzureError, ValueError) as exc:
            raise StorageSignError(f"Signing failed: {exc}") from exc

    def _sign(self, url: str, expiry: datetime) -> str:
        if not url or "?" in url:
            return url
        if not url.startswith(f"{self.base_url}/"):
            logger.warning("Not signing URL outside the container: %s", url)
            return url

        if self._account_key:
            token = generate_blob_sas(
                account_name=self._container.account_name,
                container_name=self._container.container_name,
                blob_name=self.blob_name_from_url(url),
                account_key=self._account_key,
                permission=BlobSasPermissions(read=True),
                expiry=expiry,
            )
        else:
            token = self._sas_token
        return f"{url}?{token}"


class DisabledBlobStorage(BlobStorageGateway):
    """Stand-in used when no storage account is configured."""

    async def upload(
        self,
        data: bytes,
        filename: str,
        content_type: str,
        owner_id: str | None = None,
        product_id: str | None = None,
    ) -> str:
        raise StorageWriteError("Blob storage is not configured")

    async def delete(self, url_or_key: str) -> Result[None, StorageError]:
        return Err(StorageDeleteError("Blob storage is not configured"))

    async def sign_urls(self, urls: Sequence[str], expires_in: int) -> list[str]:
        raise StorageSignError("Blob storage is not configured")


def create_blob_storage() -> BlobStorageGateway:
    """Factory function to create the Azure gateway from settings."""

    if not settings.blob_storage_configured:
        logger.warning("Blob storage is not configured; uploads will fail")
        return DisabledBlobStorage()

    sas_token: str | None = None
    account_key = settings.AZURE_STORAGE_ACCOUNT_KEY

    if settings.AZURE_SAS_URL:
        container = ContainerClient.from_container_url(settings.AZURE_SAS_URL)
        if "?" in settings.AZURE_SAS_URL:
            sas_token = settings.AZURE_SAS_URL.split("?", 1)[1]
    elif settings.AZURE_STORAGE_CONNECTION_STRING:
        container = ContainerClient.from_connection_string(
            settings.AZURE_STORAGE_CONNECTION_STRING,
            container_name=settings.AZURE_STORAGE_CONTAINER,
        )
        account_key = account_key or getattr(container.credential, "account_key", None)
    else:
        container = ContainerClient(
            account_url=(
                f"https://{settings.AZURE_STORAGE_ACCOUNT_NAME}.blob.core.windows.net"
            ),
            container_name=settings.AZURE_STORAGE_CONTAINER,
            credential=account_key,
        )

    return AzureBlobStorageGateway(
        container,
        account_key=account_key,
        sas_token=sas_token,
        key_prefix=settings.BLOB_KEY_PREFIX,
    )
