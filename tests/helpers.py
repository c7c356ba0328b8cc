"""Fakes and builders shared by the test modules."""

from collections.abc import Sequence
from datetime import timedelta
from typing import Any

from src.errors import StorageDeleteError, StorageSignError, StorageWriteError
from src.models.auth import Session
from src.models.base import utcnow
from src.models.product import Product, ProductStatus
from src.models.result import Err, Ok
from src.models.supplier import Supplier, SupplierStatus, User, UserRole
from src.services.auth.email import EmailSender
from src.services.indexing.index_client import DocumentIndexClient
from src.services.storage.blob_storage import BlobStorageGateway, build_blob_name

BLOB_BASE = "https://portal.blob.core.windows.net/supplier-assets"


class FakeBlobStorage(BlobStorageGateway):
    """In-process gateway that records every call."""

    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}
        self.uploads: list[dict[str, Any]] = []
        self.deleted: list[str] = []
        self.sign_calls: list[list[str]] = []
        self.fail_uploads_for: set[str] = set()
        self.fail_deletes = False
        self.fail_signing = False

    async def upload(
        self,
        data: bytes,
        filename: str,
        content_type: str,
        owner_id: str | None = None,
        product_id: str | None = None,
    ) -> str:
        if filename in self.fail_uploads_for:
            raise StorageWriteError(f"Upload failed: {filename}")
        blob_name = build_blob_name(
            filename,
            owner_id=owner_id,
            product_id=product_id,
            timestamp_ms=1700000000000 + len(self.uploads),
        )
        url = f"{BLOB_BASE}/{blob_name}"
        self.blobs[url] = data
        self.uploads.append(
            {
                "filename": filename,
                "content_type": content_type,
                "owner_id": owner_id,
                "product_id": product_id,
                "url": url,
            }
        )
        return url

    async def delete(self, url_or_key: str):
        self.deleted.append(url_or_key)
        if self.fail_deletes:
            return Err(StorageDeleteError(f"Delete failed for {url_or_key}"))
        self.blobs.pop(url_or_key, None)
        return Ok(None)

    async def sign_urls(self, urls: Sequence[str], expires_in: int) -> list[str]:
        self.sign_calls.append(list(urls))
        if self.fail_signing:
            raise StorageSignError("Signing failed")
        return [f"{url}?se={expires_in}&sig=test" for url in urls]


class FakeIndexClient(DocumentIndexClient):
    """Document index kept in a dict, with switchable failures."""

    backend_name = "fake"

    def __init__(self) -> None:
        self.documents: dict[str, dict[str, Any]] = {}
        self.upserts: list[str] = []
        self.deletes: list[str] = []
        self.fail_upserts = False
        self.fail_deletes = False

    async def upsert_document(
        self, document_id: str, content: str, metadata: dict[str, Any]
    ) -> None:
        self.upserts.append(document_id)
        if self.fail_upserts:
            raise RuntimeError("index unavailable")
        self.documents[document_id] = {"content": content, "metadata": metadata}

    async def delete_document(self, document_id: str) -> None:
        self.deletes.append(document_id)
        if self.fail_deletes:
            raise RuntimeError("index unavailable")
        self.documents.pop(document_id, None)


class RecordingEmailSender(EmailSender):
    def __init__(self) -> None:
        self.sent: list[dict[str, str]] = []
        self.fail = False

    async def send(self, to: str, subject: str, html: str) -> None:
        if self.fail:
            raise RuntimeError("mail provider down")
        self.sent.append({"to": to, "subject": subject, "html": html})


async def make_user(
    repository,
    *,
    email: str = "supplier@example.com",
    role: UserRole = UserRole.SUPPLIER,
    verified: bool = True,
) -> User:
    user = User(
        name=email.split("@")[0],
        email=email,
        password_hash="not-a-real-hash",
        role=role,
        email_verified_at=utcnow() if verified else None,
    )
    await repository.save(user)
    return user


async def make_supplier(
    repository,
    user: User,
    *,
    status: SupplierStatus = SupplierStatus.APPROVED,
    verified: bool = True,
    company_name: str = "Acme Industrial",
) -> Supplier:
    supplier = Supplier(
        user_id=user.id,
        name=user.name,
        email=user.email,
        company_name=company_name,
        status=status,
        verified=verified,
    )
    await repository.save(supplier)
    return supplier


async def make_product(repository, supplier: Supplier, **overrides) -> Product:
    fields = {
        "supplier_id": supplier.id,
        "title": "Hydraulic Press",
        "short_description": "20 ton shop press",
        "full_description": "Heavy duty hydraulic press for workshops.",
        "tags": ["press", "hydraulic"],
        "status": ProductStatus.APPROVED,
    }
    fields.update(overrides)
    product = Product(**fields)
    await repository.save(product)
    return product


async def login_headers(repository, user: User) -> dict[str, str]:
    session = Session(
        id=f"session-{user.id}",
        user_id=user.id,
        expires_at=utcnow() + timedelta(hours=1),
    )
    await repository.save(session)
    return {"Authorization": f"Bearer {session.id}"}
