"""FastAPI dependencies resolving services from application state."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.errors import Forbidden
from src.models.supplier import User
from src.services.analytics.service import AnalyticsService
from src.services.auth.email import EmailSender
from src.services.auth.service import AuthService
from src.services.catalog.carousel import CarouselService
from src.services.catalog.categories import CategoryService
from src.services.indexing.synchronizer import IndexSynchronizer
from src.services.products.catalog import ProductCatalog
from src.services.products.coordinator import ProductAssetCoordinator
from src.services.repository.base import Repository
from src.services.storage.blob_storage import BlobStorageGateway
from src.services.storage.signed_urls import SignedUrlBatcher
from src.services.suppliers.service import SupplierService

_bearer = HTTPBearer(auto_error=False)


def get_repository(request: Request) -> Repository:
    return request.app.state.repository


def get_blob_storage(request: Request) -> BlobStorageGateway:
    return request.app.state.blob_storage


def get_index_synchronizer(request: Request) -> IndexSynchronizer:
    return request.app.state.index_synchronizer


def get_email_sender(request: Request) -> EmailSender:
    return request.app.state.email_sender


RepositoryDependency = Annotated[Repository, Depends(get_repository)]
BlobStorageDependency = Annotated[BlobStorageGateway, Depends(get_blob_storage)]


def get_signed_url_batcher(storage: BlobStorageDependency) -> SignedUrlBatcher:
    return SignedUrlBatcher(storage)


def get_product_coordinator(
    repository: RepositoryDependency,
    storage: BlobStorageDependency,
    synchronizer: Annotated[IndexSynchronizer, Depends(get_index_synchronizer)],
) -> ProductAssetCoordinator:
    return ProductAssetCoordinator(repository, storage, synchronizer)


def get_auth_service(
    repository: RepositoryDependency,
    email_sender: Annotated[EmailSender, Depends(get_email_sender)],
) -> AuthService:
    return AuthService(repository, email_sender)


def get_supplier_service(
    repository: RepositoryDependency,
    coordinator: Annotated[ProductAssetCoordinator, Depends(get_product_coordinator)],
) -> SupplierService:
    return SupplierService(repository, coordinator)


def get_category_service(repository: RepositoryDependency) -> CategoryService:
    return CategoryService(repository)


def get_carousel_service(
    repository: RepositoryDependency,
    batcher: Annotated[SignedUrlBatcher, Depends(get_signed_url_batcher)],
) -> CarouselService:
    return CarouselService(repository, batcher)


def get_product_catalog(repository: RepositoryDependency) -> ProductCatalog:
    return ProductCatalog(repository)


def get_analytics_service(repository: RepositoryDependency) -> AnalyticsService:
    return AnalyticsService(repository)


AuthServiceDependency = Annotated[AuthService, Depends(get_auth_service)]


def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> str | None:
    return credentials.credentials if credentials else None


async def get_current_user(
    token: Annotated[str | None, Depends(get_bearer_token)],
    auth: AuthServiceDependency,
) -> User:
    return await auth.authenticate(token)


CurrentUser = Annotated[User, Depends(get_current_user)]


async def require_admin(user: CurrentUser) -> User:
    if not user.is_admin:
        raise Forbidden()
    return user


AdminUser = Annotated[User, Depends(require_admin)]

BatcherDependency = Annotated[SignedUrlBatcher, Depends(get_signed_url_batcher)]
CoordinatorDependency = Annotated[
    ProductAssetCoordinator, Depends(get_product_coordinator)
]
SupplierServiceDependency = Annotated[SupplierService, Depends(get_supplier_service)]
CategoryServiceDependency = Annotated[CategoryService, Depends(get_category_service)]
CarouselServiceDependency = Annotated[CarouselService, Depends(get_carousel_service)]
CatalogDependency = Annotated[ProductCatalog, Depends(get_product_catalog)]
AnalyticsDependency = Annotated[AnalyticsService, Depends(get_analytics_service)]
