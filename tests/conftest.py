"""Pytest configuration and fixtures for the supplier portal."""

import pytest
import pytest_asyncio
from fakeredis import aioredis as fakeredis
from httpx import ASGITransport, AsyncClient

from src.api.dependencies import (
    get_blob_storage,
    get_email_sender,
    get_index_synchronizer,
    get_repository,
)
from src.config import settings
from src.models.supplier import UserRole
from src.services.indexing.synchronizer import IndexSynchronizer
from src.services.repository.redis_store import RedisRepository
from tests.helpers import (
    FakeBlobStorage,
    FakeIndexClient,
    RecordingEmailSender,
    login_headers,
    make_supplier,
    make_user,
)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "asyncio: marks tests as async tests")


@pytest.fixture(autouse=True)
def fast_password_hashing():
    """Keep bcrypt cheap so auth tests stay quick."""
    original = settings.BCRYPT_ROUNDS
    settings.BCRYPT_ROUNDS = 4
    yield
    settings.BCRYPT_ROUNDS = original


@pytest_asyncio.fixture()
async def redis_client():
    """Provide a fake Redis client for each test."""
    client = fakeredis.FakeRedis(decode_responses=True)
    try:
        yield client
    finally:
        await client.flushdb()
        await client.aclose()


@pytest.fixture()
def repository(redis_client):
    return RedisRepository(redis_client, key_prefix="test")


@pytest.fixture()
def blob_storage():
    return FakeBlobStorage()


@pytest.fixture()
def index_client():
    return FakeIndexClient()


@pytest.fixture()
def synchronizer(index_client):
    return IndexSynchronizer(index_client, platform_name="Test Portal")


@pytest.fixture()
def email_sender():
    return RecordingEmailSender()


@pytest_asyncio.fixture()
async def client(repository, blob_storage, synchronizer, email_sender):
    """Return an HTTPX async client pointing at the FastAPI app."""
    from src.main import app

    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_blob_storage] = lambda: blob_storage
    app.dependency_overrides[get_index_synchronizer] = lambda: synchronizer
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://testserver",
        ) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def supplier_account(repository):
    """A verified, approved supplier with its auth headers."""
    user = await make_user(repository)
    supplier = await make_supplier(repository, user)
    headers = await login_headers(repository, user)
    return user, supplier, headers


@pytest_asyncio.fixture()
async def admin_headers(repository):
    admin = await make_user(repository, email="admin@example.com", role=UserRole.ADMIN)
    return await login_headers(repository, admin)
