"""
Portfolio Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment variables are set before any `app` import so the
       module-level `app.main:app` builds against a throwaway configuration.

Fixture Hierarchy (all function-scoped):
    ├── settings:          Settings for a temporary SQLite database
    ├── fake_media_store:  In-memory MediaStore recording every call
    ├── app:               create_app(settings, fake store), tables + seed rows
    ├── test_client:       HTTPX AsyncClient bound to `app`
    ├── auth_headers:      Bearer header obtained through POST /api/auth/login
    ├── mock_db_session:   AsyncMock session for service-level fault injection
    └── sample_*_bytes:    Minimal image payloads for uploads
"""

import os
import tempfile

# Override settings for testing BEFORE any app imports
TEST_JWT_SECRET = "test-secret-key-with-at-least-32-characters!"
os.environ["JWT_SECRET"] = TEST_JWT_SECRET
os.environ["MEDIA_BACKEND"] = "local"
os.environ["LOCAL_MEDIA_ROOT"] = tempfile.mkdtemp(prefix="portfolio_test_uploads_")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="portfolio_test_db_"), "portfolio.db"
)
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Dict  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.config import Settings  # noqa: E402
from app.exceptions import MediaStoreError  # noqa: E402
from app.services.media_store import MediaStore, StoredMedia  # noqa: E402

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"
ADMIN_EMAIL = "admin@portfolio.com"


class FakeMediaStore(MediaStore):
    """
    In-memory media store.

    `objects` holds what is currently stored, so tests can count orphans.
    Flip `fail_upload` / `fail_delete` to simulate an unreachable host.
    """

    name = "fake"

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.upload_calls = 0
        self.deleted = []
        self.fail_upload = False
        self.fail_delete = False
        self.healthy = True

    async def upload(self, content, filename, content_type, folder):
        self.upload_calls += 1
        if self.fail_upload:
            raise MediaStoreError(context={"operation": "upload", "simulated": True})
        media_id = f"{folder}/fake-{self.upload_calls}"
        self.objects[media_id] = content
        return StoredMedia(media_id=media_id, url=f"https://media.test/{media_id}.jpg")

    async def delete(self, media_id):
        if self.fail_delete:
            raise MediaStoreError(context={"operation": "delete", "simulated": True})
        self.objects.pop(media_id, None)
        self.deleted.append(media_id)

    async def health_check(self):
        return self.healthy


# ══════════════════════════════════════════════════════════════════════════
# Configuration and Collaborators
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        environment="development",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'portfolio.db'}",
        jwt_secret=TEST_JWT_SECRET,
        media_backend="local",
        local_media_root=str(tmp_path / "uploads"),
        admin_username=ADMIN_USERNAME,
        admin_password=ADMIN_PASSWORD,
        admin_email=ADMIN_EMAIL,
        log_level="WARNING",
    )


@pytest.fixture
def fake_media_store() -> FakeMediaStore:
    return FakeMediaStore()


@pytest.fixture
def mock_db_session():
    """
    A mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = photo
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Application and HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def app(settings, fake_media_store):
    """
    Application backed by a fresh SQLite file.

    ASGITransport does not run the lifespan, so the bootstrap it would
    perform is run here directly.
    """
    from app.main import create_app
    from app.services.bootstrap import bootstrap_database
    from app.services.password_hasher import password_hasher

    application = create_app(settings, media_store=fake_media_store)
    await bootstrap_database(application.state.database, settings, password_hasher)
    yield application
    await application.state.database.dispose()


@pytest_asyncio.fixture
async def test_client(app):
    """
    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def auth_headers(test_client) -> Dict[str, str]:
    response = await test_client.post(
        "/api/auth/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


# ══════════════════════════════════════════════════════════════════════════
# Upload Payloads
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def sample_jpeg_bytes():
    """Smallest JPEG-shaped payload: SOI + JFIF header + EOI."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def sample_png_bytes():
    """PNG signature followed by a truncated IHDR chunk."""
    return b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01'
