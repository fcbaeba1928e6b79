"""
Pytest configuration and shared fixtures.

Every test gets its own SQLite database and blob directory; the FastAPI app
is wired to them through dependency overrides.
"""

import asyncio
import os
import tempfile

# Set test environment variables before imports
_TEST_ROOT = tempfile.mkdtemp(prefix="codedpad-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_TEST_ROOT}/default.db")
os.environ.setdefault("STORAGE_DIR", f"{_TEST_ROOT}/blobs")
os.environ.setdefault("CREATE_TABLES", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from codedpad.core.db import get_db, init_models
from codedpad.main import app
from codedpad.storage.blob_store import BlobStore, get_blob_store

TEST_MAX_UPLOAD_SIZE = 4096


@pytest.fixture
def engine(tmp_path):
    """Async engine on a fresh SQLite file."""
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'codedpad.db'}",
        poolclass=NullPool
    )
    asyncio.run(init_models(test_engine))
    yield test_engine
    asyncio.run(test_engine.dispose())


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def blob_dir(tmp_path):
    return tmp_path / "blobs"


@pytest.fixture
def blob_store(blob_dir):
    """Local blob store with a small upload ceiling."""
    from codedpad.core.config import DEFAULT_ALLOWED_CONTENT_TYPES

    return BlobStore.create_local(
        str(blob_dir),
        max_size=TEST_MAX_UPLOAD_SIZE,
        allowed_content_types=DEFAULT_ALLOWED_CONTENT_TYPES,
        chunk_size=1024,
        confirm_timeout=0.2,
        confirm_interval=0.01
    )


@pytest.fixture
def client(session_factory, blob_store):
    """Test client with database and blob store overridden."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store

    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


def stored_blobs(blob_dir):
    """All files currently present under the blob directory."""
    if not blob_dir.exists():
        return []
    return [p for p in blob_dir.rglob("*") if p.is_file()]


def upload(client, owner_id="alice", content=b"hello pad", filename="hello.txt",
           content_type="text/plain", visibility="public", secondary_code=None):
    data = {"ownerId": owner_id, "visibility": visibility}
    if secondary_code is not None:
        data["secondaryCode"] = secondary_code
    return client.post(
        "/files",
        files={"file": (filename, content, content_type)},
        data=data
    )
