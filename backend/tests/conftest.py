"""Pytest configuration and fixtures."""
import io
import os
import zipfile
from typing import AsyncGenerator, Callable, Dict, Generator, Union

# Must be set before hoa_intake modules build their engine
os.environ.setdefault("DB_URL", "sqlite+aiosqlite://")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from hoa_intake.api.dependencies import get_progress_store
from hoa_intake.core.auth import get_current_user_id
from hoa_intake.db.base import Base
import hoa_intake.db.models  # noqa: F401
from hoa_intake.main import app
from hoa_intake.services.document_storage import LocalDocumentStorage
from hoa_intake.services.progress_store import InMemoryProgressStore

TEST_USER_ID = "user-123"


@pytest_asyncio.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """Session factory bound to a fresh SQLite database per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'intake.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Async database session for one test."""
    async with session_factory() as db:
        yield db


@pytest.fixture
def storage(tmp_path) -> LocalDocumentStorage:
    """Document storage rooted in the test's temp directory."""
    return LocalDocumentStorage(tmp_path / "storage", "http://files.test/documents")


@pytest.fixture
def progress_store() -> InMemoryProgressStore:
    return InMemoryProgressStore()


@pytest.fixture
def make_zip() -> Callable[[Dict[str, Union[bytes, str]]], bytes]:
    """Build ZIP bytes from a {path: content} mapping (None content = directory)."""

    def _make(files: Dict[str, Union[bytes, str, None]]) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as zf:
            for path, content in files.items():
                if content is None:
                    zf.writestr(zipfile.ZipInfo(path.rstrip("/") + "/"), b"")
                else:
                    zf.writestr(path, content)
        return buffer.getvalue()

    return _make


@pytest.fixture
def client(progress_store) -> Generator[TestClient, None, None]:
    """Test client with auth and progress store overridden."""
    app.dependency_overrides[get_current_user_id] = lambda: TEST_USER_ID
    app.dependency_overrides[get_progress_store] = lambda: progress_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
