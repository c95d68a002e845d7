import os

# settings are read when the app package is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ADMIN_TOKEN"] = "test-admin-token"

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app import app
from app.core.dependencies import get_db
from app.db.base import Base
from app.repositories import DatabaseStorage


ADMIN_HEADERS = {"Authorization": "Bearer test-admin-token"}


@pytest.fixture
def database_url(tmp_path):
    """A fresh SQLite file per test, with the schema already created."""
    path = tmp_path / "test.db"

    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()

    return f"sqlite+aiosqlite:///{path}"


@pytest_asyncio.fixture
async def session(database_url):
    engine = create_async_engine(database_url, poolclass=NullPool)
    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as db:
        yield db

    await engine.dispose()


@pytest.fixture
def storage(session):
    return DatabaseStorage(session)


@pytest.fixture
def client(database_url):
    # NullPool: every request opens its connection on the test client's own loop
    engine = create_async_engine(database_url, poolclass=NullPool)
    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as db:
            yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return dict(ADMIN_HEADERS)
