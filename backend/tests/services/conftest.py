"""Service test fixtures: async DB, repositories, catalog service, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB session factory
    - db_manager patched so the readiness probe sees the test engine
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from storedir.db.base import Base
from storedir.infrastructure.database import get_db, DatabaseSessionManager
from storedir.infrastructure.review_repository import SqlReviewRepository
from storedir.infrastructure.store_repository import SqlStoreRepository
from storedir.infrastructure.user_resolver import SqlUserResolver
from storedir.models.user import User
from storedir.services.catalog_service import CatalogService
import storedir.infrastructure.database as db_module
import storedir.models  # noqa: F401
from storedir.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def author(test_db):
    """Insert the user every test store is attributed to."""
    user = User(email="wes@example.com", name="Wes")
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user


@pytest.fixture
def catalog(test_db):
    return CatalogService(
        stores=SqlStoreRepository(test_db),
        reviews=SqlReviewRepository(test_db),
        users=SqlUserResolver(test_db),
    )


@pytest.fixture
def store_input(author):
    """Factory for create_store payloads owned by the seeded author."""
    def _make(
        name: str = "Coffee Shop",
        tags: list[str] | None = None,
        coordinates: list[float] | None = None,
        description: str | None = None,
    ) -> dict:
        return {
            "name": name,
            "description": description,
            "tags": tags or [],
            "location": {
                "type": "Point",
                "coordinates": coordinates or [-79.3832, 43.6532],
                "address": "1 Front St, Toronto",
            },
            "author_id": author.id,
        }
    return _make


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
