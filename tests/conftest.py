"""Shared fixtures for storefront tests.

Every test gets a fresh in-memory SQLite database. API tests talk to
the real FastAPI app through ``httpx.AsyncClient``; the app's session
factory is pointed at the test database.
"""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from storefront.catalog.models import Category, Product
from storefront.catalog.slugs import slugify
from storefront.infrastructure.config import settings
from storefront.infrastructure.database import Base, create_session_factory
from storefront.infrastructure.models import UserModel
from storefront.main import app

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory database with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory for the test database."""
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Open a session for service-level tests and data setup."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async client bound to the test database."""
    app.state.session_factory = session_factory
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    del app.state.session_factory


@pytest.fixture
def admin_headers() -> dict[str, str]:
    """Get admin authentication headers."""
    return {"Authorization": f"Bearer {settings.admin_api_key}"}


class CatalogFactory:
    """Inserts catalog rows with strictly increasing creation times."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._tick = 0

    def _next_time(self) -> datetime:
        self._tick += 1
        return BASE_TIME + timedelta(minutes=self._tick)

    async def category(self, name: str) -> Category:
        """Insert a category."""
        category = Category(name=name, slug=slugify(name), created_at=self._next_time())
        self.session.add(category)
        await self.session.commit()
        return category

    async def product(
        self,
        name: str,
        category: Category | None = None,
        price: Decimal | int | str = Decimal("10.00"),
        quantity: int = 5,
        description: str | None = None,
        slug: str | None = None,
        photo: bytes | None = None,
        content_type: str = "image/png",
    ) -> Product:
        """Insert a product."""
        product = Product(
            name=name,
            slug=slug or slugify(name),
            description=description or f"{name} description",
            price=Decimal(str(price)),
            quantity=quantity,
            category=category,
            created_at=self._next_time(),
        )
        if photo is not None:
            product.photo_data = photo
            product.photo_content_type = content_type
        self.session.add(product)
        await self.session.commit()
        return product

    async def user(self, name: str = "Jane Buyer", email: str | None = None) -> UserModel:
        """Insert a user."""
        user = UserModel(name=name, email=email or f"{slugify(name)}@example.com")
        self.session.add(user)
        await self.session.commit()
        return user


@pytest.fixture
def factory(session: AsyncSession) -> CatalogFactory:
    """Get a row factory bound to the test session."""
    return CatalogFactory(session)
