"""
Root conftest for the pytest test suite.

This file contains the main fixtures that are used across the entire test suite.

Each test runs against a fresh, isolated in-memory SQLite database. A single
connection is shared through ``StaticPool`` so the schema created in the
fixture is the one the application sees.

Key Fixtures:
- `anyio_backend`: Specifies the asyncio backend.
- `test_engine`: A fresh in-memory engine with the schema created.
- `db_session`: A session on that engine, also handed to the app.
- `client`: An httpx AsyncClient bound to the app with its lifespan disabled.
- `make_user`, `make_inventory`, `make_item`, `share_inventory`, `grant_access`:
  Factories for test data.
- `auth_headers`: Builds a bearer header for a user.
"""

import datetime
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, Optional

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from home_inventory.core.database import Base, get_async_session
from home_inventory.features.auth.models import User
from home_inventory.features.auth.security import create_access_token, get_password_hash
from home_inventory.features.inventory.models import (
    Inventory,
    InventoryShare,
    Item,
    UserAccessGrant,
)
from home_inventory.main import app as actual_app

TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_PASSWORD = "password123"
# Hashing is slow on purpose; every fixture user shares this one hash
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_maker = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    async with session_maker() as session:
        yield session


@pytest.fixture(scope="function")
def app_for_testing(db_session: AsyncSession):
    """
    Provides the FastAPI application with its production lifespan disabled
    and its session dependency bound to the test database.
    """
    original_lifespan = actual_app.router.lifespan_context

    @asynccontextmanager
    async def dummy_lifespan(app: FastAPI):
        yield

    async def override_get_session():
        yield db_session

    actual_app.router.lifespan_context = dummy_lifespan
    actual_app.dependency_overrides[get_async_session] = override_get_session

    yield actual_app

    actual_app.dependency_overrides.clear()
    actual_app.router.lifespan_context = original_lifespan


@pytest_asyncio.fixture(scope="function")
async def client(app_for_testing: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app_for_testing)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_user(db_session: AsyncSession):
    async def _make_user(username: str, is_active: bool = True) -> User:
        user = User(
            id=uuid.uuid4(),
            username=username,
            email=f"{username}@example.com",
            hashed_password=TEST_PASSWORD_HASH,
            is_active=is_active,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make_user


@pytest.fixture
def make_inventory(db_session: AsyncSession):
    async def _make_inventory(owner: User, name: str = "Home", location: Optional[str] = None) -> Inventory:
        inventory = Inventory(name=name, user_id=owner.id, location=location)
        db_session.add(inventory)
        await db_session.commit()
        return inventory

    return _make_inventory


@pytest.fixture
def make_item(db_session: AsyncSession):
    async def _make_item(inventory: Inventory, name: str, **fields: Any) -> Item:
        fields.setdefault("quantity", 1)
        item = Item(inventory_id=inventory.id, name=name, **fields)
        db_session.add(item)
        await db_session.commit()
        return item

    return _make_item


@pytest.fixture
def share_inventory(db_session: AsyncSession):
    async def _share(inventory: Inventory, grantee: User, permission_level: str = "view") -> InventoryShare:
        share = InventoryShare(
            inventory_id=inventory.id,
            shared_with_user_id=grantee.id,
            shared_by_user_id=inventory.user_id,
            permission_level=permission_level,
        )
        db_session.add(share)
        await db_session.commit()
        return share

    return _share


@pytest.fixture
def grant_access(db_session: AsyncSession):
    async def _grant(grantor: User, grantee: User) -> UserAccessGrant:
        grant = UserAccessGrant(grantor_user_id=grantor.id, grantee_user_id=grantee.id)
        db_session.add(grant)
        await db_session.commit()
        return grant

    return _grant


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict[str, str]:
        token = create_access_token(
            data={"sub": user.username}, expires_delta=datetime.timedelta(minutes=5)
        )
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
