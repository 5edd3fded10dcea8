"""
Shared fixtures.

Every test gets its own on-disk SQLite database under ``tmp_path``, reached
through aiosqlite, so the real engine, pool and SQL paths are exercised
without a Postgres server.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from meal_orders.core.config import Settings
from meal_orders.database import build_engine, init_db
from meal_orders.main import create_app
from meal_orders.repository import OrderRepository


ALICE_ORDER = {
    "timestamp": "2024-01-01T00:00:00Z",
    "user": "Alice",
    "mainCourse": "Beef",
    "mainCoursePrice": 120,
    "combo": None,
    "comboPrice": 0,
    "drink": "Tea",
    "drinkPrice": 30,
    "dessert": None,
    "dessertPrice": 0,
    "total": 150,
}


def sqlite_settings(path, **overrides) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{path}",
        database_ssl_insecure=False,
        env_mode="development",
        **overrides,
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return sqlite_settings(tmp_path / "orders.db")


@pytest.fixture
def broken_settings(tmp_path) -> Settings:
    """Points at a directory that does not exist, so every connect fails."""
    return sqlite_settings(tmp_path / "missing" / "orders.db")


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def engine(settings):
    engine = build_engine(settings)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def repository(engine) -> OrderRepository:
    assert await init_db(engine)
    return OrderRepository(engine)
