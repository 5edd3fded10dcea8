"""
Order repository and schema bootstrap against a real SQLite database.
"""

import pytest
from sqlalchemy import func, select

from meal_orders.database import build_engine, init_db
from meal_orders.exceptions import StorageError
from meal_orders.models import Order
from meal_orders.repository import OrderRepository
from meal_orders.schemas import OrderSubmission

from tests.conftest import ALICE_ORDER


def order(**overrides) -> OrderSubmission:
    return OrderSubmission(**{**ALICE_ORDER, **overrides})


async def count_rows(engine) -> int:
    async with engine.connect() as conn:
        return (await conn.execute(select(func.count(Order.id)))).scalar_one()


class TestBootstrap:

    @pytest.mark.asyncio
    async def test_creates_table(self, engine):
        assert await init_db(engine) is True
        assert await count_rows(engine) == 0

    @pytest.mark.asyncio
    async def test_second_run_is_a_no_op(self, engine):
        assert await init_db(engine) is True
        await OrderRepository(engine).insert(order())

        assert await init_db(engine) is True
        assert await count_rows(engine) == 1

    @pytest.mark.asyncio
    async def test_failure_is_reported_not_raised(self, broken_settings):
        engine = build_engine(broken_settings)
        try:
            assert await init_db(engine) is False
        finally:
            await engine.dispose()


class TestInsert:

    @pytest.mark.asyncio
    async def test_maps_wire_fields_to_columns(self, repository, engine):
        await repository.insert(order())

        async with engine.connect() as conn:
            row = (await conn.execute(select(Order.__table__))).mappings().one()

        assert row["user_name"] == "Alice"
        assert row["main_course"] == "Beef"
        assert row["main_course_price"] == 120
        assert row["combo"] is None
        assert row["combo_price"] == 0
        assert row["drink"] == "Tea"
        assert row["drink_price"] == 30
        assert row["dessert"] is None
        assert row["dessert_price"] == 0
        assert row["total"] == 150
        assert row["timestamp"] == "2024-01-01T00:00:00Z"
        assert row["created_at"] is not None

    @pytest.mark.asyncio
    async def test_ids_increase_with_insertion(self, repository, engine):
        for name in ["a", "b", "c"]:
            await repository.insert(order(user=name))

        async with engine.connect() as conn:
            rows = (await conn.execute(select(Order.id, Order.user_name).order_by(Order.id))).all()

        assert [r.user_name for r in rows] == ["a", "b", "c"]
        assert len({r.id for r in rows}) == 3

    @pytest.mark.asyncio
    async def test_values_are_bound_not_interpolated(self, repository):
        hostile = "Robert'); DROP TABLE orders;--"
        await repository.insert(order(user=hostile))

        orders = await repository.list_all()
        assert orders[0].user_name == hostile

    @pytest.mark.asyncio
    async def test_missing_table_raises_storage_error(self, engine):
        with pytest.raises(StorageError) as exc_info:
            await OrderRepository(engine).insert(order())

        assert exc_info.value.operation == "insert"
        assert "orders" in exc_info.value.message


class TestListAll:

    @pytest.mark.asyncio
    async def test_empty(self, repository):
        assert await repository.list_all() == []

    @pytest.mark.asyncio
    async def test_projection_and_order(self, repository):
        await repository.insert(order(user="first", total=10))
        await repository.insert(order(user="second", total=20))

        orders = await repository.list_all()

        assert [o.model_dump() for o in orders] == [
            {"user_name": "second", "main_course": "Beef", "total": 20,
             "timestamp": "2024-01-01T00:00:00Z"},
            {"user_name": "first", "main_course": "Beef", "total": 10,
             "timestamp": "2024-01-01T00:00:00Z"},
        ]

    @pytest.mark.asyncio
    async def test_unreachable_database_raises_storage_error(self, broken_settings):
        engine = build_engine(broken_settings)
        try:
            with pytest.raises(StorageError) as exc_info:
                await OrderRepository(engine).list_all()
        finally:
            await engine.dispose()

        assert exc_info.value.operation == "list"
        assert exc_info.value.message
