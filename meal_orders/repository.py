"""
Order Repository

Thin data-access layer over the shared connection pool. Each public method
issues exactly one parameterized statement on a connection borrowed for that
statement alone; nothing is cached between calls and nothing is retried.
"""

import logging

from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from meal_orders.exceptions import StorageError
from meal_orders.models import Order
from meal_orders.schemas import OrderSubmission, OrderSummary

logger = logging.getLogger(__name__)


class OrderRepository:
    """
    Reads and writes the orders table.

    The engine is injected and owned by the caller, so tests can point the
    repository at any database SQLAlchemy can reach.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def insert(self, order: OrderSubmission) -> None:
        """
        Store one order.

        Raises:
            StorageError: on any driver or database error
        """
        statement = insert(Order).values(**order.to_row())
        try:
            async with self.engine.begin() as conn:
                await conn.execute(statement)
        except (SQLAlchemyError, OSError) as e:
            raise StorageError.from_exception(e, operation="insert") from e

        logger.info(f"Order stored for: {order.user}")

    async def list_all(self) -> list[OrderSummary]:
        """
        All orders, most recently inserted first.

        ``id`` breaks ties between rows stamped within the same clock tick.

        Raises:
            StorageError: on any driver or database error
        """
        statement = (
            select(Order.user_name, Order.main_course, Order.total, Order.timestamp)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(statement)
                rows = result.all()
        except (SQLAlchemyError, OSError) as e:
            raise StorageError.from_exception(e, operation="list") from e

        return [OrderSummary.model_validate(row) for row in rows]


class UnavailableOrderRepository:
    """
    Stands in for ``OrderRepository`` when no engine could be built.

    Every call fails with the error from engine construction, so requests get
    the usual storage-error response instead of the process refusing to start.
    """

    def __init__(self, error: StorageError):
        self.error = error

    async def insert(self, order: OrderSubmission) -> None:
        raise StorageError(self.error.message, operation="insert")

    async def list_all(self) -> list[OrderSummary]:
        raise StorageError(self.error.message, operation="list")
