"""
SQLAlchemy Database Models

A single table holds every meal order submitted for the gathering.
Rows are only ever inserted; nothing here updates or deletes them.
"""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from meal_orders.database import Base


class Order(Base):
    """
    One meal submission: a main course, optional combo, drink and dessert,
    each with its price, plus the total the client computed.

    ``timestamp`` is the client's own submission time, kept as the string it
    sent. ``created_at`` is stamped by the database and drives list ordering.
    """
    __tablename__ = "orders"

    # Primary Key
    id = Column(Integer, primary_key=True, autoincrement=True)

    # =========================================================================
    # SUBMITTER
    # =========================================================================
    timestamp = Column(String(255), nullable=True)
    user_name = Column(String(255), nullable=True)

    # =========================================================================
    # MENU SELECTIONS
    # =========================================================================
    main_course = Column(String(255), nullable=True)
    main_course_price = Column(Integer, nullable=True)
    combo = Column(String(255), nullable=True)
    combo_price = Column(Integer, nullable=True)
    drink = Column(String(255), nullable=True)
    drink_price = Column(Integer, nullable=True)
    dessert = Column(String(255), nullable=True)
    dessert_price = Column(Integer, nullable=True)

    # =========================================================================
    # PRICING
    # =========================================================================
    total = Column(Integer, nullable=True)

    # =========================================================================
    # TIMESTAMPS
    # =========================================================================
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Order #{self.id} - {self.user_name} - {self.main_course} - {self.total}>"
