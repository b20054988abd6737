# inventory_api/models.py

"""
SQLAlchemy database models for the Inventory API.
"""

from sqlalchemy import Column, DateTime, Integer, Numeric, Text
from sqlalchemy.sql import func

from .db import Base


class Product(Base):
    """
    SQLAlchemy model for the 'products' table.
    The only entity of the service; there are no relationships.
    """

    __tablename__ = "products"

    # Generated by the database, never reused.
    id = Column(Integer, primary_key=True, autoincrement=True)

    name = Column(Text, nullable=False)
    category = Column(Text, nullable=False)
    quantity = Column(Integer, nullable=False)

    # Numeric with 10 total digits and 2 decimal places.
    price = Column(Numeric(10, 2), nullable=False)

    description = Column(Text, nullable=True)

    # Both timestamps are set by the database at insert time.
    # 'updated_at' is refreshed by every update statement.
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', category='{self.category}')>"
