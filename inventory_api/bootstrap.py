# inventory_api/bootstrap.py

"""
Schema bootstrap: makes sure the products table exists and holds data
before the API starts serving.
"""
import logging
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from .db import Base
from .models import Product

logger = logging.getLogger(__name__)

# (name, category, quantity, price, description)
SEED_PRODUCTS = [
    ("Laptop Pro", "Electronics", 15, Decimal("1299.99"), "High-performance laptop"),
    ("Wireless Mouse", "Electronics", 45, Decimal("29.99"), "Ergonomic wireless mouse"),
    ("Office Chair", "Furniture", 8, Decimal("199.99"), "Comfortable office chair"),
    ("Coffee Beans", "Food", 120, Decimal("12.99"), "Premium coffee beans"),
    ("Notebook Set", "Office Supplies", 200, Decimal("8.99"), "Pack of 3 notebooks"),
]


class BootstrapError(RuntimeError):
    """The products table could not be created or seeded at startup."""


def ensure_schema(engine: Engine) -> int:
    """
    Creates the products table if it does not exist and inserts the seed
    products if the table is empty. Safe to run on every start.

    Each seed row is committed on its own so every row gets its own
    created_at, and the list shows the last seed first.

    Returns the number of seed rows inserted. Errors propagate to the caller.
    """
    # create_all checks for the table before issuing CREATE TABLE
    Base.metadata.create_all(bind=engine, tables=[Product.__table__])
    logger.info("Ensured table 'products' exists.")

    with Session(engine) as db:
        count = db.scalar(select(func.count()).select_from(Product))
        if count != 0:
            logger.info(f"Table 'products' already holds {count} rows, skipping seed.")
            return 0

        for name, category, quantity, price, description in SEED_PRODUCTS:
            db.add(
                Product(
                    name=name,
                    category=category,
                    quantity=quantity,
                    price=price,
                    description=description,
                )
            )
            db.commit()

    logger.info(f"Seeded {len(SEED_PRODUCTS)} products.")
    return len(SEED_PRODUCTS)
