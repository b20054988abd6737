# inventory_api/repository.py

"""
Product persistence for the Inventory API.
Every operation is a single parameterized statement against the session
the repository was constructed with.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, distinct, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import Product
from .schemas import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_products(self) -> List[Product]:
        """Returns all products, most recently created first."""
        stmt = select(Product).order_by(Product.created_at.desc())
        return list(self.db.scalars(stmt))

    def get_product(self, product_id: int) -> Optional[Product]:
        """Returns the product with the given id, or None if there is none."""
        return self.db.get(Product, product_id)

    def create_product(self, data: ProductCreate) -> int:
        """Inserts a product and returns the id assigned by the database."""
        product = Product(**data.model_dump())
        try:
            self.db.add(product)
            self.db.flush()
            product_id = product.id
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return product_id

    def update_product(self, product_id: int, data: ProductUpdate) -> bool:
        """
        Replaces every editable field of a product and refreshes updated_at.
        Returns False when no row has the given id.
        """
        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .values(**data.model_dump(), updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        return self._execute_write(stmt)

    def delete_product(self, product_id: int) -> bool:
        """Hard-deletes a product. Returns False when no row has the given id."""
        stmt = (
            delete(Product)
            .where(Product.id == product_id)
            .execution_options(synchronize_session=False)
        )
        return self._execute_write(stmt)

    def get_stats(self) -> Dict[str, Any]:
        stmt = select(
            func.count(Product.id).label("total_products"),
            func.coalesce(func.sum(Product.quantity), 0).label("total_items"),
            func.count(distinct(Product.category)).label("categories"),
            func.coalesce(func.sum(Product.quantity * Product.price), 0).label("total_value"),
        )
        row = self.db.execute(stmt).one()
        return dict(row._mapping)

    def _execute_write(self, stmt) -> bool:
        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        logger.debug(f"Statement affected {result.rowcount} row(s).")
        return result.rowcount > 0
