# inventory_api/schemas.py

"""
Pydantic schemas for the Inventory API.
These define the data structures for incoming requests and outgoing responses,
ensuring data validation and clear API contracts.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

CENT = Decimal("0.01")
PRICE_LIMIT = Decimal("100000000")


# Schema for creating a new product.
# Used in POST /api/products.
class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Name of the product.")
    category: str = Field(..., min_length=1, description="Category the product belongs to.")
    quantity: int = Field(..., description="Units in stock.")
    price: Decimal = Field(..., description="Unit price, rounded to cents.")
    description: Optional[str] = Field(None, description="Free-form description of the product.")

    # Stored as NUMERIC(10,2): round to cents like the column would,
    # but reject values that overflow it.
    @field_validator("price")
    @classmethod
    def round_price(cls, value: Decimal) -> Decimal:
        if abs(value) < PRICE_LIMIT:
            rounded = value.quantize(CENT, rounding=ROUND_HALF_UP)
            if abs(rounded) < PRICE_LIMIT:
                return rounded
        raise ValueError(f"price must be below {PRICE_LIMIT}")


# Schema for replacing an existing product.
# PUT is a full replacement: the same fields as create are required,
# and an absent description is stored as null.
# Used in PUT /api/products/{product_id}.
class ProductUpdate(ProductCreate):
    pass


# Schema for representing a product in API responses.
class ProductResponse(BaseModel):
    id: int
    name: str
    category: str
    quantity: int
    price: float
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str


class ProductCreated(MessageResponse):
    id: int


# Aggregates over the whole table; all zero when the table is empty.
class StatsResponse(BaseModel):
    total_products: int = 0
    total_items: int = 0
    categories: int = 0
    total_value: float = 0


class ErrorResponse(BaseModel):
    error: str
