# artmarket/schemas/cart.py
import uuid
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field

from artmarket.schemas.product import ProductSummary


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    quantity: int = Field(default=1, gt=0)


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart item.

    0 removes the item; negative values are rejected by the service.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int


class CartItemRead(SQLModel):
    """
    Read model for a single cart item, with its product expanded.

    in_stock is False when the product's available quantity dropped
    below the quantity already held in the cart.
    """

    id: uuid.UUID
    cart_id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    product: ProductSummary
    line_total: float
    in_stock: bool
    created_at: datetime


class CartRead(SQLModel):
    """
    Full cart response model with totals.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    items: list[CartItemRead]
    total_quantity: int
    total_price: float
