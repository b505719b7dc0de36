# artmarket/models/product.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Artwork listed by a seller.

    - quantity is the live stock ceiling checked by every cart mutation.
    - images is ordered; images[0] is the main image.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    seller_id: uuid.UUID = Field(
        foreign_key="seller_profiles.id",
        index=True,
        description="FK to seller_profiles.id",
    )

    name: str = Field(
        max_length=200,
        index=True,
        description="Display name of the artwork",
    )

    description: str | None = Field(default=None)

    price: Decimal = Field(
        ge=0,
        max_digits=10,
        decimal_places=2,
        description="Unit price",
    )

    quantity: int = Field(
        default=1,
        ge=0,
        description="How many units are available",
    )

    is_available: bool = Field(
        default=True,
        index=True,
        description="Whether the artwork can be bought",
    )

    images: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class ProductCategoryLink(SQLModel, table=True):
    """Many-to-many link between products and categories."""

    __tablename__ = "product_categories"

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        primary_key=True,
    )
    category_id: uuid.UUID = Field(
        foreign_key="categories.id",
        primary_key=True,
    )
