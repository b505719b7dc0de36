# artmarket/schemas/product.py
import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


# ---------- Categories ----------


class CategoryCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class CategoryRead(SQLModel):
    id: uuid.UUID
    name: str
    description: str | None = None


# ---------- Products ----------


class ProductCreate(SQLModel):
    """
    Validated product fields (built from the multipart form).

    Images are uploaded separately and not part of this schema.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=200)
    description: str | None = None
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    quantity: int = Field(default=1, ge=0)
    category_ids: list[uuid.UUID] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class ProductUpdate(SQLModel):
    """
    Partial update; any field left as None is unchanged.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=200)
    description: str | None = None
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    quantity: int | None = Field(default=None, ge=0)
    is_available: bool | None = None
    category_ids: list[uuid.UUID] | None = None


class ProductRead(SQLModel):
    """
    Full product view with seller display info and categories.
    """

    id: uuid.UUID
    seller_id: uuid.UUID
    seller_name: str | None = None
    name: str
    description: str | None
    price: float
    quantity: int
    is_available: bool
    images: list[str]
    categories: list[CategoryRead] = []
    created_at: datetime
    updated_at: datetime


class ProductSummary(SQLModel):
    """
    Product data embedded in cart items.
    """

    id: uuid.UUID
    name: str
    price: float
    quantity: int
    is_available: bool
    images: list[str]
    seller_name: str | None = None
