# artmarket/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from artmarket.schemas.forms import parse_int_field
from artmarket.schemas.user import UserSummary

OrderType = Literal["product", "custom"]
OrderStatus = Literal["requested", "accepted", "rejected", "in_progress", "completed"]


class ProductOrderCreate(SQLModel):
    """
    Payload for ordering a listed artwork.

    Backend derives:
      - user_id from token
      - artist_id from the product's seller (any client value is ignored)
      - status = 'requested'
    """

    model_config = ConfigDict(extra="ignore")

    product_id: uuid.UUID


class CustomOrderCreate(SQLModel):
    """
    Commission request sent to an artist.

    Every detail is optional. num_people and base_price are stored as
    integers taken from their leading digits; absent values and values
    without a leading integer become None.
    """

    model_config = ConfigDict(extra="forbid")

    artist_id: uuid.UUID
    description: str | None = None
    paper_size: str | None = Field(default=None, max_length=50)
    paper_type: str | None = Field(default=None, max_length=50)
    num_people: int | None = None
    base_price: int | None = None

    @field_validator("num_people", "base_price", mode="before")
    @classmethod
    def parse_optional_int(cls, v):
        return parse_int_field(v)

    @field_validator("description", "paper_size", "paper_type")
    @classmethod
    def normalize_text(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderUpdate(SQLModel):
    """
    Partial update applied by the artist.

    The status change is checked against the transition table in
    OrderService; rejection_reason only goes with 'rejected' and
    delivery_url only with 'completed'.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus | None = None
    rejection_reason: str | None = None
    delivery_url: str | None = None


class OrderRead(SQLModel):
    id: uuid.UUID
    type: OrderType
    user_id: uuid.UUID
    artist_id: uuid.UUID
    status: str
    product_id: uuid.UUID | None
    reference_image: str | None
    description: str | None
    paper_size: str | None
    paper_type: str | None
    num_people: int | None
    base_price: int | None
    rejection_reason: str | None
    delivery_url: str | None
    created_at: datetime
    updated_at: datetime


class ArtistOrderRead(OrderRead):
    """Order as seen by the artist, with the buyer's identity."""

    user: UserSummary | None = None
