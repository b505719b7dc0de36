# artmarket/models/seller.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class Category(SQLModel, table=True):
    """Art category / medium (e.g. "Charcoal", "Portrait")."""

    __tablename__ = "categories"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        unique=True,
        index=True,
        max_length=100,
    )

    description: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class SellerProfile(SQLModel, table=True):
    """
    Seller (artist) profile. One per user.

    The owning user's id is what orders store as artist_id.
    """

    __tablename__ = "seller_profiles"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        unique=True,
        index=True,
    )

    bio: str

    profile_image: str | None = None

    portfolio_images: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    pickup_address_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="addresses.id",
    )

    does_custom_art: bool = Field(default=False)

    # e.g. {"A4": 1500, "A3": 2500}
    custom_art_pricing: dict | None = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
    )

    material_options: list[str] | None = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class SellerCategoryLink(SQLModel, table=True):
    """Many-to-many link between seller profiles and categories."""

    __tablename__ = "seller_categories"

    seller_id: uuid.UUID = Field(
        foreign_key="seller_profiles.id",
        primary_key=True,
    )
    category_id: uuid.UUID = Field(
        foreign_key="categories.id",
        primary_key=True,
    )
