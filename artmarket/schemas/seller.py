# artmarket/schemas/seller.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from artmarket.schemas.product import CategoryRead, ProductRead
from artmarket.schemas.user import AddressInput, AddressRead


class SellerProfileInput(SQLModel):
    """
    Validated seller profile fields.

    Built by the router from the multipart form after every JSON-encoded
    field has been decoded (see schemas/forms.py). Images are uploaded
    separately.
    """

    model_config = ConfigDict(extra="forbid")

    bio: str
    pickup_address: AddressInput
    category_ids: list[uuid.UUID]
    does_custom_art: bool = False
    custom_art_pricing: dict[str, float] | None = None
    material_options: list[str] | None = None

    @field_validator("bio")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("bio cannot be empty")
        return v


class SellerProfileRead(SQLModel):
    id: uuid.UUID
    user_id: uuid.UUID
    bio: str
    profile_image: str | None
    portfolio_images: list[str]
    pickup_address_id: uuid.UUID | None
    pickup_address: AddressRead | None = None
    does_custom_art: bool
    custom_art_pricing: dict | None
    material_options: list[str] | None
    categories: list[CategoryRead] = []
    created_at: datetime


class SellerProfileStatus(SQLModel):
    """Which parts of the seller profile are in place."""

    is_complete: bool
    is_seller: bool
    has_profile: bool
    has_bio: bool
    has_address: bool
    has_categories: bool


class SellerOwnerRead(SQLModel):
    name: str
    email: str
    created_at: datetime


class SellerPublicRead(SellerProfileRead):
    """Public seller page: profile, owner identity and listed products."""

    user: SellerOwnerRead
    products: list[ProductRead] = Field(default_factory=list)
