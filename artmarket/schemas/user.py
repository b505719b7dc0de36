# artmarket/schemas/user.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel, Field

AddressType = Literal["DELIVERY", "PICKUP"]


class AddressInput(SQLModel):
    """
    Structured postal address accepted by profile endpoints.

    Validation rules:
      - required lines cannot be empty or whitespace
    """

    model_config = ConfigDict(extra="forbid")

    address_line1: str = Field(max_length=200)
    address_line2: str | None = Field(default=None, max_length=200)
    city: str = Field(max_length=100)
    state: str = Field(max_length=100)
    country: str = Field(max_length=100)
    pincode: str = Field(max_length=20)

    @field_validator("address_line1", "city", "state", "country", "pincode")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("address_line2")
    @classmethod
    def normalize_line2(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class AddressRead(SQLModel):
    id: uuid.UUID
    type: AddressType
    address_line1: str
    address_line2: str | None
    city: str
    state: str
    country: str
    pincode: str


class UserRead(SQLModel):
    """Response schema returned to clients."""

    id: uuid.UUID
    email: str
    name: str
    phone: str | None
    phone_verified: bool
    is_seller: bool
    profile_completed: bool
    created_at: datetime


class UserSummary(SQLModel):
    """Public identity attached to orders and carts."""

    id: uuid.UUID
    name: str
    email: str


class IdentityClaims(SQLModel):
    """
    Claims of a verified identity-provider token used to provision a
    local user. Unknown claims are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    sub: str = Field(min_length=1)
    email: EmailStr | None = None
    name: str | None = Field(default=None, max_length=200)

    @field_validator("email", "name", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CompleteProfile(SQLModel):
    """
    Payload for buyer profile completion:
    phone number plus a delivery address.
    """

    model_config = ConfigDict(extra="forbid")

    phone_number: str = Field(max_length=20)
    address: AddressInput

    @field_validator("phone_number")
    @classmethod
    def normalize_phone(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("phone number cannot be empty")
        return v


class CompleteProfileRead(SQLModel):
    user: UserRead
    delivery_address: AddressRead


class ProfileCompleteRead(SQLModel):
    is_complete: bool


class UserProfileRead(UserRead):
    """Own profile with addresses and a pointer to the seller profile."""

    addresses: list[AddressRead] = []
    seller_profile_id: uuid.UUID | None = None
