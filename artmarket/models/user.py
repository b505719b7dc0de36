# artmarket/models/user.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field

ADDRESS_DELIVERY = "DELIVERY"
ADDRESS_PICKUP = "PICKUP"


class User(SQLModel, table=True):
    """
    Persistent user profile.

    Identity:
      - external_id: subject ("sub") of the identity provider's token.
        The bearer token is mapped to a row through this column.

    This table is *not* responsible for credentials. The identity
    provider owns them; we only mirror identity, contact details and
    marketplace flags.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    external_id: str = Field(
        unique=True,
        index=True,
        description="Subject id issued by the identity provider",
    )

    email: str = Field(
        index=True,
        description="Contact email from the identity provider",
    )

    name: str = Field(
        max_length=100,
        description="Display name; first part of email by default",
    )

    phone: str | None = Field(default=None, max_length=20)
    phone_verified: bool = Field(default=False)

    is_seller: bool = Field(
        default=False,
        index=True,
        description="Set once the seller profile is completed",
    )

    profile_completed: bool = Field(default=False)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class Address(SQLModel, table=True):
    """
    Postal address of a user.

    A user holds at most one address per type (DELIVERY | PICKUP);
    profile flows update the existing row in place.
    """

    __tablename__ = "addresses"
    __table_args__ = (UniqueConstraint("user_id", "type"),)

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    # DELIVERY | PICKUP
    type: str = Field(description="Address type")

    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    country: str
    pincode: str

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
