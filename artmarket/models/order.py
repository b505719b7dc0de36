# artmarket/models/order.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field

ORDER_TYPE_PRODUCT = "product"
ORDER_TYPE_CUSTOM = "custom"


class Order(SQLModel, table=True):
    """
    Buyer order, discriminated by `type`:

      - product: purchase of a listed artwork (product_id set)
      - custom:  commission negotiated with an artist
                 (reference_image, description, paper_*, num_people,
                 base_price)

    artist_id is the user who fulfils the order. For product orders it
    is always derived from the product's seller.
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    # product | custom
    type: str = Field(index=True)

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
        description="Buyer",
    )

    artist_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
        description="Seller / artist fulfilling the order",
    )

    # requested | accepted | rejected | in_progress | completed
    status: str = Field(
        default="requested",
        index=True,
        description="Order status lifecycle",
    )

    product_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="products.id",
        index=True,
    )

    # Custom order details
    reference_image: str | None = None
    description: str | None = None
    paper_size: str | None = None
    paper_type: str | None = None
    num_people: int | None = None
    base_price: int | None = None

    rejection_reason: str | None = None
    delivery_url: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
