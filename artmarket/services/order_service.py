# artmarket/services/order_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from artmarket.core.errors import InvalidArgument, InvalidState, NotFound
from artmarket.core.storage_utils import CUSTOM_ORDER_IMAGES, MediaStorage
from artmarket.models.order import ORDER_TYPE_CUSTOM, ORDER_TYPE_PRODUCT, Order
from artmarket.models.user import User
from artmarket.repositories.order_repo import OrderRepository
from artmarket.repositories.product_repo import ProductRepository
from artmarket.repositories.seller_repo import SellerRepository
from artmarket.repositories.user_repo import UserRepository
from artmarket.schemas.order import (
    ArtistOrderRead,
    CustomOrderCreate,
    OrderUpdate,
    ProductOrderCreate,
)
from artmarket.schemas.user import UserSummary
from artmarket.services.ownership import OwnershipGuard

logger = logging.getLogger(__name__)

STATUS_REQUESTED = "requested"
STATUS_REJECTED = "rejected"
STATUS_COMPLETED = "completed"

# Legal status changes. Terminal states map to an empty set.
ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "requested": {"accepted", "rejected"},
    "accepted": {"in_progress", "rejected"},
    "in_progress": {"completed"},
    "rejected": set(),
    "completed": set(),
}

ORDER_LABELS = {
    ORDER_TYPE_PRODUCT: "Product order",
    ORDER_TYPE_CUSTOM: "Custom order",
}


def next_status(current: str, requested: str) -> str:
    """
    Apply one status transition.

    Same status is a no-op. Any pair missing from ALLOWED_TRANSITIONS
    raises InvalidState.
    """
    if current == requested:
        return current

    allowed = ALLOWED_TRANSITIONS.get(current)
    if allowed is None or requested not in allowed:
        raise InvalidState(f"Invalid status transition: {current} -> {requested}")
    return requested


class OrderService:
    """
    Business logic for product and custom orders.

    Responsibilities:
      - create product orders, deriving artist_id from the product's
        seller (never from the client)
      - create custom (commission) orders, uploading the optional
        reference image
      - list / fetch orders filtered by type
      - drive the status machine via ALLOWED_TRANSITIONS
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        seller_repo: SellerRepository,
        user_repo: UserRepository,
        guard: OwnershipGuard,
    ):
        self.order_repo = order_repo
        self.product_repo = product_repo
        self.seller_repo = seller_repo
        self.user_repo = user_repo
        self.guard = guard

    # -------- Creation --------

    def create_product_order(
        self,
        session: Session,
        buyer_id: uuid.UUID,
        payload: ProductOrderCreate,
    ) -> Order:
        """
        Order a listed artwork.

        Steps:
          1. Resolve product (404 if missing).
          2. Reject unavailable products (InvalidState).
          3. artist_id = user owning the product's seller profile.
          4. Create Order(type='product', status='requested').
        """
        product = self.product_repo.get_by_id(session, payload.product_id)
        if not product:
            raise NotFound("Product not found")

        if not product.is_available:
            raise InvalidState("Product is not available")

        seller = self.seller_repo.get_by_id(session, product.seller_id)
        if seller is None:
            raise NotFound("Seller not found")

        order = Order(
            type=ORDER_TYPE_PRODUCT,
            user_id=buyer_id,
            artist_id=seller.user_id,
            product_id=product.id,
            status=STATUS_REQUESTED,
        )
        order = self.order_repo.create(session, order)
        logger.info(
            "Product order %s created by %s for product %s", order.id, buyer_id, product.id
        )
        return order

    def create_custom_order(
        self,
        session: Session,
        buyer_id: uuid.UUID,
        payload: CustomOrderCreate,
        media: MediaStorage | None = None,
        reference_image: tuple[str, bytes] | None = None,
    ) -> Order:
        """
        Request a commission from an artist.

        Steps:
          1. Buyer and artist must both exist (InvalidArgument otherwise).
          2. Upload the reference image when one is attached.
          3. Create Order(type='custom', status='requested').

        An uploaded image is not removed if the insert fails afterwards.
        """
        buyer = self.user_repo.get_by_id(session, buyer_id)
        if not buyer:
            raise InvalidArgument("User not found")

        artist = self.user_repo.get_by_id(session, payload.artist_id)
        if not artist:
            raise InvalidArgument("Artist not found")

        reference_image_url = None
        if reference_image is not None:
            if media is None:
                raise InvalidArgument("Image uploads are not available")
            content_type, file_bytes = reference_image
            reference_image_url = media.upload_image(
                CUSTOM_ORDER_IMAGES, content_type, file_bytes
            )

        order = Order(
            type=ORDER_TYPE_CUSTOM,
            user_id=buyer.id,
            artist_id=artist.id,
            reference_image=reference_image_url,
            description=payload.description,
            paper_size=payload.paper_size,
            paper_type=payload.paper_type,
            num_people=payload.num_people,
            base_price=payload.base_price,
            status=STATUS_REQUESTED,
        )
        order = self.order_repo.create(session, order)
        logger.info("Custom order %s created by %s for artist %s", order.id, buyer.id, artist.id)
        return order

    # -------- Queries --------

    def list_for_buyer(
        self,
        session: Session,
        buyer_id: uuid.UUID,
        order_type: str,
    ) -> list[Order]:
        return self.order_repo.list_for_buyer(session, buyer_id, order_type)

    def list_for_artist(
        self,
        session: Session,
        artist_id: uuid.UUID,
        order_type: str,
    ) -> list[ArtistOrderRead]:
        """
        Orders addressed to an artist, each with the buyer's identity.
        """
        orders = self.order_repo.list_for_artist(session, artist_id, order_type)
        buyers: dict[uuid.UUID, User | None] = {}

        result: list[ArtistOrderRead] = []
        for order in orders:
            if order.user_id not in buyers:
                buyers[order.user_id] = self.user_repo.get_by_id(session, order.user_id)
            buyer = buyers[order.user_id]
            result.append(
                ArtistOrderRead(
                    **order.model_dump(),
                    user=UserSummary.model_validate(buyer) if buyer else None,
                )
            )
        return result

    def get_order(
        self,
        session: Session,
        order_id: uuid.UUID,
        order_type: str,
    ) -> Order:
        """
        Fetch one order of the given type.

        An id belonging to the other type is reported as not found.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order or order.type != order_type:
            raise NotFound(f"{ORDER_LABELS[order_type]} not found")
        return order

    # -------- Lifecycle --------

    def update_order(
        self,
        session: Session,
        order_id: uuid.UUID,
        order_type: str,
        acting_user: User,
        payload: OrderUpdate,
    ) -> Order:
        """
        Artist-side partial update: status, rejection reason, delivery URL.

        Rules:
          - only the order's artist may update it (403)
          - status changes follow ALLOWED_TRANSITIONS (InvalidState)
          - rejection_reason requires the resulting status 'rejected'
          - delivery_url requires the resulting status 'completed'
        """
        order = self.get_order(session, order_id, order_type)
        self.guard.ensure_order_artist(order, acting_user)

        new_status = order.status
        if payload.status is not None:
            new_status = next_status(order.status, payload.status)

        if payload.rejection_reason is not None and new_status != STATUS_REJECTED:
            raise InvalidState("Rejection reason is only allowed on rejected orders")

        if payload.delivery_url is not None and new_status != STATUS_COMPLETED:
            raise InvalidState("Delivery URL is only allowed on completed orders")

        previous = order.status
        order.status = new_status
        if payload.rejection_reason is not None:
            order.rejection_reason = payload.rejection_reason
        if payload.delivery_url is not None:
            order.delivery_url = payload.delivery_url
        order.updated_at = datetime.now(timezone.utc)

        order = self.order_repo.update(session, order)
        if previous != new_status:
            logger.info("Order %s: %s -> %s", order.id, previous, new_status)
        return order

    # -------- Maintenance --------

    def reconcile_product_order_artists(self, session: Session) -> int:
        """
        Rewrite artist_id on product orders whose value does not match
        the user owning the product's seller profile.

        Returns:
            Number of orders fixed.
        """
        fixed = 0
        for order, seller_user_id in self.order_repo.list_product_orders_with_seller_user(session):
            if order.artist_id != seller_user_id:
                logger.info(
                    "Order %s: artist_id %s -> %s", order.id, order.artist_id, seller_user_id
                )
                order.artist_id = seller_user_id
                session.add(order)
                fixed += 1

        if fixed:
            session.commit()
        return fixed
