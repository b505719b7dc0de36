# artmarket/services/cart_service.py
import logging
import uuid
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from artmarket.core.errors import CapacityExceeded, InvalidArgument, InvalidState, NotFound
from artmarket.models.cart import Cart, CartItem
from artmarket.models.product import Product
from artmarket.repositories.cart_repo import CartRepository
from artmarket.repositories.product_repo import ProductRepository
from artmarket.repositories.seller_repo import SellerRepository
from artmarket.repositories.user_repo import UserRepository
from artmarket.schemas.cart import CartItemRead, CartRead
from artmarket.schemas.product import ProductSummary
from artmarket.services.ownership import OwnershipGuard

logger = logging.getLogger(__name__)


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - at most one cart per user (created lazily)
      - one row per (cart, product); re-adding increments quantity
      - validate product existence and availability flag
      - enforce quantity <= product.quantity on every mutation

    Stock is never cached between calls; the final write is a
    conditional UPDATE so the ceiling also holds under concurrency.
    """

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        seller_repo: SellerRepository,
        user_repo: UserRepository,
        guard: OwnershipGuard,
    ):
        self.cart_repo = cart_repo
        self.product_repo = product_repo
        self.seller_repo = seller_repo
        self.user_repo = user_repo
        self.guard = guard

    # ---- internal helpers ----

    def _get_or_create(self, session: Session, user_id: uuid.UUID) -> Cart:
        cart = self.cart_repo.get_for_user(session, user_id)
        if cart is not None:
            return cart
        try:
            return self.cart_repo.create(session, Cart(user_id=user_id))
        except IntegrityError:
            # Another request created the cart first.
            session.rollback()
            return self.cart_repo.get_for_user(session, user_id)

    def _get_available_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise NotFound("Product not found")
        if not product.is_available:
            raise InvalidState("Product is not available")
        return product

    def _seller_name(self, session: Session, product: Product) -> str | None:
        seller = self.seller_repo.get_by_id(session, product.seller_id)
        if seller is None:
            return None
        owner = self.user_repo.get_by_id(session, seller.user_id)
        return owner.name if owner else None

    def _capacity_error(
        self,
        session: Session,
        product_id: uuid.UUID,
        requested: int,
    ) -> CapacityExceeded:
        product = self.product_repo.get_by_id(session, product_id)
        available = product.quantity if product else 0
        return CapacityExceeded(available_quantity=available, requested_quantity=requested)

    def _build_cart(self, session: Session, cart: Cart) -> CartRead:
        """
        Compose CartRead from ORM rows, expanding each product and its
        seller's display name.
        """
        items = self.cart_repo.list_items(session, cart.id)

        item_reads: list[CartItemRead] = []
        total_qty = 0
        total_price = Decimal("0")

        for it in items:
            product = self.product_repo.get_by_id(session, it.product_id)
            line_total = it.quantity * product.price
            total_qty += it.quantity
            total_price += line_total

            item_reads.append(
                CartItemRead(
                    id=it.id,
                    cart_id=it.cart_id,
                    product_id=it.product_id,
                    quantity=it.quantity,
                    product=ProductSummary(
                        id=product.id,
                        name=product.name,
                        price=product.price,
                        quantity=product.quantity,
                        is_available=product.is_available,
                        images=product.images,
                        seller_name=self._seller_name(session, product),
                    ),
                    line_total=line_total,
                    in_stock=product.is_available and it.quantity <= product.quantity,
                    created_at=it.created_at,
                )
            )

        return CartRead(
            id=cart.id,
            user_id=cart.user_id,
            items=item_reads,
            total_quantity=total_qty,
            total_price=total_price,
        )

    # ---- public operations ----

    def get_or_create_cart(self, session: Session, user_id: uuid.UUID) -> CartRead:
        """
        Return the user's cart with items expanded, creating an empty
        cart on first access.
        """
        cart = self._get_or_create(session, user_id)
        return self._build_cart(session, cart)

    def add_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int = 1,
    ) -> CartRead:
        """
        Add a product to the user's cart.

        Rules:
          - product must exist (404) and be available (400)
          - existing_quantity + quantity <= product.quantity, otherwise
            CapacityExceeded reporting the available and requested totals
          - present item => quantity is incremented, else created
        """
        if quantity <= 0:
            raise InvalidArgument("Quantity must be at least 1")

        product = self._get_available_product(session, product_id)
        cart = self._get_or_create(session, user_id)

        existing = self.cart_repo.get_item(session, cart.id, product.id)
        current_quantity = existing.quantity if existing else 0
        new_total = current_quantity + quantity

        if new_total > product.quantity:
            raise CapacityExceeded(
                available_quantity=product.quantity,
                requested_quantity=new_total,
            )

        if existing is None:
            try:
                created = self.cart_repo.create_item(
                    session,
                    CartItem(cart_id=cart.id, product_id=product.id, quantity=quantity),
                )
            except IntegrityError:
                # Row appeared concurrently; fall back to incrementing it.
                session.rollback()
                existing = self.cart_repo.get_item(session, cart.id, product.id)
            else:
                # Stock may have been lowered since it was read above.
                if not self.cart_repo.set_within_stock(
                    session, created.id, product.id, quantity
                ):
                    self.cart_repo.delete_item(session, created)
                    raise self._capacity_error(session, product.id, quantity)

        if existing is not None:
            updated = self.cart_repo.increment_within_stock(
                session, existing.id, product.id, quantity
            )
            if not updated:
                current = self.cart_repo.get_item(session, cart.id, product.id)
                current_quantity = current.quantity if current else 0
                raise self._capacity_error(
                    session, product.id, current_quantity + quantity
                )

        logger.info(
            "Cart %s: added %s x product %s", cart.id, quantity, product.id
        )
        return self._build_cart(session, cart)

    def update_item_quantity(
        self,
        session: Session,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
        quantity: int,
    ) -> CartRead:
        """
        Set the quantity of an item in the user's cart.

        - quantity < 0 => InvalidArgument
        - quantity > product.quantity => CapacityExceeded
        - quantity == 0 => the item is removed
        """
        if quantity < 0:
            raise InvalidArgument("Valid quantity is required")

        cart, item = self.guard.cart_item_for_user(session, item_id, user_id)
        product = self.product_repo.get_by_id(session, item.product_id)

        if quantity > product.quantity:
            raise CapacityExceeded(
                available_quantity=product.quantity,
                requested_quantity=quantity,
            )

        if quantity == 0:
            self.cart_repo.delete_item(session, item)
            logger.info("Cart %s: removed item %s", cart.id, item_id)
            return self._build_cart(session, cart)

        updated = self.cart_repo.set_within_stock(session, item.id, product.id, quantity)
        if not updated:
            raise self._capacity_error(session, product.id, quantity)

        logger.info("Cart %s: item %s set to %s", cart.id, item_id, quantity)
        return self._build_cart(session, cart)

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
    ) -> CartRead:
        """
        Remove an item from the user's cart.
        """
        cart, item = self.guard.cart_item_for_user(session, item_id, user_id)
        self.cart_repo.delete_item(session, item)
        logger.info("Cart %s: removed item %s", cart.id, item_id)
        return self._build_cart(session, cart)

    def clear_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> CartRead:
        """
        Delete every item of the user's cart.

        Raises:
            NotFound: the user never had a cart.
        """
        cart = self.cart_repo.get_for_user(session, user_id)
        if not cart:
            raise NotFound("Cart not found")

        self.cart_repo.clear(session, cart.id)
        logger.info("Cart %s cleared", cart.id)
        return self._build_cart(session, cart)
