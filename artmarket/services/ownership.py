# artmarket/services/ownership.py
import uuid

from sqlmodel import Session

from artmarket.core.errors import Forbidden, NotFound
from artmarket.models.cart import Cart, CartItem
from artmarket.models.order import Order
from artmarket.models.product import Product
from artmarket.models.user import User
from artmarket.repositories.cart_repo import CartRepository
from artmarket.repositories.product_repo import ProductRepository
from artmarket.repositories.seller_repo import SellerRepository


class OwnershipGuard:
    """
    Binds the acting user to the resource a request targets.

    Ownership is re-read from storage on every call:
      - product:   product.seller.user_id == user.id
      - cart item: item.cart.user_id == user.id
      - order:     user is the artist (mutations) or a party (reads)
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        seller_repo: SellerRepository,
        cart_repo: CartRepository,
    ):
        self.product_repo = product_repo
        self.seller_repo = seller_repo
        self.cart_repo = cart_repo

    def product_for_owner(
        self,
        session: Session,
        product_id: uuid.UUID,
        user: User,
        action: str = "update",
    ) -> Product:
        """
        Raises:
            NotFound: unknown product.
            Forbidden: the user does not own the product's seller profile.
        """
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise NotFound("Product not found")

        seller = self.seller_repo.get_by_id(session, product.seller_id)
        if seller is None or seller.user_id != user.id:
            raise Forbidden(f"Not authorized to {action} this product")
        return product

    def cart_item_for_user(
        self,
        session: Session,
        item_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> tuple[Cart, CartItem]:
        """
        Resolve an item inside the user's own cart.

        Items of other carts are reported as not found so their
        existence is not revealed.

        Raises:
            NotFound: no cart, or the item is not in this user's cart.
        """
        cart = self.cart_repo.get_for_user(session, user_id)
        if not cart:
            raise NotFound("Cart not found")

        item = self.cart_repo.get_item_in_cart(session, cart.id, item_id)
        if not item:
            raise NotFound("Cart item not found")
        return cart, item

    @staticmethod
    def ensure_order_artist(order: Order, user: User) -> None:
        if order.artist_id != user.id:
            raise Forbidden("Only the artist can update this order")

    @staticmethod
    def ensure_order_party(order: Order, user: User) -> None:
        if user.id not in (order.user_id, order.artist_id):
            raise Forbidden("Not authorized to view this order")

    @staticmethod
    def ensure_self(user: User, user_id: uuid.UUID) -> None:
        if user.id != user_id:
            raise Forbidden("Not authorized to view these orders")
