# artmarket/repositories/cart_repo.py
import uuid

from sqlalchemy import delete, update
from sqlmodel import Session, select

from artmarket.models.cart import Cart, CartItem
from artmarket.models.product import Product


class CartRepository:
    """
    Data access layer for Cart and CartItem.

    Quantity writes that must respect stock are single conditional
    UPDATE statements: the stock comparison happens inside the write,
    so two concurrent requests cannot both push an item past
    Product.quantity. They return the number of affected rows; 0 means
    the condition failed (or the row is gone).
    """

    # ---- Carts ----

    def get_for_user(self, session: Session, user_id: uuid.UUID) -> Cart | None:
        stmt = select(Cart).where(Cart.user_id == user_id)
        return session.exec(stmt).first()

    def create(self, session: Session, cart: Cart) -> Cart:
        session.add(cart)
        session.commit()
        session.refresh(cart)
        return cart

    # ---- Items ----

    def list_items(self, session: Session, cart_id: uuid.UUID) -> list[CartItem]:
        stmt = (
            select(CartItem)
            .where(CartItem.cart_id == cart_id)
            .order_by(CartItem.created_at)
        )
        return session.exec(stmt).all()

    def get_item(
        self, session: Session, cart_id: uuid.UUID, product_id: uuid.UUID
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.cart_id == cart_id, CartItem.product_id == product_id
        )
        return session.exec(stmt).first()

    def get_item_in_cart(
        self, session: Session, cart_id: uuid.UUID, item_id: uuid.UUID
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.id == item_id, CartItem.cart_id == cart_id
        )
        return session.exec(stmt).first()

    def create_item(self, session: Session, item: CartItem) -> CartItem:
        """
        Insert a new item. Raises IntegrityError when a row for the same
        (cart, product) was inserted concurrently.
        """
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def increment_within_stock(
        self,
        session: Session,
        item_id: uuid.UUID,
        product_id: uuid.UUID,
        delta: int,
    ) -> int:
        stock = select(Product.quantity).where(Product.id == product_id).scalar_subquery()
        stmt = (
            update(CartItem)
            .where(CartItem.id == item_id, CartItem.quantity + delta <= stock)
            .values(quantity=CartItem.quantity + delta)
            .execution_options(synchronize_session=False)
        )
        result = session.exec(stmt)
        session.commit()
        return result.rowcount

    def set_within_stock(
        self,
        session: Session,
        item_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int,
    ) -> int:
        stock = select(Product.quantity).where(Product.id == product_id).scalar_subquery()
        stmt = (
            update(CartItem)
            .where(CartItem.id == item_id, stock >= quantity)
            .values(quantity=quantity)
            .execution_options(synchronize_session=False)
        )
        result = session.exec(stmt)
        session.commit()
        return result.rowcount

    def delete_item(self, session: Session, item: CartItem) -> None:
        session.delete(item)
        session.commit()

    def clear(self, session: Session, cart_id: uuid.UUID) -> None:
        session.exec(delete(CartItem).where(CartItem.cart_id == cart_id))
        session.commit()
