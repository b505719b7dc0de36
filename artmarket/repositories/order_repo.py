# artmarket/repositories/order_repo.py
import uuid

from sqlmodel import Session, select

from artmarket.models.order import Order, ORDER_TYPE_PRODUCT
from artmarket.models.product import Product
from artmarket.models.seller import SellerProfile


class OrderRepository:
    """
    Data access layer for orders of both types.
    """

    def list_for_buyer(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_type: str,
    ) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id, Order.type == order_type)
            .order_by(Order.created_at.desc())
        )
        return session.exec(stmt).all()

    def list_for_artist(
        self,
        session: Session,
        artist_id: uuid.UUID,
        order_type: str,
    ) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.artist_id == artist_id, Order.type == order_type)
            .order_by(Order.created_at.desc())
        )
        return session.exec(stmt).all()

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def create(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.commit()
        session.refresh(order)
        return order

    def update(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.commit()
        session.refresh(order)
        return order

    def list_product_orders_with_seller_user(
        self, session: Session
    ) -> list[tuple[Order, uuid.UUID]]:
        """
        Every product order paired with the user id owning the
        product's seller profile.
        """
        stmt = (
            select(Order, SellerProfile.user_id)
            .join(Product, Product.id == Order.product_id)
            .join(SellerProfile, SellerProfile.id == Product.seller_id)
            .where(Order.type == ORDER_TYPE_PRODUCT)
        )
        return session.exec(stmt).all()
