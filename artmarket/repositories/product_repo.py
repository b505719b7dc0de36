# artmarket/repositories/product_repo.py
import uuid

from sqlalchemy import delete
from sqlmodel import Session, select

from artmarket.models.cart import CartItem
from artmarket.models.order import Order
from artmarket.models.product import Product, ProductCategoryLink
from artmarket.models.seller import Category


class ProductRepository:
    """
    Data access layer for Product and its category links.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    # ----- Products -----

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def list_for_seller(self, session: Session, seller_id: uuid.UUID) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.seller_id == seller_id)
            .order_by(Product.created_at.desc())
        )
        return session.exec(stmt).all()

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.flush()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.flush()
        session.refresh(product)
        return product

    def has_orders(self, session: Session, product_id: uuid.UUID) -> bool:
        stmt = select(Order.id).where(Order.product_id == product_id).limit(1)
        return session.exec(stmt).first() is not None

    def delete(self, session: Session, product: Product) -> None:
        """
        Delete a product with its cart rows and category links.
        """
        session.exec(delete(CartItem).where(CartItem.product_id == product.id))
        session.exec(
            delete(ProductCategoryLink).where(ProductCategoryLink.product_id == product.id)
        )
        session.delete(product)
        session.flush()

    # ----- Categories -----

    def list_categories(
        self, session: Session, product_id: uuid.UUID
    ) -> list[Category]:
        stmt = (
            select(Category)
            .join(ProductCategoryLink, ProductCategoryLink.category_id == Category.id)
            .where(ProductCategoryLink.product_id == product_id)
            .order_by(Category.name)
        )
        return session.exec(stmt).all()

    def set_categories(
        self,
        session: Session,
        product_id: uuid.UUID,
        category_ids: list[uuid.UUID],
    ) -> None:
        """Replace the product's category set."""
        session.exec(
            delete(ProductCategoryLink).where(ProductCategoryLink.product_id == product_id)
        )
        session.add_all(
            ProductCategoryLink(product_id=product_id, category_id=cid)
            for cid in dict.fromkeys(category_ids)
        )
        session.flush()
