# artmarket/repositories/seller_repo.py
import uuid

from sqlalchemy import delete
from sqlmodel import Session, select

from artmarket.models.seller import Category, SellerCategoryLink, SellerProfile


class SellerRepository:
    """
    Data access layer for SellerProfile and its category links.

    NOTE:
      - No commits here; profile completion writes the address, the
        profile, the links and the user flag in one transaction.
    """

    def get_by_id(self, session: Session, seller_id: uuid.UUID) -> SellerProfile | None:
        return session.get(SellerProfile, seller_id)

    def get_by_user_id(
        self, session: Session, user_id: uuid.UUID
    ) -> SellerProfile | None:
        stmt = select(SellerProfile).where(SellerProfile.user_id == user_id)
        return session.exec(stmt).first()

    def save(self, session: Session, profile: SellerProfile) -> SellerProfile:
        session.add(profile)
        session.flush()
        session.refresh(profile)
        return profile

    def list_categories(
        self, session: Session, seller_id: uuid.UUID
    ) -> list[Category]:
        stmt = (
            select(Category)
            .join(SellerCategoryLink, SellerCategoryLink.category_id == Category.id)
            .where(SellerCategoryLink.seller_id == seller_id)
            .order_by(Category.name)
        )
        return session.exec(stmt).all()

    def set_categories(
        self,
        session: Session,
        seller_id: uuid.UUID,
        category_ids: list[uuid.UUID],
    ) -> None:
        """Replace the seller's category set."""
        session.exec(
            delete(SellerCategoryLink).where(SellerCategoryLink.seller_id == seller_id)
        )
        session.add_all(
            SellerCategoryLink(seller_id=seller_id, category_id=cid)
            for cid in dict.fromkeys(category_ids)
        )
        session.flush()


class CategoryRepository:
    """Data access layer for Category."""

    def get_by_name(self, session: Session, name: str) -> Category | None:
        stmt = select(Category).where(Category.name == name)
        return session.exec(stmt).first()

    def list_by_ids(
        self, session: Session, category_ids: list[uuid.UUID]
    ) -> list[Category]:
        if not category_ids:
            return []
        stmt = select(Category).where(Category.id.in_(category_ids))
        return session.exec(stmt).all()

    def create(self, session: Session, category: Category) -> Category:
        session.add(category)
        session.commit()
        session.refresh(category)
        return category
