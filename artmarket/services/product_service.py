# artmarket/services/product_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from artmarket.core.errors import Forbidden, InvalidArgument, InvalidState, NotFound
from artmarket.core.storage_utils import PRODUCT_IMAGES, MediaStorage
from artmarket.models.product import Product
from artmarket.models.seller import Category, SellerProfile
from artmarket.models.user import User
from artmarket.repositories.product_repo import ProductRepository
from artmarket.repositories.seller_repo import CategoryRepository, SellerRepository
from artmarket.repositories.user_repo import UserRepository
from artmarket.schemas.product import (
    CategoryCreate,
    CategoryRead,
    ProductCreate,
    ProductRead,
    ProductUpdate,
)
from artmarket.services.ownership import OwnershipGuard

logger = logging.getLogger(__name__)

MAX_ADDITIONAL_IMAGES = 4


class ProductService:
    """
    Business logic for Product and Category.

    Responsibilities:
      - only sellers create products and categories
      - only the owning seller updates/deletes a product (OwnershipGuard)
      - category ids must all exist
      - image upload orchestration (images[0] is the main image)
    """

    def __init__(
        self,
        repo: ProductRepository,
        seller_repo: SellerRepository,
        category_repo: CategoryRepository,
        user_repo: UserRepository,
        guard: OwnershipGuard,
    ):
        self.repo = repo
        self.seller_repo = seller_repo
        self.category_repo = category_repo
        self.user_repo = user_repo
        self.guard = guard

    # ----- Helpers -----

    def _require_seller(self, session: Session, user: User, detail: str) -> SellerProfile:
        seller = self.seller_repo.get_by_user_id(session, user.id)
        if not seller:
            raise Forbidden(detail)
        return seller

    def _validate_categories(
        self, session: Session, category_ids: list[uuid.UUID]
    ) -> list[uuid.UUID]:
        unique_ids = list(dict.fromkeys(category_ids))
        found = self.category_repo.list_by_ids(session, unique_ids)
        if len(found) != len(unique_ids):
            raise InvalidArgument("One or more categories not found")
        return unique_ids

    def build_read(self, session: Session, product: Product) -> ProductRead:
        """
        Compose ProductRead with seller display name and categories.
        """
        seller = self.seller_repo.get_by_id(session, product.seller_id)
        owner = self.user_repo.get_by_id(session, seller.user_id) if seller else None
        categories = self.repo.list_categories(session, product.id)
        return ProductRead(
            **product.model_dump(),
            seller_name=owner.name if owner else None,
            categories=[CategoryRead.model_validate(c) for c in categories],
        )

    # ----- Products -----

    def get_product(self, session: Session, product_id: uuid.UUID) -> ProductRead:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise NotFound("Product not found")
        return self.build_read(session, product)

    def create_product(
        self,
        session: Session,
        user: User,
        payload: ProductCreate,
        media: MediaStorage,
        main_image: tuple[str, bytes] | None,
        additional_images: list[tuple[str, bytes]] | None = None,
    ) -> ProductRead:
        """
        Create a product for the user's seller profile.

        - The main image is required; up to 4 additional images.
        - New products start available.
        """
        seller = self._require_seller(session, user, "Only sellers can create products")
        category_ids = self._validate_categories(session, payload.category_ids)

        if main_image is None:
            raise InvalidArgument("Main image is required")
        additional_images = additional_images or []
        if len(additional_images) > MAX_ADDITIONAL_IMAGES:
            raise InvalidArgument(
                f"Too many files! Maximum is {MAX_ADDITIONAL_IMAGES} additional images."
            )

        images = media.upload_many(PRODUCT_IMAGES, [main_image, *additional_images])

        product = Product(
            seller_id=seller.id,
            name=payload.name,
            description=payload.description,
            price=payload.price,
            quantity=payload.quantity,
            is_available=True,
            images=images,
        )
        product = self.repo.create(session, product)
        self.repo.set_categories(session, product.id, category_ids)
        session.commit()
        session.refresh(product)

        logger.info("Seller %s created product %s", seller.id, product.id)
        return self.build_read(session, product)

    def update_product(
        self,
        session: Session,
        user: User,
        product_id: uuid.UUID,
        payload: ProductUpdate,
        media: MediaStorage | None = None,
        main_image: tuple[str, bytes] | None = None,
        additional_images: list[tuple[str, bytes]] | None = None,
    ) -> ProductRead:
        """
        Partial update by the owning seller.

        - A new main image replaces images[0]; the old file is deleted
          only once the product row has been committed.
        - New additional images are appended.
        """
        product = self.guard.product_for_owner(session, product_id, user, "update")

        if payload.name is not None:
            product.name = payload.name.strip()

        if payload.description is not None:
            product.description = payload.description

        if payload.price is not None:
            product.price = payload.price

        if payload.quantity is not None:
            product.quantity = payload.quantity

        if payload.is_available is not None:
            product.is_available = payload.is_available

        if payload.category_ids is not None:
            category_ids = self._validate_categories(session, payload.category_ids)
            self.repo.set_categories(session, product.id, category_ids)

        replaced_main: str | None = None
        if main_image is not None or additional_images:
            if media is None:
                raise InvalidArgument("Image uploads are not available")
            images = list(product.images)
            if main_image is not None:
                new_main = media.upload_image(PRODUCT_IMAGES, *main_image)
                if images:
                    replaced_main = images[0]
                    images[0] = new_main
                else:
                    images.append(new_main)
            if additional_images:
                images.extend(media.upload_many(PRODUCT_IMAGES, additional_images))
            product.images = images

        product.updated_at = datetime.now(timezone.utc)
        product = self.repo.update(session, product)
        session.commit()
        session.refresh(product)

        if replaced_main is not None:
            media.delete_public_url(replaced_main)

        logger.info("Product %s updated by %s", product.id, user.id)
        return self.build_read(session, product)

    def delete_product(
        self,
        session: Session,
        user: User,
        product_id: uuid.UUID,
        media: MediaStorage | None = None,
    ) -> None:
        """
        Delete a product owned by the user, its cart rows and images.

        Products that already have orders are kept (mark them
        unavailable instead).
        """
        product = self.guard.product_for_owner(session, product_id, user, "delete")

        if self.repo.has_orders(session, product.id):
            raise InvalidState("Product has orders; mark it unavailable instead")

        images = list(product.images)
        self.repo.delete(session, product)
        session.commit()

        if media is not None:
            for url in images:
                media.delete_public_url(url)

        logger.info("Product %s deleted by %s", product_id, user.id)

    # ----- Categories -----

    def create_category(
        self,
        session: Session,
        user: User,
        payload: CategoryCreate,
    ) -> Category:
        """
        Create a category. Restricted to sellers.

        Raises:
            Forbidden: user has no seller profile.
            InvalidArgument: a category with this name exists.
        """
        self._require_seller(session, user, "Not authorized to create categories")

        if self.category_repo.get_by_name(session, payload.name):
            raise InvalidArgument("Category with this name already exists")

        try:
            category = self.category_repo.create(
                session,
                Category(name=payload.name, description=payload.description),
            )
        except IntegrityError:
            session.rollback()
            raise InvalidArgument("Category with this name already exists")

        logger.info("Category %s created by %s", category.name, user.id)
        return category
