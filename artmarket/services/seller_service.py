# artmarket/services/seller_service.py
import logging
import uuid

from sqlmodel import Session

from artmarket.core.errors import InvalidArgument, NotFound
from artmarket.core.storage_utils import PORTFOLIO_IMAGES, PROFILE_IMAGES, MediaStorage
from artmarket.models.seller import SellerProfile
from artmarket.models.user import ADDRESS_PICKUP, User
from artmarket.repositories.product_repo import ProductRepository
from artmarket.repositories.seller_repo import CategoryRepository, SellerRepository
from artmarket.repositories.user_repo import AddressRepository, UserRepository
from artmarket.schemas.product import CategoryRead
from artmarket.schemas.seller import (
    SellerOwnerRead,
    SellerProfileInput,
    SellerProfileRead,
    SellerProfileStatus,
    SellerPublicRead,
)
from artmarket.schemas.user import AddressRead
from artmarket.services.product_service import ProductService

logger = logging.getLogger(__name__)

MAX_PORTFOLIO_IMAGES = 5


class SellerService:
    """
    Business logic for seller (artist) profiles.

    Responsibilities:
      - profile completion: pickup address (updated in place), profile
        and portfolio images, categories, custom-art settings
      - flag the user as a seller
      - own / public profile views
    """

    def __init__(
        self,
        repo: SellerRepository,
        category_repo: CategoryRepository,
        address_repo: AddressRepository,
        user_repo: UserRepository,
        product_repo: ProductRepository,
        product_service: ProductService,
    ):
        self.repo = repo
        self.category_repo = category_repo
        self.address_repo = address_repo
        self.user_repo = user_repo
        self.product_repo = product_repo
        self.product_service = product_service

    def _build_read(self, session: Session, profile: SellerProfile) -> SellerProfileRead:
        address = (
            self.address_repo.get_for_user(session, profile.user_id, ADDRESS_PICKUP)
            if profile.pickup_address_id
            else None
        )
        categories = self.repo.list_categories(session, profile.id)
        return SellerProfileRead(
            **profile.model_dump(),
            pickup_address=AddressRead.model_validate(address) if address else None,
            categories=[CategoryRead.model_validate(c) for c in categories],
        )

    def complete_profile(
        self,
        session: Session,
        user: User,
        payload: SellerProfileInput,
        media: MediaStorage | None = None,
        profile_image: tuple[str, bytes] | None = None,
        portfolio_images: list[tuple[str, bytes]] | None = None,
    ) -> SellerProfileRead:
        """
        Create or update the user's seller profile.

        Steps:
          1. Verify every category exists.
          2. Upload profile / portfolio images when attached.
          3. Upsert the PICKUP address.
          4. Upsert the profile and replace its categories.
          5. Mark the user as a seller.
        """
        category_ids = list(dict.fromkeys(payload.category_ids))
        categories = self.category_repo.list_by_ids(session, category_ids)
        if len(categories) != len(category_ids):
            raise InvalidArgument("One or more categories not found")

        portfolio_images = portfolio_images or []
        if len(portfolio_images) > MAX_PORTFOLIO_IMAGES:
            raise InvalidArgument(
                f"Too many files! Maximum is {MAX_PORTFOLIO_IMAGES} portfolio images."
            )
        if (profile_image is not None or portfolio_images) and media is None:
            raise InvalidArgument("Image uploads are not available")

        profile_image_url = None
        if profile_image is not None:
            profile_image_url = media.upload_image(PROFILE_IMAGES, *profile_image)
        portfolio_urls = (
            media.upload_many(PORTFOLIO_IMAGES, portfolio_images) if portfolio_images else []
        )

        address = self.address_repo.upsert(
            session,
            user.id,
            ADDRESS_PICKUP,
            payload.pickup_address.model_dump(),
        )

        profile = self.repo.get_by_user_id(session, user.id)
        if profile is None:
            profile = SellerProfile(user_id=user.id, bio=payload.bio)

        profile.bio = payload.bio
        profile.pickup_address_id = address.id
        profile.does_custom_art = payload.does_custom_art
        profile.custom_art_pricing = payload.custom_art_pricing
        profile.material_options = payload.material_options
        if profile_image_url:
            profile.profile_image = profile_image_url
        if portfolio_urls:
            profile.portfolio_images = portfolio_urls

        profile = self.repo.save(session, profile)
        self.repo.set_categories(session, profile.id, category_ids)

        user.is_seller = True
        session.add(user)
        session.commit()
        session.refresh(profile)

        logger.info("User %s completed seller profile %s", user.id, profile.id)
        return self._build_read(session, profile)

    def get_profile(self, session: Session, user: User) -> SellerProfileRead:
        profile = self.repo.get_by_user_id(session, user.id)
        if not profile:
            raise NotFound("Seller profile not found")
        return self._build_read(session, profile)

    def profile_status(self, session: Session, user: User) -> SellerProfileStatus:
        """
        Report which parts of the seller profile are in place.
        """
        profile = self.repo.get_by_user_id(session, user.id)
        has_bio = bool(profile and profile.bio)
        has_address = bool(profile and profile.pickup_address_id)
        has_categories = bool(profile and self.repo.list_categories(session, profile.id))
        return SellerProfileStatus(
            is_complete=user.is_seller and has_bio and has_address and has_categories,
            is_seller=user.is_seller,
            has_profile=profile is not None,
            has_bio=has_bio,
            has_address=has_address,
            has_categories=has_categories,
        )

    def get_public(self, session: Session, seller_id: uuid.UUID) -> SellerPublicRead:
        """
        Public seller page with owner identity and products (newest first).
        """
        profile = self.repo.get_by_id(session, seller_id)
        if not profile:
            raise NotFound("Seller not found")

        owner = self.user_repo.get_by_id(session, profile.user_id)
        products = self.product_repo.list_for_seller(session, profile.id)
        base = self._build_read(session, profile)
        return SellerPublicRead(
            **base.model_dump(),
            user=SellerOwnerRead.model_validate(owner),
            products=[self.product_service.build_read(session, p) for p in products],
        )
