# artmarket/routers/sellers.py
import uuid

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlmodel import Session

from artmarket.core.auth import require_auth
from artmarket.core.storage_utils import MediaStorage, get_media_storage
from artmarket.database import get_session
from artmarket.models.user import User
from artmarket.repositories.cart_repo import CartRepository
from artmarket.repositories.product_repo import ProductRepository
from artmarket.repositories.seller_repo import CategoryRepository, SellerRepository
from artmarket.repositories.user_repo import AddressRepository, UserRepository
from artmarket.routers.uploads import read_upload, read_uploads
from artmarket.schemas.forms import parse_bool_field, parse_json_field, validate_form
from artmarket.schemas.seller import (
    SellerProfileInput,
    SellerProfileRead,
    SellerProfileStatus,
    SellerPublicRead,
)
from artmarket.schemas.user import AddressInput
from artmarket.services.ownership import OwnershipGuard
from artmarket.services.product_service import ProductService
from artmarket.services.seller_service import SellerService

router = APIRouter(prefix="/sellers", tags=["Sellers"])

seller_repo = SellerRepository()
category_repo = CategoryRepository()
product_repo = ProductRepository()
user_repo = UserRepository()
product_service = ProductService(
    product_repo,
    seller_repo,
    category_repo,
    user_repo,
    OwnershipGuard(product_repo, seller_repo, CartRepository()),
)
service = SellerService(
    seller_repo,
    category_repo,
    AddressRepository(),
    user_repo,
    product_repo,
    product_service,
)


@router.post("/complete-profile", response_model=SellerProfileRead)
def complete_profile(
    bio: str = Form(...),
    pickup_address: str = Form(...),
    category_ids: str = Form(...),
    does_custom_art: str | None = Form(None),
    custom_art_pricing: str | None = Form(None),
    material_options: str | None = Form(None),
    profile_image: UploadFile | None = File(None),
    portfolio_images: list[UploadFile] | None = File(None),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    media: MediaStorage = Depends(get_media_storage),
):
    """
    Create or update the caller's seller profile.

    Multipart form; structured fields are JSON-encoded strings:
      - pickup_address: address object
      - category_ids: array of category ids
      - custom_art_pricing: object of size -> price
      - material_options: array of strings
    """
    payload = validate_form(
        SellerProfileInput,
        bio=bio,
        pickup_address=parse_json_field(
            pickup_address, AddressInput, "pickup address", required=True
        ),
        category_ids=parse_json_field(
            category_ids, list[uuid.UUID], "category IDs", required=True
        ),
        does_custom_art=parse_bool_field(does_custom_art),
        custom_art_pricing=parse_json_field(
            custom_art_pricing, dict[str, float], "custom art pricing"
        ),
        material_options=parse_json_field(
            material_options, list[str], "material options"
        ),
    )
    return service.complete_profile(
        session,
        current_user,
        payload,
        media,
        profile_image=read_upload(profile_image),
        portfolio_images=read_uploads(portfolio_images),
    )


@router.get("/profile", response_model=SellerProfileRead)
def read_profile(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """Return the caller's seller profile."""
    return service.get_profile(session, current_user)


@router.get("/profile-complete", response_model=SellerProfileStatus)
def profile_complete(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """Which parts of the caller's seller profile are in place."""
    return service.profile_status(session, current_user)


@router.get("/{seller_id}", response_model=SellerPublicRead)
def get_seller(
    seller_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Public seller page with products.
    """
    return service.get_public(session, seller_id)
