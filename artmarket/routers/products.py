# artmarket/routers/products.py
import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlmodel import Session

from artmarket.core.auth import require_auth
from artmarket.core.storage_utils import MediaStorage, get_media_storage
from artmarket.database import get_session
from artmarket.models.user import User
from artmarket.repositories.cart_repo import CartRepository
from artmarket.repositories.product_repo import ProductRepository
from artmarket.repositories.seller_repo import CategoryRepository, SellerRepository
from artmarket.repositories.user_repo import UserRepository
from artmarket.routers.uploads import read_upload, read_uploads
from artmarket.schemas.forms import parse_bool_field, parse_json_field, validate_form
from artmarket.schemas.product import ProductCreate, ProductRead, ProductUpdate
from artmarket.services.ownership import OwnershipGuard
from artmarket.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
seller_repo = SellerRepository()
guard = OwnershipGuard(repo, seller_repo, CartRepository())
service = ProductService(repo, seller_repo, CategoryRepository(), UserRepository(), guard)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single product by id.

    - Public endpoint.
    """
    return service.get_product(session, product_id)


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    name: str = Form(...),
    price: Decimal = Form(...),
    description: str | None = Form(None),
    quantity: int = Form(1),
    category_ids: str | None = Form(None),
    main_image: UploadFile | None = File(None),
    additional_images: list[UploadFile] | None = File(None),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    media: MediaStorage = Depends(get_media_storage),
):
    """
    Create a product (sellers only).

    Multipart form:
      - name, price, description, quantity
      - category_ids: JSON array of category ids
      - main_image (required), additional_images (max 4)
    """
    payload = validate_form(
        ProductCreate,
        name=name,
        description=description,
        price=price,
        quantity=quantity,
        category_ids=parse_json_field(category_ids, list[uuid.UUID], "category IDs") or [],
    )
    return service.create_product(
        session,
        current_user,
        payload,
        media,
        main_image=read_upload(main_image),
        additional_images=read_uploads(additional_images),
    )


@router.put("/{product_id}", response_model=ProductRead)
def update_product(
    product_id: uuid.UUID,
    name: str | None = Form(None),
    price: Decimal | None = Form(None),
    description: str | None = Form(None),
    quantity: int | None = Form(None),
    is_available: str | None = Form(None),
    category_ids: str | None = Form(None),
    main_image: UploadFile | None = File(None),
    additional_images: list[UploadFile] | None = File(None),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    media: MediaStorage = Depends(get_media_storage),
):
    """
    Update a product (owning seller only).

    - A new main_image replaces the current main image.
    - additional_images are appended.
    """
    payload = validate_form(
        ProductUpdate,
        name=name,
        description=description,
        price=price,
        quantity=quantity,
        is_available=parse_bool_field(is_available) if is_available is not None else None,
        category_ids=parse_json_field(category_ids, list[uuid.UUID], "category IDs"),
    )
    return service.update_product(
        session,
        current_user,
        product_id,
        payload,
        media,
        main_image=read_upload(main_image),
        additional_images=read_uploads(additional_images),
    )


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    media: MediaStorage = Depends(get_media_storage),
):
    """
    Delete a product and its images (owning seller only).
    """
    service.delete_product(session, current_user, product_id, media)
    return None
