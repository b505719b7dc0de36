# artmarket/routers/custom_orders.py
import uuid

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlmodel import Session

from artmarket.core.auth import require_auth
from artmarket.core.storage_utils import MediaStorage, get_media_storage
from artmarket.database import get_session
from artmarket.models.order import ORDER_TYPE_CUSTOM
from artmarket.models.user import User
from artmarket.repositories.cart_repo import CartRepository
from artmarket.repositories.order_repo import OrderRepository
from artmarket.repositories.product_repo import ProductRepository
from artmarket.repositories.seller_repo import SellerRepository
from artmarket.repositories.user_repo import UserRepository
from artmarket.routers.uploads import read_upload
from artmarket.schemas.forms import validate_form
from artmarket.schemas.order import (
    ArtistOrderRead,
    CustomOrderCreate,
    OrderRead,
    OrderUpdate,
)
from artmarket.services.order_service import OrderService
from artmarket.services.ownership import OwnershipGuard

router = APIRouter(prefix="/custom-orders", tags=["Custom Orders"])

product_repo = ProductRepository()
seller_repo = SellerRepository()
guard = OwnershipGuard(product_repo, seller_repo, CartRepository())
service = OrderService(OrderRepository(), product_repo, seller_repo, UserRepository(), guard)


@router.post(
    "",
    response_model=OrderRead,
    status_code=status.HTTP_201_CREATED,
)
def create_custom_order(
    artist_id: str = Form(...),
    description: str | None = Form(None),
    paper_size: str | None = Form(None),
    paper_type: str | None = Form(None),
    num_people: str | None = Form(None),
    base_price: str | None = Form(None),
    reference_image: UploadFile | None = File(None),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    media: MediaStorage = Depends(get_media_storage),
):
    """
    Request a commission from an artist.

    Multipart form:
      - artist_id (required)
      - description, paper_size, paper_type
      - num_people, base_price: integers; anything unparsable is stored as null
      - reference_image: optional image file
    """
    payload = validate_form(
        CustomOrderCreate,
        artist_id=artist_id,
        description=description,
        paper_size=paper_size,
        paper_type=paper_type,
        num_people=num_people,
        base_price=base_price,
    )
    return service.create_custom_order(
        session,
        current_user.id,
        payload,
        media,
        reference_image=read_upload(reference_image),
    )


@router.get("/user/{user_id}", response_model=list[OrderRead])
def list_user_orders(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """Custom orders placed by the caller, newest first."""
    guard.ensure_self(current_user, user_id)
    return service.list_for_buyer(session, user_id, ORDER_TYPE_CUSTOM)


@router.get("/artist/{artist_id}", response_model=list[ArtistOrderRead])
def list_artist_orders(
    artist_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """Commissions received by the caller, with buyer details."""
    guard.ensure_self(current_user, artist_id)
    return service.list_for_artist(session, artist_id, ORDER_TYPE_CUSTOM)


@router.get("/{order_id}", response_model=OrderRead)
def get_custom_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    order = service.get_order(session, order_id, ORDER_TYPE_CUSTOM)
    guard.ensure_order_party(order, current_user)
    return order


@router.patch("/{order_id}", response_model=OrderRead)
def update_custom_order(
    order_id: uuid.UUID,
    payload: OrderUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Artist-side update: accept, reject (with reason), progress, complete
    (with delivery URL).
    """
    return service.update_order(session, order_id, ORDER_TYPE_CUSTOM, current_user, payload)
