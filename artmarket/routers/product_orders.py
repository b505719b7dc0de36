# artmarket/routers/product_orders.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from artmarket.core.auth import require_auth
from artmarket.database import get_session
from artmarket.models.order import ORDER_TYPE_PRODUCT
from artmarket.models.user import User
from artmarket.repositories.cart_repo import CartRepository
from artmarket.repositories.order_repo import OrderRepository
from artmarket.repositories.product_repo import ProductRepository
from artmarket.repositories.seller_repo import SellerRepository
from artmarket.repositories.user_repo import UserRepository
from artmarket.schemas.order import (
    ArtistOrderRead,
    OrderRead,
    OrderUpdate,
    ProductOrderCreate,
)
from artmarket.services.order_service import OrderService
from artmarket.services.ownership import OwnershipGuard

router = APIRouter(prefix="/product-orders", tags=["Product Orders"])

product_repo = ProductRepository()
seller_repo = SellerRepository()
guard = OwnershipGuard(product_repo, seller_repo, CartRepository())
service = OrderService(OrderRepository(), product_repo, seller_repo, UserRepository(), guard)


@router.post(
    "",
    response_model=OrderRead,
    status_code=status.HTTP_201_CREATED,
)
def create_product_order(
    payload: ProductOrderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Order a listed artwork.

    - Buyer is the authenticated user.
    - artist_id is taken from the product's seller.
    """
    return service.create_product_order(session, current_user.id, payload)


@router.get("/user/{user_id}", response_model=list[OrderRead])
def list_user_orders(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """Product orders placed by the caller, newest first."""
    guard.ensure_self(current_user, user_id)
    return service.list_for_buyer(session, user_id, ORDER_TYPE_PRODUCT)


@router.get("/artist/{artist_id}", response_model=list[ArtistOrderRead])
def list_artist_orders(
    artist_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Product orders received by the caller as artist, newest first,
    each with the buyer's name and email.
    """
    guard.ensure_self(current_user, artist_id)
    return service.list_for_artist(session, artist_id, ORDER_TYPE_PRODUCT)


@router.get("/{order_id}", response_model=OrderRead)
def get_product_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """Buyer or artist only."""
    order = service.get_order(session, order_id, ORDER_TYPE_PRODUCT)
    guard.ensure_order_party(order, current_user)
    return order


@router.patch("/{order_id}", response_model=OrderRead)
def update_product_order(
    order_id: uuid.UUID,
    payload: OrderUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Update status / rejection reason / delivery URL.

    Artist only. Status changes must follow the order lifecycle.
    """
    return service.update_order(session, order_id, ORDER_TYPE_PRODUCT, current_user, payload)
