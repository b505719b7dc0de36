# artmarket/routers/cart.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from artmarket.core.auth import require_auth
from artmarket.database import get_session
from artmarket.models.user import User
from artmarket.repositories.cart_repo import CartRepository
from artmarket.repositories.product_repo import ProductRepository
from artmarket.repositories.seller_repo import SellerRepository
from artmarket.repositories.user_repo import UserRepository
from artmarket.schemas.cart import CartRead, CartItemCreate, CartItemUpdate
from artmarket.services.cart_service import CartService
from artmarket.services.ownership import OwnershipGuard

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
seller_repo = SellerRepository()
service = CartService(
    cart_repo,
    product_repo,
    seller_repo,
    UserRepository(),
    OwnershipGuard(product_repo, seller_repo, cart_repo),
)


@router.get("", response_model=CartRead)
def get_my_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Get the current user's cart, creating an empty one if needed.
    """
    return service.get_or_create_cart(session, current_user.id)


@router.post("/items", response_model=CartRead)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Add product to the current user's cart.

    Returns the updated cart.
    """
    return service.add_item(session, current_user.id, payload.product_id, payload.quantity)


@router.put("/items/{item_id}", response_model=CartRead)
def update_cart_item(
    item_id: uuid.UUID,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Update quantity of an item in the cart; 0 removes it.

    Returns the updated cart.
    """
    return service.update_item_quantity(
        session=session,
        user_id=current_user.id,
        item_id=item_id,
        quantity=payload.quantity,
    )


@router.delete("/items/{item_id}", response_model=CartRead)
def remove_cart_item(
    item_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Remove an item from the cart.

    Returns the updated cart.
    """
    return service.remove_item(session, current_user.id, item_id)


@router.delete("", response_model=CartRead)
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Clear the entire cart.

    Returns the emptied cart.
    """
    return service.clear_cart(session, current_user.id)
