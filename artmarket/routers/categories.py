# artmarket/routers/categories.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from artmarket.core.auth import require_auth
from artmarket.database import get_session
from artmarket.models.user import User
from artmarket.repositories.cart_repo import CartRepository
from artmarket.repositories.product_repo import ProductRepository
from artmarket.repositories.seller_repo import CategoryRepository, SellerRepository
from artmarket.repositories.user_repo import UserRepository
from artmarket.schemas.product import CategoryCreate, CategoryRead
from artmarket.services.ownership import OwnershipGuard
from artmarket.services.product_service import ProductService

router = APIRouter(prefix="/categories", tags=["Categories"])

product_repo = ProductRepository()
seller_repo = SellerRepository()
service = ProductService(
    product_repo,
    seller_repo,
    CategoryRepository(),
    UserRepository(),
    OwnershipGuard(product_repo, seller_repo, CartRepository()),
)


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    payload: CategoryCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Create a category.

    Auth:
      - Sellers only.
    """
    return service.create_category(session, current_user, payload)
