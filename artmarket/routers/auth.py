# artmarket/routers/auth.py
from typing import Any

from fastapi import APIRouter, Depends
from sqlmodel import Session

from artmarket.core.auth import get_token_claims
from artmarket.database import get_session
from artmarket.repositories.seller_repo import SellerRepository
from artmarket.repositories.user_repo import AddressRepository, UserRepository
from artmarket.schemas.user import UserRead
from artmarket.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])

service = UserService(UserRepository(), AddressRepository(), SellerRepository())


@router.post("/create-user", response_model=UserRead)
def create_user(
    claims: dict[str, Any] = Depends(get_token_claims),
    session: Session = Depends(get_session),
):
    """
    Provision the local user after sign-in with the identity provider.

    Idempotent: an existing user is returned unchanged.

    Auth:
      - Requires a valid bearer token (the user row may not exist yet).
    """
    return service.create_from_claims(session, claims)
