# artmarket/routers/users.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from artmarket.core.auth import require_auth
from artmarket.database import get_session
from artmarket.models.user import User
from artmarket.repositories.seller_repo import SellerRepository
from artmarket.repositories.user_repo import AddressRepository, UserRepository
from artmarket.schemas.user import (
    CompleteProfile,
    CompleteProfileRead,
    ProfileCompleteRead,
    UserProfileRead,
)
from artmarket.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

service = UserService(UserRepository(), AddressRepository(), SellerRepository())


@router.post("/complete-profile", response_model=CompleteProfileRead)
def complete_profile(
    payload: CompleteProfile,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Set phone number and delivery address.

    The delivery address is updated in place if the user already has one.
    """
    return service.complete_profile(session, current_user, payload)


@router.get("/profile-complete", response_model=ProfileCompleteRead)
def profile_complete(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Whether the user has a phone number and a delivery address.
    """
    return service.is_profile_complete(session, current_user)


@router.get("/profile", response_model=UserProfileRead)
def read_profile(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Return the authenticated user's profile with addresses.
    """
    return service.get_profile(session, current_user)
