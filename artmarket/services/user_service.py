# artmarket/services/user_service.py
import logging
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from artmarket.core.errors import InvalidArgument
from artmarket.models.user import ADDRESS_DELIVERY, User
from artmarket.repositories.seller_repo import SellerRepository
from artmarket.repositories.user_repo import AddressRepository, UserRepository
from artmarket.schemas.user import (
    AddressRead,
    CompleteProfile,
    CompleteProfileRead,
    IdentityClaims,
    ProfileCompleteRead,
    UserProfileRead,
    UserRead,
)

logger = logging.getLogger(__name__)


def default_name_from_email(email: str) -> str:
    """
    Derive a default display name from email when the identity
    provider did not supply one.
    """
    if "@" in email:
        return email.split("@", 1)[0]
    return email


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - provision the local user row from verified token claims
      - buyer profile completion (phone + single delivery address)
      - profile views
    """

    def __init__(
        self,
        repo: UserRepository,
        address_repo: AddressRepository,
        seller_repo: SellerRepository,
    ):
        self.repo = repo
        self.address_repo = address_repo
        self.seller_repo = seller_repo

    def create_from_claims(self, session: Session, claims: dict[str, Any]) -> User:
        """
        Return the user mapped to the token subject, creating it on
        first sign-in. Safe to call repeatedly.

        Raises:
            InvalidArgument: the token carries a malformed email.
        """
        try:
            identity = IdentityClaims.model_validate(claims)
        except ValidationError as exc:
            raise InvalidArgument(
                {
                    "message": "Invalid identity claims",
                    "errors": exc.errors(include_url=False, include_context=False),
                }
            ) from exc

        user = self.repo.get_by_external_id(session, identity.sub)
        if user is not None:
            return user

        email = identity.email or ""
        user = User(
            external_id=identity.sub,
            email=email,
            name=identity.name or default_name_from_email(email),
            profile_completed=False,
        )
        try:
            user = self.repo.create(session, user)
        except IntegrityError:
            # Concurrent first sign-in created the row already.
            session.rollback()
            user = self.repo.get_by_external_id(session, identity.sub)
        else:
            logger.info("Provisioned user %s", user.id)
        return user

    def complete_profile(
        self,
        session: Session,
        current_user: User,
        payload: CompleteProfile,
    ) -> CompleteProfileRead:
        """
        Set the phone number and the delivery address.

        The delivery address is updated in place when one exists.
        """
        current_user.phone = payload.phone_number
        current_user.profile_completed = True
        session.add(current_user)

        address = self.address_repo.upsert(
            session,
            current_user.id,
            ADDRESS_DELIVERY,
            payload.address.model_dump(),
        )
        session.commit()
        session.refresh(current_user)
        session.refresh(address)

        logger.info("User %s completed profile", current_user.id)
        return CompleteProfileRead(
            user=UserRead.model_validate(current_user),
            delivery_address=AddressRead.model_validate(address),
        )

    def is_profile_complete(self, session: Session, current_user: User) -> ProfileCompleteRead:
        has_phone = bool(current_user.phone)
        has_delivery = (
            self.address_repo.get_for_user(session, current_user.id, ADDRESS_DELIVERY)
            is not None
        )
        return ProfileCompleteRead(is_complete=has_phone and has_delivery)

    def get_profile(self, session: Session, current_user: User) -> UserProfileRead:
        """
        Full profile: user fields, all addresses and the seller profile
        id when the user has one.
        """
        addresses = self.address_repo.list_for_user(session, current_user.id)
        seller = self.seller_repo.get_by_user_id(session, current_user.id)
        return UserProfileRead(
            **UserRead.model_validate(current_user).model_dump(),
            addresses=[AddressRead.model_validate(a) for a in addresses],
            seller_profile_id=seller.id if seller else None,
        )
