# artmarket/repositories/user_repo.py
import uuid

from sqlmodel import Session, select

from artmarket.models.user import Address, User


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def get_by_external_id(self, session: Session, external_id: str) -> User | None:
        """Return the User mapped to an identity-provider subject."""
        stmt = select(User).where(User.external_id == external_id)
        return session.exec(stmt).first()

    def create(self, session: Session, user: User) -> User:
        """Insert a new User and return the persisted row."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user


class AddressRepository:
    """
    Data access layer for Address.

    NOTE:
      - No commits here; addresses are written as part of a profile
        update and the service commits once.
    """

    def get_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        address_type: str,
    ) -> Address | None:
        stmt = select(Address).where(
            Address.user_id == user_id, Address.type == address_type
        )
        return session.exec(stmt).first()

    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[Address]:
        stmt = select(Address).where(Address.user_id == user_id)
        return session.exec(stmt).all()

    def upsert(
        self,
        session: Session,
        user_id: uuid.UUID,
        address_type: str,
        fields: dict,
    ) -> Address:
        """
        Update the user's address of this type in place, or create it.
        """
        address = self.get_for_user(session, user_id, address_type)
        if address is None:
            address = Address(user_id=user_id, type=address_type, **fields)
        else:
            for key, value in fields.items():
                setattr(address, key, value)
        session.add(address)
        session.flush()
        session.refresh(address)
        return address
