import os
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

# Settings are read once at import time; point them at test values first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_JWT_SECRET"] = "test-secret"
os.environ["SUPABASE_URL"] = "http://localhost:54321"
os.environ.pop("AUTH_JWT_AUDIENCE", None)

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from artmarket.core.storage_utils import MediaStorage, get_media_storage, validate_image
from artmarket.database import get_session
from artmarket.main import app
from artmarket.models.product import Product
from artmarket.models.seller import Category, SellerProfile
from artmarket.models.user import User
from artmarket.repositories.cart_repo import CartRepository
from artmarket.repositories.order_repo import OrderRepository
from artmarket.repositories.product_repo import ProductRepository
from artmarket.repositories.seller_repo import CategoryRepository, SellerRepository
from artmarket.repositories.user_repo import AddressRepository, UserRepository
from artmarket.services.cart_service import CartService
from artmarket.services.order_service import OrderService
from artmarket.services.ownership import OwnershipGuard
from artmarket.services.product_service import ProductService
from artmarket.services.seller_service import SellerService
from artmarket.services.user_service import UserService

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class FakeMediaStorage(MediaStorage):
    """Records uploads and deletions instead of talking to Storage."""

    def __init__(self):
        super().__init__(client=None, bucket="assets", max_image_bytes=1024 * 1024)
        self.uploaded: list[tuple[str, str]] = []
        self.deleted: list[str] = []

    def upload_image(self, folder: str, content_type: str, file_bytes: bytes) -> str:
        ext = validate_image(content_type, file_bytes, self.max_image_bytes)
        url = f"https://cdn.test/storage/v1/object/public/assets/{folder}/{len(self.uploaded)}.{ext}"
        self.uploaded.append((folder, url))
        return url

    def delete_public_url(self, url: str) -> None:
        self.deleted.append(url)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def media():
    return FakeMediaStorage()


@pytest.fixture
def client(session, media):
    def _get_session():
        yield session

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_media_storage] = lambda: media
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---- services ----


@pytest.fixture
def guard():
    return OwnershipGuard(ProductRepository(), SellerRepository(), CartRepository())


@pytest.fixture
def cart_service(guard):
    return CartService(
        CartRepository(), ProductRepository(), SellerRepository(), UserRepository(), guard
    )


@pytest.fixture
def order_service(guard):
    return OrderService(
        OrderRepository(), ProductRepository(), SellerRepository(), UserRepository(), guard
    )


@pytest.fixture
def product_service(guard):
    return ProductService(
        ProductRepository(), SellerRepository(), CategoryRepository(), UserRepository(), guard
    )


@pytest.fixture
def seller_service(product_service):
    return SellerService(
        SellerRepository(),
        CategoryRepository(),
        AddressRepository(),
        UserRepository(),
        ProductRepository(),
        product_service,
    )


@pytest.fixture
def user_service():
    return UserService(UserRepository(), AddressRepository(), SellerRepository())


# ---- factories ----


@pytest.fixture
def make_user(session):
    def _make(name: str = "Buyer", email: str | None = None, **fields) -> User:
        user = User(
            external_id=f"ext-{uuid.uuid4()}",
            email=email or f"{uuid.uuid4().hex[:8]}@example.com",
            name=name,
            **fields,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_seller(session, make_user):
    def _make(name: str = "Artist") -> SellerProfile:
        user = make_user(name=name, is_seller=True)
        profile = SellerProfile(user_id=user.id, bio="Charcoal portraits")
        session.add(profile)
        session.commit()
        session.refresh(profile)
        return profile

    return _make


@pytest.fixture
def make_product(session, make_seller):
    def _make(
        seller: SellerProfile | None = None,
        quantity: int = 5,
        price: Decimal | float = Decimal("100.00"),
        is_available: bool = True,
        name: str = "Sunset Sketch",
    ) -> Product:
        seller = seller or make_seller()
        product = Product(
            seller_id=seller.id,
            name=name,
            price=Decimal(str(price)),
            quantity=quantity,
            is_available=is_available,
            images=["https://cdn.test/storage/v1/object/public/assets/product-images/main.png"],
        )
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture
def make_category(session):
    def _make(name: str = "Charcoal") -> Category:
        category = Category(name=name)
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    return _make


# ---- auth ----


def make_token(sub: str, email: str | None = "someone@example.com", **claims) -> str:
    payload = {
        "sub": sub,
        "email": email,
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
        **claims,
    }
    return jwt.encode(payload, "test-secret", algorithm="HS256")


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user.external_id, user.email)}"}
