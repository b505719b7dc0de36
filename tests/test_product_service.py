import uuid

import pytest
from sqlmodel import select

from artmarket.core.errors import Forbidden, InvalidArgument, InvalidState, NotFound
from artmarket.models.cart import CartItem
from artmarket.models.order import ORDER_TYPE_PRODUCT, Order
from artmarket.models.user import User
from artmarket.schemas.product import CategoryCreate, ProductCreate, ProductUpdate

from conftest import PNG_BYTES

IMAGE = ("image/png", PNG_BYTES)


class TestCreateProduct:
    def test_seller_creates_product(
        self, session, product_service, make_seller, make_category, media
    ):
        seller = make_seller()
        category = make_category()
        owner = session.get(User, seller.user_id)

        product = product_service.create_product(
            session,
            owner,
            ProductCreate(name=" Dusk ", price=120, quantity=3, category_ids=[category.id]),
            media,
            main_image=IMAGE,
            additional_images=[IMAGE, IMAGE],
        )

        assert product.name == "Dusk"
        assert product.seller_id == seller.id
        assert product.seller_name == "Artist"
        assert product.is_available is True
        assert len(product.images) == 3
        assert [c.name for c in product.categories] == ["Charcoal"]
        assert all(folder == "product-images" for folder, _ in media.uploaded)

    def test_non_seller_is_forbidden(self, session, product_service, make_user, media):
        with pytest.raises(Forbidden):
            product_service.create_product(
                session, make_user(), ProductCreate(name="X", price=1), media, main_image=IMAGE
            )

    def test_main_image_required(self, session, product_service, make_seller, media):
        owner = session.get(User, make_seller().user_id)

        with pytest.raises(InvalidArgument):
            product_service.create_product(
                session, owner, ProductCreate(name="X", price=1), media, main_image=None
            )

    def test_too_many_additional_images(self, session, product_service, make_seller, media):
        owner = session.get(User, make_seller().user_id)

        with pytest.raises(InvalidArgument):
            product_service.create_product(
                session,
                owner,
                ProductCreate(name="X", price=1),
                media,
                main_image=IMAGE,
                additional_images=[IMAGE] * 5,
            )
        assert media.uploaded == []

    def test_unknown_category(self, session, product_service, make_seller, media):
        owner = session.get(User, make_seller().user_id)

        with pytest.raises(InvalidArgument):
            product_service.create_product(
                session,
                owner,
                ProductCreate(name="X", price=1, category_ids=[uuid.uuid4()]),
                media,
                main_image=IMAGE,
            )

    def test_non_image_upload_rejected(self, session, product_service, make_seller, media):
        owner = session.get(User, make_seller().user_id)

        with pytest.raises(InvalidArgument):
            product_service.create_product(
                session,
                owner,
                ProductCreate(name="X", price=1),
                media,
                main_image=("application/pdf", b"%PDF"),
            )


class TestUpdateProduct:
    def test_owner_updates_fields(self, session, product_service, make_product):
        product = make_product(quantity=5)
        owner = _owner(session, product_service, product)

        updated = product_service.update_product(
            session, owner, product.id, ProductUpdate(quantity=2, is_available=False)
        )

        assert updated.quantity == 2
        assert updated.is_available is False

    def test_new_main_image_replaces_first(self, session, product_service, make_product, media):
        product = make_product()
        old_main = product.images[0]
        owner = _owner(session, product_service, product)

        updated = product_service.update_product(
            session,
            owner,
            product.id,
            ProductUpdate(),
            media,
            main_image=IMAGE,
            additional_images=[IMAGE],
        )

        assert len(updated.images) == 2
        assert updated.images[0] != old_main
        assert media.deleted == [old_main]

    def test_failed_additional_upload_keeps_main_image(
        self, session, product_service, make_product, media
    ):
        product = make_product()
        old_main = product.images[0]
        owner = _owner(session, product_service, product)

        with pytest.raises(InvalidArgument):
            product_service.update_product(
                session,
                owner,
                product.id,
                ProductUpdate(),
                media,
                main_image=IMAGE,
                additional_images=[("text/plain", b"x")],
            )
        session.rollback()

        assert product_service.get_product(session, product.id).images == [old_main]
        assert media.deleted == []

    def test_other_user_is_forbidden(self, session, product_service, make_product, make_user):
        product = make_product()

        with pytest.raises(Forbidden):
            product_service.update_product(
                session, make_user(), product.id, ProductUpdate(price=1)
            )


class TestDeleteProduct:
    def test_delete_removes_cart_rows_and_images(
        self, session, product_service, cart_service, make_product, make_user, media
    ):
        product = make_product()
        images = list(product.images)
        buyer = make_user()
        cart_service.add_item(session, buyer.id, product.id, 1)
        owner = _owner(session, product_service, product)

        product_service.delete_product(session, owner, product.id, media)

        with pytest.raises(NotFound):
            product_service.get_product(session, product.id)
        assert session.exec(select(CartItem)).all() == []
        assert media.deleted == images

    def test_delete_with_orders_is_refused(
        self, session, product_service, make_product, make_user
    ):
        product = make_product()
        owner = _owner(session, product_service, product)
        session.add(
            Order(
                type=ORDER_TYPE_PRODUCT,
                user_id=make_user().id,
                artist_id=owner.id,
                product_id=product.id,
            )
        )
        session.commit()

        with pytest.raises(InvalidState):
            product_service.delete_product(session, owner, product.id)

    def test_other_user_is_forbidden(self, session, product_service, make_product, make_user):
        product = make_product()

        with pytest.raises(Forbidden):
            product_service.delete_product(session, make_user(), product.id)


class TestCategories:
    def test_seller_creates_category(self, session, product_service, make_seller):
        owner = session.get(User, make_seller().user_id)

        category = product_service.create_category(
            session, owner, CategoryCreate(name="Watercolour")
        )

        assert category.name == "Watercolour"

    def test_duplicate_name(self, session, product_service, make_seller, make_category):
        make_category("Ink")
        owner = session.get(User, make_seller().user_id)

        with pytest.raises(InvalidArgument):
            product_service.create_category(session, owner, CategoryCreate(name="Ink"))

    def test_non_seller_is_forbidden(self, session, product_service, make_user):
        with pytest.raises(Forbidden):
            product_service.create_category(session, make_user(), CategoryCreate(name="Ink"))


def _owner(session, product_service, product):
    seller = product_service.seller_repo.get_by_id(session, product.seller_id)
    return session.get(User, seller.user_id)
