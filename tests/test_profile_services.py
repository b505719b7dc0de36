import uuid

import pytest

from artmarket.core.errors import InvalidArgument, NotFound
from artmarket.schemas.seller import SellerProfileInput
from artmarket.schemas.user import AddressInput, CompleteProfile

from conftest import PNG_BYTES

ADDRESS = {
    "address_line1": "12 Canal Street",
    "city": "Pune",
    "state": "MH",
    "country": "India",
    "pincode": "411001",
}


class TestUserProvisioning:
    def test_creates_user_from_claims(self, session, user_service):
        user = user_service.create_from_claims(
            session, {"sub": "idp|1", "email": "maya@example.com"}
        )

        assert user.external_id == "idp|1"
        assert user.name == "maya"
        assert user.profile_completed is False

    def test_is_idempotent(self, session, user_service):
        first = user_service.create_from_claims(session, {"sub": "idp|2", "email": "a@example.com"})
        second = user_service.create_from_claims(
            session, {"sub": "idp|2", "email": "a@example.com", "name": "Other"}
        )

        assert first.id == second.id
        assert second.name == "a"

    def test_malformed_email_claim(self, session, user_service):
        with pytest.raises(InvalidArgument):
            user_service.create_from_claims(session, {"sub": "idp|3", "email": "not-an-email"})


class TestBuyerProfile:
    def test_complete_profile_upserts_delivery_address(self, session, user_service, make_user):
        user = make_user()

        result = user_service.complete_profile(
            session,
            user,
            CompleteProfile(phone_number="9999999999", address=AddressInput(**ADDRESS)),
        )
        assert result.user.profile_completed is True
        first_id = result.delivery_address.id

        result = user_service.complete_profile(
            session,
            user,
            CompleteProfile(
                phone_number="8888888888",
                address=AddressInput(**{**ADDRESS, "city": "Mumbai"}),
            ),
        )

        assert result.delivery_address.id == first_id
        assert result.delivery_address.city == "Mumbai"
        assert result.user.phone == "8888888888"
        assert user_service.is_profile_complete(session, user).is_complete is True

    def test_incomplete_profile(self, session, user_service, make_user):
        assert user_service.is_profile_complete(session, make_user()).is_complete is False

    def test_profile_view(self, session, user_service, make_user):
        user = make_user()

        profile = user_service.get_profile(session, user)

        assert profile.id == user.id
        assert profile.addresses == []
        assert profile.seller_profile_id is None


class TestSellerProfile:
    def _payload(self, category_ids, **overrides):
        data = {
            "bio": "Ink and charcoal",
            "pickup_address": AddressInput(**ADDRESS),
            "category_ids": category_ids,
            "does_custom_art": True,
            "custom_art_pricing": {"A4": 1500, "A3": 2500},
            "material_options": ["charcoal"],
            **overrides,
        }
        return SellerProfileInput(**data)

    def test_complete_profile_marks_user_as_seller(
        self, session, seller_service, make_user, make_category, media
    ):
        user = make_user()
        category = make_category()

        profile = seller_service.complete_profile(
            session,
            user,
            self._payload([category.id]),
            media,
            profile_image=("image/png", PNG_BYTES),
            portfolio_images=[("image/png", PNG_BYTES)],
        )

        assert user.is_seller is True
        assert profile.user_id == user.id
        assert profile.pickup_address.city == "Pune"
        assert profile.custom_art_pricing == {"A4": 1500, "A3": 2500}
        assert [c.name for c in profile.categories] == ["Charcoal"]
        assert profile.profile_image is not None
        assert len(profile.portfolio_images) == 1

        status = seller_service.profile_status(session, user)
        assert status.is_complete is True

    def test_resubmission_updates_in_place(
        self, session, seller_service, make_user, make_category
    ):
        user = make_user()
        category = make_category()
        first = seller_service.complete_profile(session, user, self._payload([category.id]))

        second = seller_service.complete_profile(
            session,
            user,
            self._payload([category.id], bio="Watercolour now"),
        )

        assert second.id == first.id
        assert second.pickup_address_id == first.pickup_address_id
        assert second.bio == "Watercolour now"

    def test_unknown_category(self, session, seller_service, make_user):
        with pytest.raises(InvalidArgument):
            seller_service.complete_profile(session, make_user(), self._payload([uuid.uuid4()]))

    def test_too_many_portfolio_images(
        self, session, seller_service, make_user, make_category, media
    ):
        with pytest.raises(InvalidArgument):
            seller_service.complete_profile(
                session,
                make_user(),
                self._payload([make_category().id]),
                media,
                portfolio_images=[("image/png", PNG_BYTES)] * 6,
            )

    def test_missing_profile(self, session, seller_service, make_user):
        user = make_user()

        with pytest.raises(NotFound):
            seller_service.get_profile(session, user)
        assert seller_service.profile_status(session, user).has_profile is False

    def test_public_page_lists_products(self, session, seller_service, make_seller, make_product):
        seller = make_seller()
        make_product(seller=seller, name="One")
        make_product(seller=seller, name="Two")

        page = seller_service.get_public(session, seller.id)

        assert page.user.name == "Artist"
        assert sorted(p.name for p in page.products) == ["One", "Two"]

    def test_public_page_unknown_seller(self, session, seller_service):
        with pytest.raises(NotFound):
            seller_service.get_public(session, uuid.uuid4())
