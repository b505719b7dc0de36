from artmarket.models.user import User

from conftest import PNG_BYTES, auth_headers


class TestProductOrdersApi:
    def _place(self, client, session, make_user, make_seller, make_product):
        buyer = make_user(name="Buyer")
        seller = make_seller()
        product = make_product(seller=seller)
        artist = session.get(User, seller.user_id)
        res = client.post(
            "/api/product-orders",
            json={"product_id": str(product.id), "artist_id": str(buyer.id)},
            headers=auth_headers(buyer),
        )
        return buyer, artist, res

    def test_create_derives_artist(self, client, session, make_user, make_seller, make_product):
        buyer, artist, res = self._place(client, session, make_user, make_seller, make_product)

        assert res.status_code == 201
        body = res.json()
        assert body["user_id"] == str(buyer.id)
        assert body["artist_id"] == str(artist.id)
        assert body["status"] == "requested"

    def test_requires_auth(self, client):
        assert client.post("/api/product-orders", json={}).status_code == 401

    def test_read_permissions(self, client, session, make_user, make_seller, make_product):
        buyer, artist, res = self._place(client, session, make_user, make_seller, make_product)
        order_id = res.json()["id"]

        assert client.get(f"/api/product-orders/{order_id}", headers=auth_headers(buyer)).status_code == 200
        assert client.get(f"/api/product-orders/{order_id}", headers=auth_headers(artist)).status_code == 200
        outsider = make_user(name="Outsider")
        assert client.get(f"/api/product-orders/{order_id}", headers=auth_headers(outsider)).status_code == 403

    def test_wrong_type_is_not_found(self, client, session, make_user, make_seller, make_product):
        buyer, _, res = self._place(client, session, make_user, make_seller, make_product)

        res = client.get(f"/api/custom-orders/{res.json()['id']}", headers=auth_headers(buyer))

        assert res.status_code == 404

    def test_lists_are_self_only(self, client, session, make_user, make_seller, make_product):
        buyer, artist, _ = self._place(client, session, make_user, make_seller, make_product)

        res = client.get(f"/api/product-orders/user/{buyer.id}", headers=auth_headers(buyer))
        assert res.status_code == 200
        assert len(res.json()) == 1

        res = client.get(f"/api/product-orders/artist/{artist.id}", headers=auth_headers(artist))
        assert res.status_code == 200
        assert res.json()[0]["user"]["name"] == "Buyer"

        res = client.get(f"/api/product-orders/user/{buyer.id}", headers=auth_headers(artist))
        assert res.status_code == 403

    def test_status_updates(self, client, session, make_user, make_seller, make_product):
        buyer, artist, res = self._place(client, session, make_user, make_seller, make_product)
        url = f"/api/product-orders/{res.json()['id']}"

        res = client.patch(url, json={"status": "accepted"}, headers=auth_headers(buyer))
        assert res.status_code == 403

        res = client.patch(url, json={"status": "completed"}, headers=auth_headers(artist))
        assert res.status_code == 400

        res = client.patch(url, json={"status": "accepted"}, headers=auth_headers(artist))
        assert res.status_code == 200
        assert res.json()["status"] == "accepted"

        res = client.patch(
            url,
            json={"status": "rejected", "rejection_reason": "Out of paper"},
            headers=auth_headers(artist),
        )
        assert res.status_code == 200
        assert res.json()["rejection_reason"] == "Out of paper"

        res = client.patch(url, json={"status": "in_progress"}, headers=auth_headers(artist))
        assert res.status_code == 400

    def test_unknown_status_is_rejected(
        self, client, session, make_user, make_seller, make_product
    ):
        _, artist, res = self._place(client, session, make_user, make_seller, make_product)

        res = client.patch(
            f"/api/product-orders/{res.json()['id']}",
            json={"status": "shipped"},
            headers=auth_headers(artist),
        )

        assert res.status_code == 400


class TestCustomOrdersApi:
    def test_create_with_reference_image(self, client, make_user, media):
        buyer = make_user()
        artist = make_user(name="Artist")

        res = client.post(
            "/api/custom-orders",
            data={
                "artist_id": str(artist.id),
                "description": "Couple portrait",
                "paper_size": "A4",
                "num_people": "2",
                "base_price": "abc",
            },
            files={"reference_image": ("ref.png", PNG_BYTES, "image/png")},
            headers=auth_headers(buyer),
        )

        assert res.status_code == 201
        body = res.json()
        assert body["type"] == "custom"
        assert body["num_people"] == 2
        assert body["base_price"] is None
        assert body["reference_image"] == media.uploaded[0][1]

    def test_create_without_image(self, client, make_user):
        buyer = make_user()
        artist = make_user(name="Artist")

        res = client.post(
            "/api/custom-orders",
            data={"artist_id": str(artist.id)},
            headers=auth_headers(buyer),
        )

        assert res.status_code == 201
        assert res.json()["reference_image"] is None
        assert res.json()["status"] == "requested"

    def test_rejects_non_image(self, client, make_user):
        artist = make_user(name="Artist")

        res = client.post(
            "/api/custom-orders",
            data={"artist_id": str(artist.id)},
            files={"reference_image": ("ref.txt", b"hello", "text/plain")},
            headers=auth_headers(make_user()),
        )

        assert res.status_code == 400

    def test_artist_completes_with_delivery(self, client, make_user):
        buyer = make_user()
        artist = make_user(name="Artist")
        order = client.post(
            "/api/custom-orders",
            data={"artist_id": str(artist.id)},
            headers=auth_headers(buyer),
        ).json()
        url = f"/api/custom-orders/{order['id']}"

        for status in ("accepted", "in_progress"):
            assert client.patch(url, json={"status": status}, headers=auth_headers(artist)).status_code == 200

        res = client.patch(
            url,
            json={"status": "completed", "delivery_url": "https://files.test/final.png"},
            headers=auth_headers(artist),
        )

        assert res.status_code == 200
        assert res.json()["delivery_url"] == "https://files.test/final.png"
