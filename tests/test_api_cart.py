import uuid

from conftest import auth_headers, make_token


class TestCartAuth:
    def test_guest_is_rejected(self, client):
        res = client.get("/api/cart")

        assert res.status_code == 401
        assert res.json()["detail"] == "Authentication required"

    def test_invalid_token(self, client):
        res = client.get("/api/cart", headers={"Authorization": "Bearer not-a-jwt"})

        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid or expired token"

    def test_token_without_local_user(self, client):
        res = client.get(
            "/api/cart", headers={"Authorization": f"Bearer {make_token('idp|unknown')}"}
        )

        assert res.status_code == 401
        assert res.json()["detail"] == "User not found"


class TestCartApi:
    def test_get_creates_empty_cart(self, client, make_user):
        user = make_user()

        res = client.get("/api/cart", headers=auth_headers(user))

        assert res.status_code == 200
        body = res.json()
        assert body["user_id"] == str(user.id)
        assert body["items"] == []

    def test_add_then_exceed_stock(self, client, make_user, make_product):
        user = make_user()
        product = make_product(quantity=5, price=10.0)
        headers = auth_headers(user)

        res = client.post(
            "/api/cart/items",
            json={"product_id": str(product.id), "quantity": 3},
            headers=headers,
        )
        assert res.status_code == 200
        assert res.json()["total_price"] == 30.0

        res = client.post(
            "/api/cart/items",
            json={"product_id": str(product.id), "quantity": 3},
            headers=headers,
        )
        assert res.status_code == 400
        assert res.json()["detail"] == {
            "message": "Not enough quantity available",
            "available_quantity": 5,
            "requested_quantity": 6,
        }

    def test_add_unknown_product(self, client, make_user):
        res = client.post(
            "/api/cart/items",
            json={"product_id": str(uuid.uuid4())},
            headers=auth_headers(make_user()),
        )

        assert res.status_code == 404

    def test_add_unavailable_product(self, client, make_user, make_product):
        product = make_product(is_available=False)

        res = client.post(
            "/api/cart/items",
            json={"product_id": str(product.id)},
            headers=auth_headers(make_user()),
        )

        assert res.status_code == 400

    def test_malformed_body(self, client, make_user):
        res = client.post(
            "/api/cart/items",
            json={"product_id": "nope", "quantity": "many"},
            headers=auth_headers(make_user()),
        )

        assert res.status_code == 400
        assert res.json()["detail"] == "Validation failed"
        assert res.json()["errors"]

    def test_update_and_remove(self, client, make_user, make_product):
        user = make_user()
        product = make_product(quantity=5)
        headers = auth_headers(user)
        cart = client.post(
            "/api/cart/items", json={"product_id": str(product.id)}, headers=headers
        ).json()
        item_id = cart["items"][0]["id"]

        res = client.put(f"/api/cart/items/{item_id}", json={"quantity": 5}, headers=headers)
        assert res.status_code == 200
        assert res.json()["items"][0]["quantity"] == 5

        res = client.put(f"/api/cart/items/{item_id}", json={"quantity": 6}, headers=headers)
        assert res.status_code == 400

        res = client.put(f"/api/cart/items/{item_id}", json={"quantity": -2}, headers=headers)
        assert res.status_code == 400

        res = client.delete(f"/api/cart/items/{item_id}", headers=headers)
        assert res.status_code == 200
        assert res.json()["items"] == []

    def test_foreign_item_is_not_found(self, client, make_user, make_product):
        owner = make_user()
        other = make_user()
        product = make_product()
        cart = client.post(
            "/api/cart/items",
            json={"product_id": str(product.id)},
            headers=auth_headers(owner),
        ).json()
        item_id = cart["items"][0]["id"]
        client.get("/api/cart", headers=auth_headers(other))

        res = client.put(
            f"/api/cart/items/{item_id}", json={"quantity": 1}, headers=auth_headers(other)
        )
        assert res.status_code == 404

        res = client.delete(f"/api/cart/items/{item_id}", headers=auth_headers(other))
        assert res.status_code == 404

    def test_clear(self, client, make_user, make_product):
        user = make_user()
        headers = auth_headers(user)

        assert client.delete("/api/cart", headers=headers).status_code == 404

        client.post(
            "/api/cart/items", json={"product_id": str(make_product().id)}, headers=headers
        )
        res = client.delete("/api/cart", headers=headers)

        assert res.status_code == 200
        assert res.json()["items"] == []
