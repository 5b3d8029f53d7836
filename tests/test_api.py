"""
HTTP API tests (TestClient + dependency overrides).
"""
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from storefront.api.errors import ERROR_CODE_HEADER
from storefront.api.routers import orders
from storefront.domain.errors import InvalidPayment
from storefront.main import app


def as_user(user):
    return {"X-User-Id": str(user.id)}


ORDER_BODY = {
    "shipping_address": "1 Main St, Springfield",
    "payment": {"cardholder": "Alice", "last4": "4242"},
}


class TestIdentity:
    def test_missing_header_is_unauthorized(self, test_client):
        resp = test_client.get("/cart")
        assert resp.status_code == 401

    @pytest.mark.parametrize("value", ["999", "abc", ""])
    def test_unknown_or_malformed_user(self, test_client, value):
        resp = test_client.get("/cart", headers={"X-User-Id": value})
        assert resp.status_code == 401

    def test_health(self, test_client):
        resp = test_client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestUsersApi:
    def test_create_and_me(self, test_client):
        resp = test_client.post("/users", json={"username": "carol", "email": "carol@example.com"})
        assert resp.status_code == 201
        user = resp.json()
        assert user["is_admin"] is False

        me = test_client.get("/users/me", headers={"X-User-Id": str(user["id"])})
        assert me.status_code == 200
        assert me.json()["username"] == "carol"

    def test_duplicate_username(self, test_client, users):
        resp = test_client.post("/users", json={"username": "alice", "email": "other@example.com"})
        assert resp.status_code == 400
        assert resp.headers[ERROR_CODE_HEADER] == "Conflict"


class TestCartApi:
    def test_add_and_list(self, test_client, users, sneakers):
        headers = as_user(users["alice"])
        body = {"product_id": sneakers.id, "quantity": 2, "size": "9", "color": "Black"}

        resp = test_client.post("/cart/items", json=body, headers=headers)
        assert resp.status_code == 201
        test_client.post("/cart/items", json=body, headers=headers)

        lines = test_client.get("/cart", headers=headers).json()
        assert len(lines) == 1
        assert lines[0]["quantity"] == 4
        assert lines[0]["product"]["name"] == "Urban Street Sneakers"
        assert Decimal(lines[0]["product"]["price"]) == Decimal("100.00")

    def test_summary(self, test_client, users, sneakers):
        headers = as_user(users["alice"])
        test_client.post(
            "/cart/items",
            json={"product_id": sneakers.id, "quantity": 3, "size": "10", "color": "White"},
            headers=headers,
        )

        summary = test_client.get("/cart/summary", headers=headers).json()
        assert summary["item_count"] == 3
        assert Decimal(summary["subtotal"]) == Decimal("300.00")

    @pytest.mark.parametrize(
        "body,code",
        [
            ({"size": "42", "color": "Black"}, "InvalidVariant"),
            ({"size": "9", "color": "Black", "quantity": 0}, "InvalidQuantity"),
            ({"size": "9", "color": "Black", "product_id": 999}, "NotFound"),
        ],
    )
    def test_add_rejected(self, test_client, users, sneakers, body, code):
        payload = {"product_id": sneakers.id, **body}

        resp = test_client.post("/cart/items", json=payload, headers=as_user(users["alice"]))

        assert resp.status_code == 400
        assert resp.headers[ERROR_CODE_HEADER] == code
        assert test_client.get("/cart", headers=as_user(users["alice"])).json() == []

    def test_update_quantity(self, test_client, users, sneakers):
        headers = as_user(users["alice"])
        line = test_client.post(
            "/cart/items",
            json={"product_id": sneakers.id, "size": "9", "color": "Black"},
            headers=headers,
        ).json()

        resp = test_client.put(f"/cart/items/{line['id']}", json={"quantity": 6}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["quantity"] == 6

        resp = test_client.put(f"/cart/items/{line['id']}", json={"quantity": 0}, headers=headers)
        assert resp.status_code == 400

    def test_update_missing_and_foreign_line(self, test_client, users, sneakers):
        line = test_client.post(
            "/cart/items",
            json={"product_id": sneakers.id, "size": "9", "color": "Black"},
            headers=as_user(users["alice"]),
        ).json()

        resp = test_client.put("/cart/items/999", json={"quantity": 2}, headers=as_user(users["alice"]))
        assert resp.status_code == 404

        resp = test_client.put(f"/cart/items/{line['id']}", json={"quantity": 2}, headers=as_user(users["bob"]))
        assert resp.status_code == 403

        resp = test_client.delete(f"/cart/items/{line['id']}", headers=as_user(users["bob"]))
        assert resp.status_code == 403

    def test_remove_and_clear(self, test_client, users, sneakers, slippers):
        headers = as_user(users["alice"])
        line = test_client.post(
            "/cart/items",
            json={"product_id": sneakers.id, "size": "9", "color": "Black"},
            headers=headers,
        ).json()
        test_client.post(
            "/cart/items",
            json={"product_id": slippers.id, "size": "S", "color": "Grey"},
            headers=headers,
        )

        assert test_client.delete(f"/cart/items/{line['id']}", headers=headers).status_code == 204
        assert test_client.delete(f"/cart/items/{line['id']}", headers=headers).status_code == 404
        assert len(test_client.get("/cart", headers=headers).json()) == 1

        assert test_client.delete("/cart", headers=headers).status_code == 204
        assert test_client.get("/cart", headers=headers).json() == []

    def test_merge_guest_cart(self, test_client, users, sneakers, slippers):
        headers = as_user(users["alice"])
        test_client.post(
            "/cart/items",
            json={"product_id": sneakers.id, "size": "9", "color": "Black"},
            headers=headers,
        )

        resp = test_client.post(
            "/cart/merge",
            json={
                "items": [
                    {"product_id": sneakers.id, "quantity": 2, "size": "9", "color": "Black"},
                    {"product_id": slippers.id, "quantity": 1, "size": "M", "color": "Grey"},
                ]
            },
            headers=headers,
        )

        assert resp.status_code == 200
        assert [(i["product_id"], i["quantity"]) for i in resp.json()] == [(sneakers.id, 3), (slippers.id, 1)]


class TestOrdersApi:
    def test_place_order(self, test_client, users, sneakers):
        headers = as_user(users["alice"])
        test_client.post(
            "/cart/items",
            json={"product_id": sneakers.id, "quantity": 2, "size": "9", "color": "Black"},
            headers=headers,
        )

        resp = test_client.post("/orders", json=ORDER_BODY, headers=headers)

        assert resp.status_code == 201
        order = resp.json()
        assert order["status"] == "pending"
        # 200 + 0 shipping + 16 tax
        assert Decimal(order["total_amount"]) == Decimal("216.00")
        assert [Decimal(i["price"]) for i in order["items"]] == [Decimal("100.00")]
        assert "payment" not in order
        assert test_client.get("/cart", headers=headers).json() == []

        listed = test_client.get("/orders", headers=headers).json()
        assert [o["id"] for o in listed] == [order["id"]]

    def test_empty_cart(self, test_client, users):
        resp = test_client.post("/orders", json=ORDER_BODY, headers=as_user(users["alice"]))

        assert resp.status_code == 400
        assert resp.headers[ERROR_CODE_HEADER] == "EmptyCart"

    def test_missing_payment_is_rejected(self, test_client, users, sneakers):
        headers = as_user(users["alice"])
        test_client.post(
            "/cart/items",
            json={"product_id": sneakers.id, "size": "9", "color": "Black"},
            headers=headers,
        )

        resp = test_client.post("/orders", json={**ORDER_BODY, "payment": {}}, headers=headers)

        assert resp.status_code == 422
        assert len(test_client.get("/cart", headers=headers).json()) == 1

    def test_payment_rejected_by_service_is_400(self, test_client, users):
        svc = MagicMock()
        svc.place_order.side_effect = InvalidPayment("Payment details are required")
        app.dependency_overrides[orders.get_service] = lambda: svc

        resp = test_client.post("/orders", json=ORDER_BODY, headers=as_user(users["alice"]))

        assert resp.status_code == 400
        assert resp.headers[ERROR_CODE_HEADER] == "InvalidPayment"

    def test_order_visibility(self, test_client, users, sneakers):
        headers = as_user(users["alice"])
        test_client.post(
            "/cart/items",
            json={"product_id": sneakers.id, "size": "9", "color": "Black"},
            headers=headers,
        )
        order = test_client.post("/orders", json=ORDER_BODY, headers=headers).json()

        assert test_client.get(f"/orders/{order['id']}", headers=headers).status_code == 200
        assert test_client.get(f"/orders/{order['id']}", headers=as_user(users["bob"])).status_code == 403
        assert test_client.get(f"/orders/{order['id']}", headers=as_user(users["admin"])).status_code == 200
        assert test_client.get("/orders/999", headers=headers).status_code == 404


class TestProductsApi:
    def test_catalog_queries(self, test_client, sneakers, slippers):
        assert [p["id"] for p in test_client.get("/products").json()] == [sneakers.id, slippers.id]
        assert [p["id"] for p in test_client.get("/products/featured").json()] == [slippers.id]
        assert [p["id"] for p in test_client.get("/products/category/men").json()] == [sneakers.id]
        assert [p["id"] for p in test_client.get("/products", params={"category": "slippers"}).json()] == [slippers.id]
        assert test_client.get("/products/new-arrivals").json() == []
        assert test_client.get(f"/products/{sneakers.id}").json()["name"] == "Urban Street Sneakers"
        assert test_client.get("/products/999").status_code == 404

    def test_unknown_category(self, test_client):
        assert test_client.get("/products/category/pets").status_code == 422

    def test_admin_only_mutations(self, test_client, users):
        body = {
            "name": "Trail Boots",
            "price": "75.50",
            "category": "women",
            "sizes": ["7", "8"],
            "colors": ["Brown"],
            "new_arrival": True,
        }

        assert test_client.post("/products", json=body).status_code == 401
        assert test_client.post("/products", json=body, headers=as_user(users["alice"])).status_code == 403

        resp = test_client.post("/products", json=body, headers=as_user(users["admin"]))
        assert resp.status_code == 201
        product = resp.json()
        assert Decimal(product["price"]) == Decimal("75.50")

        resp = test_client.put(
            f"/products/{product['id']}", json={"price": "60.00"}, headers=as_user(users["admin"])
        )
        assert resp.status_code == 200
        assert Decimal(resp.json()["price"]) == Decimal("60.00")
        assert resp.json()["sizes"] == ["7", "8"]

        assert test_client.delete(f"/products/{product['id']}", headers=as_user(users["admin"])).status_code == 204
        assert test_client.get(f"/products/{product['id']}").status_code == 404

    def test_product_needs_sizes_and_colors(self, test_client, users):
        body = {"name": "Nothing", "price": "10.00", "category": "baby", "sizes": [], "colors": ["Red"]}

        resp = test_client.post("/products", json=body, headers=as_user(users["admin"]))

        assert resp.status_code == 422


class TestAdminApi:
    @pytest.fixture
    def order(self, test_client, users, sneakers):
        headers = as_user(users["alice"])
        test_client.post(
            "/cart/items",
            json={"product_id": sneakers.id, "size": "9", "color": "Black"},
            headers=headers,
        )
        return test_client.post("/orders", json=ORDER_BODY, headers=headers).json()

    def test_non_admin_is_forbidden(self, test_client, users, order):
        assert test_client.get("/admin/orders", headers=as_user(users["alice"])).status_code == 403

    def test_list_and_update_status(self, test_client, users, order):
        headers = as_user(users["admin"])

        assert [o["id"] for o in test_client.get("/admin/orders", headers=headers).json()] == [order["id"]]

        resp = test_client.patch(f"/admin/orders/{order['id']}/status", json={"status": "processing"}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["status"] == "processing"

        resp = test_client.patch(f"/admin/orders/{order['id']}/status", json={"status": "pending"}, headers=headers)
        assert resp.status_code == 400
        assert resp.headers[ERROR_CODE_HEADER] == "InvalidStatusTransition"

        resp = test_client.patch("/admin/orders/999/status", json={"status": "shipped"}, headers=headers)
        assert resp.status_code == 404
