"""
Component tests for checkout, payment, cancellation and the admin
order state machine.
"""
import pytest
from fastapi.testclient import TestClient

from app.models.product import Product

CART = "/api/v1/cart"
ORDERS = "/api/v1/orders"

SHIPPING = {
    "recipient_name": "Aisyah Rahman",
    "phone": "012-345 6789",
    "shipping_address": "12 Jalan Ampang",
    "city": "Kuala Lumpur",
    "state_code": "KUL",
    "postal_code": "50450",
}


@pytest.fixture
def consumer_headers(headers, consumer):
    return headers(consumer)


@pytest.fixture
def admin_headers(headers, admin):
    return headers(admin)


@pytest.fixture
def placed_order(client, consumer_headers, panadol):
    client.post(CART, json={"product_id": str(panadol.id), "quantity": 2}, headers=consumer_headers)
    response = client.post(f"{ORDERS}/checkout", json=SHIPPING, headers=consumer_headers)
    assert response.status_code == 200
    return response.json()


class TestCheckout:
    def test_creates_pending_order_with_delivery_fee(self, placed_order, panadol):
        assert placed_order["status"] == "pending"
        assert placed_order["subtotal"] == 25.00
        assert placed_order["delivery_fee"] == 5.00
        assert placed_order["total_amount"] == 30.00
        item = placed_order["items"][0]
        assert item["product_id"] == str(panadol.id)
        assert item["price"] == 12.50
        assert item["product_name"] == "Panadol Extra"
        assert item["line_total"] == 25.00

    def test_free_delivery_over_threshold(self, client, consumer_headers, vitamin_c):
        client.post(CART, json={"product_id": str(vitamin_c.id), "quantity": 2}, headers=consumer_headers)

        response = client.post(f"{ORDERS}/checkout", json=SHIPPING, headers=consumer_headers)

        assert response.json()["delivery_fee"] == 0.0
        assert response.json()["total_amount"] == 91.00

    def test_express_delivery(self, client, consumer_headers, vitamin_c):
        client.post(CART, json={"product_id": str(vitamin_c.id), "quantity": 2}, headers=consumer_headers)

        response = client.post(
            f"{ORDERS}/checkout",
            json={**SHIPPING, "express_delivery": True},
            headers=consumer_headers,
        )

        assert response.json()["delivery_fee"] == 10.0

    def test_deducts_stock_and_clears_cart(
        self, client, session, consumer_headers, placed_order, panadol
    ):
        session.refresh(panadol)
        assert panadol.stock_quantity == 8

        cart = client.get(CART, headers=consumer_headers).json()
        assert cart["items"] == []

    def test_prices_are_frozen(self, client, session, consumer_headers, placed_order, panadol):
        panadol.price = 99.00
        session.add(panadol)
        session.commit()

        response = client.get(f"{ORDERS}/me/{placed_order['id']}", headers=consumer_headers)

        assert response.json()["items"][0]["price"] == 12.50
        assert response.json()["total_amount"] == 30.00

    def test_empty_cart(self, client, consumer_headers):
        response = client.post(f"{ORDERS}/checkout", json=SHIPPING, headers=consumer_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Cart is empty"

    def test_postal_code_must_match_state(self, client, consumer_headers, panadol):
        client.post(CART, json={"product_id": str(panadol.id)}, headers=consumer_headers)

        response = client.post(
            f"{ORDERS}/checkout",
            json={**SHIPPING, "postal_code": "99999"},
            headers=consumer_headers,
        )

        assert response.status_code == 422

    def test_invalid_phone(self, client, consumer_headers):
        response = client.post(
            f"{ORDERS}/checkout",
            json={**SHIPPING, "phone": "notaphone"},
            headers=consumer_headers,
        )

        assert response.status_code == 422

    def test_stock_drop_after_adding_fails_checkout(
        self, client, session, consumer_headers, vitamin_c
    ):
        client.post(CART, json={"product_id": str(vitamin_c.id), "quantity": 4}, headers=consumer_headers)
        vitamin_c.stock_quantity = 2
        session.add(vitamin_c)
        session.commit()

        response = client.post(f"{ORDERS}/checkout", json=SHIPPING, headers=consumer_headers)

        assert response.status_code == 400
        assert response.json()["detail"]["message"] == "Cart validation failed"


class TestPayment:
    def test_pay_confirms_order(self, client, consumer_headers, placed_order):
        response = client.post(
            f"{ORDERS}/{placed_order['id']}/pay",
            json={"method": "fpx"},
            headers=consumer_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "confirmed"
        assert data["payment_method"] == "fpx"
        assert data["paid_at"] is not None

    def test_card_requires_details(self, client, consumer_headers, placed_order):
        response = client.post(
            f"{ORDERS}/{placed_order['id']}/pay",
            json={"method": "card"},
            headers=consumer_headers,
        )

        assert response.status_code == 422

    def test_card_payment(self, client, consumer_headers, placed_order):
        response = client.post(
            f"{ORDERS}/{placed_order['id']}/pay",
            json={
                "method": "card",
                "card": {
                    "number": "4111111111111111",
                    "expiry": "12/29",
                    "cvv": "123",
                    "name": "AISYAH RAHMAN",
                },
            },
            headers=consumer_headers,
        )

        assert response.status_code == 200
        assert response.json()["payment_method"] == "card"

    @pytest.mark.parametrize("field, value", [("expiry", "13/29"), ("cvv", "12a")])
    def test_malformed_card_details(self, client, consumer_headers, placed_order, field, value):
        card = {
            "number": "4111111111111111",
            "expiry": "12/29",
            "cvv": "123",
            "name": "AISYAH RAHMAN",
        }
        card[field] = value

        response = client.post(
            f"{ORDERS}/{placed_order['id']}/pay",
            json={"method": "card", "card": card},
            headers=consumer_headers,
        )

        assert response.status_code == 422

    def test_cannot_pay_twice(self, client, consumer_headers, placed_order):
        url = f"{ORDERS}/{placed_order['id']}/pay"
        client.post(url, json={"method": "ewallet"}, headers=consumer_headers)

        response = client.post(url, json={"method": "ewallet"}, headers=consumer_headers)

        assert response.status_code == 400

    def test_other_users_order_is_hidden(self, client, headers, vendor, placed_order):
        response = client.post(
            f"{ORDERS}/{placed_order['id']}/pay",
            json={"method": "fpx"},
            headers=headers(vendor),
        )

        assert response.status_code == 404


class TestCancel:
    def test_cancel_restores_stock(self, client, session, consumer_headers, placed_order, panadol):
        response = client.post(
            f"{ORDERS}/{placed_order['id']}/cancel",
            json={"reason": "Ordered by mistake"},
            headers=consumer_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "cancelled"
        assert data["cancellation_reason"] == "Ordered by mistake"
        assert data["cancelled_at"] is not None
        session.refresh(panadol)
        assert panadol.stock_quantity == 10

    def test_cannot_cancel_shipped_order(
        self, client, consumer_headers, admin_headers, placed_order
    ):
        order_id = placed_order["id"]
        for new_status in ("confirmed", "processing", "shipped"):
            client.patch(
                f"{ORDERS}/{order_id}/status",
                json={"status": new_status},
                headers=admin_headers,
            )

        response = client.post(
            f"{ORDERS}/{order_id}/cancel",
            json={"reason": "Too late"},
            headers=consumer_headers,
        )

        assert response.status_code == 400


class TestListing:
    def test_my_orders_with_status_filter(self, client, consumer_headers, placed_order):
        all_orders = client.get(f"{ORDERS}/me", headers=consumer_headers).json()
        delivered = client.get(
            f"{ORDERS}/me", params={"status": "delivered"}, headers=consumer_headers
        ).json()

        assert [o["id"] for o in all_orders] == [placed_order["id"]]
        assert delivered == []

    def test_admin_list_requires_admin(self, client, consumer_headers, placed_order):
        response = client.get(ORDERS, headers=consumer_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == "Requires role: admin"

    def test_admin_sees_all_orders(self, client, admin_headers, placed_order):
        response = client.get(ORDERS, headers=admin_headers)

        assert [o["id"] for o in response.json()] == [placed_order["id"]]

    def test_vendor_sees_lines_for_own_products(self, client, headers, vendor, placed_order, panadol):
        response = client.get("/api/v1/vendor/orders", headers=headers(vendor))

        assert response.status_code == 200
        lines = response.json()
        assert len(lines) == 1
        assert lines[0]["product_id"] == str(panadol.id)
        assert lines[0]["quantity"] == 2
        assert lines[0]["line_total"] == 25.00


class TestStatusMachine:
    def test_full_lifecycle(self, client, admin_headers, placed_order):
        url = f"{ORDERS}/{placed_order['id']}/status"

        for new_status in ("confirmed", "processing", "shipped", "delivered"):
            response = client.patch(
                url,
                json={"status": new_status, "tracking_number": "MY123456789"},
                headers=admin_headers,
            )
            assert response.status_code == 200
            assert response.json()["status"] == new_status

        assert response.json()["tracking_number"] == "MY123456789"

    @pytest.mark.parametrize("new_status", ["processing", "shipped", "delivered"])
    def test_invalid_jump_from_pending(self, client, admin_headers, placed_order, new_status):
        response = client.patch(
            f"{ORDERS}/{placed_order['id']}/status",
            json={"status": new_status},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == f"Invalid status transition: pending -> {new_status}"

    def test_admin_cancel_restores_stock(self, client, session, admin_headers, placed_order, panadol):
        response = client.patch(
            f"{ORDERS}/{placed_order['id']}/status",
            json={"status": "cancelled"},
            headers=admin_headers,
        )

        assert response.json()["status"] == "cancelled"
        assert session.get(Product, panadol.id).stock_quantity == 10

    def test_cancelled_is_terminal(self, client, admin_headers, placed_order):
        url = f"{ORDERS}/{placed_order['id']}/status"
        client.patch(url, json={"status": "cancelled"}, headers=admin_headers)

        response = client.patch(url, json={"status": "confirmed"}, headers=admin_headers)

        assert response.status_code == 400
