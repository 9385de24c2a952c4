"""
Tests for POST /api/orders.
"""
import json

import pytest

from tuhoshop.core.exceptions import DatabaseException
from tuhoshop.db import AsyncOrderRepository, Order
from tuhoshop.services.notification_builder import NO_PRODUCTS_LINE

GRANOLA_ITEMS = json.dumps(
    [{"id": "1", "name": "Granola", "price": 80000, "image": "/img/granola.jpg", "quantity": 2}]
)


def _payload(**overrides):
    data = {
        "name": "Nguyen A",
        "phone": "0909000000",
        "address": "Hanoi",
        "items": GRANOLA_ITEMS,
        "total": 160000,
    }
    data.update(overrides)
    return data


class TestCreateOrder:
    def test_returns_created_record(self, client, database):
        response = client.post("/api/orders", json=_payload())

        assert response.status_code == 201
        body = response.json()
        assert isinstance(body["id"], int)
        assert body["status"] == "pending"
        assert body["total"] == 160000
        assert body["email"] is None
        assert "createdAt" in body
        assert "created_at" not in body
        with database.session_factory() as session:
            assert session.get(Order, body["id"]).phone == "0909000000"

    def test_items_round_trip(self, client):
        body = client.post("/api/orders", json=_payload()).json()

        assert json.loads(body["items"]) == json.loads(GRANOLA_ITEMS)

    def test_ids_increase(self, client):
        first = client.post("/api/orders", json=_payload()).json()
        second = client.post("/api/orders", json=_payload()).json()

        assert second["id"] > first["id"]

    def test_optional_email_is_stored(self, client):
        body = client.post("/api/orders", json=_payload(email="a@example.com")).json()

        assert body["email"] == "a@example.com"

    def test_empty_order_is_accepted(self, client, order_repo):
        response = client.post("/api/orders", json=_payload(items="[]", total=0))

        assert response.status_code == 201
        assert response.json()["total"] == 0
        assert order_repo.count_orders() == 1

    def test_items_as_typed_lines(self, client, notifier):
        lines = [{"id": 3, "name": "Honey", "price": 120000, "quantity": 1}]
        response = client.post("/api/orders", json=_payload(items=lines, total=120000))

        assert response.status_code == 201
        assert json.loads(response.json()["items"]) == [
            {"id": 3, "name": "Honey", "price": 120000.0, "quantity": 1}
        ]
        assert "• 1 × Honey — 120.000 VND" in notifier.messages[0]


class TestNotification:
    def test_admin_is_notified(self, client, notifier):
        body = client.post("/api/orders", json=_payload()).json()

        assert len(notifier.messages) == 1
        assert f"Đơn Hàng Mới #{body['id']}" in notifier.messages[0]
        assert "• 2 × Granola — 160.000 VND" in notifier.messages[0]

    def test_unparsable_items_still_accepted(self, client, notifier):
        response = client.post("/api/orders", json=_payload(items="definitely not json"))

        assert response.status_code == 201
        assert response.json()["items"] == "definitely not json"
        assert NO_PRODUCTS_LINE in notifier.messages[0]

    def test_delivery_failure_does_not_fail_order(self, client, notifier, order_repo):
        notifier.deliver = False

        response = client.post("/api/orders", json=_payload())

        assert response.status_code == 201
        assert order_repo.count_orders() == 1


class TestValidation:
    def test_missing_fields_are_listed(self, client, order_repo, notifier):
        response = client.post("/api/orders", json={"name": "Nguyen A"})

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Missing required order information"
        assert {error["field"] for error in body["errors"]} == {"phone", "address", "items", "total"}
        assert order_repo.count_orders() == 0
        assert notifier.messages == []

    @pytest.mark.parametrize("field", ["name", "phone", "address"])
    def test_blank_field_is_rejected(self, client, order_repo, field):
        response = client.post("/api/orders", json=_payload(**{field: "   "}))

        assert response.status_code == 400
        assert [error["field"] for error in response.json()["errors"]] == [field]
        assert order_repo.count_orders() == 0

    @pytest.mark.parametrize("total", ["160000", True, -1, None])
    def test_total_must_be_non_negative_number(self, client, total):
        response = client.post("/api/orders", json=_payload(total=total))

        assert response.status_code == 400
        assert [error["field"] for error in response.json()["errors"]] == ["total"]

    @pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN"])
    def test_total_must_be_finite(self, client, order_repo, literal):
        raw = json.dumps(_payload(total=0)).replace('"total": 0', f'"total": {literal}')

        response = client.post("/api/orders", content=raw, headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert [error["field"] for error in response.json()["errors"]] == ["total"]
        assert order_repo.count_orders() == 0

    def test_bad_email_is_rejected(self, client):
        response = client.post("/api/orders", json=_payload(email="nope"))

        assert response.status_code == 400
        assert response.json()["errors"] == [{"field": "email", "message": "Invalid email address"}]

    def test_malformed_line_is_rejected(self, client, order_repo):
        response = client.post("/api/orders", json=_payload(items=[{"name": "Honey", "quantity": 0}]))

        assert response.status_code == 400
        assert [error["field"] for error in response.json()["errors"]] == ["items"]
        assert order_repo.count_orders() == 0


def test_database_failure_is_500(api_app, client, notifier):
    class FailingRepository:
        def create_order(self, **kwargs):
            raise DatabaseException("database is unreachable")

    api_app.state.orders = AsyncOrderRepository(FailingRepository())

    response = client.post("/api/orders", json=_payload())

    assert response.status_code == 500
    assert response.json()["message"] == "Lỗi khi xử lý đơn hàng"
    assert notifier.messages == []
