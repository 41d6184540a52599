from datetime import datetime, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from badgeshop.db import SessionLocal
from badgeshop.main import app
from badgeshop.models.order import Order, OrderItem
from badgeshop.models.user import User
from badgeshop.utils.security import hash_password

client = TestClient(app)


@pytest.fixture(scope="module")
def user_with_orders():
    db = SessionLocal()
    try:
        user = User(first_name="Linus", last_name="Pauling", email="linus@example.com", password=hash_password("x"))
        db.add(user)
        db.flush()
        older = Order(
            order_ref="ORD-1-aaaaa",
            user_id=user.id,
            email=user.email,
            address="1 Lab Way",
            city="Pasadena",
            postal_code="91125",
            country="US",
            subtotal=Decimal("45.95"),
            tax=Decimal("7.35"),
            shipping=Decimal("5.99"),
            total=Decimal("59.29"),
            order_date=datetime(2026, 3, 4, 9, 30, tzinfo=timezone.utc),
        )
        older.items = [
            OrderItem(product_id="1", name="Standard ID Badge", price=Decimal("12.99"), quantity=3),
            OrderItem(product_id="3", name="Badge Reel", price=Decimal("6.99"), quantity=1),
        ]
        newer = Order(
            order_ref="ORD-2-bbbbb",
            user_id=user.id,
            email=user.email,
            address="1 Lab Way",
            city="Pasadena",
            postal_code="91125",
            country="US",
            subtotal=Decimal("0"),
            tax=Decimal("0"),
            shipping=Decimal("0"),
            total=Decimal("0"),
            order_date=datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
        )
        db.add_all([older, newer])
        db.commit()
        return user.id
    finally:
        db.close()


def test_orders_require_user_id():
    res = client.get("/api/orders")
    assert res.status_code == 400
    assert res.json() == {"error": "User ID is required"}


def test_orders_newest_first_with_display_fields(user_with_orders):
    res = client.get("/api/orders", params={"userId": user_with_orders})
    assert res.status_code == 200
    orders = res.json()
    assert [o["orderNumber"] for o in orders] == ["ORD-2-bbbbb", "ORD-1-aaaaa"]

    newer, older = orders
    assert newer["formattedDate"] == "October 19, 2026"
    assert newer["description"] == "No items available"
    assert older["formattedDate"] == "March 4, 2026"
    assert older["isoDate"].startswith("2026-03-04T09:30:00")
    assert older["timestamp"] == int(datetime(2026, 3, 4, 9, 30, tzinfo=timezone.utc).timestamp() * 1000)
    assert older["description"] == "2 item(s): 3 × Standard ID Badge, 1 × Badge Reel"
    assert older["first_name"] == "Linus"
    assert older["total"] == 59.29
    assert older["items"][0]["product_name"] == "Standard ID Badge"


def test_unknown_user_has_no_orders():
    res = client.get("/api/orders", params={"userId": 987654})
    assert res.status_code == 200
    assert res.json() == []
