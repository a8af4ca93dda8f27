"""HTTP tests for the admin screens and the role gate in front of them."""

import uuid
from decimal import Decimal

import pytest

from app.models.order import Order, OrderItem
from app.models.settings import CafeSetting
from app.models.user import Profile, UserRoleAssignment

from conftest import auth_headers

API = "/api/v1"


@pytest.fixture
def place_order(db, menu):
    """Insert an order (with one latte line) straight into the database."""

    def _place(status="pending", quantity=1, customer_name="Sam"):
        latte = menu["latte"]
        total = latte.price * quantity
        order = Order(
            user_id=uuid.uuid4(),
            total_amount=total,
            status=status,
            phone="+15551234567",
            customer_name=customer_name,
        )
        db.add(order)
        db.commit()
        db.add(
            OrderItem(
                order_id=order.id,
                product_id=latte.id,
                quantity=quantity,
                unit_price=latte.price,
                line_total=total,
            )
        )
        db.commit()
        db.refresh(order)
        return order

    return _place


@pytest.fixture
def cafe_settings(db):
    rows = [
        CafeSetting(key="cafe_name", value="Corner Cafe"),
        CafeSetting(key="opening_hours", value="7-15", type="textarea"),
    ]
    db.add_all(rows)
    db.commit()
    return rows


# -------- Role gate --------


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/orders"),
        ("get", "/users"),
        ("get", "/admin/stats"),
        ("post", "/categories"),
        ("put", "/settings"),
    ],
)
def test_admin_screens_reject_guests_and_customers(client, method, path):
    resp = client.request(method.upper(), f"{API}{path}", json={})
    assert resp.status_code == 401

    resp = client.request(method.upper(), f"{API}{path}", json={}, headers=auth_headers(uuid.uuid4()))
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Admin access required"


def test_moderator_is_not_admin(client, db):
    moderator = uuid.uuid4()
    db.add(Profile(id=moderator, phone="+15550002222"))
    db.add(UserRoleAssignment(user_id=moderator, role="moderator"))
    db.commit()

    resp = client.get(f"{API}/orders", headers=auth_headers(moderator))

    assert resp.status_code == 403


def test_admin_role_is_reported_by_me(client, admin_headers):
    me = client.get(f"{API}/auth/me", headers=admin_headers).json()
    assert me["authenticated"] is True
    assert me["role"] == "admin"


# -------- Orders --------


def test_admin_lists_orders_with_status_filter(client, admin_headers, place_order):
    pending = place_order()
    place_order(status="completed")

    resp = client.get(f"{API}/orders", headers=admin_headers)
    assert resp.status_code == 200
    assert len(resp.json()) == 2

    resp = client.get(f"{API}/orders", params={"status": "pending"}, headers=admin_headers)
    assert [o["id"] for o in resp.json()] == [str(pending.id)]


def test_admin_order_detail_includes_lines(client, admin_headers, place_order):
    order = place_order(quantity=2)

    detail = client.get(f"{API}/orders/{order.id}", headers=admin_headers).json()

    assert detail["formatted_total"] == "$9.00"
    assert detail["items"][0]["product_name"] == "Latte"
    assert detail["items"][0]["quantity"] == 2


def test_order_moves_through_lifecycle(client, admin_headers, place_order):
    order = place_order()
    url = f"{API}/orders/{order.id}/status"

    for status in ("preparing", "ready", "completed"):
        resp = client.patch(url, json={"status": status}, headers=admin_headers)
        assert resp.status_code == 200, resp.text
        assert resp.json()["status"] == status


@pytest.mark.parametrize(
    "current, new",
    [
        ("pending", "completed"),
        ("pending", "ready"),
        ("ready", "preparing"),
        ("completed", "cancelled"),
        ("cancelled", "pending"),
    ],
)
def test_illegal_status_transitions_are_rejected(client, admin_headers, place_order, current, new):
    order = place_order(status=current)

    resp = client.patch(f"{API}/orders/{order.id}/status", json={"status": new}, headers=admin_headers)

    assert resp.status_code == 400
    assert resp.json()["detail"] == f"Invalid status transition: {current} -> {new}"


def test_same_status_is_a_noop(client, admin_headers, place_order):
    order = place_order(status="ready")

    resp = client.patch(f"{API}/orders/{order.id}/status", json={"status": "ready"}, headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json()["status"] == "ready"


def test_unknown_status_is_422(client, admin_headers, place_order):
    order = place_order()

    resp = client.patch(f"{API}/orders/{order.id}/status", json={"status": "lost"}, headers=admin_headers)

    assert resp.status_code == 422


def test_status_update_for_missing_order_is_404(client, admin_headers):
    resp = client.patch(
        f"{API}/orders/{uuid.uuid4()}/status", json={"status": "ready"}, headers=admin_headers
    )
    assert resp.status_code == 404


# -------- Users --------


def test_admin_lists_users_with_roles(client, db, admin_user, admin_headers):
    customer = Profile(id=uuid.uuid4(), phone="+15550003333", first_name="Kim")
    db.add(customer)
    db.commit()

    users = {u["id"]: u for u in client.get(f"{API}/users", headers=admin_headers).json()}

    assert users[str(admin_user.id)]["role"] == "admin"
    assert users[str(admin_user.id)]["full_name"] == "Ada Admin"
    assert users[str(customer.id)]["role"] == "user"
    assert users[str(customer.id)]["full_name"] == "Kim"


def test_admin_changes_user_role(client, db, admin_headers):
    customer = uuid.uuid4()
    db.add(Profile(id=customer, phone="+15550004444"))
    db.commit()
    url = f"{API}/users/{customer}/role"

    resp = client.patch(url, json={"role": "moderator"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["role"] == "moderator"
    assert resp.json()["full_name"] == "Anonymous"
    assert client.get(f"{API}/users/{customer}", headers=admin_headers).json()["role"] == "moderator"

    resp = client.patch(url, json={"role": "user"}, headers=admin_headers)
    assert resp.json()["role"] == "user"
    assert client.get(f"{API}/users/{customer}", headers=admin_headers).json()["role"] == "user"


def test_role_update_validation(client, admin_headers):
    resp = client.patch(f"{API}/users/{uuid.uuid4()}/role", json={"role": "admin"}, headers=admin_headers)
    assert resp.status_code == 404

    resp = client.patch(f"{API}/users/{uuid.uuid4()}/role", json={"role": "owner"}, headers=admin_headers)
    assert resp.status_code == 422


# -------- Dashboard --------


def test_dashboard_stats(client, admin_headers, place_order):
    place_order(status="completed", quantity=2)
    place_order(status="completed")
    place_order(status="pending", quantity=3)
    place_order(status="cancelled")

    stats = client.get(f"{API}/admin/stats", headers=admin_headers).json()

    assert stats["total_orders"] == 4
    assert stats["pending_orders"] == 1
    assert stats["total_products"] == 4
    assert stats["total_categories"] == 2
    assert stats["total_users"] == 1
    assert Decimal(stats["total_revenue"]) == Decimal("13.50")
    assert stats["formatted_revenue"] == "$13.50"
    assert len(stats["recent_orders"]) == 4


# -------- Settings --------


def test_settings_are_public(client, cafe_settings):
    resp = client.get(f"{API}/settings")
    assert [s["key"] for s in resp.json()] == ["cafe_name", "opening_hours"]


def test_admin_updates_settings(client, admin_headers, cafe_settings):
    resp = client.put(
        f"{API}/settings",
        json={"values": {"cafe_name": "Harbour Cafe", "opening_hours": "8-16"}},
        headers=admin_headers,
    )

    assert resp.status_code == 200
    values = {s["key"]: s["value"] for s in resp.json()}
    assert values == {"cafe_name": "Harbour Cafe", "opening_hours": "8-16"}


def test_unknown_setting_rejects_whole_update(client, admin_headers, cafe_settings):
    resp = client.put(
        f"{API}/settings",
        json={"values": {"cafe_name": "Harbour Cafe", "wifi_password": "hunter2"}},
        headers=admin_headers,
    )

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Unknown setting(s): wifi_password"
    values = {s["key"]: s["value"] for s in client.get(f"{API}/settings").json()}
    assert values["cafe_name"] == "Corner Cafe"


# -------- Menu management --------


def test_admin_manages_menu(client, admin_headers, menu):
    resp = client.post(
        f"{API}/categories",
        json={"name": "  Cold Drinks ", "display_order": 3},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    category = resp.json()
    assert category["name"] == "Cold Drinks"

    resp = client.post(
        f"{API}/products",
        json={"category_id": category["id"], "name": "Iced Tea", "price": "3.50"},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    product = resp.json()

    resp = client.patch(
        f"{API}/products/{product['id']}",
        json={"price": "3.75", "is_available": False},
        headers=admin_headers,
    )
    assert Decimal(resp.json()["price"]) == Decimal("3.75")
    assert resp.json()["is_available"] is False
    names = [p["name"] for p in client.get(f"{API}/products").json()]
    assert "Iced Tea" not in names

    resp = client.delete(f"{API}/categories/{category['id']}", headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Category still contains products"

    assert client.delete(f"{API}/products/{product['id']}", headers=admin_headers).status_code == 204
    assert client.delete(f"{API}/categories/{category['id']}", headers=admin_headers).status_code == 204
    assert [c["name"] for c in client.get(f"{API}/categories").json()] == ["Coffee", "Pastries"]


def test_product_in_unknown_category_is_404(client, admin_headers):
    resp = client.post(
        f"{API}/products",
        json={"category_id": str(uuid.uuid4()), "name": "Ghost", "price": "1.00"},
        headers=admin_headers,
    )
    assert resp.status_code == 404


def test_blank_product_name_is_422(client, admin_headers):
    resp = client.post(
        f"{API}/products",
        json={"name": "   ", "price": "1.00"},
        headers=admin_headers,
    )
    assert resp.status_code == 422
