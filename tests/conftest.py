"""Shared pytest fixtures for the cafe ordering API."""

import os

# Settings are read at import time; configure before importing the app.
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")

import threading
import time
import uuid
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.core.auth import get_session_registry
from app.core.auth_gateway import get_auth_gateway
from app.core.errors import AuthGatewayError
from app.database import get_session
from app.main import app
from app.models.product import Category, Product
from app.models.user import Profile, UserRoleAssignment
from app.repositories.order_repo import OrderRepository
from app.routers.checkout import get_order_submission
from app.schemas.cart import LineItem
from app.schemas.user import Identity
from app.services.order_submission import OrderSubmissionService
from app.services.sessions import SessionRegistry

VALID_CODE = "123456"


# -------- Fakes --------


class FakeAuthGateway:
    """Phone OTP provider that accepts VALID_CODE for any number it texted."""

    def __init__(self):
        self.requested: list[str] = []
        self.verified: list[tuple[str, str]] = []
        self.fail_requests = False

    def request_code(self, phone: str) -> None:
        if self.fail_requests:
            raise AuthGatewayError("SMS provider unavailable")
        self.requested.append(phone)

    def verify_code(self, phone: str, code: str) -> Identity:
        self.verified.append((phone, code))
        if phone not in self.requested or code != VALID_CODE:
            raise AuthGatewayError("Token has expired or is invalid")
        return Identity(id=uuid.uuid5(uuid.NAMESPACE_URL, phone), phone=phone)


class FakeOrderRepository:
    """
    In-memory stand-in for OrderRepository.

    `block` (a threading.Event) makes insert_order wait until it is set.
    """

    def __init__(self, fail_order=False, fail_lines=False, fail_delete=False, block=None):
        self.fail_order = fail_order
        self.fail_lines = fail_lines
        self.fail_delete = fail_delete
        self.block = block
        self.orders: dict = {}
        self.lines: list = []
        self.calls: list[str] = []

    @property
    def write_count(self) -> int:
        return sum(1 for c in self.calls if c.startswith("insert"))

    def lines_for(self, order_id):
        return [line for line in self.lines if line.order_id == order_id]

    def insert_order(self, session, order):
        self.calls.append("insert_order")
        if self.block is not None:
            self.block.wait(timeout=5)
        if self.fail_order:
            raise RuntimeError("connection refused")
        self.orders[order.id] = order
        return order

    def insert_lines(self, session, lines):
        self.calls.append("insert_lines")
        if self.fail_lines:
            raise RuntimeError("violates foreign key constraint")
        self.lines.extend(lines)
        return lines

    def delete_order(self, session, order_id):
        self.calls.append("delete_order")
        if self.fail_delete:
            raise RuntimeError("permission denied")
        self.orders.pop(order_id, None)
        self.lines = [line for line in self.lines if line.order_id != order_id]


# -------- Builders --------


def make_line(name="Coffee", price="4.50", quantity=1, product_id=None) -> LineItem:
    return LineItem(
        product_id=product_id or uuid.uuid5(uuid.NAMESPACE_DNS, name.lower()),
        name=name,
        unit_price=Decimal(price),
        quantity=quantity,
    )


def make_token(user_id: uuid.UUID, phone: str | None = "15550001111") -> str:
    claims = {
        "sub": str(user_id),
        "phone": phone,
        "role": "authenticated",
        "exp": int(time.time()) + 3600,
    }
    return jwt.encode(claims, os.environ["SUPABASE_JWT_SECRET"], algorithm="HS256")


def auth_headers(user_id: uuid.UUID, phone: str | None = "15550001111") -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, phone)}"}


# -------- Fixtures --------


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def identity():
    return Identity(id=uuid.uuid4(), phone="+15550001111")


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


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def gateway():
    return FakeAuthGateway()


@pytest.fixture
def registry():
    return SessionRegistry()


@pytest.fixture
def client(engine, gateway, registry):
    """TestClient wired to the SQLite engine and the fake OTP provider."""

    def override_session():
        with Session(engine) as session:
            yield session

    submitter = OrderSubmissionService(
        OrderRepository(),
        lambda: Session(engine),
        phase_timeout=5.0,
    )

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_auth_gateway] = lambda: gateway
    app.dependency_overrides[get_session_registry] = lambda: registry
    app.dependency_overrides[get_order_submission] = lambda: submitter
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def menu(db):
    """Two categories with a few products, one of them unavailable."""
    drinks = Category(name="Coffee", description="Hot drinks", display_order=1)
    bakery = Category(name="Pastries", description="Baked daily", display_order=2)
    db.add_all([drinks, bakery])
    db.commit()

    products = {
        "latte": Product(
            category_id=drinks.id,
            name="Latte",
            description="Espresso with steamed milk",
            price=Decimal("4.50"),
            display_order=1,
        ),
        "americano": Product(
            category_id=drinks.id,
            name="Americano",
            description="Espresso topped with hot water",
            price=Decimal("3.25"),
            display_order=2,
        ),
        "croissant": Product(
            category_id=bakery.id,
            name="Croissant",
            description="Butter croissant",
            price=Decimal("2.75"),
            display_order=1,
        ),
        "scone": Product(
            category_id=bakery.id,
            name="Blueberry Scone",
            description="Seasonal",
            price=Decimal("3.00"),
            is_available=False,
        ),
    }
    db.add_all(products.values())
    db.commit()
    for p in products.values():
        db.refresh(p)
    return {"drinks": drinks, "bakery": bakery, **products}


@pytest.fixture
def admin_user(db):
    profile = Profile(id=uuid.uuid4(), phone="+15559990000", first_name="Ada", last_name="Admin")
    db.add(profile)
    db.add(UserRoleAssignment(user_id=profile.id, role="admin"))
    db.commit()
    db.refresh(profile)
    return profile


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user.id, "15559990000")


@pytest.fixture
def release_event():
    """Event for FakeOrderRepository.block; always released at teardown."""
    event = threading.Event()
    yield event
    event.set()
