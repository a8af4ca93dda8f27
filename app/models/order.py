# app/models/order.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Customer order, paid at pickup.

    Columns:
      - id, user_id, total_amount, status, phone,
        customer_name, notes, created_at, updated_at
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    # Supabase auth.users.id of the customer
    user_id: uuid.UUID = Field(index=True)

    # Cart total at submission time
    total_amount: Decimal = Field(
        ge=0,
        max_digits=10,
        decimal_places=2,
    )

    # pending | preparing | ready | completed | cancelled
    status: str = Field(
        default="pending",
        index=True,
        description="Order status lifecycle",
    )

    phone: str | None = Field(
        default=None,
        description="Contact phone from the verified identity",
    )
    customer_name: str = Field(
        max_length=100,
        description="Name to call out at pickup",
    )
    notes: str | None = Field(
        default=None,
        description="Optional special instructions",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Last status change (UTC)",
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order.

    Columns:
      - id, order_id, product_id, quantity, unit_price, line_total
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    unit_price: Decimal = Field(
        max_digits=10,
        decimal_places=2,
        description="Unit price at time of order",
    )

    line_total: Decimal = Field(
        max_digits=10,
        decimal_places=2,
        description="unit_price * quantity",
    )
