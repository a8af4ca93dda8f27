# app/schemas/order.py
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.core.errors import SubmissionErrorKind
from app.schemas.cart import CartSummary

OrderStatus = Literal["pending", "preparing", "ready", "completed", "cancelled"]
SubmissionState = Literal["idle", "submitting"]


class CheckoutForm(SQLModel):
    """
    Customer-supplied checkout fields.

    Kept on the client session between attempts so a failed submission
    can be retried without re-entering them.
    """

    model_config = ConfigDict(extra="forbid")

    customer_name: str = Field(default="", max_length=100)
    notes: str | None = None

    @field_validator("notes", mode="before")
    @classmethod
    def normalize_notes(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class CheckoutSubmit(SQLModel):
    """
    Submit payload. Fields left out fall back to the stored form.
    """

    model_config = ConfigDict(extra="forbid")

    customer_name: str | None = Field(default=None, max_length=100)
    notes: str | None = None


class CheckoutView(SQLModel):
    """
    What the checkout screen needs: form, cart and submission state.
    """

    state: SubmissionState
    form: CheckoutForm
    cart: CartSummary
    phone: str | None
    can_submit: bool


class OrderRead(SQLModel):
    """
    Lightweight representation of an order (without items).
    """

    id: uuid.UUID
    user_id: uuid.UUID
    total_amount: Decimal
    status: OrderStatus
    phone: str | None
    customer_name: str
    notes: str | None
    created_at: datetime
    updated_at: datetime


class OrderLineRead(SQLModel):
    """
    Representation of a single order line item.
    """

    id: uuid.UUID
    order_id: uuid.UUID
    product_id: uuid.UUID
    product_name: str | None = None
    image_url: str | None = None
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderWithLinesRead(OrderRead):
    """
    Full order view including items.
    """

    items: list[OrderLineRead]
    formatted_total: str


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus


class SubmissionOutcome(SQLModel):
    """
    Single user-facing notification for a checkout attempt.
    """

    success: bool
    kind: SubmissionErrorKind | None = None
    title: str
    message: str
    order: OrderWithLinesRead | None = None
