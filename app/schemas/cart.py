# app/schemas/cart.py
import uuid
from decimal import Decimal

from sqlmodel import SQLModel, Field


class LineItem(SQLModel):
    """
    One product in the in-memory cart.

    `product_id` is unique within a cart; `quantity` is never below 1
    while the item is present.
    """

    product_id: uuid.UUID
    name: str
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    image_url: str | None = None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.
    """

    product_id: uuid.UUID
    quantity: int = Field(default=1, gt=0)


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart item.

    Zero or negative quantities remove the item.
    """

    quantity: int


class CartItemRead(SQLModel):
    """
    Read model for a single cart item, including line_total.
    """

    product_id: uuid.UUID
    name: str
    unit_price: Decimal
    quantity: int
    image_url: str | None = None
    line_total: Decimal


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartItemRead]
    total_quantity: int
    total_price: Decimal
    formatted_total: str
