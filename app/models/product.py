# app/models/product.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlmodel import SQLModel, Field


class Category(SQLModel, table=True):
    """
    Menu category (e.g. "Coffee", "Pastries").

    Columns:
      - id, name, description, display_order, created_at
    """

    __tablename__ = "categories"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        index=True,
        description="Display name of the category",
    )

    description: str | None = Field(
        default=None,
        description="Optional short description",
    )

    display_order: int = Field(
        default=0,
        description="Ordering index on the storefront",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class Product(SQLModel, table=True):
    """
    Menu item sold by the cafe.

    Columns:
      - id, category_id, name, description, price,
        image_url, is_available, display_order, created_at
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    category_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="categories.id",
        index=True,
    )

    name: str = Field(
        max_length=100,
        index=True,
        description="Display name of the menu item",
    )

    description: str | None = Field(
        default=None,
        description="Optional long description",
    )

    price: Decimal = Field(
        ge=0,
        max_digits=10,
        decimal_places=2,
        description="Unit price",
    )

    image_url: str | None = Field(
        default=None,
        description="Public image URL",
    )

    is_available: bool = Field(
        default=True,
        index=True,
        description="Whether this item can currently be ordered",
    )

    display_order: int = Field(
        default=0,
        description="Ordering index on the storefront",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
