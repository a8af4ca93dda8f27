# app/models/settings.py
import uuid

from sqlmodel import SQLModel, Field


class CafeSetting(SQLModel, table=True):
    """
    Key/value store for storefront settings (name, address, hours...).
    """

    __tablename__ = "cafe_settings"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
    )

    key: str = Field(unique=True, index=True)
    value: str | None = None

    # text | textarea | url | phone | email
    type: str = Field(default="text")
