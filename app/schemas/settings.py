# app/schemas/settings.py
import uuid

from pydantic import ConfigDict
from sqlmodel import SQLModel


class CafeSettingRead(SQLModel):
    id: uuid.UUID
    key: str
    value: str | None
    type: str


class CafeSettingsUpdate(SQLModel):
    """
    Bulk update: {"values": {"cafe_name": "...", "opening_hours": "..."}}.
    """

    model_config = ConfigDict(extra="forbid")

    values: dict[str, str]
