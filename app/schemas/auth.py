# app/schemas/auth.py
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel

from app.schemas.user import Identity

PhoneAuthStep = Literal["awaiting_phone", "awaiting_code"]


class PhoneSubmit(SQLModel):
    model_config = ConfigDict(extra="forbid")

    phone: str

    @field_validator("phone")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("phone cannot be empty")
        return v


class CodeSubmit(SQLModel):
    model_config = ConfigDict(extra="forbid")

    code: str


class PhoneAuthView(SQLModel):
    """
    Current state of the phone sign-in dialog for this session.
    """

    step: PhoneAuthStep
    phone: str | None = None
    identity: Identity | None = None
