# app/schemas/user.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict
from sqlmodel import SQLModel

RoleName = Literal["user", "moderator", "admin"]


class Identity(SQLModel):
    """
    Authenticated caller, as handed out by Supabase Auth.

    Nothing beyond these two fields is read by the ordering core.
    """

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    phone: str | None = None


class ProfileRead(SQLModel):
    """Profile with its effective role (admin screens)."""

    id: uuid.UUID
    phone: str | None
    first_name: str | None
    last_name: str | None
    full_name: str
    role: RoleName
    created_at: datetime


class MeRead(SQLModel):
    """Response for GET /auth/me."""

    authenticated: bool
    identity: Identity | None = None
    role: RoleName | None = None


class UserRoleUpdate(SQLModel):
    """
    Admin-only role update schema.
    """

    model_config = ConfigDict(extra="forbid")
    role: RoleName
