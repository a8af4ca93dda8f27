# app/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Profile(SQLModel, table=True):
    """
    Customer profile mirrored from Supabase Auth.

    Identity:
      - id: MUST match Supabase auth.users.id (UUID from JWT "sub")

    Phone sign-in means there is no email or password here; Supabase Auth
    owns the credentials.
    """

    __tablename__ = "profiles"

    id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Matches Supabase auth.users.id",
    )

    phone: str | None = Field(
        default=None,
        index=True,
        description="Verified phone number (E.164)",
    )

    first_name: str | None = Field(default=None, max_length=50)
    last_name: str | None = Field(default=None, max_length=50)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class UserRoleAssignment(SQLModel, table=True):
    """
    Elevated role granted to a user.

    Users without any row are plain customers ("user").
    """

    __tablename__ = "user_roles"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
    )

    user_id: uuid.UUID = Field(index=True)

    # admin | moderator
    role: str = Field(index=True)
