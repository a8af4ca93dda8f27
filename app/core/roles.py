# app/core/roles.py
from enum import IntEnum


class Role(IntEnum):
    """
    Application roles, ordered by privilege.

    "guest" is not a role: it is the absence of an identity.
    """

    USER = 1
    MODERATOR = 2
    ADMIN = 3

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, raw: str) -> "Role":
        try:
            return cls[raw.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown role: {raw!r}") from None


def at_least(role: Role | None, required: Role) -> bool:
    """Return True if `role` grants everything `required` does."""
    if role is None:
        return False
    return role >= required
