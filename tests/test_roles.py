"""Tests for the role hierarchy."""

import pytest

from app.core.roles import Role, at_least
from app.services.user_service import highest_role


def test_roles_are_ordered():
    assert Role.USER < Role.MODERATOR < Role.ADMIN


@pytest.mark.parametrize(
    "role, required, allowed",
    [
        (Role.ADMIN, Role.ADMIN, True),
        (Role.ADMIN, Role.MODERATOR, True),
        (Role.MODERATOR, Role.MODERATOR, True),
        (Role.MODERATOR, Role.ADMIN, False),
        (Role.USER, Role.MODERATOR, False),
        (None, Role.USER, False),
    ],
)
def test_at_least(role, required, allowed):
    assert at_least(role, required) is allowed


def test_parse_role_names():
    assert Role.parse("Admin") is Role.ADMIN
    assert Role.parse(" moderator ") is Role.MODERATOR
    with pytest.raises(ValueError):
        Role.parse("owner")


def test_highest_role_picks_most_privileged():
    assert highest_role([]) is Role.USER
    assert highest_role(["moderator"]) is Role.MODERATOR
    assert highest_role(["moderator", "admin"]) is Role.ADMIN
    assert highest_role(["owner", "moderator"]) is Role.MODERATOR
