# app/services/user_service.py
import logging
import uuid

from sqlmodel import Session

from app.core.errors import NotFound
from app.core.roles import Role
from app.models.user import Profile
from app.repositories.user_repo import UserRepository
from app.schemas.user import Identity, ProfileRead, UserRoleUpdate

logger = logging.getLogger(__name__)


def highest_role(role_names: list[str]) -> Role:
    """
    Effective role from a user's role rows (admin > moderator > user).

    Unknown names are ignored; no rows means a plain customer.
    """
    best = Role.USER
    for name in role_names:
        try:
            role = Role.parse(name)
        except ValueError:
            continue
        best = max(best, role)
    return best


def _full_name(profile: Profile) -> str:
    full = f"{profile.first_name or ''} {profile.last_name or ''}".strip()
    return full or "Anonymous"


class UserService:
    """
    Business logic for profiles and roles.

    Responsibilities:
      - resolve a user's effective role (the access gate)
      - provision a profile row the first time an identity shows up
      - admin role management
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    # ----- Access gate -----

    def get_role(self, session: Session, user_id: uuid.UUID) -> Role:
        """
        Effective role of a user. Falls back to USER if the lookup fails.
        """
        try:
            names = self.repo.role_names_for_user(session, user_id)
        except Exception as exc:
            logger.warning("Role lookup failed for %s, defaulting to user: %s", user_id, exc)
            session.rollback()
            return Role.USER
        return highest_role(names)

    def ensure_profile(self, session: Session, identity: Identity) -> Profile:
        """
        Return the profile for `identity`, creating a minimal one if missing.
        """
        profile = self.repo.get_by_id(session, identity.id)
        if profile is None:
            profile = self.repo.create(session, Profile(id=identity.id, phone=identity.phone))
        return profile

    # ----- Admin operations -----

    def list_users(self, session: Session, skip: int = 0, limit: int = 50) -> list[ProfileRead]:
        """List profiles with their effective role (admin only)."""
        profiles = self.repo.list_profiles(session, skip=skip, limit=limit)
        roles = self.repo.role_names_for_users(session, [p.id for p in profiles])
        return [self._to_read(p, highest_role(roles.get(p.id, []))) for p in profiles]

    def get_user(self, session: Session, user_id: uuid.UUID) -> ProfileRead:
        """
        Get a profile by id (admin only).

        Raises:
            NotFound: if there is no such profile.
        """
        profile = self.repo.get_by_id(session, user_id)
        if not profile:
            raise NotFound("User not found")
        return self._to_read(profile, self.get_role(session, user_id))

    def update_role(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: UserRoleUpdate,
    ) -> ProfileRead:
        """
        Change a user's role (admin only).

        Plain customers carry no role row, so "user" just clears them.
        """
        profile = self.repo.get_by_id(session, user_id)
        if not profile:
            raise NotFound("User not found")

        role = Role.parse(payload.role)
        self.repo.replace_roles(session, user_id, None if role is Role.USER else role.label)
        logger.info("Role of %s set to %s", user_id, role.label)
        return self._to_read(profile, role)

    @staticmethod
    def _to_read(profile: Profile, role: Role) -> ProfileRead:
        return ProfileRead(
            id=profile.id,
            phone=profile.phone,
            first_name=profile.first_name,
            last_name=profile.last_name,
            full_name=_full_name(profile),
            role=role.label,
            created_at=profile.created_at,
        )
