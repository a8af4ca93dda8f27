# app/repositories/user_repo.py
import uuid

from sqlmodel import Session, select

from app.models.user import Profile, UserRoleAssignment


class UserRepository:
    """
    Data access layer for profiles and role assignments.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    # ----- Profiles -----

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> Profile | None:
        """Return a Profile by primary key, or None if not found."""
        return session.get(Profile, user_id)

    def list_profiles(self, session: Session, skip: int = 0, limit: int = 50) -> list[Profile]:
        """
        Paginated profile listing, newest first.
        """
        stmt = (
            select(Profile)
            .order_by(Profile.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def create(self, session: Session, profile: Profile) -> Profile:
        """Insert a new Profile and return the persisted row."""
        session.add(profile)
        session.commit()
        session.refresh(profile)
        return profile

    # ----- Roles -----

    def role_names_for_user(self, session: Session, user_id: uuid.UUID) -> list[str]:
        stmt = select(UserRoleAssignment.role).where(UserRoleAssignment.user_id == user_id)
        return list(session.exec(stmt).all())

    def role_names_for_users(
        self,
        session: Session,
        user_ids: list[uuid.UUID],
    ) -> dict[uuid.UUID, list[str]]:
        result: dict[uuid.UUID, list[str]] = {uid: [] for uid in user_ids}
        if not user_ids:
            return result
        stmt = select(UserRoleAssignment).where(UserRoleAssignment.user_id.in_(user_ids))
        for row in session.exec(stmt).all():
            result.setdefault(row.user_id, []).append(row.role)
        return result

    def replace_roles(
        self,
        session: Session,
        user_id: uuid.UUID,
        role: str | None,
    ) -> None:
        """
        Drop every role row for the user, then add `role` if given.
        """
        stmt = select(UserRoleAssignment).where(UserRoleAssignment.user_id == user_id)
        for row in session.exec(stmt).all():
            session.delete(row)
        if role is not None:
            session.add(UserRoleAssignment(user_id=user_id, role=role))
        session.commit()
