# app/services/settings_service.py
from sqlmodel import Session

from app.core.errors import NotFound
from app.models.settings import CafeSetting
from app.repositories.settings_repo import SettingsRepository
from app.schemas.settings import CafeSettingsUpdate


class SettingsService:
    """
    Storefront settings (cafe name, address, opening hours, ...).

    Keys are seeded in the database; this service only edits values.
    """

    def __init__(self, repo: SettingsRepository):
        self.repo = repo

    def list_settings(self, session: Session) -> list[CafeSetting]:
        return self.repo.list_settings(session)

    def update_settings(self, session: Session, payload: CafeSettingsUpdate) -> list[CafeSetting]:
        """
        Update several values at once; nothing is written if any key is unknown.
        """
        existing = self.repo.get_many(session, list(payload.values))
        missing = sorted(set(payload.values) - set(existing))
        if missing:
            raise NotFound(f"Unknown setting(s): {', '.join(missing)}")

        for key, value in payload.values.items():
            existing[key].value = value
        self.repo.save_all(session, list(existing.values()))
        return self.repo.list_settings(session)
