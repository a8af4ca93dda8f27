# app/repositories/settings_repo.py
from sqlmodel import Session, select

from app.models.settings import CafeSetting


class SettingsRepository:

    def list_settings(self, session: Session) -> list[CafeSetting]:
        stmt = select(CafeSetting).order_by(CafeSetting.key)
        return list(session.exec(stmt).all())

    def get_many(self, session: Session, keys: list[str]) -> dict[str, CafeSetting]:
        if not keys:
            return {}
        stmt = select(CafeSetting).where(CafeSetting.key.in_(keys))
        return {s.key: s for s in session.exec(stmt).all()}

    def save_all(self, session: Session, rows: list[CafeSetting]) -> None:
        session.add_all(rows)
        session.commit()
