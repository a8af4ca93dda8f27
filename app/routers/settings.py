# app/routers/settings.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.settings_repo import SettingsRepository
from app.schemas.settings import CafeSettingRead, CafeSettingsUpdate
from app.services.settings_service import SettingsService

router = APIRouter(prefix="/settings", tags=["Settings"])

repo = SettingsRepository()
service = SettingsService(repo)


@router.get("", response_model=list[CafeSettingRead])
def list_settings(session: Session = Depends(get_session)):
    """
    Storefront settings (name, address, hours...). Public.
    """
    return service.list_settings(session)


@router.put(
    "",
    response_model=list[CafeSettingRead],
    dependencies=[Depends(require_admin)],
)
def update_settings(
    payload: CafeSettingsUpdate,
    session: Session = Depends(get_session),
):
    """
    Update several settings at once (admin only).
    """
    return service.update_settings(session, payload)
