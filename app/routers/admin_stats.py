# app/routers/admin_stats.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_admin
from app.core.config import get_settings
from app.database import get_session
from app.repositories.stats_repo import StatsRepository
from app.schemas.stats import AdminDashboardStats
from app.services.stats_service import StatsService

router = APIRouter(prefix="/admin/stats", tags=["Admin Stats"])

repo = StatsRepository()
service = StatsService(repo, currency=get_settings().CURRENCY)


@router.get(
    "",
    response_model=AdminDashboardStats,
    dependencies=[Depends(require_admin)],
)
def get_admin_dashboard_stats(session: Session = Depends(get_session)):
    """
    Aggregated statistics for the admin dashboard.

    Revenue counts completed orders only.

    Only accessible to users with role='admin'.
    """
    return service.get_admin_dashboard_stats(session=session)
