# app/services/stats_service.py
from sqlmodel import Session

from app.core.pricing import format_price
from app.repositories.stats_repo import StatsRepository
from app.schemas.stats import AdminDashboardStats, RecentOrderSummary


class StatsService:
    """
    Orchestrates aggregated admin dashboard statistics.
    """

    def __init__(self, repo: StatsRepository, currency: str = "USD"):
        self.repo = repo
        self.currency = currency

    def get_admin_dashboard_stats(
        self,
        session: Session,
        latest_n_orders: int = 5,
    ) -> AdminDashboardStats:
        # Revenue only counts orders that were actually picked up
        revenue = self.repo.completed_revenue(session)

        recent_orders = [
            RecentOrderSummary(
                id=o.id,
                customer_name=o.customer_name,
                phone=o.phone,
                total_amount=o.total_amount,
                status=o.status,
                created_at=o.created_at,
            )
            for o in self.repo.latest_orders(session, limit=latest_n_orders)
        ]

        return AdminDashboardStats(
            total_products=self.repo.count_products(session),
            total_categories=self.repo.count_categories(session),
            total_orders=self.repo.count_orders(session),
            total_users=self.repo.count_users(session),
            pending_orders=self.repo.count_orders_with_status(session, "pending"),
            total_revenue=revenue,
            formatted_revenue=format_price(revenue, self.currency),
            recent_orders=recent_orders,
        )
