# app/repositories/stats_repo.py
from decimal import Decimal

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.order import Order
from app.models.product import Category, Product
from app.models.user import Profile


class StatsRepository:
    """
    Read-only aggregated queries for admin dashboard.
    """

    def _count(self, session: Session, model) -> int:
        stmt = select(func.count()).select_from(model)
        value = session.exec(stmt).one()
        return int(value or 0)

    def count_products(self, session: Session) -> int:
        return self._count(session, Product)

    def count_categories(self, session: Session) -> int:
        return self._count(session, Category)

    def count_orders(self, session: Session) -> int:
        return self._count(session, Order)

    def count_users(self, session: Session) -> int:
        return self._count(session, Profile)

    def count_orders_with_status(self, session: Session, status: str) -> int:
        stmt = select(func.count()).select_from(Order).where(Order.status == status)
        return int(session.exec(stmt).one() or 0)

    def completed_revenue(self, session: Session) -> Decimal:
        """
        Sum of total_amount for completed orders only.
        """
        stmt = (
            select(func.coalesce(func.sum(Order.total_amount), 0))
            .where(Order.status == "completed")
        )
        value = session.exec(stmt).one()
        return Decimal(str(value or 0))

    def latest_orders(
        self,
        session: Session,
        limit: int = 5,
    ) -> list[Order]:
        """
        Latest N orders by created_at (any status).
        """
        stmt = (
            select(Order)
            .order_by(Order.created_at.desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())
