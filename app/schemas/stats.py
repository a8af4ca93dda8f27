# app/schemas/stats.py
import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict
from sqlmodel import SQLModel

from app.schemas.order import OrderStatus


class RecentOrderSummary(SQLModel):
    """
    Lightweight info for last N orders.
    """
    model_config = ConfigDict(extra="forbid")

    id: uuid.UUID
    customer_name: str
    phone: str | None
    total_amount: Decimal
    status: OrderStatus
    created_at: datetime


class AdminDashboardStats(SQLModel):
    """
    Full payload for admin dashboard.
    """
    model_config = ConfigDict(extra="forbid")

    total_products: int
    total_categories: int
    total_orders: int
    total_users: int
    pending_orders: int
    total_revenue: Decimal
    formatted_revenue: str
    recent_orders: list[RecentOrderSummary]
