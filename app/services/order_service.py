# app/services/order_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from app.core.errors import InvalidStatusTransition, NotFound
from app.core.pricing import format_price
from app.models.order import Order
from app.repositories.order_repo import OrderRepository
from app.schemas.order import (
    OrderLineRead,
    OrderRead,
    OrderStatusUpdate,
    OrderWithLinesRead,
)

logger = logging.getLogger(__name__)

# Allowed status moves; completed and cancelled are final.
STATUS_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"preparing", "cancelled"},
    "preparing": {"ready", "cancelled"},
    "ready": {"completed", "cancelled"},
    "completed": set(),
    "cancelled": set(),
}


def can_transition(current: str, new: str) -> bool:
    return new in STATUS_TRANSITIONS.get(current, set())


class OrderService:
    """
    Read and admin operations on placed orders.

    Placing orders is OrderSubmissionService's job; this covers:
      - customers listing their own orders
      - admin listing / detail / status updates
    """

    def __init__(self, order_repo: OrderRepository, currency: str = "USD"):
        self.order_repo = order_repo
        self.currency = currency

    # -------- User-facing operations --------

    def list_user_orders(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        """
        List orders for the given user (without items).
        """
        return self.order_repo.list_for_user(session, user_id, skip, limit)

    def get_user_order(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> OrderWithLinesRead:
        """
        Get a single order for the user, including items.

        - NotFound if the order does not exist or belongs to someone else.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order or order.user_id != user_id:
            raise NotFound("Order not found")
        return self._with_lines(session, order)

    # -------- Admin operations --------

    def list_all_orders(
        self,
        session: Session,
        status: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        return self.order_repo.list_all(session, status=status, skip=skip, limit=limit)

    def get_order_admin(self, session: Session, order_id: uuid.UUID) -> OrderWithLinesRead:
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise NotFound("Order not found")
        return self._with_lines(session, order)

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> OrderRead:
        """
        Admin status update, following STATUS_TRANSITIONS:

          pending   -> preparing, cancelled
          preparing -> ready, cancelled
          ready     -> completed, cancelled
          completed -> (final)
          cancelled -> (final)

        Setting the current status again is a no-op.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise NotFound("Order not found")

        current = order.status
        new = payload.status

        if current == new:
            return OrderRead.model_validate(order)

        if not can_transition(current, new):
            raise InvalidStatusTransition(f"Invalid status transition: {current} -> {new}")

        order.status = new
        order.updated_at = datetime.now(timezone.utc)
        order = self.order_repo.update_order(session, order)
        logger.info("Order %s: %s -> %s", order_id, current, new)
        return OrderRead.model_validate(order)

    # -------- Helper DTO builder --------

    def _with_lines(self, session: Session, order: Order) -> OrderWithLinesRead:
        items = [
            OrderLineRead(
                id=line.id,
                order_id=line.order_id,
                product_id=line.product_id,
                product_name=product.name if product else None,
                image_url=product.image_url if product else None,
                quantity=line.quantity,
                unit_price=line.unit_price,
                line_total=line.line_total,
            )
            for line, product in self.order_repo.list_items_for_order(session, order.id)
        ]
        return OrderWithLinesRead(
            **OrderRead.model_validate(order).model_dump(),
            items=items,
            formatted_total=format_price(order.total_amount, self.currency),
        )
