# app/routers/orders.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_identity, require_admin
from app.core.config import get_settings
from app.database import get_session
from app.repositories.order_repo import OrderRepository
from app.schemas.order import (
    OrderRead,
    OrderStatus,
    OrderStatusUpdate,
    OrderWithLinesRead,
)
from app.schemas.user import Identity
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

settings = get_settings()

order_repo = OrderRepository()
service = OrderService(order_repo, currency=settings.CURRENCY)


# -------- User-facing endpoints --------


@router.get(
    "/me",
    response_model=list[OrderRead],
)
def list_my_orders(
    session: Session = Depends(get_session),
    identity: Identity = Depends(require_identity),
    skip: int = 0,
    limit: int = 50,
):
    """
    List the authenticated customer's orders (without items), newest first.
    """
    return service.list_user_orders(session, identity.id, skip, limit)


@router.get(
    "/me/{order_id}",
    response_model=OrderWithLinesRead,
)
def get_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    identity: Identity = Depends(require_identity),
):
    """
    Get a single order (with items) belonging to the current customer.
    """
    return service.get_user_order(session, identity.id, order_id)


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=list[OrderRead],
    dependencies=[Depends(require_admin)],
)
def list_all_orders(
    session: Session = Depends(get_session),
    status: OrderStatus | None = None,
    skip: int = 0,
    limit: int = 50,
):
    """
    List all orders, newest first (admin only).

    Optional `status` filter.
    """
    return service.list_all_orders(session, status=status, skip=skip, limit=limit)


@router.get(
    "/{order_id}",
    response_model=OrderWithLinesRead,
    dependencies=[Depends(require_admin)],
)
def get_order_admin(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get any order with items (admin only).
    """
    return service.get_order_admin(session, order_id)


@router.patch(
    "/{order_id}/status",
    response_model=OrderRead,
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Update order status (admin only).

      pending   -> preparing, cancelled

      preparing -> ready, cancelled

      ready     -> completed, cancelled

      completed, cancelled -> (final)

    """
    return service.update_status(session, order_id, payload)
