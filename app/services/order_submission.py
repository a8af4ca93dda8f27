# app/services/order_submission.py
import asyncio
import logging
import uuid
from decimal import Decimal
from typing import Callable

from sqlmodel import Session

from app.core.errors import (
    EmptyCart,
    InvalidInput,
    OrderLinesWriteFailed,
    OrderWriteFailed,
    SubmissionTimeout,
    Unauthenticated,
)
from app.core.pricing import format_price
from app.models.order import Order, OrderItem
from app.repositories.order_repo import OrderRepository
from app.schemas.order import OrderLineRead, OrderWithLinesRead
from app.schemas.user import Identity
from app.services.cart_store import CartSnapshot

logger = logging.getLogger(__name__)

FAILED_MESSAGE = "Failed to place order. Please try again."


class OrderSubmissionService:
    """
    Turns a cart snapshot into an Order plus its OrderItems.

    Two writes, in order:
      1. insert the Order (status='pending', total = snapshot total)
      2. insert every OrderItem in one batch, using the new order id

    The writes are not atomic. If (2) fails the Order row stays behind
    without lines, unless `compensate_orphans` is set, in which case a
    delete of that Order is attempted. Either way the caller gets
    OrderLinesWriteFailed.

    Storage calls are blocking; each one runs in a worker thread, on a
    Session of its own from `session_factory`, and is bounded by
    `phase_timeout` seconds (None = wait forever). A timed-out worker keeps
    its Session until it finishes, so nothing else touches it.
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        session_factory: Callable[[], Session],
        *,
        phase_timeout: float | None = 10.0,
        compensate_orphans: bool = False,
        currency: str = "USD",
    ):
        self.order_repo = order_repo
        self.session_factory = session_factory
        self.phase_timeout = phase_timeout
        self.compensate_orphans = compensate_orphans
        self.currency = currency

    # ---- public ----

    async def submit(
        self,
        identity: Identity | None,
        snapshot: CartSnapshot,
        customer_name: str | None,
        notes: str | None = None,
    ) -> OrderWithLinesRead:
        """
        Write the order for `snapshot` on behalf of `identity`.

        Raises (nothing written):
            Unauthenticated, EmptyCart, InvalidInput, OrderWriteFailed
        Raises (order row may exist):
            OrderLinesWriteFailed, SubmissionTimeout
        """
        if identity is None:
            raise Unauthenticated("Please sign in with your phone number to place an order.")
        if not snapshot.items:
            raise EmptyCart("Your cart is empty.")

        name = (customer_name or "").strip()
        if not name:
            raise InvalidInput("Please enter your name.")
        notes = (notes or "").strip() or None

        # Phase 1: order row
        order = Order(
            user_id=identity.id,
            total_amount=snapshot.total,
            status="pending",
            phone=identity.phone,
            customer_name=name,
            notes=notes,
        )
        try:
            order = await self._run_phase(1, self.order_repo.insert_order, order)
        except SubmissionTimeout:
            logger.error("Order write timed out after %ss (user %s)", self.phase_timeout, identity.id)
            raise
        except Exception as exc:
            logger.error("Order write failed for user %s: %s", identity.id, exc)
            raise OrderWriteFailed(FAILED_MESSAGE) from exc

        order_id = order.id

        # Phase 2: line items, one batch
        lines = [
            OrderItem(
                order_id=order_id,
                product_id=it.product_id,
                quantity=it.quantity,
                unit_price=it.unit_price,
                line_total=it.line_total,
            )
            for it in snapshot.items
        ]
        try:
            lines = await self._run_phase(
                2, self.order_repo.insert_lines, lines, order_id=order_id
            )
        except SubmissionTimeout:
            # The insert may still land; deleting underneath it is not safe.
            logger.error("Order %s: line items write timed out, order may be incomplete", order_id)
            raise
        except Exception as exc:
            logger.error("Order %s was written without line items: %s", order_id, exc)
            if self.compensate_orphans:
                await self._delete_orphan(order_id)
            raise OrderLinesWriteFailed(FAILED_MESSAGE, order_id=order_id) from exc

        logger.info(
            "Order %s placed: %d line(s), total %s",
            order_id,
            len(lines),
            format_price(snapshot.total, self.currency),
        )
        return self._build_dto(order, lines, snapshot)

    # ---- helpers ----

    def _in_own_session(self, fn, payload):
        with self.session_factory() as session:
            return fn(session, payload)

    async def _run_phase(self, phase: int, fn, payload, order_id: uuid.UUID | None = None):
        call = asyncio.to_thread(self._in_own_session, fn, payload)
        if self.phase_timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self.phase_timeout)
        except asyncio.TimeoutError:
            raise SubmissionTimeout(
                "The order is taking too long to go through. Please check your orders before retrying.",
                phase=phase,
                order_id=order_id,
            ) from None

    async def _delete_orphan(self, order_id: uuid.UUID) -> None:
        logger.warning("Order %s: deleting order without line items", order_id)
        try:
            await self._run_phase(2, self.order_repo.delete_order, order_id, order_id=order_id)
        except Exception as exc:
            logger.error("Order %s: compensating delete failed: %s", order_id, exc)

    def _build_dto(
        self,
        order: Order,
        lines: list[OrderItem],
        snapshot: CartSnapshot,
    ) -> OrderWithLinesRead:
        by_product = {it.product_id: it for it in snapshot.items}
        items: list[OrderLineRead] = []
        for line in lines:
            source = by_product.get(line.product_id)
            items.append(
                OrderLineRead(
                    id=line.id,
                    order_id=line.order_id,
                    product_id=line.product_id,
                    product_name=source.name if source else None,
                    image_url=source.image_url if source else None,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    line_total=line.line_total,
                )
            )

        return OrderWithLinesRead(
            id=order.id,
            user_id=order.user_id,
            total_amount=Decimal(order.total_amount),
            status=order.status,
            phone=order.phone,
            customer_name=order.customer_name,
            notes=order.notes,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=items,
            formatted_total=format_price(order.total_amount, self.currency),
        )
