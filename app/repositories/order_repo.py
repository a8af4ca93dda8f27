# app/repositories/order_repo.py
import uuid

from sqlmodel import Session, select

from app.models.order import Order, OrderItem
from app.models.product import Product


class OrderRepository:
    """
    Data access layer for orders and order_items.

    NOTE:
      - Order submission is two separate writes on purpose: `insert_order`
        and `insert_lines` each commit on their own. The submission
        service owns what happens when the second one fails.
    """

    # ---- Writes used by order submission ----

    def insert_order(self, session: Session, order: Order) -> Order:
        """
        Insert and commit an Order; the returned row has its id.
        """
        session.add(order)
        session.commit()
        session.refresh(order)
        return order

    def insert_lines(self, session: Session, lines: list[OrderItem]) -> list[OrderItem]:
        """
        Insert all lines of one order as a single batch.
        """
        try:
            session.add_all(lines)
            session.commit()
        except Exception:
            session.rollback()
            raise
        for line in lines:
            session.refresh(line)
        return lines

    def delete_order(self, session: Session, order_id: uuid.UUID) -> None:
        """
        Remove an order and any lines that did make it into storage.
        """
        stmt = select(OrderItem).where(OrderItem.order_id == order_id)
        for line in session.exec(stmt).all():
            session.delete(line)
        order = session.get(Order, order_id)
        if order is not None:
            session.delete(order)
        session.commit()

    # ---- Orders ----

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def list_all(
        self,
        session: Session,
        status: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = select(Order)
        if status is not None:
            stmt = stmt.where(Order.status == status)
        stmt = stmt.order_by(Order.created_at.desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def update_order(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.commit()
        session.refresh(order)
        return order

    # ---- Order items ----

    def list_items_for_order(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> list[tuple[OrderItem, Product | None]]:
        """
        Lines of an order, each paired with its product (if it still exists).
        """
        stmt = (
            select(OrderItem, Product)
            .join(Product, Product.id == OrderItem.product_id, isouter=True)
            .where(OrderItem.order_id == order_id)
        )
        return list(session.exec(stmt).all())
