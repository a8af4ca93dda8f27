# app/services/cart_store.py
import uuid
from dataclasses import dataclass
from decimal import Decimal

from app.core.pricing import format_price
from app.schemas.cart import CartItemRead, CartSummary, LineItem


def cart_total(items) -> Decimal:
    """Sum of unit_price * quantity over any iterable of line items."""
    return sum((it.unit_price * it.quantity for it in items), Decimal("0"))


@dataclass(frozen=True)
class CartSnapshot:
    """
    Frozen copy of the cart, taken right before an order is written.
    """

    items: tuple[LineItem, ...]
    total: Decimal

    def __len__(self) -> int:
        return len(self.items)


class CartStore:
    """
    In-memory cart for one client session.

    Responsibilities:
      - keep one entry per product_id, in insertion order
      - never hold an entry with quantity < 1
      - derive the total from the entries on every read
    """

    def __init__(self, currency: str = "USD"):
        self.currency = currency
        self._items: dict[uuid.UUID, LineItem] = {}

    # ---- reads ----

    @property
    def items(self) -> list[LineItem]:
        return [it.model_copy() for it in self._items.values()]

    @property
    def total(self) -> Decimal:
        return cart_total(self._items.values())

    @property
    def item_count(self) -> int:
        return sum(it.quantity for it in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, product_id: uuid.UUID) -> bool:
        return product_id in self._items

    def get(self, product_id: uuid.UUID) -> LineItem | None:
        item = self._items.get(product_id)
        return item.model_copy() if item else None

    def is_empty(self) -> bool:
        return not self._items

    def snapshot(self) -> CartSnapshot:
        items = tuple(it.model_copy() for it in self._items.values())
        return CartSnapshot(items=items, total=cart_total(items))

    def summary(self) -> CartSummary:
        total = self.total
        return CartSummary(
            items=[
                CartItemRead(
                    product_id=it.product_id,
                    name=it.name,
                    unit_price=it.unit_price,
                    quantity=it.quantity,
                    image_url=it.image_url,
                    line_total=it.line_total,
                )
                for it in self._items.values()
            ],
            total_quantity=self.item_count,
            total_price=total,
            formatted_total=format_price(total, self.currency),
        )

    # ---- mutations ----

    def add_item(self, item: LineItem, quantity: int | None = None) -> None:
        """
        Add `quantity` units (default: item.quantity, usually 1).

        Merges into an existing entry for the same product.
        """
        qty = item.quantity if quantity is None else quantity
        if qty <= 0:
            return

        existing = self._items.get(item.product_id)
        if existing is not None:
            existing.quantity += qty
            return

        self._items[item.product_id] = item.model_copy(update={"quantity": qty})

    def update_quantity(self, product_id: uuid.UUID, new_quantity: int) -> None:
        """
        Set the quantity of an entry; zero or less removes it.
        """
        if product_id not in self._items:
            return
        if new_quantity <= 0:
            self.remove_item(product_id)
            return
        self._items[product_id].quantity = new_quantity

    def remove_item(self, product_id: uuid.UUID) -> None:
        self._items.pop(product_id, None)

    def deduct(self, snapshot: CartSnapshot) -> None:
        """
        Take the quantities in `snapshot` out of the cart.

        Lines added or topped up after the snapshot was taken stay behind;
        with no edits in between this empties the cart.
        """
        for ordered in snapshot.items:
            current = self._items.get(ordered.product_id)
            if current is not None:
                self.update_quantity(ordered.product_id, current.quantity - ordered.quantity)

    def clear(self) -> None:
        self._items.clear()
