# app/services/checkout.py
import logging
from enum import Enum

from app.core.errors import SubmissionError, SubmissionErrorKind
from app.schemas.order import CheckoutForm, CheckoutView, SubmissionOutcome
from app.schemas.user import Identity
from app.services.cart_store import CartStore
from app.services.order_submission import OrderSubmissionService

logger = logging.getLogger(__name__)


class SubmissionState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


class CheckoutSession:
    """
    Checkout screen state for one client session.

    Lifecycle of an attempt:
        IDLE -> SUBMITTING -> (success | failure) -> IDLE

    While SUBMITTING, further submits are turned away without writing
    anything. A failure keeps the form as typed; a success removes the
    ordered lines from the cart and clears the form.
    """

    def __init__(self, cart: CartStore):
        self.cart = cart
        self.form = CheckoutForm()
        self.state = SubmissionState.IDLE

    @property
    def submitting(self) -> bool:
        return self.state is SubmissionState.SUBMITTING

    def can_submit(self, identity: Identity | None) -> bool:
        return (
            not self.submitting
            and identity is not None
            and not self.cart.is_empty()
            and bool(self.form.customer_name.strip())
        )

    def update_form(self, customer_name: str | None = None, notes: str | None = None) -> None:
        data = self.form.model_dump()
        if customer_name is not None:
            data["customer_name"] = customer_name
        if notes is not None:
            data["notes"] = notes
        self.form = CheckoutForm.model_validate(data)

    def view(self, identity: Identity | None) -> CheckoutView:
        return CheckoutView(
            state=self.state.value,
            form=self.form,
            cart=self.cart.summary(),
            phone=identity.phone if identity else None,
            can_submit=self.can_submit(identity),
        )

    async def submit(
        self,
        submitter: OrderSubmissionService,
        identity: Identity | None,
        customer_name: str | None = None,
        notes: str | None = None,
    ) -> SubmissionOutcome:
        """
        Run one submission attempt and report it as a single outcome.
        """
        if self.submitting:
            logger.info("Ignoring checkout submit: a submission is already in flight")
            return SubmissionOutcome(
                success=False,
                kind=SubmissionErrorKind.IN_PROGRESS,
                title="Order in progress",
                message="Your order is already being placed.",
            )

        self.update_form(customer_name, notes)
        self.state = SubmissionState.SUBMITTING
        try:
            # Snapshot before the first await; later cart edits do not
            # reach this order.
            snapshot = self.cart.snapshot()
            order = await submitter.submit(
                identity,
                snapshot,
                self.form.customer_name,
                self.form.notes,
            )
        except SubmissionError as exc:
            if exc.wrote_order:
                logger.error("Checkout failed; an order row may have been written (%s)", exc.kind.value)
            else:
                logger.warning("Checkout rejected (%s): %s", exc.kind.value, exc.message)
            return SubmissionOutcome(
                success=False,
                kind=exc.kind,
                title="Order Failed",
                message=exc.message,
            )
        finally:
            self.state = SubmissionState.IDLE

        # Items added while the order was being written are kept.
        self.cart.deduct(snapshot)
        self.form = CheckoutForm()
        return SubmissionOutcome(
            success=True,
            title="Order Placed Successfully!",
            message=(
                f"Your order for {order.formatted_total} has been received. "
                "We'll prepare it shortly!"
            ),
            order=order,
        )
