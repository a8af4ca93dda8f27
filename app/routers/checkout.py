# app/routers/checkout.py
from functools import lru_cache

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from app.core.auth import get_client_session, get_identity
from app.core.config import get_settings
from app.core.errors import SubmissionErrorKind
from app.database import new_session
from app.repositories.order_repo import OrderRepository
from app.schemas.order import CheckoutForm, CheckoutSubmit, CheckoutView, SubmissionOutcome
from app.schemas.user import Identity
from app.services.order_submission import OrderSubmissionService
from app.services.sessions import ClientSession

router = APIRouter(prefix="/checkout", tags=["Checkout"])

settings = get_settings()

FAILURE_STATUS: dict[SubmissionErrorKind, int] = {
    SubmissionErrorKind.INVALID_INPUT: 400,
    SubmissionErrorKind.EMPTY_CART: 400,
    SubmissionErrorKind.UNAUTHENTICATED: 401,
    SubmissionErrorKind.IN_PROGRESS: 409,
    SubmissionErrorKind.ORDER_WRITE_FAILED: 502,
    SubmissionErrorKind.ORDER_LINES_WRITE_FAILED: 502,
    SubmissionErrorKind.TIMEOUT: 504,
}


@lru_cache
def get_order_submission() -> OrderSubmissionService:
    """Order submission service wired to the SQL order repository."""
    return OrderSubmissionService(
        OrderRepository(),
        new_session,
        phase_timeout=settings.ORDER_PHASE_TIMEOUT_SECONDS,
        compensate_orphans=settings.COMPENSATE_ORPHAN_ORDERS,
        currency=settings.CURRENCY,
    )


@router.get("", response_model=CheckoutView)
def get_checkout(
    client: ClientSession = Depends(get_client_session),
    identity: Identity | None = Depends(get_identity),
):
    """
    Checkout screen state: order summary, form fields, contact phone and
    whether the "Place Order" button is enabled.
    """
    return client.checkout.view(identity)


@router.put("", response_model=CheckoutView)
def update_checkout_form(
    payload: CheckoutForm,
    client: ClientSession = Depends(get_client_session),
    identity: Identity | None = Depends(get_identity),
):
    """
    Save the form fields as typed (kept across failed attempts).
    """
    client.checkout.update_form(payload.customer_name, payload.notes or "")
    return client.checkout.view(identity)


@router.post(
    "",
    response_model=SubmissionOutcome,
    responses={code: {"model": SubmissionOutcome} for code in set(FAILURE_STATUS.values())},
)
async def place_order(
    payload: CheckoutSubmit | None = Body(default=None),
    client: ClientSession = Depends(get_client_session),
    identity: Identity | None = Depends(get_identity),
    submitter: OrderSubmissionService = Depends(get_order_submission),
):
    """
    Place an order from the session's cart ("pay at pickup").

    Always answers with a single SubmissionOutcome; failures carry an
    error `kind` and a non-2xx status. On success the cart is emptied.
    """
    payload = payload or CheckoutSubmit()
    outcome = await client.checkout.submit(
        submitter,
        identity,
        customer_name=payload.customer_name,
        notes=payload.notes,
    )
    if outcome.success:
        return outcome
    return JSONResponse(
        status_code=FAILURE_STATUS[outcome.kind],
        content=outcome.model_dump(mode="json"),
    )
