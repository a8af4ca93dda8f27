# app/core/errors.py
"""
Domain exceptions.

Services raise these; `app.main` maps them to HTTP responses.
Submission failures additionally carry a `SubmissionErrorKind` so the
checkout boundary can turn them into a single user-facing outcome.
"""
from enum import Enum


class SubmissionErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    EMPTY_CART = "empty_cart"
    UNAUTHENTICATED = "unauthenticated"
    ORDER_WRITE_FAILED = "order_write_failed"
    ORDER_LINES_WRITE_FAILED = "order_lines_write_failed"
    TIMEOUT = "timeout"
    IN_PROGRESS = "in_progress"


class CafeError(Exception):
    """Base class for all application errors."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(CafeError):
    status_code = 404


class AuthGatewayError(CafeError):
    """The phone sign-in provider rejected a request."""

    status_code = 400


class InvalidStatusTransition(CafeError):
    status_code = 400


# ---- Submission errors ----


class SubmissionError(CafeError):
    kind: SubmissionErrorKind

    # True once an order row may exist in storage
    wrote_order: bool = False


class InvalidInput(SubmissionError):
    kind = SubmissionErrorKind.INVALID_INPUT
    status_code = 400


class EmptyCart(SubmissionError):
    kind = SubmissionErrorKind.EMPTY_CART
    status_code = 400


class Unauthenticated(SubmissionError):
    kind = SubmissionErrorKind.UNAUTHENTICATED
    status_code = 401


class OrderWriteFailed(SubmissionError):
    kind = SubmissionErrorKind.ORDER_WRITE_FAILED
    status_code = 502


class OrderLinesWriteFailed(SubmissionError):
    kind = SubmissionErrorKind.ORDER_LINES_WRITE_FAILED
    status_code = 502
    wrote_order = True

    def __init__(self, message: str, order_id=None):
        super().__init__(message)
        self.order_id = order_id


class SubmissionTimeout(SubmissionError):
    kind = SubmissionErrorKind.TIMEOUT
    status_code = 504

    def __init__(self, message: str, phase: int, order_id=None):
        super().__init__(message)
        self.phase = phase
        self.order_id = order_id
        # Phase 1 may still commit after the timeout; the outcome is unknown.
        self.wrote_order = True
