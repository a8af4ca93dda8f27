# app/services/phone_auth.py
import logging
import re
from enum import Enum

from app.core.auth_gateway import AuthGateway
from app.core.errors import AuthGatewayError, InvalidInput
from app.schemas.auth import PhoneAuthView
from app.schemas.user import Identity

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(raw: str, default_country_code: str = "+1") -> str:
    """
    Normalize user input to an E.164-like string.

      "+44 20 7946 0958" -> "+442079460958"
      "(555) 123-4567"   -> "+15551234567"
    """
    raw = raw.strip()
    digits = _NON_DIGITS.sub("", raw)
    if not digits:
        raise InvalidInput("Please enter a valid phone number.")
    if raw.startswith("+"):
        return f"+{digits}"
    return f"{default_country_code}{digits}"


class PhoneAuthStep(str, Enum):
    AWAITING_PHONE = "awaiting_phone"
    AWAITING_CODE = "awaiting_code"


class PhoneAuthFlow:
    """
    Phone sign-in dialog for one client session.

        AWAITING_PHONE --submit_phone--> AWAITING_CODE --submit_code--> closed
              ^                               |
              +---------- change_phone -------+

    `close()` from any state resets to AWAITING_PHONE with empty fields.
    """

    def __init__(self, default_country_code: str = "+1", code_length: int = 6):
        self.default_country_code = default_country_code
        self.code_length = code_length
        self.step = PhoneAuthStep.AWAITING_PHONE
        self.phone: str | None = None

    def view(self, identity: Identity | None = None) -> PhoneAuthView:
        return PhoneAuthView(step=self.step.value, phone=self.phone, identity=identity)

    def submit_phone(self, gateway: AuthGateway, raw_phone: str) -> str:
        """
        Ask the gateway to text a code. Returns the normalized number.

        On failure the flow stays in AWAITING_PHONE.
        """
        phone = normalize_phone(raw_phone, self.default_country_code)
        try:
            gateway.request_code(phone)
        except AuthGatewayError as exc:
            logger.warning("OTP request failed for %s: %s", phone, exc.message)
            self.step = PhoneAuthStep.AWAITING_PHONE
            raise

        self.phone = phone
        self.step = PhoneAuthStep.AWAITING_CODE
        return phone

    def submit_code(self, gateway: AuthGateway, code: str) -> Identity:
        """
        Verify the code and close the flow.

        On failure the flow stays in AWAITING_CODE.
        """
        if self.step is not PhoneAuthStep.AWAITING_CODE or self.phone is None:
            raise InvalidInput("Request a verification code first.")

        code = code.strip()
        if len(code) != self.code_length or not (code.isascii() and code.isdigit()):
            raise InvalidInput(f"Enter the {self.code_length}-digit code sent to {self.phone}.")

        try:
            identity = gateway.verify_code(self.phone, code)
        except AuthGatewayError as exc:
            logger.warning("OTP verification failed for %s: %s", self.phone, exc.message)
            raise

        self.close()
        return identity

    def change_phone(self) -> None:
        """Go back to phone entry; the pending code is dropped."""
        self.step = PhoneAuthStep.AWAITING_PHONE

    def close(self) -> None:
        self.step = PhoneAuthStep.AWAITING_PHONE
        self.phone = None
