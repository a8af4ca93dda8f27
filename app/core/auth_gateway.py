# app/core/auth_gateway.py
import uuid
from functools import lru_cache
from typing import Protocol

from supabase import Client

from app.core.errors import AuthGatewayError
from app.core.supabase_client import supabase_public
from app.schemas.user import Identity


class AuthGateway(Protocol):
    """
    Phone challenge/response provider.
    """

    def request_code(self, phone: str) -> None: ...

    def verify_code(self, phone: str, code: str) -> Identity: ...


class SupabaseAuthGateway:
    """
    AuthGateway backed by Supabase Auth SMS OTP.
    """

    def __init__(self, client: Client):
        self.client = client

    def request_code(self, phone: str) -> None:
        """
        Text a one-time code to `phone`.

        Raises:
            AuthGatewayError: if Supabase rejects the request.
        """
        try:
            self.client.auth.sign_in_with_otp({"phone": phone})
        except Exception as exc:
            raise AuthGatewayError(str(exc) or "Could not send verification code") from exc

    def verify_code(self, phone: str, code: str) -> Identity:
        """
        Exchange phone + code for the signed-in user.

        Raises:
            AuthGatewayError: wrong/expired code or provider failure.
        """
        try:
            response = self.client.auth.verify_otp(
                {"phone": phone, "token": code, "type": "sms"}
            )
        except Exception as exc:
            raise AuthGatewayError(str(exc) or "Invalid verification code") from exc

        user = getattr(response, "user", None)
        if user is None:
            raise AuthGatewayError("Invalid verification code")

        return Identity(id=uuid.UUID(str(user.id)), phone=phone)


@lru_cache
def get_auth_gateway() -> AuthGateway:
    """
    FastAPI dependency returning the process-wide gateway.
    """
    return SupabaseAuthGateway(supabase_public())
