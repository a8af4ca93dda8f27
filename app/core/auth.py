# app/core/auth.py
import uuid
from functools import lru_cache
from typing import Any

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session

from app.core.config import get_settings
from app.core.roles import Role, at_least
from app.database import get_session
from app.repositories.user_repo import UserRepository
from app.schemas.user import Identity
from app.services.sessions import ClientSession, SessionRegistry
from app.services.user_service import UserService

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so we can support "guest" mode (unauthenticated).
bearer_scheme = HTTPBearer(auto_error=False)

user_service = UserService(UserRepository())


# -------- Client sessions --------


@lru_cache
def get_session_registry() -> SessionRegistry:
    """Process-wide registry of client sessions (carts, sign-in state)."""
    return SessionRegistry(
        currency=settings.CURRENCY,
        default_country_code=settings.DEFAULT_COUNTRY_CODE,
        code_length=settings.OTP_LENGTH,
        idle_timeout=settings.SESSION_IDLE_TIMEOUT_SECONDS,
        max_sessions=settings.SESSION_MAX_COUNT,
    )


def get_client_session(
    request: Request,
    response: Response,
    registry: SessionRegistry = Depends(get_session_registry),
) -> ClientSession:
    """
    Resolve the caller's ClientSession from the session cookie.

    A new session (and cookie) is issued when the cookie is missing or
    unknown, e.g. after a server restart.
    """
    cookie = request.cookies.get(settings.SESSION_COOKIE_NAME)
    client_session, created = registry.get_or_create(cookie)
    if created:
        response.set_cookie(
            settings.SESSION_COOKIE_NAME,
            client_session.id,
            httponly=True,
            samesite="lax",
        )
    return client_session


def get_existing_client_session(
    request: Request,
    registry: SessionRegistry = Depends(get_session_registry),
) -> ClientSession | None:
    """
    The caller's ClientSession if the cookie names a live one; never creates.
    """
    return registry.get(request.cookies.get(settings.SESSION_COOKIE_NAME))


# -------- Identity --------


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def identity_from_claims(payload: dict[str, Any]) -> Identity:
    """
    Build an Identity from Supabase JWT claims ('sub', 'phone').

    Supabase stores phone numbers without the leading '+'.
    """
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub",
        )

    try:
        sub_uuid = uuid.UUID(sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid sub in token",
        )

    phone = payload.get("phone") or None
    if phone and not phone.startswith("+"):
        phone = f"+{phone}"
    return Identity(id=sub_uuid, phone=phone)


def get_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
    registry: SessionRegistry = Depends(get_session_registry),
) -> Identity | None:
    """
    Resolve the caller's Identity.

    Flow:
      1. Bearer token present => verify it, provision profile if missing.
      2. Otherwise => identity stored on an existing client session by the
         phone sign-in flow (no session is created here).
      3. Neither => guest => None.
    """
    if credentials is not None:
        identity = identity_from_claims(decode_access_token(credentials.credentials))
        user_service.ensure_profile(session, identity)
        return identity

    client_session = get_existing_client_session(request, registry)
    return client_session.identity if client_session else None


def require_identity(identity: Identity | None = Depends(get_identity)) -> Identity:
    """
    Enforce authentication.

    Raises:
        HTTPException(401): for guests.
    """
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return identity


# -------- Role gate --------


def get_current_role(
    identity: Identity | None = Depends(get_identity),
    session: Session = Depends(get_session),
) -> Role | None:
    """Effective role of the caller, or None for guests."""
    if identity is None:
        return None
    return user_service.get_role(session, identity.id)


def require_role(required: Role):
    """
    Dependency factory: allow callers whose role is at least `required`.

    Usage:
        @router.get("/admin/x", dependencies=[Depends(require_role(Role.ADMIN))])

    Raises:
        HTTPException(401): guests.
        HTTPException(403): role below `required`.
    """

    def dependency(
        identity: Identity = Depends(require_identity),
        role: Role | None = Depends(get_current_role),
    ) -> Identity:
        if not at_least(role, required):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{required.label.capitalize()} access required",
            )
        return identity

    return dependency


require_admin = require_role(Role.ADMIN)
