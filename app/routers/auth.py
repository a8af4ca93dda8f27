# app/routers/auth.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import get_client_session, get_current_role, get_identity
from app.core.auth_gateway import AuthGateway, get_auth_gateway
from app.core.roles import Role
from app.database import get_session
from app.repositories.user_repo import UserRepository
from app.schemas.auth import CodeSubmit, PhoneAuthView, PhoneSubmit
from app.schemas.user import Identity, MeRead
from app.services.sessions import ClientSession
from app.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])

user_service = UserService(UserRepository())


@router.get("/me", response_model=MeRead)
def read_me(
    identity: Identity | None = Depends(get_identity),
    role: Role | None = Depends(get_current_role),
):
    """
    Who is calling: guest, or an identity with its role.
    """
    if identity is None:
        return MeRead(authenticated=False)
    return MeRead(authenticated=True, identity=identity, role=role.label if role else None)


@router.get("/phone", response_model=PhoneAuthView)
def get_phone_sign_in(client: ClientSession = Depends(get_client_session)):
    """
    Current step of the phone sign-in dialog.
    """
    return client.auth_flow.view(client.identity)


@router.post("/phone/request", response_model=PhoneAuthView)
def request_code(
    payload: PhoneSubmit,
    client: ClientSession = Depends(get_client_session),
    gateway: AuthGateway = Depends(get_auth_gateway),
):
    """
    Send a verification code to the given phone number.

    Numbers without a leading '+' get the default country code.
    """
    client.auth_flow.submit_phone(gateway, payload.phone)
    return client.auth_flow.view(client.identity)


@router.post("/phone/verify", response_model=PhoneAuthView)
def verify_code(
    payload: CodeSubmit,
    session: Session = Depends(get_session),
    client: ClientSession = Depends(get_client_session),
    gateway: AuthGateway = Depends(get_auth_gateway),
):
    """
    Verify the code; on success the session is signed in.
    """
    identity = client.auth_flow.submit_code(gateway, payload.code)
    user_service.ensure_profile(session, identity)
    client.identity = identity
    return client.auth_flow.view(client.identity)


@router.post("/phone/change", response_model=PhoneAuthView)
def change_phone(client: ClientSession = Depends(get_client_session)):
    """
    Go back to phone entry ("Change Phone Number").
    """
    client.auth_flow.change_phone()
    return client.auth_flow.view(client.identity)


@router.post("/phone/close", response_model=PhoneAuthView)
def close_phone_sign_in(client: ClientSession = Depends(get_client_session)):
    """
    Dismiss the dialog; the next open starts from phone entry.
    """
    client.auth_flow.close()
    return client.auth_flow.view(client.identity)


@router.post("/logout", response_model=MeRead)
def logout(client: ClientSession = Depends(get_client_session)):
    """
    Forget the session's identity. The cart is kept.
    """
    client.identity = None
    client.auth_flow.close()
    return MeRead(authenticated=False)
