# app/services/sessions.py
import secrets
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable

from app.schemas.user import Identity
from app.services.cart_store import CartStore
from app.services.checkout import CheckoutSession
from app.services.phone_auth import PhoneAuthFlow


@dataclass
class ClientSession:
    """
    Everything one browser session owns: its cart, checkout form,
    sign-in dialog state and (once signed in) its identity.
    """

    id: str
    cart: CartStore
    checkout: CheckoutSession
    auth_flow: PhoneAuthFlow
    identity: Identity | None = field(default=None)
    last_seen: float = 0.0


class SessionRegistry:
    """
    Process-wide map of session id -> ClientSession.

    Sessions never share state; the lock only guards the map itself.

    The map is kept in least-recently-used order. Sessions idle for more
    than `idle_timeout` seconds are dropped, and the oldest ones go first
    once more than `max_sessions` are held.
    """

    def __init__(
        self,
        currency: str = "USD",
        default_country_code: str = "+1",
        code_length: int = 6,
        idle_timeout: float = 4 * 3600,
        max_sessions: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.currency = currency
        self.default_country_code = default_country_code
        self.code_length = code_length
        self.idle_timeout = idle_timeout
        self.max_sessions = max_sessions
        self.clock = clock
        self._sessions: OrderedDict[str, ClientSession] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def _new(self, session_id: str) -> ClientSession:
        cart = CartStore(currency=self.currency)
        return ClientSession(
            id=session_id,
            cart=cart,
            checkout=CheckoutSession(cart),
            auth_flow=PhoneAuthFlow(self.default_country_code, self.code_length),
        )

    def _evict(self, now: float) -> None:
        # Oldest first; stop at the first session still in use.
        while self._sessions:
            oldest = next(iter(self._sessions.values()))
            if now - oldest.last_seen <= self.idle_timeout:
                break
            self._sessions.popitem(last=False)
        while len(self._sessions) > self.max_sessions:
            self._sessions.popitem(last=False)

    def _touch(self, client_session: ClientSession, now: float) -> None:
        client_session.last_seen = now
        self._sessions.move_to_end(client_session.id)

    def get(self, session_id: str | None) -> ClientSession | None:
        """
        Look up a live session without creating one.
        """
        if not session_id:
            return None
        with self._lock:
            now = self.clock()
            self._evict(now)
            client_session = self._sessions.get(session_id)
            if client_session is not None:
                self._touch(client_session, now)
            return client_session

    def get_or_create(self, session_id: str | None) -> tuple[ClientSession, bool]:
        """
        Return (session, created). Unknown, expired or missing ids get a new session.
        """
        with self._lock:
            now = self.clock()
            self._evict(now)
            if session_id and session_id in self._sessions:
                client_session = self._sessions[session_id]
                self._touch(client_session, now)
                return client_session, False

            new_id = secrets.token_urlsafe(24)
            client_session = self._new(new_id)
            client_session.last_seen = now
            self._sessions[new_id] = client_session
            self._evict(now)
            return client_session, True
