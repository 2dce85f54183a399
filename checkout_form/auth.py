"""Auth gate: a session must pass before the checkout form is reachable."""
import hashlib
import hmac
import logging
import os
from dataclasses import dataclass
from typing import Optional

from .errors import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedUser:
    user_id: str


ANONYMOUS = AuthenticatedUser(user_id="local")


class AuthGate:
    """Checks a presented session token against the configured one."""

    def __init__(self, session_token: Optional[str] = None):
        if session_token is None:
            session_token = os.environ.get("CHECKOUT_SESSION_TOKEN") or None
        self._session_token = session_token

    @property
    def enabled(self) -> bool:
        return self._session_token is not None

    def require_user(self, token: Optional[str]) -> AuthenticatedUser:
        """Return the session's user, or raise AuthenticationError."""
        if not self.enabled:
            return ANONYMOUS
        if not token or not hmac.compare_digest(token.encode(), self._session_token.encode()):
            logger.warning("Checkout access denied: bad session token")
            raise AuthenticationError("Not signed in. Sign in to reach checkout.")
        digest = hashlib.sha256(token.encode()).hexdigest()[:8]
        return AuthenticatedUser(user_id=f"session-{digest}")
