"""Explicit authentication state for one caller.

The browser dashboard kept the token, role and onboarding flags in local
storage and read them wherever it needed them. Here the same state is an
object that is built once, at login or from the request's Authorization
header, and passed to whatever needs it.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from pydantic import BaseModel

from .models.enums import UserRole
from .models.user import LoginResponse

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


class Session(BaseModel):
    """Token plus the flags the dashboard needs for routing decisions.

    The token is never verified here; the backend does that on every call.
    Claims are only read to pick up the role and expiry.
    """

    token: Optional[str] = None
    role: Optional[UserRole] = None
    is_verified: bool = True
    first_login: bool = False
    is_onboarded: bool = False

    @classmethod
    def anonymous(cls) -> "Session":
        return cls()

    @classmethod
    def from_login(cls, response: LoginResponse) -> "Session":
        return cls(
            token=response.token,
            role=response.role,
            is_verified=response.is_verified,
            first_login=response.first_login,
            is_onboarded=response.is_onboarded,
        )

    @classmethod
    def from_token(cls, token: str) -> "Session":
        session = cls(token=token)
        role = session.claims().get("role")
        if role in {r.value for r in UserRole}:
            session.role = UserRole(role)
        return session

    @classmethod
    def from_authorization(cls, header: Optional[str]) -> "Session":
        """Build a session from an ``Authorization: Bearer <token>`` header."""
        if not header or not header.lower().startswith(BEARER_PREFIX):
            return cls.anonymous()
        token = header[len(BEARER_PREFIX):].strip()
        if not token:
            return cls.anonymous()
        return cls.from_token(token)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def is_admin(self) -> bool:
        return self.role in (UserRole.admin, UserRole.admin_only)

    @property
    def user_id(self) -> Optional[str]:
        user_id = self.claims().get("id")
        return str(user_id) if user_id is not None else None

    def claims(self) -> Dict[str, Any]:
        """Unverified JWT claims, empty when the token is missing or malformed."""
        if not self.token:
            return {}
        try:
            return jwt.get_unverified_claims(self.token)
        except JWTError:
            logger.debug("Could not decode session token claims")
            return {}

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        exp = self.claims().get("exp")
        if exp is None:
            return False
        try:
            expires_at = float(exp)
        except (TypeError, ValueError):
            logger.debug(f"Unreadable exp claim: {exp!r}")
            return True
        now = now or datetime.now(timezone.utc)
        return now.timestamp() >= expires_at

    def auth_headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def clear(self) -> None:
        """Forget everything, as on logout."""
        self.token = None
        self.role = None
        self.is_verified = True
        self.first_login = False
        self.is_onboarded = False
