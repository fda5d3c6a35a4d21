from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash

from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    name: str
    email: str
    role: Role

    def to_session(self) -> dict:
        return {"user_id": self.user_id, "name": self.name, "email": self.email, "role": self.role.value}

    @classmethod
    def from_session(cls, data) -> "SessionUser":
        return cls(
            user_id=int(data["user_id"]),
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            role=Role(data.get("role")),
        )


class AuthService:
    """Use case: authenticate user (sign in)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = (email or "").strip()
        user = self._users.get_by_email(email) if email else None
        if not user or not user.is_active:
            logger.info("Sign-in rejected for %r", email)
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hash values
            ok = False

        if not ok:
            logger.info("Sign-in rejected for %r", email)
            raise AuthenticationError("Invalid email or password")

        logger.info("User %s signed in as %s", user.user_id, user.role.value)
        return SessionUser(user_id=user.user_id, name=user.name, email=user.email, role=user.role)
