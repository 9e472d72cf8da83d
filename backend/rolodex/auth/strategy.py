"""Authentication strategy abstraction for the contacts API.

The authentication flow sits behind a small *strategy* interface so that the
concrete logic can be swapped depending on the runtime configuration
(development bypass vs. production JWT validation):

• The branch is decided once – no per-request branching in the handlers.
• Tests flip :pydata:`rolodex.dependencies.auth.AUTH_DISABLED` to pick the
  other strategy.
"""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from typing import Any

from fastapi import HTTPException
from fastapi import Request
from fastapi import status
from jose import JWTError
from jose import jwt
from sqlalchemy.orm import Session

from rolodex.config import get_settings
from rolodex.crud import crud
from rolodex.models.enums import UserRole

JWT_ALGORITHM = "HS256"

# ---------------------------------------------------------------------------
# Strategy base-class
# ---------------------------------------------------------------------------


class AuthStrategy(ABC):
    """Pluggable authentication backend (strategy pattern)."""

    @abstractmethod
    def get_current_user(self, request: Request, db: Session):  # noqa: D401 – abstract
        """Return the authenticated user or raise **401**."""


# ---------------------------------------------------------------------------
# Development-mode bypass
# ---------------------------------------------------------------------------


class DevAuthStrategy(AuthStrategy):
    """Bypass all checks – used when *AUTH_DISABLED* is true or in tests."""

    DEV_USER_ID = "dev"
    DEV_EMAIL = "dev@local"

    def __init__(self):
        self._settings = get_settings()

    def _get_or_create_dev_user(self, db: Session):
        desired_role = UserRole.ADMIN.value if self._settings.dev_admin else UserRole.USER.value

        user = crud.get_user_by_user_id(db, self.DEV_USER_ID)
        if user is not None:
            if getattr(user, "role", UserRole.USER.value) != desired_role:
                user.role = desired_role  # type: ignore[attr-defined]
                db.commit()
                db.refresh(user)
            return user

        return crud.create_user(
            db,
            user_id=self.DEV_USER_ID,
            email=self.DEV_EMAIL,
            display_name="Developer",
            role=desired_role,
        )

    def get_current_user(self, request: Request, db: Session):  # noqa: D401 – impl
        # Any header content (or none at all) maps to the dev user.
        return self._get_or_create_dev_user(db)


# ---------------------------------------------------------------------------
# HS256 JWT validation (production)
# ---------------------------------------------------------------------------


class JWTAuthStrategy(AuthStrategy):
    """Production strategy that validates HS256 tokens.

    The ``sub`` claim carries the numeric primary key of the ``users`` row.
    """

    def __init__(self):
        self._secret = get_settings().jwt_secret

    def _decode(self, token: str) -> dict[str, Any]:  # noqa: D401 – helper
        return jwt.decode(token, self._secret, algorithms=[JWT_ALGORITHM])

    def get_current_user(self, request: Request, db: Session):  # noqa: D401 – impl
        auth_header: str | None = request.headers.get("Authorization")
        if not auth_header or not auth_header.lower().startswith("bearer "):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

        token = auth_header[7:].strip()
        if not token:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

        try:
            payload = self._decode(token)
        except JWTError:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

        try:
            user_pk = int(payload.get("sub"))
        except (TypeError, ValueError):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token subject")

        user = crud.get_user(db, user_pk)
        if user is None or not getattr(user, "is_active", True):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")

        if getattr(user, "last_login", None) is None:
            crud.touch_last_login(db, user)

        return user


def issue_token(user_pk: int, secret: str, *, expires_at: int | None = None) -> str:
    """Return a signed HS256 token for *user_pk* (used by ops scripts and tests)."""

    claims: dict[str, Any] = {"sub": str(user_pk)}
    if expires_at is not None:
        claims["exp"] = expires_at
    return jwt.encode(claims, secret, algorithm=JWT_ALGORITHM)


# Public re-exports ---------------------------------------------------------


__all__ = [
    "AuthStrategy",
    "DevAuthStrategy",
    "JWTAuthStrategy",
    "issue_token",
]
