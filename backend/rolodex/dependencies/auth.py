"""FastAPI dependencies that expose the *current user* and *admin guard*.

The heavy lifting (development bypass vs. JWT validation) is implemented in
strategy classes under :pymod:`rolodex.auth.strategy`.  The module-level
:pydata:`AUTH_DISABLED` flag picks the concrete implementation so that the
request handlers stay branch-free.
"""

from __future__ import annotations

from fastapi import Depends
from fastapi import HTTPException
from fastapi import Request
from fastapi import status
from sqlalchemy.orm import Session

from rolodex.auth.strategy import AuthStrategy
from rolodex.auth.strategy import DevAuthStrategy
from rolodex.auth.strategy import JWTAuthStrategy
from rolodex.config import get_settings
from rolodex.database import get_db
from rolodex.models.enums import UserRole

# Settings ------------------------------------------------------------------

_settings = get_settings()

# Tests patch this constant to toggle dev ↔ prod behaviour.
AUTH_DISABLED: bool = _settings.auth_disabled  # noqa: N816

# ---------------------------------------------------------------------------
# Strategy selector – returns singleton per mode, toggles when flag patched.
# ---------------------------------------------------------------------------

_strategy_cache: dict[str, AuthStrategy] = {}


def _get_strategy() -> AuthStrategy:  # noqa: D401 – internal helper
    """Return *singleton* strategy instance based on ``AUTH_DISABLED`` flag."""

    if AUTH_DISABLED:
        if "dev" not in _strategy_cache:
            _strategy_cache["dev"] = DevAuthStrategy()
        return _strategy_cache["dev"]

    if "jwt" not in _strategy_cache:
        _strategy_cache["jwt"] = JWTAuthStrategy()
    return _strategy_cache["jwt"]


# ---------------------------------------------------------------------------
# Public dependencies
# ---------------------------------------------------------------------------


def get_current_user(request: Request, db: Session = Depends(get_db)):
    """Return the authenticated *User* row or raise **401**."""

    if "Authorization" not in request.headers and not AUTH_DISABLED:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _get_strategy().get_current_user(request, db)


def require_admin(current_user=Depends(get_current_user)):
    """FastAPI dependency that ensures the user has role == ``ADMIN``."""

    if getattr(current_user, "role", UserRole.USER.value) != UserRole.ADMIN.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin privileges required")

    return current_user


__all__ = [
    "get_current_user",
    "require_admin",
]
