"""Centralised configuration helper.

This module eliminates scattered ``os.getenv`` calls by exposing a **single**
:class:`Settings` instance (retrieved via :func:`get_settings`) populated
from the process environment and the project ``.env`` file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# ``_REPO_ROOT`` points to the top-level repository directory (one level
# **above** the "backend" directory).  This file lives at
# ``backend/rolodex/config/__init__.py``.

_REPO_ROOT = Path(__file__).resolve().parents[3]


def _truthy(value: str | None) -> bool:  # noqa: D401 – small helper
    """Return *True* when *value* looks like an affirmative string."""

    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:  # noqa: D401 – simple data container
    """Lightweight settings container populated from environment variables."""

    # Runtime flags -----------------------------------------------------
    testing: bool
    auth_disabled: bool

    # Secrets -----------------------------------------------------------
    jwt_secret: str

    # Database ---------------------------------------------------------
    database_url: str

    # Misc
    dev_admin: bool
    log_level: str
    environment: Any
    allowed_cors_origins: str

    # Contacts API -----------------------------------------------------
    contacts_max_page_size: int


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def _load_settings() -> Settings:  # noqa: D401 – helper
    """Populate :class:`Settings` from environment variables."""

    # Load environment file based on NODE_ENV
    node_env = os.getenv("NODE_ENV", "development")

    if node_env == "test":
        env_path = _REPO_ROOT / ".env.test"
        if not env_path.exists():
            env_path = _REPO_ROOT / ".env"  # Fallback to main .env
    else:
        env_path = _REPO_ROOT / ".env"

    if env_path.exists():
        # An explicitly exported TESTING flag wins over the .env file so the
        # test-suite cannot be switched into production mode by accident.
        current_testing = os.getenv("TESTING")

        load_dotenv(env_path, override=True)

        if current_testing:
            os.environ["TESTING"] = current_testing

    testing = _truthy(os.getenv("TESTING"))

    return Settings(
        testing=testing,
        auth_disabled=_truthy(os.getenv("AUTH_DISABLED")) or testing,
        jwt_secret=os.getenv("JWT_SECRET", "dev-secret"),
        database_url=os.getenv("DATABASE_URL", ""),
        dev_admin=_truthy(os.getenv("DEV_ADMIN")) or testing,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        environment=os.getenv("ENVIRONMENT"),
        allowed_cors_origins=os.getenv("ALLOWED_CORS_ORIGINS", ""),
        contacts_max_page_size=int(os.getenv("CONTACTS_MAX_PAGE_SIZE", "1000")),
    )


# ------------------------------------------------------------------
# Runtime validation – fail fast when *required* settings are missing.
# ------------------------------------------------------------------


def _validate_required(settings: Settings) -> None:  # noqa: D401 – helper
    """Abort startup when mandatory configuration is missing.

    Skipped entirely when the *TESTING* flag is active because the
    test-suite runs against an in-memory SQLite database with auth disabled.
    """

    if settings.testing:
        return

    missing_vars = []

    if not settings.database_url:
        missing_vars.append("DATABASE_URL")

    if not settings.auth_disabled:
        weak = settings.jwt_secret.strip() in {"", "dev-secret"} or len(settings.jwt_secret) < 16
        if weak:
            missing_vars.append("JWT_SECRET (must be >=16 chars, not 'dev-secret')")

    if settings.contacts_max_page_size < 1:
        missing_vars.append("CONTACTS_MAX_PAGE_SIZE (must be >= 1)")

    if missing_vars:
        error_msg = (
            f"CRITICAL: Missing required environment variables: {', '.join(missing_vars)}\n"
            f"Set these in your .env file or deployment environment.\n"
            f"Current DATABASE_URL: '{settings.database_url}'"
        )
        raise RuntimeError(error_msg)


def get_settings() -> Settings:  # noqa: D401 – public accessor
    """Return :class:`Settings` instance loaded from environment."""

    settings = _load_settings()
    _validate_required(settings)
    return settings


__all__ = [
    "Settings",
    "get_settings",
]
