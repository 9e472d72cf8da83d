"""Shared *Enum* definitions for SQLAlchemy & Pydantic models.

The Enums inherit from ``str`` so that JSON serialisation renders plain
strings and equality checks against raw literals (``role == "ADMIN"``) keep
working.
"""

from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


__all__ = [
    "UserRole",
]
