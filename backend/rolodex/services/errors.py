"""Error kinds raised by the contacts core.

Not-found outcomes for a single contact are *return values* (``None`` /
``False``), never exceptions.  Only the conditions below are raised.
"""

from __future__ import annotations

from typing import Iterable
from typing import Optional


class ContactServiceError(Exception):
    """Base class for every error raised by the contacts core."""


class ContactValidationError(ContactServiceError):
    """One or more required input fields are missing or empty."""

    def __init__(self, missing: Iterable[str], message: Optional[str] = None):
        self.missing = list(missing)
        super().__init__(message or f"Missing required fields: {', '.join(self.missing)}")


class UserNotFoundError(ContactServiceError):
    """The referenced user id does not exist in the user directory."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


class BackendError(ContactServiceError):
    """The card store or the user directory failed.

    Raised by the collaborator implementations with the original exception
    chained as ``__cause__``.  Never retried by the core.
    """

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"{operation} failed: {message}")


__all__ = [
    "ContactServiceError",
    "ContactValidationError",
    "UserNotFoundError",
    "BackendError",
]
