"""Typed value objects passed across the contacts core.

Nothing inside the codec, resolver or service hands untyped dictionaries
around; the dict shape only appears at the HTTP boundary via
:meth:`ContactRecord.to_dict`.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from dataclasses import replace
from typing import Any
from typing import Dict
from typing import List
from typing import Optional


@dataclass(frozen=True)
class ContactRecord:
    """Structured form of one stored vCard."""

    uid: str
    displayname: str
    email: str
    cloud_id: str
    organization: Optional[str] = None

    # Attached by the service, never persisted inside the card itself.
    user_id: Optional[str] = None
    address_book_id: Optional[int] = None

    def with_location(self, user_id: str, address_book_id: Optional[int] = None) -> ContactRecord:
        """Return a copy carrying the owning user and address book."""

        return replace(self, user_id=user_id, address_book_id=address_book_id)

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON shape served by the API."""

        payload: Dict[str, Any] = {
            "uid": self.uid,
            "user_id": self.user_id,
            "displayname": self.displayname,
            "email": self.email,
            "cloud_id": self.cloud_id,
            "organization": self.organization,
        }
        if self.address_book_id is not None:
            payload["address_book_id"] = self.address_book_id
        return payload


@dataclass(frozen=True)
class AddressBookInfo:
    """One collection as reported by the card store."""

    id: int
    uri: str
    principal_uri: str
    display_name: Optional[str] = None


@dataclass(frozen=True)
class CardInfo:
    """One stored card: its file name and raw vCard text."""

    name: str
    data: str


@dataclass(frozen=True)
class ContactPage:
    """A paginated slice of contacts plus the unpaginated total."""

    records: List[ContactRecord] = field(default_factory=list)
    total: int = 0


__all__ = [
    "ContactRecord",
    "AddressBookInfo",
    "CardInfo",
    "ContactPage",
]
