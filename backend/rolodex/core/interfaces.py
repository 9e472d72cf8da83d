"""Contracts for the collaborators the contacts core depends on.

Business logic in :mod:`rolodex.services` only talks to these abstractions.
Production code plugs in the SQLAlchemy implementations from
:mod:`rolodex.core.implementations`; unit-tests use the in-memory ones from
:mod:`rolodex.core.test_implementations`.
"""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from typing import Dict
from typing import Iterator
from typing import List
from typing import Optional

from rolodex.schemas.contact_types import AddressBookInfo
from rolodex.schemas.contact_types import CardInfo


class AddressBookBackend(ABC):
    """Durable store of address books and the cards inside them.

    Implementations raise :class:`rolodex.services.errors.BackendError` for
    any storage failure.
    """

    @abstractmethod
    def get_address_books_for_principal(self, principal_uri: str) -> List[AddressBookInfo]:
        """Return the principal's address books in store order."""

    @abstractmethod
    def create_address_book(self, principal_uri: str, uri: str, properties: Dict[str, str]) -> int:
        """Create an address book and return its new id."""

    @abstractmethod
    def get_cards(self, address_book_id: int) -> List[CardInfo]:
        """Return every card in the address book in store order."""

    @abstractmethod
    def get_card(self, address_book_id: int, name: str) -> Optional[CardInfo]:
        """Return one card by name or ``None``."""

    @abstractmethod
    def create_card(self, address_book_id: int, name: str, data: str) -> None:
        """Store a new card."""

    @abstractmethod
    def update_card(self, address_book_id: int, name: str, data: str) -> None:
        """Replace the data of an existing card; a card that is already gone is left alone."""

    @abstractmethod
    def delete_card(self, address_book_id: int, name: str) -> None:
        """Remove a card; removing one that is already gone is a no-op."""


class UserDirectory(ABC):
    """Source of truth for which user ids exist."""

    @abstractmethod
    def user_exists(self, user_id: str) -> bool:
        """Return ``True`` when *user_id* is a known user."""

    @abstractmethod
    def iter_user_ids(self) -> Iterator[str]:
        """Yield every known user id in directory order."""


class RandomSource(ABC):
    """Cryptographically sound random bytes."""

    @abstractmethod
    def generate(self, num_bytes: int) -> bytes:
        """Return *num_bytes* random bytes."""


__all__ = [
    "AddressBookBackend",
    "UserDirectory",
    "RandomSource",
]
