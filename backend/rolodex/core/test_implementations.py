"""Test-specific implementations of core interfaces.

These implementations keep everything in plain Python containers so unit
tests can exercise the contacts core without a database, while keeping the
same interfaces as production code.
"""

from __future__ import annotations

from typing import Dict
from typing import Iterable
from typing import Iterator
from typing import List
from typing import Optional

from rolodex.constants import DISPLAYNAME_PROPERTY
from rolodex.core.interfaces import AddressBookBackend
from rolodex.core.interfaces import RandomSource
from rolodex.core.interfaces import UserDirectory
from rolodex.schemas.contact_types import AddressBookInfo
from rolodex.schemas.contact_types import CardInfo
from rolodex.services.errors import BackendError


class InMemoryAddressBookBackend(AddressBookBackend):
    """Dict-backed card store preserving insertion order.

    ``fail_on`` names operations that should raise :class:`BackendError`,
    which lets tests drive the failure paths.
    """

    def __init__(self):
        self._books: List[AddressBookInfo] = []
        self._cards: Dict[int, Dict[str, str]] = {}
        self._next_id = 1
        self.fail_on: set[str] = set()
        self.calls: List[str] = []

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise BackendError(operation, "simulated failure")

    def get_address_books_for_principal(self, principal_uri: str) -> List[AddressBookInfo]:
        self._record("get_address_books_for_principal")
        return [book for book in self._books if book.principal_uri == principal_uri]

    def create_address_book(self, principal_uri: str, uri: str, properties: Dict[str, str]) -> int:
        self._record("create_address_book")
        book = AddressBookInfo(
            id=self._next_id,
            uri=uri,
            principal_uri=principal_uri,
            display_name=properties.get(DISPLAYNAME_PROPERTY),
        )
        self._next_id += 1
        self._books.append(book)
        self._cards[book.id] = {}
        return book.id

    def get_cards(self, address_book_id: int) -> List[CardInfo]:
        self._record("get_cards")
        return [CardInfo(name=name, data=data) for name, data in self._cards.get(address_book_id, {}).items()]

    def get_card(self, address_book_id: int, name: str) -> Optional[CardInfo]:
        self._record("get_card")
        data = self._cards.get(address_book_id, {}).get(name)
        if data is None:
            return None
        return CardInfo(name=name, data=data)

    def create_card(self, address_book_id: int, name: str, data: str) -> None:
        self._record("create_card")
        cards = self._cards.setdefault(address_book_id, {})
        if name in cards:
            raise BackendError("create_card", f"card {name} already exists")
        cards[name] = data

    def update_card(self, address_book_id: int, name: str, data: str) -> None:
        self._record("update_card")
        cards = self._cards.get(address_book_id, {})
        if name in cards:
            cards[name] = data

    def delete_card(self, address_book_id: int, name: str) -> None:
        self._record("delete_card")
        self._cards.get(address_book_id, {}).pop(name, None)

    # Test helpers ------------------------------------------------------

    def put_raw_card(self, address_book_id: int, name: str, data: str) -> None:
        """Store *data* verbatim, bypassing the codec."""
        self._cards.setdefault(address_book_id, {})[name] = data


class InMemoryUserDirectory(UserDirectory):
    """Ordered set of user ids."""

    def __init__(self, user_ids: Iterable[str] = ()):
        self._user_ids: List[str] = list(user_ids)

    def add(self, user_id: str) -> None:
        if user_id not in self._user_ids:
            self._user_ids.append(user_id)

    def user_exists(self, user_id: str) -> bool:
        return user_id in self._user_ids

    def iter_user_ids(self) -> Iterator[str]:
        return iter(list(self._user_ids))


class FixedRandomSource(RandomSource):
    """Deterministic bytes: repeats *pattern* to the requested length."""

    def __init__(self, pattern: bytes = b"\xff"):
        self.pattern = pattern

    def generate(self, num_bytes: int) -> bytes:
        repeated = self.pattern * (num_bytes // len(self.pattern) + 1)
        return repeated[:num_bytes]


__all__ = [
    "InMemoryAddressBookBackend",
    "InMemoryUserDirectory",
    "FixedRandomSource",
]
