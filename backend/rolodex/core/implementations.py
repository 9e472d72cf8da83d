"""Production implementations of core interfaces.

These implementations wrap the CRUD helpers in :mod:`rolodex.crud.crud` to
provide the interface contracts required by the contacts core.  Each one
works on a caller-owned SQLAlchemy ``Session`` (the request-scoped session
from :func:`rolodex.database.get_db` in the API).
"""

from __future__ import annotations

import logging
import secrets
from contextlib import contextmanager
from typing import Dict
from typing import Iterator
from typing import List
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rolodex.constants import DISPLAYNAME_PROPERTY
from rolodex.core.interfaces import AddressBookBackend
from rolodex.core.interfaces import RandomSource
from rolodex.core.interfaces import UserDirectory
from rolodex.crud import crud
from rolodex.schemas.contact_types import AddressBookInfo
from rolodex.schemas.contact_types import CardInfo
from rolodex.services.errors import BackendError

logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors(db: Session, operation: str):
    """Roll back and re-raise SQLAlchemy failures as :class:`BackendError`."""

    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"{operation} failed: {exc}")
        raise BackendError(operation, str(exc)) from exc


class SQLAlchemyAddressBookBackend(AddressBookBackend):
    """Card store backed by the ``address_books`` / ``cards`` tables."""

    def __init__(self, db: Session):
        self.db = db

    def get_address_books_for_principal(self, principal_uri: str) -> List[AddressBookInfo]:
        with _storage_errors(self.db, "get_address_books_for_principal"):
            books = crud.get_address_books(self.db, principal_uri)
            return [
                AddressBookInfo(
                    id=book.id,
                    uri=book.uri,
                    principal_uri=book.principal_uri,
                    display_name=book.display_name,
                )
                for book in books
            ]

    def create_address_book(self, principal_uri: str, uri: str, properties: Dict[str, str]) -> int:
        with _storage_errors(self.db, "create_address_book"):
            book = crud.create_address_book(
                self.db,
                principal_uri=principal_uri,
                uri=uri,
                display_name=properties.get(DISPLAYNAME_PROPERTY),
            )
            return book.id

    def get_cards(self, address_book_id: int) -> List[CardInfo]:
        with _storage_errors(self.db, "get_cards"):
            return [CardInfo(name=card.uri, data=card.carddata) for card in crud.get_cards(self.db, address_book_id)]

    def get_card(self, address_book_id: int, name: str) -> Optional[CardInfo]:
        with _storage_errors(self.db, "get_card"):
            card = crud.get_card(self.db, address_book_id, name)
            if card is None:
                return None
            return CardInfo(name=card.uri, data=card.carddata)

    def create_card(self, address_book_id: int, name: str, data: str) -> None:
        with _storage_errors(self.db, "create_card"):
            crud.create_card(self.db, address_book_id=address_book_id, uri=name, carddata=data)

    def update_card(self, address_book_id: int, name: str, data: str) -> None:
        with _storage_errors(self.db, "update_card"):
            updated = crud.update_card(self.db, address_book_id=address_book_id, uri=name, carddata=data)
        if updated is None:
            logger.warning(f"update_card: {name} vanished from address book {address_book_id}, nothing written")

    def delete_card(self, address_book_id: int, name: str) -> None:
        with _storage_errors(self.db, "delete_card"):
            deleted = crud.delete_card(self.db, address_book_id, name)
        if not deleted:
            logger.info(f"delete_card: {name} already gone from address book {address_book_id}")


class SQLAlchemyUserDirectory(UserDirectory):
    """User directory over the ``users`` table."""

    def __init__(self, db: Session):
        self.db = db

    def user_exists(self, user_id: str) -> bool:
        with _storage_errors(self.db, "user_exists"):
            return crud.get_user_by_user_id(self.db, user_id) is not None

    def iter_user_ids(self) -> Iterator[str]:
        with _storage_errors(self.db, "iter_user_ids"):
            user_ids = crud.get_user_ids(self.db)
        return iter(user_ids)


class SecureRandomSource(RandomSource):
    """Random bytes from the operating system CSPRNG."""

    def generate(self, num_bytes: int) -> bytes:
        return secrets.token_bytes(num_bytes)


__all__ = [
    "SQLAlchemyAddressBookBackend",
    "SQLAlchemyUserDirectory",
    "SecureRandomSource",
]
