"""Locate a user's default address book, creating it on first use."""

import logging
from typing import List

from rolodex.constants import DEFAULT_ADDRESS_BOOK_DISPLAY_NAME
from rolodex.constants import DEFAULT_ADDRESS_BOOK_URI
from rolodex.constants import DISPLAYNAME_PROPERTY
from rolodex.constants import PRINCIPAL_URI_PREFIX
from rolodex.core.interfaces import AddressBookBackend
from rolodex.schemas.contact_types import AddressBookInfo

logger = logging.getLogger(__name__)


class AddressBookResolver:
    """Map user ids to address books in the card store.

    The search-then-create in :meth:`resolve_or_create_default` holds no lock.
    Two concurrent first-time creates for the same user may both try to create
    ``contacts``; the SQL store's unique constraint rejects the second one with
    a ``BackendError``.
    """

    def __init__(self, backend: AddressBookBackend):
        self.backend = backend

    @staticmethod
    def principal_uri(user_id: str) -> str:
        return f"{PRINCIPAL_URI_PREFIX}{user_id}"

    def list_for_user(self, user_id: str) -> List[AddressBookInfo]:
        """Return the user's address books in backend order."""

        return self.backend.get_address_books_for_principal(self.principal_uri(user_id))

    def resolve_or_create_default(self, user_id: str) -> int:
        """Return the id of the book new contacts for *user_id* go into.

        Prefers a book named ``contacts``, then the first listed book.  A user
        without any book gets a fresh ``contacts`` book.
        """

        books = self.list_for_user(user_id)

        for book in books:
            if book.uri == DEFAULT_ADDRESS_BOOK_URI:
                return book.id

        if books:
            return books[0].id

        book_id = self.backend.create_address_book(
            self.principal_uri(user_id),
            DEFAULT_ADDRESS_BOOK_URI,
            {DISPLAYNAME_PROPERTY: DEFAULT_ADDRESS_BOOK_DISPLAY_NAME},
        )
        logger.info(f"Created default address book {book_id} for user {user_id}")
        return book_id


__all__ = ["AddressBookResolver"]
