"""Contact CRUD on top of the card store.

This is the only place that combines the user directory, the address book
resolver and the vCard codec.  The HTTP layer in
:mod:`rolodex.routers.contacts` translates the results and the errors from
:mod:`rolodex.services.errors` into responses.

Absent contacts are ordinary return values (``None`` / ``False``).  Raised
errors are reserved for bad input, unknown users, undecodable cards on the
single-contact read path and storage failures.
"""

import logging
from typing import List
from typing import Optional
from typing import Tuple

from rolodex.constants import DEFAULT_PAGE_LIMIT
from rolodex.constants import card_name
from rolodex.core.implementations import SecureRandomSource
from rolodex.core.interfaces import AddressBookBackend
from rolodex.core.interfaces import RandomSource
from rolodex.core.interfaces import UserDirectory
from rolodex.schemas.contact_types import CardInfo
from rolodex.schemas.contact_types import ContactPage
from rolodex.schemas.contact_types import ContactRecord
from rolodex.services.address_book_resolver import AddressBookResolver
from rolodex.services.errors import ContactValidationError
from rolodex.services.errors import UserNotFoundError
from rolodex.services.vcard_codec import VCardDecodeError
from rolodex.services.vcard_codec import decode_vcard
from rolodex.services.vcard_codec import encode_vcard

logger = logging.getLogger(__name__)


def _require(**fields: Optional[str]) -> None:
    """Raise :class:`ContactValidationError` naming every empty field."""

    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise ContactValidationError(missing)


class ContactService:
    """Create, read, update, delete and list contacts stored as vCards."""

    def __init__(
        self,
        backend: AddressBookBackend,
        directory: UserDirectory,
        random_source: Optional[RandomSource] = None,
    ):
        self.backend = backend
        self.directory = directory
        self.random_source = random_source or SecureRandomSource()
        self.resolver = AddressBookResolver(backend)

    # ------------------------------------------------------------------
    # Identifiers
    # ------------------------------------------------------------------

    def generate_uid(self) -> str:
        """Return a random version-4 UUID in canonical lower-case form.

        No uniqueness check against the store: 122 random bits make a
        collision negligible.
        """

        data = bytearray(self.random_source.generate(16))
        data[6] = data[6] & 0x0F | 0x40
        data[8] = data[8] & 0x3F | 0x80
        hexed = data.hex()
        return f"{hexed[0:8]}-{hexed[8:12]}-{hexed[12:16]}-{hexed[16:20]}-{hexed[20:32]}"

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_contact(
        self,
        user_id: str,
        displayname: str,
        email: str,
        cloud_id: str,
        organization: Optional[str] = None,
    ) -> ContactRecord:
        _require(user_id=user_id, displayname=displayname, email=email, cloud_id=cloud_id)

        if not self.directory.user_exists(user_id):
            raise UserNotFoundError(user_id)

        address_book_id = self.resolver.resolve_or_create_default(user_id)
        uid = self.generate_uid()
        carddata = encode_vcard(uid, displayname, email, cloud_id, organization)

        self.backend.create_card(address_book_id, card_name(uid), carddata)
        logger.info(f"Created contact {uid} for user {user_id} in address book {address_book_id}")

        return ContactRecord(
            uid=uid,
            displayname=displayname,
            email=email,
            cloud_id=cloud_id,
            organization=organization or None,
            user_id=user_id,
        )

    def update_contact(
        self,
        user_id: str,
        uid: str,
        displayname: str,
        email: str,
        cloud_id: str,
        organization: Optional[str] = None,
    ) -> Optional[ContactRecord]:
        """Replace contact *uid* in place; ``None`` when it does not exist."""

        _require(displayname=displayname, email=email, cloud_id=cloud_id)

        located = self._locate(user_id, uid)
        if located is None:
            return None

        address_book_id, card = located
        carddata = encode_vcard(uid, displayname, email, cloud_id, organization)
        self.backend.update_card(address_book_id, card.name, carddata)
        logger.info(f"Updated contact {uid} for user {user_id}")

        return ContactRecord(
            uid=uid,
            displayname=displayname,
            email=email,
            cloud_id=cloud_id,
            organization=organization or None,
            user_id=user_id,
        )

    def delete_contact(self, user_id: str, uid: str) -> bool:
        """Remove contact *uid*; ``False`` when it does not exist."""

        located = self._locate(user_id, uid)
        if located is None:
            return False

        address_book_id, card = located
        self.backend.delete_card(address_book_id, card.name)
        logger.info(f"Deleted contact {uid} for user {user_id}")
        return True

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_contact(self, user_id: str, uid: str) -> Optional[ContactRecord]:
        """Return contact *uid* of *user_id* or ``None``.

        User existence is not checked: an unknown user simply has no books.
        A stored card that cannot be decoded raises :class:`VCardDecodeError`.
        """

        located = self._locate(user_id, uid)
        if located is None:
            return None

        address_book_id, card = located
        return decode_vcard(card.data).with_location(user_id, address_book_id)

    def list_user_contacts(self, user_id: str) -> List[ContactRecord]:
        """Return every decodable contact of *user_id* in store order."""

        records: List[ContactRecord] = []
        for book in self.resolver.list_for_user(user_id):
            for card in self.backend.get_cards(book.id):
                try:
                    record = decode_vcard(card.data)
                except VCardDecodeError as exc:
                    logger.warning(f"Skipping undecodable card {card.name} in address book {book.id}: {exc}")
                    continue
                records.append(record.with_location(user_id, book.id))
        return records

    def list_contacts(
        self,
        user_id: Optional[str] = None,
        limit: int = DEFAULT_PAGE_LIMIT,
        offset: int = 0,
    ) -> ContactPage:
        """Return one page of contacts plus the total before paging.

        Without *user_id* every directory user is scanned, in directory order.
        """

        if limit < 0 or offset < 0:
            raise ContactValidationError(
                [name for name, value in (("limit", limit), ("offset", offset)) if value < 0],
                "limit and offset must not be negative",
            )

        if user_id is not None:
            records = self.list_user_contacts(user_id)
        else:
            records = []
            for directory_user_id in self.directory.iter_user_ids():
                records.extend(self.list_user_contacts(directory_user_id))

        return ContactPage(records=records[offset : offset + limit], total=len(records))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _locate(self, user_id: str, uid: str) -> Optional[Tuple[int, CardInfo]]:
        """Return ``(address_book_id, card)`` for the first book holding *uid*."""

        name = card_name(uid)
        for book in self.resolver.list_for_user(user_id):
            card = self.backend.get_card(book.id, name)
            if card is not None:
                return book.id, card
        return None


__all__ = ["ContactService"]
