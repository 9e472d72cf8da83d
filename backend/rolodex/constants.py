# ---------------------------------------------------------------------------
# NOTE: This module is imported by the codec, the resolver and the routers so
# it stays free of heavyweight dependencies and side-effects.
# ---------------------------------------------------------------------------

from typing import Final

# Base API prefix (all HTTP routes are served under /api/*)
API_PREFIX = "/api"

# Router prefixes (relative to API_PREFIX)
CONTACTS_PREFIX = "/v1/contacts"

# ---------------------------------------------------------------------------
# Address book conventions
# ---------------------------------------------------------------------------

# Every user principal lives under this URI namespace in the card store.
PRINCIPAL_URI_PREFIX: Final[str] = "principals/users/"

# Local name + label of the collection created for users that have none.
DEFAULT_ADDRESS_BOOK_URI: Final[str] = "contacts"
DEFAULT_ADDRESS_BOOK_DISPLAY_NAME: Final[str] = "Contacts"

# DAV property carrying an address book's human readable label.
DISPLAYNAME_PROPERTY: Final[str] = "{DAV:}displayname"

# Cards are stored as ``<uid><CARD_SUFFIX>`` inside an address book.
CARD_SUFFIX: Final[str] = ".vcf"

# ---------------------------------------------------------------------------
# vCard constants
# ---------------------------------------------------------------------------

VCARD_VERSION: Final[str] = "3.0"
VCARD_PRODID: Final[str] = "-//Rolodex//Contacts API//EN"

# Pagination defaults for the bulk listing endpoint
DEFAULT_PAGE_LIMIT: Final[int] = 100


def get_full_path(relative_path: str) -> str:  # noqa: D401 – tiny helper
    """Return absolute API path by joining *relative_path* onto API_PREFIX."""

    return f"{API_PREFIX}{relative_path}"


def card_name(uid: str) -> str:
    """Return the storage name of the card holding contact *uid*."""

    return f"{uid}{CARD_SUFFIX}"


__all__ = [
    "API_PREFIX",
    "CONTACTS_PREFIX",
    "PRINCIPAL_URI_PREFIX",
    "DEFAULT_ADDRESS_BOOK_URI",
    "DEFAULT_ADDRESS_BOOK_DISPLAY_NAME",
    "DISPLAYNAME_PROPERTY",
    "CARD_SUFFIX",
    "VCARD_VERSION",
    "VCARD_PRODID",
    "DEFAULT_PAGE_LIMIT",
    "get_full_path",
    "card_name",
]
