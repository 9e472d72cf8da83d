"""vCard 3.0 encoding and decoding for contact records.

Only a fixed, minimal field set is supported: ``UID``, ``FN``, ``EMAIL``,
the cloud id (written twice, as ``CLOUD`` and ``X-NEXTCLOUD-CLOUD-ID``),
an optional ``ORG`` and the ``REV`` timestamp.

Encoding is a straight template.  Decoding delegates unfolding, tokenising
and backslash unescaping to :mod:`icalendar`'s content-line reader, which
handles RFC 2426 text as well as RFC 5545.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict
from typing import List
from typing import Optional

from icalendar.parser import Contentline
from icalendar.parser import Contentlines

from rolodex.constants import VCARD_PRODID
from rolodex.constants import VCARD_VERSION
from rolodex.schemas.contact_types import ContactRecord
from rolodex.services.errors import ContactServiceError
from rolodex.utils.time import format_rev
from rolodex.utils.time import utc_now

CRLF = "\r\n"

# Property names ------------------------------------------------------------

PROP_UID = "UID"
PROP_FN = "FN"
PROP_EMAIL = "EMAIL"
PROP_CLOUD = "CLOUD"
PROP_CLOUD_COMPAT = "X-NEXTCLOUD-CLOUD-ID"
PROP_ORG = "ORG"
PROP_REV = "REV"

_COMPONENT = "VCARD"


class VCardDecodeError(ContactServiceError):
    """Stored card text is not a well-formed single vCard."""


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def escape_value(value: str) -> str:
    """Escape a free-text value for inclusion in a vCard content line.

    Backslashes go first, otherwise the backslashes introduced for ``;``,
    ``,`` and newlines would be doubled again.
    """

    return value.replace("\\", "\\\\").replace(";", "\\;").replace(",", "\\,").replace("\n", "\\n")


def encode_vcard(
    uid: str,
    displayname: str,
    email: str,
    cloud_id: str,
    organization: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> str:
    """Return the vCard text for one contact.

    Callers supply non-empty required fields; nothing is re-validated here.
    ``now`` pins the ``REV`` timestamp (defaults to the current UTC time).
    """

    lines = [
        f"BEGIN:{_COMPONENT}",
        f"VERSION:{VCARD_VERSION}",
        f"PRODID:{VCARD_PRODID}",
        f"{PROP_UID}:{uid}",
        f"{PROP_FN}:{escape_value(displayname)}",
        f"{PROP_EMAIL};TYPE=INTERNET:{escape_value(email)}",
        f"{PROP_CLOUD_COMPAT}:{escape_value(cloud_id)}",
        f"{PROP_CLOUD}:{escape_value(cloud_id)}",
    ]

    if organization:
        lines.append(f"{PROP_ORG}:{escape_value(organization)}")

    lines.append(f"{PROP_REV}:{format_rev(now or utc_now())}")
    lines.append(f"END:{_COMPONENT}")

    return CRLF.join(lines)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _read_properties(card_text: str) -> Dict[str, str]:
    """Tokenise *card_text* and return ``{NAME: unescaped value}``.

    The first occurrence of each property wins.  Raises
    :class:`VCardDecodeError` for anything that is not exactly one
    ``BEGIN:VCARD`` … ``END:VCARD`` block.
    """

    if not isinstance(card_text, str):
        raise VCardDecodeError(f"Card data must be text, got {type(card_text).__name__}")

    try:
        lines: List[Contentline] = [line for line in Contentlines.from_ical(card_text) if line]
        parsed = [line.parts() for line in lines]
    except ValueError as exc:
        raise VCardDecodeError(f"Unparseable card: {exc}") from exc

    if len(parsed) < 2:
        raise VCardDecodeError("Card is empty or truncated")

    first_name, _, first_value = parsed[0]
    last_name, _, last_value = parsed[-1]
    if first_name.upper() != "BEGIN" or first_value.upper() != _COMPONENT:
        raise VCardDecodeError(f"Card must start with BEGIN:{_COMPONENT}")
    if last_name.upper() != "END" or last_value.upper() != _COMPONENT:
        raise VCardDecodeError(f"Card must end with END:{_COMPONENT}")

    properties: Dict[str, str] = {}
    for name, _params, value in parsed[1:-1]:
        uname = name.upper()
        if uname in ("BEGIN", "END"):
            raise VCardDecodeError(f"Unexpected {uname}:{value} inside card")
        properties.setdefault(uname, value)

    return properties


def decode_vcard(card_text: str) -> ContactRecord:
    """Parse vCard text into a :class:`ContactRecord`.

    Missing text fields come back as ``""``; a missing or empty ``ORG``
    comes back as ``None``.  The cloud id prefers ``CLOUD`` and falls back
    to ``X-NEXTCLOUD-CLOUD-ID``.
    """

    properties = _read_properties(card_text)

    if PROP_CLOUD in properties:
        cloud_id = properties[PROP_CLOUD]
    else:
        cloud_id = properties.get(PROP_CLOUD_COMPAT, "")

    return ContactRecord(
        uid=properties.get(PROP_UID, ""),
        displayname=properties.get(PROP_FN, ""),
        email=properties.get(PROP_EMAIL, ""),
        cloud_id=cloud_id,
        organization=properties.get(PROP_ORG) or None,
    )


__all__ = [
    "VCardDecodeError",
    "escape_value",
    "encode_vcard",
    "decode_vcard",
]
