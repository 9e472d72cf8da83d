"""Timezone helpers – provide a single UTC-aware *now()* function.

Import :pyfunc:`utc_now` everywhere instead of calling the stdlib helpers
directly so that timestamps written into cards and rows stay consistent.
"""

from datetime import datetime
from datetime import timezone

# ``REV`` values inside stored cards use the compact basic ISO-8601 form.
VCARD_REV_FORMAT = "%Y%m%dT%H%M%SZ"


def utc_now() -> datetime:  # noqa: D401 – simple utility
    """Return *aware* current time in UTC."""

    return datetime.now(timezone.utc)


def utc_now_naive() -> datetime:  # noqa: D401 – simple utility
    """Return *naive* current time in UTC for database compatibility.

    SQLAlchemy DateTime columns without timezone info store naive datetimes.
    This function provides UTC time in the format expected by the database.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def format_rev(moment: datetime) -> str:
    """Render *moment* as a vCard ``REV`` value (``YYYYMMDDTHHMMSSZ``).

    Aware datetimes are converted to UTC first; naive ones are assumed to
    already be UTC.
    """

    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(VCARD_REV_FORMAT)


__all__ = ["utc_now", "utc_now_naive", "format_rev", "VCARD_REV_FORMAT"]
