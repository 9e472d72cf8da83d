"""Admin-only contacts API.

Every route requires an authenticated ``ADMIN`` user.  Handlers stay thin:
they call :class:`rolodex.services.contact_service.ContactService` and
translate its outcomes into HTTP status codes.
"""

import logging
from typing import NoReturn
from typing import Optional

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Query
from fastapi import status

from rolodex.config import get_settings
from rolodex.constants import CONTACTS_PREFIX
from rolodex.constants import DEFAULT_PAGE_LIMIT
from rolodex.dependencies.auth import get_current_user
from rolodex.dependencies.auth import require_admin
from rolodex.dependencies.contacts import get_contact_service
from rolodex.schemas.schemas import ContactCreate
from rolodex.schemas.schemas import ContactListOut
from rolodex.schemas.schemas import ContactOut
from rolodex.schemas.schemas import ContactUpdate
from rolodex.schemas.schemas import MessageOut
from rolodex.services.contact_service import ContactService
from rolodex.services.errors import BackendError
from rolodex.services.errors import ContactValidationError
from rolodex.services.errors import UserNotFoundError
from rolodex.services.vcard_codec import VCardDecodeError

logger = logging.getLogger(__name__)

_settings = get_settings()

router = APIRouter(
    prefix=CONTACTS_PREFIX,
    tags=["contacts"],
    dependencies=[Depends(get_current_user), Depends(require_admin)],
)

CONTACT_NOT_FOUND = "Contact not found"


def _server_error(action: str, exc: Exception, user_id: Optional[str] = None, uid: Optional[str] = None) -> NoReturn:
    logger.error(f"Failed to {action} (user_id={user_id}, uid={uid}): {exc}")
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}",
    ) from exc


# ---------------------------------------------------------------------------
# Collection routes
# ---------------------------------------------------------------------------


@router.get("", response_model=ContactListOut, response_model_exclude_unset=True)
def list_contacts(
    user_id: Optional[str] = None,
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=_settings.contacts_max_page_size),
    offset: int = Query(0, ge=0),
    service: ContactService = Depends(get_contact_service),
):
    """List contacts across all users (or one, via ``user_id``) with paging."""

    try:
        page = service.list_contacts(user_id=user_id, limit=limit, offset=offset)
    except ContactValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except BackendError as exc:
        _server_error("list contacts", exc, user_id=user_id)

    return {"vcards": [record.to_dict() for record in page.records], "total": page.total}


@router.post(
    "",
    response_model=ContactOut,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def create_contact(
    payload: ContactCreate,
    service: ContactService = Depends(get_contact_service),
):
    try:
        record = service.create_contact(
            payload.user_id,
            payload.displayname,
            payload.email,
            payload.cloud_id,
            payload.organization,
        )
    except ContactValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except BackendError as exc:
        _server_error("create contact", exc, user_id=payload.user_id)

    return record.to_dict()


# ---------------------------------------------------------------------------
# Per-user routes
# ---------------------------------------------------------------------------


@router.get("/{user_id}", response_model=ContactListOut, response_model_exclude_unset=True)
def list_user_contacts(
    user_id: str,
    service: ContactService = Depends(get_contact_service),
):
    try:
        records = service.list_user_contacts(user_id)
    except BackendError as exc:
        _server_error("list contacts", exc, user_id=user_id)

    return {"vcards": [record.to_dict() for record in records], "total": len(records)}


@router.get("/{user_id}/{uid}", response_model=ContactOut, response_model_exclude_unset=True)
def get_contact(
    user_id: str,
    uid: str,
    service: ContactService = Depends(get_contact_service),
):
    try:
        record = service.get_contact(user_id, uid)
    except (BackendError, VCardDecodeError) as exc:
        _server_error("get contact", exc, user_id=user_id, uid=uid)

    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CONTACT_NOT_FOUND)
    return record.to_dict()


@router.put("/{user_id}/{uid}", response_model=ContactOut, response_model_exclude_unset=True)
def update_contact(
    user_id: str,
    uid: str,
    payload: ContactUpdate,
    service: ContactService = Depends(get_contact_service),
):
    try:
        record = service.update_contact(
            user_id,
            uid,
            payload.displayname,
            payload.email,
            payload.cloud_id,
            payload.organization,
        )
    except ContactValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except BackendError as exc:
        _server_error("update contact", exc, user_id=user_id, uid=uid)

    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CONTACT_NOT_FOUND)
    return record.to_dict()


@router.delete("/{user_id}/{uid}", response_model=MessageOut)
def delete_contact(
    user_id: str,
    uid: str,
    service: ContactService = Depends(get_contact_service),
):
    try:
        deleted = service.delete_contact(user_id, uid)
    except BackendError as exc:
        _server_error("delete contact", exc, user_id=user_id, uid=uid)

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CONTACT_NOT_FOUND)
    return {"message": "Contact deleted successfully"}
