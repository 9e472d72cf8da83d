from typing import List
from typing import Optional

from pydantic import BaseModel

# ------------------------------------------------------------
# Contact request bodies
# ------------------------------------------------------------

# All fields are Optional: missing and empty values both surface as the
# service's 400 "Missing required fields" error, never as a 422.


class ContactCreate(BaseModel):
    user_id: Optional[str] = None
    displayname: Optional[str] = None
    email: Optional[str] = None
    cloud_id: Optional[str] = None
    organization: Optional[str] = None


class ContactUpdate(BaseModel):
    displayname: Optional[str] = None
    email: Optional[str] = None
    cloud_id: Optional[str] = None
    organization: Optional[str] = None


# ------------------------------------------------------------
# Contact responses
# ------------------------------------------------------------


class ContactOut(BaseModel):
    uid: str
    user_id: Optional[str] = None
    displayname: str
    email: str
    cloud_id: str
    organization: Optional[str] = None
    # Only present on records read back from the store.
    address_book_id: Optional[int] = None


class ContactListOut(BaseModel):
    vcards: List[ContactOut]
    total: int


class MessageOut(BaseModel):
    message: str

