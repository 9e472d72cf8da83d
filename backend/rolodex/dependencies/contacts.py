"""Wire the contact service to the request-scoped database session."""

from fastapi import Depends
from sqlalchemy.orm import Session

from rolodex.core.implementations import SQLAlchemyAddressBookBackend
from rolodex.core.implementations import SQLAlchemyUserDirectory
from rolodex.database import get_db
from rolodex.services.contact_service import ContactService


def get_contact_service(db: Session = Depends(get_db)) -> ContactService:
    return ContactService(
        backend=SQLAlchemyAddressBookBackend(db),
        directory=SQLAlchemyUserDirectory(db),
    )


__all__ = ["get_contact_service"]
