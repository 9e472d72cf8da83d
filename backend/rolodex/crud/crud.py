import hashlib
from datetime import datetime
from typing import List
from typing import Optional

from sqlalchemy.orm import Session

from rolodex.models.models import AddressBook
from rolodex.models.models import Card

# NOTE: For return type hints we avoid the newer *PEP 604* union syntax
# ``User | None`` because the SQLAlchemy DeclarativeMeta proxy that backs the
# ``User`` model overrides the bitwise OR operator.  Using the classic
# ``Optional[User]`` sidesteps the issue.
from rolodex.models.models import User
from rolodex.utils.time import utc_now
from rolodex.utils.time import utc_now_naive


# ------------------------------------------------------------
# User CRUD operations
# ------------------------------------------------------------


def get_user(db: Session, id: int) -> Optional[User]:
    """Return user by primary key."""
    return db.query(User).filter(User.id == id).first()


def get_user_by_user_id(db: Session, user_id: str) -> Optional[User]:
    """Return user by directory id (the string used in API paths)."""
    return db.query(User).filter(User.user_id == user_id).first()


def get_user_ids(db: Session) -> List[str]:
    """Return every directory id in primary-key order."""
    return [row.user_id for row in db.query(User.user_id).order_by(User.id).all()]


def create_user(
    db: Session,
    *,
    user_id: str,
    email: Optional[str] = None,
    display_name: Optional[str] = None,
    role: str = "USER",
) -> User:
    """Insert new user row.

    Caller is expected to ensure uniqueness beforehand; we do not upsert here.
    """
    new_user = User(
        user_id=user_id,
        email=email,
        display_name=display_name,
        role=role,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    return new_user


def touch_last_login(db: Session, user: User, *, when: Optional[datetime] = None) -> User:
    user.last_login = when or utc_now_naive()
    db.commit()
    db.refresh(user)
    return user


# ------------------------------------------------------------
# Address book CRUD operations
# ------------------------------------------------------------


def get_address_books(db: Session, principal_uri: str) -> List[AddressBook]:
    """Return the principal's address books in creation (id) order."""
    return db.query(AddressBook).filter(AddressBook.principal_uri == principal_uri).order_by(AddressBook.id).all()


def create_address_book(
    db: Session,
    *,
    principal_uri: str,
    uri: str,
    display_name: Optional[str] = None,
) -> AddressBook:
    """Create an address book row.

    The (principal_uri, uri) pair is unique; a duplicate raises
    ``IntegrityError`` from the flush.
    """
    book = AddressBook(principal_uri=principal_uri, uri=uri, display_name=display_name)
    db.add(book)
    db.commit()
    db.refresh(book)
    return book


# ------------------------------------------------------------
# Card CRUD operations
# ------------------------------------------------------------


def _stamp_card(card: Card, carddata: str) -> None:
    """Set data plus the derived etag/size/last_modified columns."""
    encoded = carddata.encode("utf-8")
    card.carddata = carddata
    card.etag = hashlib.md5(encoded).hexdigest()
    card.size = len(encoded)
    card.last_modified = int(utc_now().timestamp())


def get_cards(db: Session, address_book_id: int) -> List[Card]:
    """Return every card of an address book in insertion (id) order."""
    return db.query(Card).filter(Card.address_book_id == address_book_id).order_by(Card.id).all()


def get_card(db: Session, address_book_id: int, uri: str) -> Optional[Card]:
    return db.query(Card).filter(Card.address_book_id == address_book_id, Card.uri == uri).first()


def create_card(db: Session, *, address_book_id: int, uri: str, carddata: str) -> Card:
    card = Card(address_book_id=address_book_id, uri=uri)
    _stamp_card(card, carddata)
    db.add(card)
    db.commit()
    db.refresh(card)
    return card


def update_card(db: Session, *, address_book_id: int, uri: str, carddata: str) -> Optional[Card]:
    """Replace a card's data.

    Returns the updated row or ``None`` if the card was not found.
    """
    card = get_card(db, address_book_id, uri)
    if card is None:
        return None
    _stamp_card(card, carddata)
    db.commit()
    db.refresh(card)
    return card


def delete_card(db: Session, address_book_id: int, uri: str) -> bool:
    card = get_card(db, address_book_id, uri)
    if card is None:
        return False
    db.delete(card)
    db.commit()
    return True
