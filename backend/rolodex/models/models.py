# SQLAlchemy core imports
from sqlalchemy import BigInteger
from sqlalchemy import Boolean
from sqlalchemy import Column
from sqlalchemy import DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey
from sqlalchemy import Integer
from sqlalchemy import String
from sqlalchemy import Text
from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

# Local helpers / enums
from rolodex.database import Base
from rolodex.models.enums import UserRole

# ---------------------------------------------------------------------------
# Users – the directory the contacts API resolves ``user_id`` against
# ---------------------------------------------------------------------------


class User(Base):
    """Directory user.

    ``user_id`` is the stable string identifier used in API paths and in the
    principal URI of the user's address books.  ``id`` is the numeric key
    carried in the ``sub`` claim of access tokens.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # Core identity ----------------------------------------------------------
    user_id = Column(String, unique=True, nullable=False, index=True)
    email = Column(String, nullable=True, index=True)
    display_name = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Role / permission level – backed by :class:`rolodex.models.enums.UserRole`.
    role = Column(
        SAEnum(UserRole, native_enum=False, name="user_role_enum"),
        nullable=False,
        default=UserRole.USER.value,
    )

    # Login tracking
    last_login = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


# ---------------------------------------------------------------------------
# Card store – address books and the vCards inside them
# ---------------------------------------------------------------------------


class AddressBook(Base):
    """A named collection of cards owned by one principal."""

    __tablename__ = "address_books"
    __table_args__ = (UniqueConstraint("principal_uri", "uri", name="uix_address_book_principal_uri"),)

    id = Column(Integer, primary_key=True, index=True)
    # ``principals/users/<user_id>``
    principal_uri = Column(String, nullable=False, index=True)
    # Local name inside the principal's home, e.g. ``contacts``
    uri = Column(String, nullable=False)
    display_name = Column(String, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    cards = relationship(
        "Card",
        back_populates="address_book",
        cascade="all, delete-orphan",
        order_by="Card.id",
    )


class Card(Base):
    """One stored vCard blob."""

    __tablename__ = "cards"
    __table_args__ = (UniqueConstraint("address_book_id", "uri", name="uix_card_address_book_uri"),)

    id = Column(Integer, primary_key=True, index=True)
    address_book_id = Column(Integer, ForeignKey("address_books.id", ondelete="CASCADE"), nullable=False, index=True)
    # File name inside the address book, ``<uid>.vcf``
    uri = Column(String, nullable=False)
    carddata = Column(Text, nullable=False)
    # md5 of ``carddata`` – lets other readers of the store detect changes
    etag = Column(String, nullable=False)
    size = Column(Integer, nullable=False)
    # Unix seconds of the last write
    last_modified = Column(BigInteger, nullable=False)

    address_book = relationship("AddressBook", back_populates="cards")
