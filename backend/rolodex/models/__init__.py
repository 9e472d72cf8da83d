"""Database models for the application."""

from .models import AddressBook
from .models import Card
from .models import User

__all__ = ["AddressBook", "Card", "User"]
