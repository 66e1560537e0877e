"""
Storage Module for Libreria

Persistent storage for users, issued tokens and the book catalog.
"""

from libreria.storage.models import (
    Base,
    User,
    AuthToken,
    Book,
)
from libreria.storage.book_repository import BookRepository
from libreria.storage.user_repository import UserRepository
from libreria.storage.token_repository import TokenRepository

__all__ = [
    # Models
    "Base",
    "User",
    "AuthToken",
    "Book",
    # Repositories
    "BookRepository",
    "UserRepository",
    "TokenRepository",
]
