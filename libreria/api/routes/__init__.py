"""
API Routes for Libreria

Route modules:
- auth: registration, login, logout
- books: catalog CRUD and search
"""

from libreria.api.routes.auth import router as auth_router
from libreria.api.routes.books import router as books_router

__all__ = [
    "auth_router",
    "books_router",
]
