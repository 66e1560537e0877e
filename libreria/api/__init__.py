"""
Libreria - FastAPI Backend.

JSON REST API for the library catalog.
"""

from .main import app, create_app, main
from .dependencies import (
    Settings,
    get_settings,
    get_db,
    require_token,
)
from .schemas import (
    BookStatus,
    BookCreate,
    BookUpdate,
    BookResponse,
    UserRegister,
    UserLogin,
    UserResponse,
    LoginResponse,
    HealthResponse,
    ErrorResponse,
)

__all__ = [
    # Application
    "app",
    "create_app",
    "main",
    # Dependencies
    "Settings",
    "get_settings",
    "get_db",
    "require_token",
    # Schemas
    "BookStatus",
    "BookCreate",
    "BookUpdate",
    "BookResponse",
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "LoginResponse",
    "HealthResponse",
    "ErrorResponse",
]
