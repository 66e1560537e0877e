"""
API Schemas for Libreria

Pydantic models for request validation and response serialization:
- User models
- Book models
- Error and health models

Design Decisions:
1. Strict validation: every write is validated before it reaches the store
2. Separate Request/Response: password hashes never leave the API
3. camelCase on the wire (``publishedYear``), snake_case in Python
"""

from datetime import datetime, timezone
from typing import Optional
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator


# =============================================================================
# Enums
# =============================================================================

class BookStatus(str, Enum):
    """Book availability."""
    AVAILABLE = "available"
    RESERVED = "reserved"


YEAR_PATTERN = r"^[0-9]{4}$"


def _check_email_length(value: str) -> str:
    if not 6 <= len(value) <= 255:
        raise ValueError("email must be between 6 and 255 characters")
    return value


# =============================================================================
# User Schemas
# =============================================================================

class UserRegister(BaseModel):
    """Registration request."""

    name: str = Field(..., min_length=6, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=1024)

    @field_validator("email")
    @classmethod
    def email_length(cls, value: str) -> str:
        return _check_email_length(value)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Juan Perez",
                "email": "usuario@ejemplo.com",
                "password": "contrasena123",
            }
        }
    )


class UserLogin(BaseModel):
    """Login request."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=1024)

    @field_validator("email")
    @classmethod
    def email_length(cls, value: str) -> str:
        return _check_email_length(value)


class UserResponse(BaseModel):
    """Public view of a user."""

    id: str
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class UserEnvelope(BaseModel):
    data: UserResponse


class LoginData(BaseModel):
    message: str
    name: str
    email: str


class LoginResponse(BaseModel):
    """Login response body. The token travels in the ``user-token`` header."""

    data: LoginData


class MessageResponse(BaseModel):
    message: str


# =============================================================================
# Book Schemas
# =============================================================================

class BookCreate(BaseModel):
    """Book creation or full replacement request."""

    title: str = Field(..., min_length=6, max_length=255)
    author: str = Field(..., min_length=6, max_length=255)
    published_year: str = Field(
        ...,
        pattern=YEAR_PATTERN,
        validation_alias=AliasChoices("publishedYear", "published_year"),
        serialization_alias="publishedYear",
    )
    status: BookStatus

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "El Quijote",
                "author": "Miguel de Cervantes",
                "publishedYear": "1605",
                "status": "available",
            }
        }
    )


class BookUpdate(BaseModel):
    """Book update request (partial)."""

    title: Optional[str] = Field(None, min_length=6, max_length=255)
    author: Optional[str] = Field(None, min_length=6, max_length=255)
    published_year: Optional[str] = Field(
        None,
        pattern=YEAR_PATTERN,
        validation_alias=AliasChoices("publishedYear", "published_year"),
        serialization_alias="publishedYear",
    )
    status: Optional[BookStatus] = None

    @model_validator(mode="after")
    def reject_nulls(self) -> "BookUpdate":
        """Omitted fields stay as they are; a field sent as null is an error."""
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} may not be null")
        return self


class BookResponse(BaseModel):
    """Book response model."""

    id: str
    title: str
    author: str
    published_year: str = Field(
        ...,
        validation_alias=AliasChoices("publishedYear", "published_year"),
        serialization_alias="publishedYear",
    )
    status: BookStatus

    model_config = ConfigDict(from_attributes=True)


class BookEnvelope(BaseModel):
    data: BookResponse


# =============================================================================
# Error Schemas
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    status: int
    detail: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Book not found",
                "code": "NOT_FOUND",
                "status": 404,
                "detail": "No book with identifier 'abc123' exists",
                "timestamp": "2025-01-20T12:00:00Z",
            }
        }
    )


# =============================================================================
# Health Check
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
