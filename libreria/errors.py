"""
Error taxonomy for Libreria.

Every failure surfaced to an API caller is one of these exceptions. They are
translated to JSON responses by ``libreria.api.middleware.error_handler``.
"""

from typing import Optional


class LibreriaException(Exception):
    """Base exception for Libreria errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        detail: Optional[str] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class ValidationError(LibreriaException):
    """Input validation failed."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            detail=detail,
        )


class NotFoundError(LibreriaException):
    """Resource not found."""

    def __init__(
        self,
        resource: str,
        identifier: Optional[str] = None,
        message: Optional[str] = None,
    ):
        detail = None
        if identifier is not None:
            detail = f"No {resource.lower()} with identifier '{identifier}' exists"
        super().__init__(
            message=message or f"{resource} not found",
            code="NOT_FOUND",
            status_code=404,
            detail=detail,
        )


class UserNotFoundError(LibreriaException):
    """Login attempted for an email with no registered user."""

    def __init__(self, email: str):
        super().__init__(
            message="User not found",
            code="USER_NOT_FOUND",
            status_code=400,
            detail=f"No user registered with email '{email}'",
        )


class InvalidCredentialsError(LibreriaException):
    """Password did not match the stored hash."""

    def __init__(self):
        super().__init__(
            message="Invalid password",
            code="INVALID_CREDENTIALS",
            status_code=400,
        )


class UnauthorizedError(LibreriaException):
    """No token supplied on a protected route."""

    def __init__(self, scheme: str):
        super().__init__(
            message=f"{scheme} not defined or not valid",
            code="UNAUTHORIZED",
            status_code=401,
            detail="Send the token in the 'auth-token' header or as 'Authorization: Bearer <token>'",
        )


class InvalidTokenError(LibreriaException):
    """Token unknown to the store or with a bad signature."""

    def __init__(self, scheme: str, detail: Optional[str] = None):
        super().__init__(
            message=f"{scheme} is not valid",
            code="INVALID_TOKEN",
            status_code=400,
            detail=detail,
        )


class TokenExpiredError(LibreriaException):
    """Token signature is fine but its expiry has passed."""

    def __init__(self, scheme: str, detail: Optional[str] = None):
        super().__init__(
            message=f"{scheme} expired",
            code="TOKEN_EXPIRED",
            status_code=400,
            detail=detail,
        )


class RevokedTokenError(LibreriaException):
    """Token row exists but has been deactivated."""

    def __init__(self, scheme: str):
        super().__init__(
            message=f"{scheme} revoked",
            code="TOKEN_REVOKED",
            status_code=400,
        )


class InternalError(LibreriaException):
    """Unexpected store or runtime failure."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(
            message=message,
            code="INTERNAL_ERROR",
            status_code=500,
            detail=detail,
        )
