"""
Error Handling for Libreria

Centralized error handling:
- Structured error responses
- Logging of errors
- Exception translation
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...errors import LibreriaException
from .logging import REQUEST_ID_HEADER

POWERED_BY_HEADER = "X-Powered-By"
POWERED_BY = "Library API"


def create_error_response(
    error: str,
    code: str,
    status_code: int,
    detail: Optional[str] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """Create standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "code": code,
            "status": status_code,
            "detail": detail,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        headers=headers,
    )


def describe_validation_error(exc: RequestValidationError) -> str:
    """Human-readable message for the first failing field."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    message = first.get("msg", "invalid value")
    if location:
        return f"{'.'.join(location)}: {message}"
    return message


def setup_exception_handlers(app):
    """Register exception handlers with FastAPI app."""

    @app.exception_handler(LibreriaException)
    async def libreria_exception_handler(request: Request, exc: LibreriaException):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(f"Libreria error on {request.method} {request.url.path}: {exc.code} - {exc.message}")

        headers = None
        if exc.status_code == 401:
            headers = {"WWW-Authenticate": "Bearer"}

        return create_error_response(
            error=exc.message,
            code=exc.code,
            status_code=exc.status_code,
            detail=exc.detail,
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        message = describe_validation_error(exc)
        logger.warning(f"Validation error on {request.url.path}: {message}")
        return create_error_response(
            error=message,
            code="VALIDATION_ERROR",
            status_code=400,
            detail="Invalid input data",
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return create_error_response(
            error=str(exc.detail),
            code="HTTP_ERROR",
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error(
            f"Unhandled exception on {request.method} {request.url.path}: {type(exc).__name__}: {exc}"
        )
        # Runs outside the middleware stack, so the usual headers are added here
        headers = {POWERED_BY_HEADER: POWERED_BY}
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            headers[REQUEST_ID_HEADER] = request_id

        # Don't expose internal error details
        return create_error_response(
            error="Internal Server Error",
            code="INTERNAL_ERROR",
            status_code=500,
            detail="An unexpected error occurred",
            headers=headers,
        )
