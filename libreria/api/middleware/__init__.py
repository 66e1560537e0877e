"""
API middleware components.

Provides cross-cutting concerns for the API:
- Error handling
- CORS configuration
- Request/response logging
"""

from .error_handler import (
    setup_exception_handlers,
    create_error_response,
    describe_validation_error,
)

from .cors import (
    CORSConfig,
    parse_origins,
    get_cors_config,
    setup_cors,
)

from .logging import (
    LoggingConfig,
    JSONLogFormatter,
    RequestLoggingMiddleware,
    setup_logging,
    get_request_id,
    mask_credentials,
)


__all__ = [
    # Error handling
    "setup_exception_handlers",
    "create_error_response",
    "describe_validation_error",
    # CORS
    "CORSConfig",
    "parse_origins",
    "get_cors_config",
    "setup_cors",
    # Logging
    "LoggingConfig",
    "JSONLogFormatter",
    "RequestLoggingMiddleware",
    "setup_logging",
    "get_request_id",
    "mask_credentials",
]
