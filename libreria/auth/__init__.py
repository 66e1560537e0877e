"""
Authentication core: issuing tokens at login and validating them on
protected routes.
"""

from libreria.auth.issuer import TokenIssuer, IssuedToken
from libreria.auth.validator import (
    TokenValidator,
    TokenCheck,
    TokenClaims,
    TokenFailure,
    extract_token,
    verify_signature,
    AUTH_TOKEN_SCHEME,
    BEARER_SCHEME,
)

__all__ = [
    "TokenIssuer",
    "IssuedToken",
    "TokenValidator",
    "TokenCheck",
    "TokenClaims",
    "TokenFailure",
    "extract_token",
    "verify_signature",
    "AUTH_TOKEN_SCHEME",
    "BEARER_SCHEME",
]
