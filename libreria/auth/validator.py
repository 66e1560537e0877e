"""
Token validation for protected routes.

Both accepted transports (the ``auth-token`` header and ``Authorization:
Bearer``) go through the same asynchronous check, which returns a
``TokenCheck`` instead of raising. Callers decide how to surface failures.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from jose import ExpiredSignatureError, JWTError
from loguru import logger

from ..errors import (
    LibreriaException,
    UnauthorizedError,
    InvalidTokenError,
    TokenExpiredError,
    RevokedTokenError,
)
from ..security import ALGORITHM, decode_access_token
from ..storage.token_repository import TokenRepository

AUTH_TOKEN_SCHEME = "auth-token"
BEARER_SCHEME = "Bearer token"


class TokenFailure(str, Enum):
    """Why a token was rejected."""
    MISSING = "missing"
    UNKNOWN = "unknown"
    REVOKED = "revoked"
    EXPIRED = "expired"
    INVALID = "invalid"


@dataclass
class TokenClaims:
    """Claims carried by a verified token."""
    user_id: str
    email: str
    expires_at: Optional[int] = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "TokenClaims":
        return cls(
            user_id=str(payload.get("id", "")),
            email=str(payload.get("email", "")),
            expires_at=payload.get("exp"),
        )


@dataclass
class TokenCheck:
    """Outcome of validating a token."""
    scheme: str
    token: Optional[str] = None
    claims: Optional[TokenClaims] = None
    failure: Optional[TokenFailure] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None and self.claims is not None

    def to_exception(self) -> LibreriaException:
        """Map a failed check to the matching API error."""
        if self.failure is TokenFailure.MISSING:
            return UnauthorizedError(self.scheme)
        if self.failure is TokenFailure.REVOKED:
            return RevokedTokenError(self.scheme)
        if self.failure is TokenFailure.EXPIRED:
            return TokenExpiredError(self.scheme, detail=self.detail)
        return InvalidTokenError(self.scheme, detail=self.detail)


def extract_token(
    auth_token: Optional[str],
    authorization: Optional[str],
) -> tuple[Optional[str], str]:
    """
    Pick the token out of the request headers.

    The custom header wins when both are present.

    Returns:
        (token or None, scheme name used in error messages)
    """
    if auth_token:
        return auth_token.strip() or None, AUTH_TOKEN_SCHEME

    if authorization:
        parts = authorization.split(None, 1)
        if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1].strip():
            return parts[1].strip(), BEARER_SCHEME

    return None, BEARER_SCHEME


def verify_signature(
    token: str,
    secret_key: str,
    algorithm: str = ALGORITHM,
    scheme: str = BEARER_SCHEME,
) -> TokenCheck:
    """Check signature and expiry only, without consulting the store."""
    try:
        payload = decode_access_token(token, secret_key, algorithm)
    except ExpiredSignatureError as e:
        return TokenCheck(scheme=scheme, token=token, failure=TokenFailure.EXPIRED, detail=str(e))
    except JWTError as e:
        return TokenCheck(scheme=scheme, token=token, failure=TokenFailure.INVALID, detail=str(e))

    return TokenCheck(scheme=scheme, token=token, claims=TokenClaims.from_payload(payload))


class TokenValidator:
    """
    Gate for protected routes.

    Order of checks:
    1. a token must be present
    2. it must be known to the token store
    3. its stored row must be active
    4. its signature and expiry must verify
    """

    def __init__(
        self,
        tokens: TokenRepository,
        secret_key: str,
        algorithm: str = ALGORITHM,
    ):
        self.tokens = tokens
        self.secret_key = secret_key
        self.algorithm = algorithm

    async def validate(
        self,
        auth_token: Optional[str] = None,
        authorization: Optional[str] = None,
    ) -> TokenCheck:
        token, scheme = extract_token(auth_token, authorization)
        if token is None:
            return TokenCheck(scheme=scheme, failure=TokenFailure.MISSING)

        stored = await self.tokens.get_by_token(token)
        if stored is None:
            logger.info(f"Rejected {scheme}: not issued by this server")
            return TokenCheck(scheme=scheme, token=token, failure=TokenFailure.UNKNOWN)

        if not stored.active:
            logger.info(f"Rejected {scheme}: revoked token for {stored.email}")
            return TokenCheck(scheme=scheme, token=token, failure=TokenFailure.REVOKED)

        check = verify_signature(token, self.secret_key, self.algorithm, scheme=scheme)
        if not check.ok:
            logger.info(f"Rejected {scheme}: {check.failure.value} ({check.detail})")
        return check
