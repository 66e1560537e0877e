"""
Unit tests for token validation on protected routes.
"""

from datetime import timedelta

import pytest

from libreria.auth import (
    AUTH_TOKEN_SCHEME,
    BEARER_SCHEME,
    TokenFailure,
    TokenValidator,
    extract_token,
)
from libreria.errors import (
    InvalidTokenError,
    RevokedTokenError,
    TokenExpiredError,
    UnauthorizedError,
)
from libreria.security import create_access_token

pytestmark = pytest.mark.asyncio

SECRET = "validator-secret"
EMAIL = "juan.perez@ejemplo.com"


@pytest.fixture
def validator(token_repo) -> TokenValidator:
    return TokenValidator(tokens=token_repo, secret_key=SECRET)


def _token(secret: str = SECRET, **kwargs) -> str:
    return create_access_token({"id": "user-1", "email": EMAIL}, secret, **kwargs)


class TestExtractToken:
    """Tests for picking the token out of the headers."""

    async def test_custom_header(self):
        assert extract_token("abc", None) == ("abc", AUTH_TOKEN_SCHEME)

    async def test_bearer_header(self):
        assert extract_token(None, "Bearer abc") == ("abc", BEARER_SCHEME)

    async def test_bearer_is_case_insensitive(self):
        assert extract_token(None, "bearer abc") == ("abc", BEARER_SCHEME)

    async def test_custom_header_wins(self):
        assert extract_token("abc", "Bearer xyz") == ("abc", AUTH_TOKEN_SCHEME)

    async def test_other_schemes_ignored(self):
        assert extract_token(None, "Basic dXNlcjpwYXNz") == (None, BEARER_SCHEME)

    async def test_nothing_supplied(self):
        assert extract_token(None, None) == (None, BEARER_SCHEME)


class TestTokenValidator:
    """Tests for the ordered validation checks."""

    async def test_valid_token(self, validator, token_repo):
        token = _token()
        await token_repo.add(EMAIL, token)

        check = await validator.validate(auth_token=token)

        assert check.ok
        assert check.claims.email == EMAIL
        assert check.claims.user_id == "user-1"
        assert check.scheme == AUTH_TOKEN_SCHEME

    async def test_valid_bearer_token(self, validator, token_repo):
        token = _token()
        await token_repo.add(EMAIL, token)

        check = await validator.validate(authorization=f"Bearer {token}")

        assert check.ok
        assert check.scheme == BEARER_SCHEME

    async def test_missing_token(self, validator):
        check = await validator.validate()

        assert check.failure is TokenFailure.MISSING
        error = check.to_exception()
        assert isinstance(error, UnauthorizedError)
        assert error.status_code == 401

    async def test_token_not_issued_here(self, validator):
        check = await validator.validate(auth_token=_token())

        assert check.failure is TokenFailure.UNKNOWN
        error = check.to_exception()
        assert isinstance(error, InvalidTokenError)
        assert error.status_code == 400

    async def test_revoked_token(self, validator, token_repo):
        token = _token()
        await token_repo.add(EMAIL, token)
        await token_repo.revoke(token)

        check = await validator.validate(auth_token=token)

        assert check.failure is TokenFailure.REVOKED
        assert isinstance(check.to_exception(), RevokedTokenError)

    async def test_expired_token(self, validator, token_repo):
        token = _token(expires_delta=timedelta(seconds=-5))
        await token_repo.add(EMAIL, token)

        check = await validator.validate(auth_token=token)

        assert check.failure is TokenFailure.EXPIRED
        error = check.to_exception()
        assert isinstance(error, TokenExpiredError)
        assert error.status_code == 400

    async def test_bad_signature(self, validator, token_repo):
        token = _token(secret="someone-else")
        await token_repo.add(EMAIL, token)

        check = await validator.validate(authorization=f"Bearer {token}")

        assert check.failure is TokenFailure.INVALID
        assert check.to_exception().message == f"{BEARER_SCHEME} is not valid"
