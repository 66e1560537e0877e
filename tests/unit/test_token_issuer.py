"""
Unit tests for the login token issuer and the token store.
"""

from datetime import timedelta

import pytest
import pytest_asyncio

from libreria.auth import TokenIssuer, TokenValidator, TokenFailure
from libreria.errors import InvalidCredentialsError, UserNotFoundError
from libreria.security import create_access_token, get_password_hash

pytestmark = pytest.mark.asyncio

SECRET = "issuer-secret"
EMAIL = "juan.perez@ejemplo.com"
PASSWORD = "contrasena123"


@pytest.fixture
def issuer(user_repo, token_repo) -> TokenIssuer:
    return TokenIssuer(users=user_repo, tokens=token_repo, secret_key=SECRET)


@pytest.fixture
def validator(token_repo) -> TokenValidator:
    return TokenValidator(tokens=token_repo, secret_key=SECRET)


@pytest_asyncio.fixture
async def user(user_repo):
    return await user_repo.create(
        name="Juan Perez",
        email=EMAIL,
        password_hash=get_password_hash(PASSWORD, rounds=4),
    )


class TestTokenIssuer:
    """Tests for login-time token decisions."""

    async def test_first_login_mints_token(self, issuer, token_repo, user):
        issued = await issuer.login(EMAIL, PASSWORD)

        assert issued.reused is False
        assert issued.name == "Juan Perez"
        assert issued.user_id == user.id

        stored = await token_repo.get_active(EMAIL)
        assert stored.token == issued.token

    async def test_second_login_reuses_active_token(self, issuer, user):
        first = await issuer.login(EMAIL, PASSWORD)
        second = await issuer.login(EMAIL, PASSWORD)

        assert second.token == first.token
        assert second.reused is True

    async def test_expired_token_is_replaced(self, issuer, token_repo, user):
        expired = create_access_token(
            {"id": user.id, "email": EMAIL},
            SECRET,
            expires_delta=timedelta(seconds=-5),
        )
        await token_repo.add(EMAIL, expired)

        issued = await issuer.login(EMAIL, PASSWORD)

        assert issued.token != expired
        assert issued.reused is False
        assert await token_repo.get_by_token(expired) is None

    async def test_unknown_user(self, issuer):
        with pytest.raises(UserNotFoundError) as exc_info:
            await issuer.login("nadie@ejemplo.com", PASSWORD)

        assert exc_info.value.status_code == 400
        assert exc_info.value.code == "USER_NOT_FOUND"

    async def test_wrong_password(self, issuer, token_repo, user):
        with pytest.raises(InvalidCredentialsError) as exc_info:
            await issuer.login(EMAIL, "otracontrasena")

        assert exc_info.value.status_code == 400
        assert await token_repo.get_active(EMAIL) is None

    async def test_revoked_token_is_not_reused(self, issuer, validator, user):
        first = await issuer.login(EMAIL, PASSWORD)

        assert await issuer.revoke(first.token) is True
        check = await validator.validate(auth_token=first.token)
        assert check.failure is TokenFailure.REVOKED

        second = await issuer.login(EMAIL, PASSWORD)
        assert second.token != first.token
        assert (await validator.validate(auth_token=second.token)).ok

    async def test_revoke_twice(self, issuer, user):
        issued = await issuer.login(EMAIL, PASSWORD)

        assert await issuer.revoke(issued.token) is True
        assert await issuer.revoke(issued.token) is False


class TestTokenRepository:
    """Tests for the one-active-token-per-email rule."""

    async def test_add_same_token_twice(self, token_repo):
        first = await token_repo.add(EMAIL, "token-a")
        again = await token_repo.add(EMAIL, "token-a")

        assert again.id == first.id

    async def test_second_active_token_loses(self, token_repo):
        await token_repo.add(EMAIL, "token-a")

        winner = await token_repo.add(EMAIL, "token-b")

        assert winner.token == "token-a"
        assert await token_repo.get_by_token("token-b") is None

    async def test_new_active_token_after_revoke(self, token_repo):
        await token_repo.add(EMAIL, "token-a")
        await token_repo.revoke("token-a")

        stored = await token_repo.add(EMAIL, "token-b")

        assert stored.token == "token-b"
        assert (await token_repo.get_active(EMAIL)).token == "token-b"
