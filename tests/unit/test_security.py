"""
Unit tests for password hashing and JWT helpers.
"""

from datetime import timedelta

import pytest
from jose import ExpiredSignatureError, JWTError

from libreria.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)

SECRET = "unit-secret"


class TestPasswordHashing:
    """Tests for bcrypt helpers."""

    def test_hash_verifies(self):
        hashed = get_password_hash("contrasena123", rounds=4)

        assert hashed != "contrasena123"
        assert verify_password("contrasena123", hashed)

    def test_wrong_password_rejected(self):
        hashed = get_password_hash("contrasena123", rounds=4)

        assert not verify_password("otracontrasena", hashed)

    def test_same_password_gets_fresh_salt(self):
        assert get_password_hash("contrasena123", rounds=4) != get_password_hash("contrasena123", rounds=4)

    def test_non_bcrypt_hash_is_a_mismatch(self):
        assert verify_password("contrasena123", "not-a-bcrypt-hash") is False

    def test_long_passwords_hash(self):
        password = "x" * 500
        hashed = get_password_hash(password, rounds=4)

        assert verify_password(password, hashed)


class TestAccessTokens:
    """Tests for JWT creation and decoding."""

    def test_round_trip_claims(self):
        token = create_access_token({"id": "user-1", "email": "juan@ejemplo.com"}, SECRET)

        payload = decode_access_token(token, SECRET)

        assert payload["id"] == "user-1"
        assert payload["email"] == "juan@ejemplo.com"
        assert payload["exp"] > payload["iat"]

    def test_default_lifetime_is_24_hours(self):
        token = create_access_token({"id": "user-1"}, SECRET)

        payload = decode_access_token(token, SECRET)

        assert payload["exp"] - payload["iat"] == 24 * 3600

    def test_tokens_minted_together_differ(self):
        data = {"id": "user-1", "email": "juan@ejemplo.com"}

        assert create_access_token(data, SECRET) != create_access_token(data, SECRET)

    def test_expired_token(self):
        token = create_access_token({"id": "user-1"}, SECRET, expires_delta=timedelta(seconds=-5))

        with pytest.raises(ExpiredSignatureError):
            decode_access_token(token, SECRET)

    def test_wrong_secret(self):
        token = create_access_token({"id": "user-1"}, SECRET)

        with pytest.raises(JWTError):
            decode_access_token(token, "another-secret")

    def test_garbage_token(self):
        with pytest.raises(JWTError):
            decode_access_token("not.a.token", SECRET)
