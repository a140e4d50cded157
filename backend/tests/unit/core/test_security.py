"""
Unit Tests for Security Module
Tests for: password hashing, bearer token issue/verify
"""
import pytest
from datetime import datetime, timedelta, timezone
from jose import jwt

from unidirectory.core.config import settings
from unidirectory.core.security import (
    TokenClaims,
    TokenIssuer,
    get_password_hash,
    verify_password,
)


class TestPasswordHashing:
    """Test password hashing functions"""

    def test_hash_password_returns_different_value(self):
        password = "testpassword123"
        hashed = get_password_hash(password, rounds=4)

        assert hashed != password
        assert hashed.startswith("$2")

    def test_hash_password_different_each_time(self):
        """Bcrypt generates a new salt per hash"""
        password = "testpassword123"
        assert get_password_hash(password, rounds=4) != get_password_hash(password, rounds=4)

    def test_verify_password_correct(self):
        hashed = get_password_hash("testpassword123", rounds=4)

        assert verify_password("testpassword123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = get_password_hash("testpassword123", rounds=4)

        assert verify_password("wrongpassword", hashed) is False

    def test_hash_long_password_truncated(self):
        """Passwords longer than 72 bytes still verify"""
        long_password = "a" * 100
        hashed = get_password_hash(long_password, rounds=4)

        assert verify_password(long_password, hashed) is True

    def test_hash_unicode_password(self):
        password = "tëst🔐pässwörd"
        hashed = get_password_hash(password, rounds=4)

        assert verify_password(password, hashed) is True

    def test_verify_against_non_bcrypt_value(self):
        """A corrupt stored hash is a mismatch, not a crash"""
        assert verify_password("anything", "not-a-bcrypt-hash") is False

    def test_default_cost_comes_from_settings(self):
        hashed = get_password_hash("testpassword123")

        assert hashed.split("$")[2] == f"{settings.BCRYPT_ROUNDS:02d}"

    def test_explicit_cost_overrides_settings(self):
        hashed = get_password_hash("testpassword123", rounds=5)

        assert hashed.split("$")[2] == "05"


class TestTokenIssuer:
    """Test bearer token issue and verification"""

    def test_requires_secret(self):
        with pytest.raises(ValueError):
            TokenIssuer(secret_key="")

    def test_from_settings(self):
        issuer = TokenIssuer.from_settings(settings)

        assert issuer.algorithm == settings.JWT_ALGORITHM
        assert issuer.expire_delta == timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    def test_issue_returns_non_empty_string(self, token_issuer):
        token = token_issuer.issue(1, "user@example.com")

        assert isinstance(token, str)
        assert len(token) > 0

    def test_token_carries_exactly_user_id_email_and_expiry(self, token_issuer):
        token = token_issuer.issue(42, "user@example.com")

        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        assert set(payload) == {"userId", "email", "exp"}
        assert payload["userId"] == 42
        assert payload["email"] == "user@example.com"

    def test_default_expiry(self, token_issuer):
        token = token_issuer.issue(1, "user@example.com")

        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        remaining = datetime.fromtimestamp(payload["exp"], timezone.utc) - datetime.now(timezone.utc)
        expected = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        assert expected - timedelta(minutes=1) < remaining <= expected

    def test_verify_valid_token(self, token_issuer):
        token = token_issuer.issue(7, "user@example.com")

        claims = token_issuer.verify(token)

        assert isinstance(claims, TokenClaims)
        assert claims.user_id == 7
        assert claims.email == "user@example.com"
        assert claims.expires_at > datetime.now(timezone.utc)
        assert claims.expires_at.tzinfo is not None

    def test_verify_expired_token(self, token_issuer):
        token = token_issuer.sign({"userId": 1, "email": "a@b.com"}, expires_delta=timedelta(seconds=-10))

        assert token_issuer.verify(token) is None

    def test_verify_wrong_secret(self, token_issuer):
        other = TokenIssuer(secret_key="a-completely-different-secret")
        token = other.issue(1, "user@example.com")

        assert token_issuer.verify(token) is None

    def test_verify_malformed_token(self, token_issuer):
        assert token_issuer.verify("not.a.token") is None
        assert token_issuer.verify("") is None

    def test_verify_tampered_token(self, token_issuer):
        token = token_issuer.issue(1, "user@example.com")
        header, payload, signature = token.split(".")
        tampered = f"{header}.{payload}.{signature[:-2]}xx"

        assert token_issuer.verify(tampered) is None

    def test_verify_missing_claims(self, token_issuer):
        token = token_issuer.sign({"sub": "1"})

        assert token_issuer.verify(token) is None

    def test_verify_token_without_expiry(self, token_issuer):
        token = jwt.encode(
            {"userId": 1, "email": "a@b.com"},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )

        assert token_issuer.verify(token) is None
