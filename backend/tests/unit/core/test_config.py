"""
Unit Tests for Settings
"""
import pytest
from pydantic import ValidationError

from unidirectory.core.config import Settings, parse_cors_origins


def make_settings(**overrides) -> Settings:
    values = {
        "DATABASE_URL": "sqlite+aiosqlite:///./test.db",
        "JWT_SECRET_KEY": "unit-test-secret",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestJWTSecret:
    """The signing secret must be present and not a placeholder"""

    def test_valid_secret_accepted(self):
        assert make_settings().JWT_SECRET_KEY == "unit-test-secret"

    def test_missing_secret_rejected(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET_KEY", raising=False)

        with pytest.raises(ValidationError):
            Settings(_env_file=None, DATABASE_URL="sqlite+aiosqlite:///./test.db")

    @pytest.mark.parametrize("secret", ["", "   ", "CHANGE_ME", "secret"])
    def test_empty_or_placeholder_secret_rejected(self, secret):
        with pytest.raises(ValidationError):
            make_settings(JWT_SECRET_KEY=secret)


class TestDefaults:

    def test_token_expiry_default_is_one_day(self):
        assert make_settings().ACCESS_TOKEN_EXPIRE_MINUTES == 1440

    def test_pagination_defaults(self):
        s = make_settings()

        assert s.DEFAULT_PAGE == 1
        assert s.DEFAULT_PAGE_SIZE == 10
        assert s.MAX_PAGE_SIZE == 100

    def test_non_positive_page_size_rejected(self):
        with pytest.raises(ValidationError):
            make_settings(MAX_PAGE_SIZE=0)


class TestCorsOrigins:

    def test_comma_separated(self):
        assert parse_cors_origins("http://a.com, http://b.com") == ["http://a.com", "http://b.com"]

    def test_json_list(self):
        assert parse_cors_origins('["http://a.com"]') == ["http://a.com"]

    def test_property(self):
        s = make_settings(CORS_ORIGINS_STR="http://localhost:3000")

        assert s.CORS_ORIGINS == ["http://localhost:3000"]
