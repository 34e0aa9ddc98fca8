"""Tests for settings loading and validation."""

import pytest
from pydantic import ValidationError

from config import Settings

REQUIRED = {
    "GOOGLE_API_KEY": "key",
    "POSTGRES_URL": "postgres://user:pass@db:5432/bitai",
}


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **{**REQUIRED, **overrides})


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        monkeypatch.delenv("X_API_KEY", raising=False)

        settings = make_settings()

        assert settings.PORT == 3001
        assert settings.RETRIEVAL_TOP_K == 9
        assert settings.EMBEDDING_DIM == 768
        assert settings.ENVIRONMENT == "production"
        assert settings.is_development is False
        assert settings.api_key is None
        assert settings.SLIP_EXTENSIONS == ["jpg", "jpeg", "png"]

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("postgres://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
            ("postgresql://u:p@h:5432/db", "postgresql+asyncpg://u:p@h:5432/db"),
            ("postgresql+asyncpg://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ],
    )
    def test_async_database_url(self, url, expected):
        assert make_settings(POSTGRES_URL=url).async_database_url == expected

    @pytest.mark.parametrize("field", ["GOOGLE_API_KEY", "POSTGRES_URL"])
    def test_blank_required_values_are_rejected(self, field):
        with pytest.raises(ValidationError, match=f"{field} is required"):
            make_settings(**{field: "   "})

    def test_missing_required_value_is_rejected(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)

        with pytest.raises(ValidationError):
            Settings(_env_file=None, POSTGRES_URL="postgres://h/db")

    def test_comma_separated_lists_from_environment(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
        monkeypatch.setenv("SLIP_EXTENSIONS", '["png"]')

        settings = make_settings()

        assert settings.CORS_ORIGINS == ["https://a.example", "https://b.example"]
        assert settings.SLIP_EXTENSIONS == ["png"]

    def test_api_key_is_secret(self):
        settings = make_settings(X_API_KEY="s3cret")

        assert settings.api_key == "s3cret"
        assert "s3cret" not in repr(settings)

    def test_empty_api_key_counts_as_unset(self):
        assert make_settings(X_API_KEY="").api_key is None

    def test_unknown_environment_is_rejected(self):
        with pytest.raises(ValidationError):
            make_settings(ENVIRONMENT="staging")
