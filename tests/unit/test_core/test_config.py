"""Unit tests for settings."""
import pytest

from eventsync.core.config import Settings


@pytest.mark.unit
class TestDatabaseUrl:

    def test_development_falls_back_to_sqlite(self):
        settings = Settings(DATABASE_URL=None, ENVIRONMENT="development")
        assert settings.get_database_url() == "sqlite:///./eventsync.db"

    def test_legacy_postgres_scheme_is_rewritten(self):
        settings = Settings(DATABASE_URL="postgres://u:p@db/events")
        assert settings.get_database_url() == "postgresql://u:p@db/events"

    def test_production_requires_database_url(self):
        settings = Settings(DATABASE_URL=None, ENVIRONMENT="production")
        with pytest.raises(ValueError, match="DATABASE_URL"):
            settings.get_database_url()


@pytest.mark.unit
class TestSettingsParsing:

    def test_cors_origins_from_comma_string(self):
        settings = Settings(CORS_ORIGINS="https://a.example, https://b.example")
        assert settings.CORS_ORIGINS == ["https://a.example", "https://b.example"]

    def test_attendance_limit_default(self):
        assert Settings().ATTENDANCE_UPDATE_LIMIT == 2


@pytest.mark.unit
class TestProductionValidation:

    def test_default_secrets_rejected(self):
        settings = Settings(ENVIRONMENT="production", CORS_ORIGINS=["*"])
        with pytest.raises(ValueError) as exc_info:
            settings.validate_production_config()
        message = str(exc_info.value)
        assert "SECRET_KEY" in message
        assert "ADMIN_PASSWORD" in message
        assert "CORS_ORIGINS" in message

    def test_valid_production_config(self):
        settings = Settings(
            ENVIRONMENT="production",
            SECRET_KEY="a-real-secret",
            ADMIN_PASSWORD="$argon2id$v=19$m=65536,t=2,p=1$abc$def",
            CORS_ORIGINS=["https://events.example"],
            SHEETS_GATEWAY_URL="https://script.example/exec",
        )
        settings.validate_production_config()
