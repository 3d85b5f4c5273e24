"""Application configuration."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import Optional, Union
import os

from eventsync.core.constants import (
    ACCESS_TOKEN_EXPIRE_MINUTES as DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES,
    ATTENDANCE_UPDATE_LIMIT as DEFAULT_ATTENDANCE_UPDATE_LIMIT,
)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # Database
    DATABASE_URL: Optional[str] = None

    # Spreadsheet gateway (deployed Apps Script web app)
    SHEETS_GATEWAY_URL: Optional[str] = None
    SHEETS_GATEWAY_TIMEOUT: float = 30.0  # Seconds; the only bound on a hung gateway call
    SHEETS_AUTO_SYNC: bool = True  # Mirror row inserts/updates to the spreadsheet automatically
    SYNC_ON_REGISTRATION_UPDATE: bool = True  # Every registration edit costs one gateway call
    INFLIGHT_STALE_AFTER_SECONDS: float = 300.0  # Only used for reporting, keys are never evicted

    # Security
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES

    # Attendance
    ATTENDANCE_UPDATE_LIMIT: int = DEFAULT_ATTENDANCE_UPDATE_LIMIT

    # CORS - Can be a list or comma-separated string
    CORS_ORIGINS: Union[list, str] = ["*"]

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    # Application
    APP_TITLE: str = "EventSync"
    APP_DESCRIPTION: str = "Event registration and attendance with spreadsheet sync"
    APP_VERSION: str = "1.0.0"

    # Environment
    ENVIRONMENT: str = "development"  # development, staging, production

    # Logging
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL

    def get_database_url(self) -> str:
        """
        Get the database URL.

        Development falls back to a local SQLite file; every other environment
        must provide DATABASE_URL explicitly.
        """
        if self.DATABASE_URL:
            if self.DATABASE_URL.startswith("postgres://"):
                # Hosted providers still hand out the legacy scheme
                return self.DATABASE_URL.replace("postgres://", "postgresql://", 1)
            return self.DATABASE_URL

        if self.ENVIRONMENT == "development":
            return "sqlite:///./eventsync.db"

        raise ValueError("Database configuration missing. Provide DATABASE_URL.")

    def validate_production_config(self) -> None:
        """Validate that production-critical settings are properly configured."""
        if self.ENVIRONMENT == "production":
            issues = []
            warnings = []

            if self.SECRET_KEY == "your-secret-key-change-in-production":
                issues.append("SECRET_KEY must be changed from default value")

            if self.ADMIN_PASSWORD == "admin123":
                issues.append("ADMIN_PASSWORD must be changed from default value")

            if not self.ADMIN_PASSWORD.startswith("$argon2"):
                warnings.append(
                    "ADMIN_PASSWORD is not hashed. For better security, use:\n"
                    "    python hash_password.py 'your-password'"
                )

            if self.CORS_ORIGINS == ["*"]:
                issues.append("CORS_ORIGINS should be restricted to specific domains")

            if not self.SHEETS_GATEWAY_URL:
                warnings.append("SHEETS_GATEWAY_URL is not set; spreadsheet sync is disabled")

            if warnings:
                print("⚠️  Production configuration warnings:")
                for warning in warnings:
                    print(f"  - {warning}")

            if issues:
                raise ValueError(
                    "Production configuration errors:\n" +
                    "\n".join(f"  - {issue}" for issue in issues)
                )


settings = Settings()

# Validate production configuration on startup
if os.getenv("ENVIRONMENT") == "production":
    settings.validate_production_config()
