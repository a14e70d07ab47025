"""Application configuration management."""
from pydantic import model_validator, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from sqlalchemy.engine.url import make_url, URL
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging

SQLITE_LOCAL_URL = "sqlite+aiosqlite:///./mealtracker.db"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = SQLITE_LOCAL_URL
    db_pool_size: int = 5
    db_max_overflow: int = 10
    sqlite_busy_timeout: float = 15.0  # Seconds a writer waits for the SQLite file lock

    # Application
    environment: str = "development"
    frontend_url: str = "http://localhost:5173"
    allowed_origins: str = ""  # Comma-separated extra CORS origins
    log_dir: str = "logs"

    # Event
    event_name: str = "HACK_MCE_5.0"
    export_timezone: str = "Asia/Kolkata"  # Claim times in the spreadsheet are shown in this zone

    # Recent activity feed
    recent_claims_default_limit: int = 10
    max_recent_claims: int = 5000  # Upper bound on ?limit=, above any realistic number of claims

    @field_validator("export_timezone")
    @classmethod
    def validate_export_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown export_timezone: {value}") from exc
        return value

    @model_validator(mode="after")
    def validate_all_config(self):
        """Validate limits and normalize Postgres URLs."""
        logger = logging.getLogger(__name__)

        if self.recent_claims_default_limit < 1:
            raise ValueError("recent_claims_default_limit must be at least 1")

        if self.max_recent_claims < self.recent_claims_default_limit:
            raise ValueError("max_recent_claims must be >= recent_claims_default_limit")

        # Database URL normalization
        url = self.database_url
        if not url:
            logger.warning("Empty DATABASE_URL, using SQLite fallback")
            self.database_url = SQLITE_LOCAL_URL
            return self

        parsed: Optional[URL] = None
        try:
            parsed = make_url(url)
        except Exception as e:  # pragma: no cover - invalid URL falls back to sqlite
            logger.error(f"Failed to parse DATABASE_URL: {e}")
            logger.warning("Invalid DATABASE_URL; falling back to default sqlite database.")
            self.database_url = SQLITE_LOCAL_URL
            return self

        drivername = parsed.drivername
        if drivername.startswith("postgres") and "+asyncpg" not in drivername:
            old_drivername = drivername
            parsed = parsed.set(drivername="postgresql+asyncpg")
            logger.info(f"Driver normalized: {old_drivername} -> {parsed.drivername}")

        # Use render_as_string to properly re-encode special characters in password
        self.database_url = parsed.render_as_string(hide_password=False)

        return self

    @property
    def cors_origins(self) -> list[str]:
        """Frontend URL plus any comma-separated extra origins."""
        origins = [self.frontend_url] if self.frontend_url else []
        origins.extend(item.strip() for item in self.allowed_origins.split(",") if item.strip())
        return origins

    @property
    def export_zone(self) -> ZoneInfo:
        return ZoneInfo(self.export_timezone)

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
