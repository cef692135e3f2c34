"""
Contact Inbox Configuration
Central configuration management using Pydantic Settings
"""
from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Application =====
    app_name: str = "Contact Inbox"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000
    frontend_url: str = "http://localhost:3000"

    # ===== CORS Configuration =====
    # Comma-separated list of extra allowed origins
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5500"

    # ===== Storage Selection =====
    storage_backend: Literal["sql", "mongo"] = "sql"

    # ===== Relational Database =====
    # Full SQLAlchemy URL; when unset it is assembled from the DB_* values
    database_url: Optional[str] = None
    db_driver: str = "mysql+aiomysql"
    db_host: str = "localhost"
    db_user: str = ""
    db_password: str = ""
    db_name: str = ""
    db_port: int = 3306
    db_ssl: bool = True
    # False encrypts without checking the server certificate
    db_ssl_verify: bool = False
    db_pool_size: int = 5
    db_echo: bool = False

    # ===== Document Database =====
    mongo_url: str = "mongodb://localhost:27017"
    mongo_db_name: str = "contacto"
    mongo_collection: str = "mensajes"
    mongo_timeout_ms: int = 5000

    # ===== Admin Access =====
    # Empty disables the listing endpoint entirely
    admin_secret: str = ""

    # ===== Logging =====
    log_level: str = "INFO"
    log_json: bool = True

    # ===== Sentry Error Tracking =====
    sentry_dsn: Optional[str] = None
    sentry_environment: Optional[str] = None  # Falls back to environment if not set
    sentry_traces_sample_rate: float = 0.1

    @field_validator("*", mode="before")
    @classmethod
    def strip_strings(cls, value: Any) -> Any:
        """Drop stray whitespace copied into environment values."""
        if isinstance(value, str):
            return value.strip()
        return value

    @property
    def async_database_url(self) -> str:
        """SQLAlchemy URL for the async engine."""
        if self.database_url:
            return self.database_url
        return URL.create(
            self.db_driver,
            username=self.db_user or None,
            password=self.db_password or None,
            host=self.db_host or None,
            port=self.db_port,
            database=self.db_name or None,
        ).render_as_string(hide_password=False)

    @property
    def allowed_origins(self) -> list[str]:
        """Origins accepted by the CORS middleware."""
        origins = [self.frontend_url]
        for origin in self.cors_origins.split(","):
            origin = origin.strip()
            if origin and origin not in origins:
                origins.append(origin)
        return origins


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
