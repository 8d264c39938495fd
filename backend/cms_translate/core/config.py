"""
Application configuration using pydantic-settings.

Loads and validates environment variables from .env file or system environment.
"""

from typing import Literal
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =============================================================================
    # API & Application
    # =============================================================================
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    environment: Literal["development", "production", "testing"] = Field(default="development")

    cors_origins: str = Field(default="http://localhost:3000")

    @field_validator("cors_origins")
    @classmethod
    def parse_cors_origins(cls, v: str) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        return [origin.strip() for origin in v.split(",") if origin.strip()]

    # =============================================================================
    # Database Configuration
    # =============================================================================
    database_url: str = Field(
        default="sqlite:///./translation_cache.db",
        description="Database connection URL"
    )
    db_vendor: Literal["postgres", "mysql", "sqlite"] = Field(default="sqlite")
    db_pool_size: int = Field(default=10)
    db_max_overflow: int = Field(default=10)
    db_pool_pre_ping: bool = Field(default=True)
    auto_migrate: bool = Field(
        default=True,
        description="Run alembic migrations to head on startup"
    )

    # =============================================================================
    # Locales
    # =============================================================================
    source_locale: str = Field(
        default="ro",
        description="Language the content is authored in"
    )
    supported_locales: str = Field(default="ro,hu,en")

    @field_validator("supported_locales")
    @classmethod
    def parse_supported_locales(cls, v: str) -> list[str]:
        """Parse comma-separated locales into a list."""
        return [locale.strip().lower() for locale in v.split(",") if locale.strip()]

    # =============================================================================
    # Translation Provider
    # =============================================================================
    translation_provider: Literal["google", "deepl"] = Field(default="google")
    google_translate_api_key: str | None = Field(default=None)
    deepl_api_key: str | None = Field(default=None)
    deepl_api_url: str = Field(default="https://api-free.deepl.com")
    translation_timeout: float = Field(
        default=10.0,
        description="HTTP timeout in seconds for one provider request"
    )
    translation_chunk_timeout: float = Field(
        default=15.0,
        description="Upper bound in seconds for one provider chunk, including connection setup"
    )
    translation_batch_size: int | None = Field(
        default=None,
        ge=1,
        description="Optional cap on texts per provider call (never above the provider limit)"
    )
    translation_dedupe_texts: bool = Field(
        default=True,
        description="Send repeated identical texts to the provider only once per request"
    )
    translation_excerpt_length: int = Field(
        default=5000,
        ge=0,
        description="Number of source characters stored alongside a cached translation"
    )

    # =============================================================================
    # Logging Configuration
    # =============================================================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text"] = Field(default="json")

    # =============================================================================
    # Development Settings
    # =============================================================================
    debug: bool = Field(default=False)

    @property
    def translation_api_key(self) -> str | None:
        """Credential for the configured translation provider."""
        if self.translation_provider == "deepl":
            return self.deepl_api_key
        return self.google_translate_api_key


# =============================================================================
# Singleton Settings Instance
# =============================================================================
settings = Settings()
