"""Application settings loaded from the environment (and an optional .env file)."""
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PRODUCTION_ORIGINS = ["https://getrooming.com", "https://www.getrooming.com"]
DEVELOPMENT_ORIGINS = ["http://localhost:5173", "http://localhost:3000"]


class Settings(BaseSettings):
    """Runtime configuration for the payments backend."""

    # Application
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("APP_ENV", "NODE_ENV"),
        description="Deployment environment (development/production)",
    )
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3001, description="HTTP port")
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=False, description="Render logs as JSON")

    # GETTRX processor
    processor_base_url: str = Field(
        default="https://api-dev.gettrx.com",
        validation_alias=AliasChoices("GETTRX_API_URL", "PROCESSOR_BASE_URL"),
    )
    processor_secret_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GETTRX_SECRET_KEY", "PROCESSOR_SECRET_KEY"),
    )
    processor_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        validation_alias=AliasChoices("GETTRX_TIMEOUT_SECONDS", "PROCESSOR_TIMEOUT_SECONDS"),
    )
    default_merchant_account_id: str = Field(
        default="acm_67c1039bd94d3f0001ee9801",
        description="Test merchant account used when a caller has none linked",
    )

    # CORS
    allowed_origins: Optional[str] = Field(
        default=None, description="CORS allowed origins (comma-separated)"
    )

    # Storage
    storage_backend: str = Field(default="memory", description="memory or database")
    database_url: str = Field(default="sqlite+aiosqlite:///./rentpay.db")
    database_echo: bool = Field(default=False)

    # Identity
    auth_mode: str = Field(default="static", description="static or jwt")
    static_user_id: str = Field(default="user_123")
    jwt_secret_key: str = Field(default="change-me")
    jwt_algorithm: str = Field(default="HS256")

    # History
    history_sample_fallback: bool = Field(
        default=True, description="Serve flagged sample records when history is empty"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v.upper()

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        if v.lower() not in ("memory", "database"):
            raise ValueError("storage_backend must be 'memory' or 'database'")
        return v.lower()

    @field_validator("auth_mode")
    @classmethod
    def validate_auth_mode(cls, v: str) -> str:
        if v.lower() not in ("static", "jwt"):
            raise ValueError("auth_mode must be 'static' or 'jwt'")
        return v.lower()

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def get_allowed_origins_list(self) -> List[str]:
        """Parse allowed origins, falling back to the per-environment defaults."""
        if self.allowed_origins:
            return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]
        return list(PRODUCTION_ORIGINS if self.is_production else DEVELOPMENT_ORIGINS)


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance; loaded once per process."""
    return Settings()
