"""
Application configuration with environment-driven settings.

The OpenPhone credential is the only required value; everything else has a
default suitable for local development.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

OPENPHONE_API_BASE = "https://api.openphone.com/v1"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "openphone-mcp-server"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # HTTP listener
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3001, ge=1, le=65535, description="Listening port")

    # OpenPhone upstream
    openphone_api_key: str = Field(
        ...,
        min_length=1,
        description="OpenPhone API key, sent verbatim in the Authorization header",
    )
    openphone_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Per-request timeout for upstream calls",
    )

    # CORS
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins",
    )

    @property
    def openphone_api_base(self) -> str:
        return OPENPHONE_API_BASE

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Raises pydantic.ValidationError when OPENPHONE_API_KEY is not set.
    """
    return Settings()
