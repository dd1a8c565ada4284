"""Application configuration settings."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from modelregistry.server.discovery.openrouter import OPENROUTER_MODELS_URL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = Field(3000, ge=1, le=65535)
    log_level: str = "INFO"

    # Agent identity
    agent_name: str = "ai-model-registry"
    agent_version: str = "1.0.0"
    agent_description: str = (
        "Real-time AI model registry with pricing, capabilities, and comparison. "
        "Aggregates data from OpenRouter for 400+ models across providers."
    )

    # Upstream catalog
    catalog_url: str = OPENROUTER_MODELS_URL
    fetch_timeout_seconds: float = Field(30.0, gt=0)

    # Cache
    cache_ttl_seconds: float = Field(300.0, ge=0)
    serve_stale_on_error: bool = True
    warm_refresh_minutes: int = Field(0, ge=0)

    # CORS
    cors_origins: list[str] = ["*"]

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize LOG_LEVEL and reject unknown level names."""
        level = v.upper()
        if level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"LOG_LEVEL must be a standard logging level, got {v!r}")
        return level


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Cached Settings instance.
    """
    return Settings()
