"""Centralized configuration for the resource search engine using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``RESOURCE_SEARCH_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RESOURCE_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Session behaviour
    history_size: int = Field(default=20, ge=1, description="Maximum remembered queries per session")
    suggestion_min_length: int = Field(default=2, ge=1, description="Characters typed before autocomplete starts")
    max_suggestions: int = Field(default=10, ge=1, description="Suggestions kept per keystroke")
    inline_suggestions: int = Field(default=3, ge=1, description="Suggestions rendered inline under the search box")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=False, description="Emit structured JSON logs")

    # Tracing
    tracing_enabled: bool = Field(default=False, description="Install an OpenTelemetry SDK tracer provider")
    service_name: str = Field(default="cloud-resource-search", description="service.name resource attribute")

    @model_validator(mode="after")
    def _check_suggestion_limits(self) -> "Settings":
        if self.inline_suggestions > self.max_suggestions:
            raise ValueError("INLINE_SUGGESTIONS cannot exceed MAX_SUGGESTIONS")
        return self

    def get_log_level(self) -> str:
        """Log level normalized for the logging module."""
        return self.log_level.upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, loaded once from the environment."""
    return Settings()
