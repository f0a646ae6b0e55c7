"""
Configuration management for the Strategic Radar.

Uses pydantic-settings for type-safe configuration with environment variable support.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RadarSettings(BaseSettings):
    """Core radar settings: calendar convention, persistence, dedup."""

    model_config = SettingsConfigDict(
        env_prefix="RADAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Civil calendar every parsed date is interpreted in
    timezone: str = "Europe/Paris"

    # Persistence
    history_key: str = "techWatchHistory"
    store_backend: str = "file"  # memory | file | redis
    history_file: Path = Field(default=Path("./data/radar_history.json"))
    redis_url: str = "redis://localhost:6379/0"

    # Comma-separated record fields that define a signature, in order
    signature_fields: str = "headline"

    # Export
    export_dir: Path = Field(default=Path("./data/exports"))
    export_prefix: str = "radar_export"
    master_export_prefix: str = "MASTER_RADAR"

    # Calendar deep links
    calendar_base_url: str = "https://calendar.google.com/calendar/render"

    # Logging
    log_level: str = "INFO"
    log_file: Path | None = None  # rotating file sink when set

    @field_validator("store_backend", mode="before")
    @classmethod
    def normalize_backend(cls, v):
        """Accept any casing for the backend name."""
        return str(v).strip().lower()

    @property
    def signature_fields_list(self) -> tuple[str, ...]:
        """Parse signature fields into an ordered tuple."""
        fields = tuple(f.strip() for f in self.signature_fields.split(",") if f.strip())
        return fields or ("headline",)


class GeneratorSettings(BaseSettings):
    """LLM generator settings loaded from GENERATOR_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GENERATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Anthropic API
    anthropic_api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 8192
    timeout: float = 120.0  # seconds

    # Server-side web search so the model can find recent items
    web_search: bool = True
    web_search_max_uses: int = 5

    # Retry on transient transport errors
    max_retries: int = 3
    retry_delay: float = 1.0  # seconds

    # How many items a scan asks for
    min_items: int = 12
    max_items: int = 15


class APISettings(BaseSettings):
    """API server settings."""

    model_config = SettingsConfigDict(
        env_prefix="API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]


class Settings(BaseSettings):
    """Main settings class that combines all settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Sub-settings
    radar: RadarSettings = Field(default_factory=RadarSettings)
    generator: GeneratorSettings = Field(default_factory=GeneratorSettings)
    api: APISettings = Field(default_factory=APISettings)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


# Convenience alias for quick access
settings = get_settings()
