"""Configuration management using Pydantic Settings."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from iss_graphql.client import DEFAULT_BASE_URL


class Settings(BaseSettings):
    """Application settings loaded from ISS_GRAPHQL_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ISS_GRAPHQL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ISS
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = 30.0

    # Generation
    max_workers: int | None = None  # one thread per spec when unset
    specs_path: str | None = None  # packaged specs.yaml when unset

    # Server
    host: str = "0.0.0.0"
    port: int = 4000

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "console"] = "console"


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
