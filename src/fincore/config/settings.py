"""Application settings and configuration."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Financial Analytics Core"
    app_version: str = "0.1.0"

    # Storage
    database_url: str = "sqlite:///./fincore.db"
    redis_url: Optional[str] = None

    log_level: str = "INFO"

    # Exchange calendar (local exchange time)
    market_timezone: str = "America/Sao_Paulo"
    market_open_hour: int = 9
    market_close_hour: int = 18

    # Cache TTLs
    quote_cache_ttl_seconds: int = 30
    indicator_cache_ttl_seconds: int = 300
    volatility_cache_ttl_seconds: int = 600

    # Quote circuit breaker
    breaker_failure_rate_threshold: float = 50.0
    breaker_window_size: int = 10
    breaker_minimum_calls: int = 5
    breaker_open_cooldown_seconds: float = 60.0

    # Market simulation
    simulation_enabled: bool = False
    simulation_interval_seconds: float = 30.0
    backfill_days: int = 90
    simulation_seed: Optional[int] = None


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
