"""
Application configuration using Pydantic Settings.
"""
from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import field_validator


LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Costbook API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database - in-memory SQLite unless pointed at a durable backend
    DATABASE_URL: str = "sqlite://"
    SEED_SAMPLE_DATA: bool = False

    # Costing precision
    COST_DECIMAL_PLACES: int = 4
    MARGIN_DECIMAL_PLACES: int = 2

    # Reporting
    LOW_MARGIN_THRESHOLD: int = 20  # percent

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {', '.join(sorted(LOG_LEVELS))} (got {v!r})"
            )
        return level

    @field_validator("COST_DECIMAL_PLACES", "MARGIN_DECIMAL_PLACES")
    @classmethod
    def validate_decimal_places(cls, v: int) -> int:
        """Currency results must keep at least cent precision."""
        if v < 2:
            raise ValueError(f"decimal places must be at least 2 (got {v})")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
