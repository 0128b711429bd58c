from datetime import datetime
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    project_name: str = Field(default="Dynasty Cap Engine API")
    version: str = Field(default="0.1.0")
    environment: str = Field(default="development")
    commit_sha: str = Field(default="local-dev")
    log_level: str = Field(default="INFO")

    database_url: str = Field(default="sqlite:///./dynasty_cap.db")

    # Defaults applied to newly created leagues.
    default_salary_cap: int = Field(default=279_000_000)
    default_annual_increase_percentage: float = Field(default=0.15, ge=0, le=1)
    default_minimum_salary: int = Field(default=1_000_000)
    default_max_franchise_tags: int = Field(default=1, ge=0)
    default_season: int = Field(default_factory=lambda: datetime.utcnow().year)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""
    return Settings()


settings = get_settings()
