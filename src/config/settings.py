"""
Centralized settings management using pydantic-settings.

All environment variables and configuration values are defined here.
Use get_settings() to access the singleton settings instance.
"""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from config.constants import DEFAULT_REPLENISHMENT_CONFIG


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Optional environment variables:
        - ENVIRONMENT: Environment name (development, staging, production)
        - HOST / PORT: Server bind address
        - LOW_WATER_MARK: Queue size below which more candidates are fetched
        - FETCH_PAGE_SIZE: Candidates requested per fetch
        - CATALOG_PATH: JSON file with the candidate catalog
        - SESSION_TTL_SECONDS: Lifetime of an idle discover session
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.debug else "INFO"

    # ==========================================================================
    # Server Configuration
    # ==========================================================================
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")

    cors_origins: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ],
        description="Allowed CORS origins"
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # ==========================================================================
    # Discover Queue
    # ==========================================================================
    low_water_mark: int = Field(
        default=DEFAULT_REPLENISHMENT_CONFIG.LOW_WATER_MARK,
        ge=1,
        description="Queue size below which a fetch-more intent is dispatched"
    )
    fetch_page_size: int = Field(
        default=DEFAULT_REPLENISHMENT_CONFIG.PAGE_SIZE,
        ge=1,
        description="Candidates returned by one catalog fetch"
    )
    fetch_workers: int = Field(
        default=2,
        ge=1,
        description="Worker threads per session for background fetches"
    )
    session_ttl_seconds: int = Field(
        default=86400,
        description="Session TTL in seconds (24 hours)"
    )

    # ==========================================================================
    # Catalog
    # ==========================================================================
    catalog_path: Optional[Path] = Field(
        default=None,
        description="JSON file holding the candidate catalog"
    )
    random_seed: Optional[int] = Field(
        default=None,
        description="Seed for the random discover parameters (reproducible runs)"
    )

    @field_validator("catalog_path", mode="before")
    @classmethod
    def parse_catalog_path(cls, v):
        if isinstance(v, str):
            return Path(v) if v.strip() else None
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Uses lru_cache to ensure only one instance is created.
    Settings are loaded from environment variables and .env file.

    Returns:
        Settings: The application settings instance
    """
    env_file = Path(__file__).parent.parent.parent / ".env"
    return Settings(_env_file=env_file if env_file.exists() else None)


def get_settings_for_testing(**overrides) -> Settings:
    """
    Create a settings instance for testing with optional overrides.

    This bypasses the cache to allow different settings in tests.

    Args:
        **overrides: Setting values to override

    Returns:
        Settings: A new settings instance with overrides applied
    """
    test_defaults = {
        "environment": "testing",
        "debug": True,
        "random_seed": 7,
    }
    test_defaults.update(overrides)

    return Settings(_env_file=None, **test_defaults)
