"""
IsoRisk Configuration Module
============================

Centralized configuration management using Pydantic Settings.

Loads configuration from:
    1. Environment variables
    2. .env file (if present)
    3. Default values

Usage:
    from isorisk.config import settings

    print(settings.cost_per_test)
    print(settings.geography_api_url)

Author: IsoRisk Team
Version: 1.0.0
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Naming convention: UPPER_SNAKE_CASE in env, lower_snake_case in code.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application Settings
    # =========================================================================

    app_name: str = Field(default="IsoRisk", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=True, description="Emit JSON log lines")

    # =========================================================================
    # Sampling Protocol
    # =========================================================================

    cost_per_test: float = Field(
        default=300.0,
        gt=0.0,
        description="Laboratory cost of a single isotope test"
    )
    expected_defect_rate: float = Field(
        default=0.05,
        ge=0.0,
        le=1.0,
        description="Assumed fraction of non-conforming units in a lot"
    )

    # =========================================================================
    # Isotopic Overlap
    # =========================================================================

    separability_threshold_sd: float = Field(
        default=2.0,
        gt=0.0,
        description="Distance (in declared SDs) above which origins are separable"
    )

    # =========================================================================
    # Geography / Isotope Lookup Service
    # =========================================================================

    geography_api_url: str = Field(
        default="http://127.0.0.1:8000",
        description="Geography/isotope lookup service URL"
    )
    geography_api_token: str = Field(
        default="",
        description="Bearer token for the lookup service (empty = no auth)"
    )
    geography_timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Lookup request timeout in seconds"
    )
    geography_circuit_failure_threshold: int = Field(
        default=5,
        ge=1,
        description="Consecutive failures before the lookup circuit opens"
    )
    geography_circuit_cooldown_seconds: float = Field(
        default=60.0,
        ge=0.0,
        description="Seconds the lookup circuit stays open"
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached engine settings.

    Uses LRU cache to ensure settings are loaded only once.

    Returns:
        Settings instance
    """
    return Settings()


# Convenience alias
settings = get_settings()
