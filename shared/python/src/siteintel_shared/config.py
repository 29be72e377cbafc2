"""
config.py — pydantic-settings Settings class.

All environment variables for siteintel are declared here. The pipeline,
the API and the CLI import `settings` from this module; components that
talk to external providers also accept an explicit Settings instance so
tests can run without touching the environment.

Usage:
    from siteintel_shared.config import settings
    print(settings.bls_api_key)
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_dotenv() -> Path | None:
    """Walk up from CWD to find the nearest .env file."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        candidate = parent / ".env"
        if candidate.is_file():
            return candidate
    return None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_find_dotenv() or ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = Field(
        default="development"
    )

    # -------------------------------------------------------------------------
    # Supabase (record store)
    # -------------------------------------------------------------------------
    supabase_url: str = Field(default="http://localhost:54321")
    supabase_anon_key: str = Field(default="")
    supabase_service_key: str = Field(default="")

    # -------------------------------------------------------------------------
    # Provider credentials
    # -------------------------------------------------------------------------
    bls_api_key: str = Field(default="")
    census_api_key: str = Field(default="")
    openai_api_key: str = Field(default="")
    gemini_api_key: str = Field(default="")
    nyc_geo_key: str = Field(default="")
    ors_api_key: str = Field(default="")
    tomtom_api_key: str = Field(default="")

    # -------------------------------------------------------------------------
    # Provider endpoints
    # -------------------------------------------------------------------------
    census_geocoder_url: str = Field(
        default="https://geocoding.geo.census.gov/geocoder"
    )
    census_data_url: str = Field(default="https://api.census.gov/data")
    bls_api_url: str = Field(
        default="https://api.bls.gov/publicAPI/v2/timeseries/data"
    )
    nyc_geoclient_url: str = Field(default="https://api.nyc.gov/geoclient/v2")
    ors_base_url: str = Field(default="https://api.openrouteservice.org")
    tomtom_base_url: str = Field(default="https://api.tomtom.com")

    # -------------------------------------------------------------------------
    # Models
    # -------------------------------------------------------------------------
    gemini_model: str = Field(default="gemini-2.0-flash")
    incentives_model: str = Field(default="gpt-4o-search-preview")
    assistant_model: str = Field(default="gpt-4o")

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------
    pdf_char_budget: int = Field(default=12000)
    upload_max_bytes: int = Field(default=10 * 1024 * 1024)
    debug_write: bool = Field(default=False)
    storage_dir: str = Field(default="./storage")

    # Static reference dataset for the utility-rate stage
    utility_rates_path: str = Field(default="utilitiesRatesAndPremiums.json")

    # -------------------------------------------------------------------------
    # API server
    # -------------------------------------------------------------------------
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=5000)
    cors_origins: str = Field(default="http://localhost:3000")

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    log_format: Literal["json", "console"] = Field(default="console")

    # -------------------------------------------------------------------------
    # Derived / computed
    # -------------------------------------------------------------------------
    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @field_validator(
        "supabase_url",
        "census_geocoder_url",
        "census_data_url",
        "nyc_geoclient_url",
        "ors_base_url",
        "tomtom_base_url",
        mode="before",
    )
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") if isinstance(v, str) else v


# ---------------------------------------------------------------------------
# Module-level singleton — import this everywhere
# ---------------------------------------------------------------------------
settings = Settings()
