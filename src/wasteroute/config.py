"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="WASTE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Waste Collection Route Engine"
    api_prefix: str = "/api"
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Zone simulation
    zone_seed_file: Optional[Path] = Field(
        default=None,
        description="Optional JSON file overriding the built-in zone seed data.",
    )
    seed_random_state: Optional[int] = Field(
        default=None,
        description="Seed for the initial fill draw; leave unset for a random start.",
    )
    initial_fill_fraction: float = Field(default=0.3, ge=0.0, le=1.0)
    initial_collection_age_minutes: float = Field(default=120.0, ge=0.0)
    overflow_allowance: float = Field(
        default=1.0,
        ge=1.0,
        description="Multiple of bin capacity a zone may reach before it is clamped.",
    )

    # Ranking
    risk_thresholds: tuple[float, ...] = Field(
        default=(40.0, 70.0, 90.0),
        description="Fill-percentage cut points for MEDIUM, HIGH and CRITICAL.",
    )
    default_hotspot_count: int = Field(default=5, ge=1)
    default_collection_amount_kg: float = Field(default=100.0, ge=0.0)

    # Signal ingestion
    signal_fetch_timeout_seconds: float = Field(default=5.0, gt=0.0)

    # OSRM road geometry (optional)
    osrm_base_url: Optional[str] = Field(
        default=None,
        description="Base URL for the OSRM routing service (e.g., http://localhost:5000).",
    )
    osrm_profile: Literal["driving", "driving-hgv"] = Field(
        default="driving",
        description="OSRM profile to use when requesting road geometry.",
    )
    osrm_max_retries: int = Field(default=2, ge=0)
    osrm_backoff_seconds: float = Field(default=0.5, ge=0.0)

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("zone_seed_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Optional[Path]:
        if value is None or value == "":
            return None
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("risk_thresholds", mode="before")
    @classmethod
    def _parse_float_tuple_from_env(cls, value: Any) -> tuple[float, ...]:
        """Parse float tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, (tuple, list)):
            return tuple(float(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(float(item) for item in parsed)
            except (json.JSONDecodeError, TypeError, ValueError):
                pass
            return tuple(float(item.strip()) for item in value.split(",") if item.strip())
        return tuple()

    @field_validator("risk_thresholds")
    @classmethod
    def _check_risk_thresholds(cls, value: tuple[float, ...]) -> tuple[float, ...]:
        if len(value) != 3 or list(value) != sorted(value):
            raise ValueError("risk_thresholds must hold three ascending fill percentages.")
        return value


settings = Settings()
