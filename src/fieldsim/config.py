"""Application configuration and settings management."""

from datetime import time
from pathlib import Path
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="FIELDSIM_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Field Dispatch Compliance Simulator"
    data_root: Path = Field(default=Path("data"), description="Root directory for input and output files.")
    job_file: Path = Field(default=Path("data/jobs.csv"), description="Job backlog CSV.")
    unit_file: Path = Field(default=Path("data/gsts.csv"), description="Field unit (GST) roster CSV.")
    job_report_file: Path = Field(
        default=Path("data/outputs/completed_jobs.csv"),
        description="Destination for the completed job report.",
    )
    unit_report_file: Path = Field(
        default=Path("data/outputs/unit_jobs.csv"),
        description="Destination for the per-unit job report.",
    )

    compliance_seconds: int = Field(default=1800, ge=1, description="Compliance window for travel plus idle time.")
    day_start: time = Field(default=time(7, 0), description="Time of day at which the daily roster is refreshed.")
    max_match_distance: float = Field(
        default=200.0,
        gt=0.0,
        description="Upper bound on planar coordinate distance between a unit and a job.",
    )
    address_state: str = Field(default="NSW", description="State code appended to geocoding queries.")

    routing_base_url: str = Field(
        default="https://atlas.microsoft.com",
        description="Base URL for the routing, isochrone and geocoding service.",
    )
    routing_subscription_key: Optional[str] = Field(
        default=None,
        description="Subscription key for the routing service.",
    )
    routing_api_version: str = "1.0"
    routing_timeout_seconds: float = Field(default=30.0, gt=0.0)
    routing_max_retries: int = Field(default=0, ge=0)
    routing_backoff_seconds: float = Field(default=1.0, ge=0.0)

    @field_validator(
        "data_root", "job_file", "unit_file", "job_report_file", "unit_report_file", mode="before"
    )
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("day_start", mode="before")
    @classmethod
    def _parse_day_start(cls, value: Any) -> time:
        """Accept HH:MM or HH:MM:SS strings from the environment."""
        if isinstance(value, time):
            return value
        if isinstance(value, str) and value.strip():
            return time.fromisoformat(value.strip())
        raise ValueError(f"Invalid day start value '{value}'")


settings = Settings()
