"""Environment-driven application settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return float(value)


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    log_level: str
    database_path: Path
    venue_timezone: str
    evening_boundary_hour: int
    venue_opening_hour: int
    early_open_staff_hourly_rate: float
    tax_rate: float
    audio_tech_base_hours: int
    bartender_comp_attendance_threshold: int
    parking_lot_room_slug: str
    pricing_max_workers: int
    catalog_max_retries: int
    catalog_retry_delay_seconds: float


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read settings once per process; tests override with dataclasses.replace."""
    return Settings(
        app_name=os.getenv("APP_NAME", "Venue Pricing Engine"),
        app_version=os.getenv("APP_VERSION", "1.0.0"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        database_path=Path(os.getenv("DATABASE_PATH", "data/venue_pricing.db")),
        venue_timezone=os.getenv("VENUE_TIMEZONE", "America/Toronto"),
        evening_boundary_hour=_env_int("EVENING_BOUNDARY_HOUR", 17),
        venue_opening_hour=_env_int("VENUE_OPENING_HOUR", 18),
        early_open_staff_hourly_rate=_env_float("EARLY_OPEN_STAFF_HOURLY_RATE", 30.0),
        tax_rate=_env_float("TAX_RATE", 0.13),
        audio_tech_base_hours=_env_int("AUDIO_TECH_BASE_HOURS", 7),
        bartender_comp_attendance_threshold=_env_int(
            "BARTENDER_COMP_ATTENDANCE_THRESHOLD", 100
        ),
        parking_lot_room_slug=os.getenv("PARKING_LOT_ROOM_SLUG", "parking-lot"),
        pricing_max_workers=_env_int("PRICING_MAX_WORKERS", 4),
        catalog_max_retries=_env_int("CATALOG_MAX_RETRIES", 3),
        catalog_retry_delay_seconds=_env_float("CATALOG_RETRY_DELAY_SECONDS", 2.0),
    )
