"""Domain-level validation rules for pricing configuration."""

from __future__ import annotations

from dataclasses import dataclass

from venue_pricing.utils.config import Settings


@dataclass(frozen=True)
class PricingConfig:
    evening_boundary_hour: int
    venue_opening_hour: int
    early_open_staff_hourly_rate: float
    tax_rate: float
    audio_tech_base_hours: int
    bartender_comp_attendance_threshold: int
    parking_lot_room_slug: str
    max_workers: int


def pricing_config_from_settings(settings: Settings) -> PricingConfig:
    config = PricingConfig(
        evening_boundary_hour=settings.evening_boundary_hour,
        venue_opening_hour=settings.venue_opening_hour,
        early_open_staff_hourly_rate=settings.early_open_staff_hourly_rate,
        tax_rate=settings.tax_rate,
        audio_tech_base_hours=settings.audio_tech_base_hours,
        bartender_comp_attendance_threshold=settings.bartender_comp_attendance_threshold,
        parking_lot_room_slug=settings.parking_lot_room_slug,
        max_workers=settings.pricing_max_workers,
    )
    validate_pricing_config(config)
    return config


def validate_pricing_config(config: PricingConfig) -> None:
    if not 0 <= config.evening_boundary_hour <= 23:
        raise ValueError("evening_boundary_hour must be between 0 and 23")
    if not 0 <= config.venue_opening_hour <= 23:
        raise ValueError("venue_opening_hour must be between 0 and 23")
    if config.early_open_staff_hourly_rate < 0:
        raise ValueError("early_open_staff_hourly_rate must be >= 0")
    if not 0.0 <= config.tax_rate < 1.0:
        raise ValueError("tax_rate must be in [0, 1)")
    if config.audio_tech_base_hours < 0:
        raise ValueError("audio_tech_base_hours must be >= 0")
    if config.bartender_comp_attendance_threshold < 0:
        raise ValueError("bartender_comp_attendance_threshold must be >= 0")
    if not config.parking_lot_room_slug.strip():
        raise ValueError("parking_lot_room_slug must be non-empty")
    if config.max_workers <= 0:
        raise ValueError("max_workers must be > 0")
