"""Tests for pricing configuration validation logic.

Covers every validation branch in validate_pricing_config().
"""

from __future__ import annotations

from dataclasses import replace

import pytest

from venue_pricing.domain.constraints import (
    PricingConfig,
    pricing_config_from_settings,
    validate_pricing_config,
)
from venue_pricing.utils.config import get_settings


def valid_config(**overrides) -> PricingConfig:
    """Return a valid baseline PricingConfig, optionally overriding fields."""
    defaults = {
        "evening_boundary_hour": 17,
        "venue_opening_hour": 18,
        "early_open_staff_hourly_rate": 30.0,
        "tax_rate": 0.13,
        "audio_tech_base_hours": 7,
        "bartender_comp_attendance_threshold": 100,
        "parking_lot_room_slug": "parking-lot",
        "max_workers": 4,
    }
    defaults.update(overrides)
    return PricingConfig(**defaults)


# --- Baseline pass ---

def test_valid_config_passes() -> None:
    """A fully valid config must not raise."""
    validate_pricing_config(valid_config())


def test_default_settings_produce_valid_config() -> None:
    get_settings.cache_clear()
    config = pricing_config_from_settings(get_settings())
    assert config.evening_boundary_hour == 17
    assert config.venue_opening_hour == 18
    assert config.tax_rate == pytest.approx(0.13)


def test_invalid_settings_rejected_when_building_config() -> None:
    get_settings.cache_clear()
    settings = replace(get_settings(), pricing_max_workers=0)
    with pytest.raises(ValueError):
        pricing_config_from_settings(settings)


# --- hours of day ---

def test_evening_boundary_hour_negative_raises() -> None:
    with pytest.raises(ValueError):
        validate_pricing_config(valid_config(evening_boundary_hour=-1))


def test_evening_boundary_hour_above_23_raises() -> None:
    with pytest.raises(ValueError):
        validate_pricing_config(valid_config(evening_boundary_hour=24))


def test_venue_opening_hour_above_23_raises() -> None:
    with pytest.raises(ValueError):
        validate_pricing_config(valid_config(venue_opening_hour=25))


# --- rates ---

def test_early_open_staff_rate_negative_raises() -> None:
    with pytest.raises(ValueError):
        validate_pricing_config(valid_config(early_open_staff_hourly_rate=-0.01))


def test_tax_rate_negative_raises() -> None:
    with pytest.raises(ValueError):
        validate_pricing_config(valid_config(tax_rate=-0.01))


def test_tax_rate_one_raises() -> None:
    with pytest.raises(ValueError):
        validate_pricing_config(valid_config(tax_rate=1.0))


# --- resource rules ---

def test_audio_tech_base_hours_negative_raises() -> None:
    with pytest.raises(ValueError):
        validate_pricing_config(valid_config(audio_tech_base_hours=-1))


def test_bartender_threshold_negative_raises() -> None:
    with pytest.raises(ValueError):
        validate_pricing_config(valid_config(bartender_comp_attendance_threshold=-5))


def test_parking_lot_slug_blank_raises() -> None:
    with pytest.raises(ValueError):
        validate_pricing_config(valid_config(parking_lot_room_slug="   "))


# --- max_workers ---

def test_max_workers_zero_raises() -> None:
    with pytest.raises(ValueError):
        validate_pricing_config(valid_config(max_workers=0))


# --- Boundary values ---

def test_midnight_boundary_passes() -> None:
    validate_pricing_config(valid_config(evening_boundary_hour=0, venue_opening_hour=0))


def test_zero_tax_rate_passes() -> None:
    """Exact lower boundary must pass."""
    validate_pricing_config(valid_config(tax_rate=0.0))


def test_zero_audio_tech_base_hours_passes() -> None:
    validate_pricing_config(valid_config(audio_tech_base_hours=0))
