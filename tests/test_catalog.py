from __future__ import annotations

import pytest

from venue_pricing.domain.catalog import build_catalog, parse_resource, parse_room_rules
from venue_pricing.domain.errors import CatalogFormatError, ResourceConfigMissingError
from venue_pricing.domain.models import RateType, ResourceType
from venue_pricing.repository.default_catalog import DEFAULT_RESOURCES, DEFAULT_ROOM_RULES


def test_room_rules_parse_periods_and_minimums() -> None:
    rule_set = parse_room_rules("Main_Hall", DEFAULT_ROOM_RULES["main-hall"])

    assert rule_set.room_slug == "main-hall"
    day_rule = rule_set.rule_for("Monday")
    assert day_rule.daytime.rate_type is RateType.HOURLY
    assert day_rule.daytime.crossover_rate == 70.0
    assert day_rule.evening.rate_type is RateType.FLAT
    assert day_rule.minimum_hours == 3.0


def test_weekday_keys_are_case_insensitive() -> None:
    rule_set = parse_room_rules(
        "annex",
        {"Saturday": {"fullDay": {"public": 900, "private": 1100, "type": "FLAT"}}},
    )

    assert rule_set.rule_for("saturday").full_day.public == 900.0
    assert rule_set.rule_for("Sunday") is None


def test_missing_rates_default_to_zero_and_hourly() -> None:
    rule_set = parse_room_rules("annex", {"all": {"daytime": {"public": 25}}})

    daytime = rule_set.rule_for("Tuesday").daytime
    assert daytime.private == 0.0
    assert daytime.rate_type is RateType.HOURLY


def test_unknown_rate_type_raises_format_error() -> None:
    with pytest.raises(CatalogFormatError):
        parse_room_rules("annex", {"all": {"daytime": {"public": 25, "type": "weekly"}}})


def test_non_numeric_rate_raises_format_error() -> None:
    with pytest.raises(CatalogFormatError):
        parse_room_rules("annex", {"all": {"evening": {"public": "cheap"}}})


def test_resource_overrides_are_keyed_by_normalized_room() -> None:
    backline = parse_resource(
        next(item for item in DEFAULT_RESOURCES if item["id"] == "backline")
    )

    override = backline.override_for("living-room")
    assert override is not None
    assert override.cost == 75.0
    assert override.includes == frozenset({"projector"})
    assert backline.override_for("living_room") == override
    assert backline.override_for("zine-library") is None


def test_textual_cost_marks_resource_custom() -> None:
    resource = parse_resource(
        {"id": "lighting", "cost": "Quoted by vendor", "description": "Lighting Rig"}
    )

    assert resource.resource_type is ResourceType.CUSTOM
    assert resource.cost == 0.0
    assert resource.sub_description == "Quoted by vendor"


def test_resource_without_id_raises_format_error() -> None:
    with pytest.raises(CatalogFormatError):
        parse_resource({"cost": 10})


def test_catalog_lookup_of_missing_resource_raises() -> None:
    catalog = build_catalog(DEFAULT_ROOM_RULES, DEFAULT_RESOURCES)

    with pytest.raises(ResourceConfigMissingError) as exc_info:
        catalog.resource("fog_machine")
    assert exc_info.value.resource_id == "fog_machine"


def test_default_catalog_covers_every_venue_room() -> None:
    catalog = build_catalog(DEFAULT_ROOM_RULES, DEFAULT_RESOURCES)

    assert set(catalog.get_room_rules()) == {
        "main-hall",
        "southern-cross",
        "living-room",
        "zine-library",
        "parking-lot",
        "the-full-building",
    }
    assert {resource.resource_id for resource in catalog.get_resource_catalog()} >= {
        "food",
        "door_staff",
        "backline",
        "projector",
        "audio_tech",
        "audio_tech_overtime",
        "bartender",
    }
