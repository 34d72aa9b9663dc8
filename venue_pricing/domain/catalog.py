"""Parsing of stored catalog documents into an immutable RuleCatalog."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from venue_pricing.domain.errors import CatalogFormatError
from venue_pricing.domain.models import (
    DayRule,
    PeriodRule,
    RateType,
    ResourceConfig,
    ResourceType,
    RoomOverride,
    RoomRuleSet,
    RuleCatalog,
    normalize_room_key,
)


_INCLUDES_PREFIX = "includes_"


def _optional_number(value: Any, field_name: str) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CatalogFormatError(f"{field_name} must be a number, got {value!r}")
    return float(value)


def _rate_type(value: Any, field_name: str) -> RateType:
    try:
        return RateType(str(value).lower())
    except ValueError as exc:
        raise CatalogFormatError(f"{field_name} must be 'flat' or 'hourly', got {value!r}") from exc


def _parse_period(raw: Any, field_name: str) -> Optional[PeriodRule]:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise CatalogFormatError(f"{field_name} must be an object")
    return PeriodRule(
        public=_optional_number(raw.get("public"), f"{field_name}.public") or 0.0,
        private=_optional_number(raw.get("private"), f"{field_name}.private") or 0.0,
        rate_type=_rate_type(raw.get("type", RateType.HOURLY.value), f"{field_name}.type"),
        minimum_hours=_optional_number(raw.get("minimumHours"), f"{field_name}.minimumHours"),
        crossover_rate=_optional_number(raw.get("crossoverRate"), f"{field_name}.crossoverRate"),
    )


def parse_day_rule(raw: Any, field_name: str = "dayRule") -> DayRule:
    if not isinstance(raw, Mapping):
        raise CatalogFormatError(f"{field_name} must be an object")
    return DayRule(
        full_day=_parse_period(raw.get("fullDay"), f"{field_name}.fullDay"),
        daytime=_parse_period(raw.get("daytime"), f"{field_name}.daytime"),
        evening=_parse_period(raw.get("evening"), f"{field_name}.evening"),
        minimum_hours=_optional_number(raw.get("minimumHours"), f"{field_name}.minimumHours"),
    )


def parse_room_rules(room_slug: str, pricing: Any) -> RoomRuleSet:
    """Parse one room's weekday -> rule document (weekday keys are case-insensitive)."""
    if not isinstance(pricing, Mapping):
        raise CatalogFormatError(f"pricing for room {room_slug} must be an object")
    day_rules = {
        str(day).strip().lower(): parse_day_rule(rule, f"{room_slug}.{day}")
        for day, rule in pricing.items()
    }
    return RoomRuleSet(room_slug=normalize_room_key(room_slug), day_rules=day_rules)


def _parse_cost(raw: Mapping[str, Any], field_name: str) -> tuple[float, Optional[str]]:
    """Return (cost, quote_note); textual costs are quoted outside the engine."""
    value = raw.get("cost", 0)
    if isinstance(value, str):
        return 0.0, value
    number = _optional_number(value, f"{field_name}.cost")
    return (number or 0.0), None


def _resource_type(value: Any, field_name: str) -> ResourceType:
    try:
        return ResourceType(str(value).lower())
    except ValueError as exc:
        raise CatalogFormatError(
            f"{field_name}.type must be one of flat, hourly, base, custom; got {value!r}"
        ) from exc


def _parse_override(raw: Any, field_name: str, default_type: ResourceType) -> RoomOverride:
    if not isinstance(raw, Mapping):
        raise CatalogFormatError(f"{field_name} must be an object")
    cost, quote_note = _parse_cost(raw, field_name)
    resource_type = (
        _resource_type(raw["type"], field_name) if "type" in raw else default_type
    )
    if quote_note is not None:
        resource_type = ResourceType.CUSTOM
    includes = frozenset(
        key[len(_INCLUDES_PREFIX):]
        for key, flag in raw.items()
        if key.startswith(_INCLUDES_PREFIX) and bool(flag)
    )
    return RoomOverride(
        cost=cost,
        resource_type=resource_type,
        description=raw.get("description"),
        includes=includes,
    )


def parse_resource(raw: Any) -> ResourceConfig:
    if not isinstance(raw, Mapping):
        raise CatalogFormatError("resource document must be an object")
    resource_id = raw.get("id")
    if not isinstance(resource_id, str) or not resource_id.strip():
        raise CatalogFormatError("resource document requires a non-empty 'id'")

    cost, quote_note = _parse_cost(raw, resource_id)
    resource_type = _resource_type(raw.get("type", ResourceType.FLAT.value), resource_id)
    sub_description = raw.get("subDescription")
    if quote_note is not None:
        resource_type = ResourceType.CUSTOM
        sub_description = sub_description or quote_note

    rooms = raw.get("rooms") or {}
    if not isinstance(rooms, Mapping):
        raise CatalogFormatError(f"{resource_id}.rooms must be an object")
    overrides = {
        normalize_room_key(room_key): _parse_override(
            override, f"{resource_id}.rooms.{room_key}", resource_type
        )
        for room_key, override in rooms.items()
    }
    return ResourceConfig(
        resource_id=resource_id,
        cost=cost,
        resource_type=resource_type,
        description=str(raw.get("description") or resource_id),
        sub_description=sub_description,
        room_overrides=overrides,
    )


def build_catalog(
    room_documents: Mapping[str, Any],
    resource_documents: Iterable[Any],
) -> RuleCatalog:
    room_rules = {}
    for room_slug, pricing in room_documents.items():
        rule_set = parse_room_rules(room_slug, pricing)
        room_rules[rule_set.room_slug] = rule_set
    resources = {}
    for document in resource_documents:
        resource = parse_resource(document)
        resources[resource.resource_id] = resource
    return RuleCatalog(room_rules=room_rules, resources=resources)
