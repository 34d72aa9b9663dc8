"""Domain models for venue-room rate resolution and cost estimation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from venue_pricing.domain.errors import ResourceConfigMissingError


ALL_DAYS = "all"


class RateType(str, Enum):
    FLAT = "flat"
    HOURLY = "hourly"


class ResourceType(str, Enum):
    FLAT = "flat"
    HOURLY = "hourly"
    BASE = "base"
    CUSTOM = "custom"


def normalize_room_key(room_slug: str) -> str:
    """Catalog documents mix `living-room` and `living_room`; both mean one room."""
    return room_slug.strip().lower().replace("_", "-")


def whole_hours(start: datetime, end: datetime) -> int:
    """Truncated whole hours between two instants, never negative."""
    seconds = (end - start).total_seconds()
    if seconds <= 0:
        return 0
    return int(seconds // 3600)


@dataclass(frozen=True)
class PeriodRule:
    """Rate for one period of a day (full day, daytime or evening)."""

    public: float
    private: float
    rate_type: RateType
    minimum_hours: Optional[float] = None
    crossover_rate: Optional[float] = None

    def rate_for(self, is_private: bool) -> float:
        return self.private if is_private else self.public


@dataclass(frozen=True)
class DayRule:
    full_day: Optional[PeriodRule] = None
    daytime: Optional[PeriodRule] = None
    evening: Optional[PeriodRule] = None
    minimum_hours: Optional[float] = None


@dataclass(frozen=True)
class RoomRuleSet:
    room_slug: str
    day_rules: Mapping[str, DayRule]

    def rule_for(self, weekday: str) -> Optional[DayRule]:
        rule = self.day_rules.get(weekday.lower())
        if rule is None:
            rule = self.day_rules.get(ALL_DAYS)
        return rule


@dataclass(frozen=True)
class RoomOverride:
    cost: float
    resource_type: ResourceType
    description: Optional[str] = None
    includes: frozenset[str] = frozenset()


@dataclass(frozen=True)
class ResourceConfig:
    resource_id: str
    cost: float
    resource_type: ResourceType
    description: str
    sub_description: Optional[str] = None
    room_overrides: Mapping[str, RoomOverride] = field(default_factory=dict)

    def override_for(self, room_slug: str) -> Optional[RoomOverride]:
        return self.room_overrides.get(normalize_room_key(room_slug))


@dataclass(frozen=True)
class RuleCatalog:
    """Read-only snapshot of room rate tables and the resource-cost catalog."""

    room_rules: Mapping[str, RoomRuleSet]
    resources: Mapping[str, ResourceConfig]

    def get_room_rules(self) -> Mapping[str, RoomRuleSet]:
        return self.room_rules

    def get_resource_catalog(self) -> list[ResourceConfig]:
        return list(self.resources.values())

    def rules_for_room(self, room_slug: str) -> Optional[RoomRuleSet]:
        return self.room_rules.get(normalize_room_key(room_slug))

    def resource(self, resource_id: str) -> ResourceConfig:
        config = self.resources.get(resource_id)
        if config is None:
            raise ResourceConfigMissingError(resource_id)
        return config


@dataclass(frozen=True)
class ManualCost:
    """Room-scoped cost already attached to a booking before pricing."""

    description: str
    cost: float
    sub_description: Optional[str] = None


@dataclass(frozen=True)
class Booking:
    booking_id: Optional[str]
    room_slugs: tuple[str, ...]
    start: str | datetime
    end: str | datetime
    booking_date: str
    is_private: bool = False
    expected_attendance: int = 0
    resources: tuple[str, ...] = ()
    room_costs: Mapping[str, tuple[ManualCost, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class TimeWindow:
    """Booking window in venue-local wall-clock time."""

    start: datetime
    end: datetime

    @property
    def total_hours(self) -> int:
        return whole_hours(self.start, self.end)

    @property
    def weekday(self) -> str:
        return self.start.strftime("%A")


@dataclass(frozen=True)
class Segment:
    start: datetime
    end: datetime

    @property
    def hours(self) -> int:
        return whole_hours(self.start, self.end)


@dataclass(frozen=True)
class TimeSplit:
    daytime: Optional[Segment]
    evening: Optional[Segment]
    crosses_boundary: bool
    total_hours: int

    @property
    def daytime_start(self) -> Optional[datetime]:
        return self.daytime.start if self.daytime else None

    @property
    def daytime_end(self) -> Optional[datetime]:
        return self.daytime.end if self.daytime else None

    @property
    def evening_start(self) -> Optional[datetime]:
        return self.evening.start if self.evening else None

    @property
    def evening_end(self) -> Optional[datetime]:
        return self.evening.end if self.evening else None


@dataclass(frozen=True)
class CostLineItem:
    id: str
    description: str
    cost: float
    sub_description: Optional[str] = None
    is_required: bool = False
    is_editable: bool = False

    def to_api_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "subDescription": self.sub_description,
            "cost": self.cost,
            "isRequired": self.is_required,
            "isEditable": self.is_editable,
        }


@dataclass(frozen=True)
class RoomPrice:
    """Base price of one room for one booking, before surcharges."""

    base_price: float
    total_booking_hours: int
    daytime_hours: int = 0
    evening_hours: int = 0
    daytime_price: float = 0.0
    evening_price: float = 0.0
    full_day_price: float = 0.0
    daytime_rate: float = 0.0
    daytime_rate_type: Optional[RateType] = None
    evening_rate: float = 0.0
    evening_rate_type: Optional[RateType] = None
    full_day_rate: float = 0.0
    full_day_rate_type: Optional[RateType] = None
    is_full_day: bool = False
    crossover_applied: bool = False
    minimum_applied: bool = False
    minimum_hours: Optional[float] = None
    rate_description: str = ""
    rate_items: tuple[CostLineItem, ...] = ()


@dataclass(frozen=True)
class RoomPriceEstimate:
    room_slug: str
    room_price: RoomPrice
    additional_costs: tuple[CostLineItem, ...]
    total_cost: float

    @property
    def base_price(self) -> float:
        return self.room_price.base_price

    def to_api_dict(self) -> dict[str, Any]:
        price = self.room_price
        return {
            "roomSlug": self.room_slug,
            "basePrice": price.base_price,
            "daytimeHours": price.daytime_hours,
            "eveningHours": price.evening_hours,
            "daytimePrice": price.daytime_price,
            "eveningPrice": price.evening_price,
            "fullDayPrice": price.full_day_price,
            "daytimeRate": price.daytime_rate,
            "daytimeRateType": price.daytime_rate_type.value if price.daytime_rate_type else "",
            "eveningRate": price.evening_rate,
            "eveningRateType": price.evening_rate_type.value if price.evening_rate_type else "",
            "fullDayRate": price.full_day_rate,
            "fullDayRateType": (
                price.full_day_rate_type.value if price.full_day_rate_type else ""
            ),
            "isFullDay": price.is_full_day,
            "crossoverApplied": price.crossover_applied,
            "minimumApplied": price.minimum_applied,
            "minimumHours": price.minimum_hours,
            "totalBookingHours": price.total_booking_hours,
            "rateDescription": price.rate_description,
            "rateItems": [item.to_api_dict() for item in price.rate_items],
            "additionalCosts": [item.to_api_dict() for item in self.additional_costs],
            "totalCost": self.total_cost,
        }


@dataclass(frozen=True)
class SurchargeResult:
    per_slot_costs: tuple[CostLineItem, ...]
    per_room_costs: Mapping[str, tuple[CostLineItem, ...]]
    custom_line_items: tuple[CostLineItem, ...]

    def costs_for_room(self, room_slug: str) -> tuple[CostLineItem, ...]:
        return self.per_room_costs.get(room_slug, ())


@dataclass(frozen=True)
class BookingCostEstimate:
    booking_id: str
    date: str
    start: str
    end: str
    estimates: tuple[RoomPriceEstimate, ...] = ()
    per_slot_costs: tuple[CostLineItem, ...] = ()
    custom_line_items: tuple[CostLineItem, ...] = ()
    slot_total: float = 0.0
    room_slugs: tuple[str, ...] = ()
    is_private: bool = False
    expected_attendance: int = 0
    resources: tuple[str, ...] = ()
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_api_dict(self) -> dict[str, Any]:
        return {
            "id": self.booking_id,
            "date": self.date,
            "start": self.start,
            "end": self.end,
            "estimates": [estimate.to_api_dict() for estimate in self.estimates],
            "perSlotCosts": [item.to_api_dict() for item in self.per_slot_costs],
            "customLineItems": [item.to_api_dict() for item in self.custom_line_items],
            "slotTotal": self.slot_total,
            "roomSlugs": list(self.room_slugs),
            "isPrivate": self.is_private,
            "expectedAttendance": self.expected_attendance,
            "resources": list(self.resources),
            "error": self.error,
        }


@dataclass(frozen=True)
class PricedBatch:
    cost_estimates: tuple[BookingCostEstimate, ...]
    grand_total: float
    tax: float
    total_with_tax: float

    @property
    def custom_line_items(self) -> dict[str, list[CostLineItem]]:
        grouped: dict[str, list[CostLineItem]] = {}
        for estimate in self.cost_estimates:
            if estimate.custom_line_items:
                grouped.setdefault(estimate.booking_id, []).extend(estimate.custom_line_items)
        return grouped

    def to_api_dict(self) -> dict[str, Any]:
        return {
            "costEstimates": [estimate.to_api_dict() for estimate in self.cost_estimates],
            "grandTotal": self.grand_total,
            "tax": self.tax,
            "totalWithTax": self.total_with_tax,
            "customLineItems": {
                booking_id: [item.to_api_dict() for item in items]
                for booking_id, items in self.custom_line_items.items()
            },
        }
