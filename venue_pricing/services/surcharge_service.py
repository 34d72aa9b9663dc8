"""Resource surcharges: per-slot costs, per-room costs and custom line items.

Each requested resource id is dispatched through a handler table. Per-slot
handlers run once per booking; per-room handlers run once per booked room.
Resources without a dedicated handler are billed by their catalog type.
Items marked editable are quoted outside the engine and are returned as
custom line items rather than per-slot or per-room costs.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional

from venue_pricing.domain.constraints import PricingConfig
from venue_pricing.domain.errors import ResourceConfigMissingError
from venue_pricing.domain.models import (
    Booking,
    CostLineItem,
    ResourceConfig,
    ResourceType,
    RuleCatalog,
    SurchargeResult,
    TimeWindow,
    normalize_room_key,
)
from venue_pricing.services.room_price_service import IdGenerator
from venue_pricing.utils.logger import get_logger


logger = get_logger(__name__)


SECURITY_RESOURCE_ID = "security"
AUDIO_TECH_OVERTIME_RESOURCE_ID = "audio_tech_overtime"
QUOTED_SEPARATELY = "Will quote separately"


@dataclass(frozen=True)
class SurchargeContext:
    booking: Booking
    window: TimeWindow
    catalog: RuleCatalog
    config: PricingConfig
    new_id: IdGenerator

    @property
    def total_hours(self) -> int:
        return self.window.total_hours

    def line_item(
        self,
        description: str,
        cost: float,
        sub_description: Optional[str] = None,
        *,
        is_required: bool = False,
        is_editable: bool = False,
    ) -> CostLineItem:
        return CostLineItem(
            id=self.new_id(),
            description=description,
            sub_description=sub_description,
            cost=float(cost),
            is_required=is_required,
            is_editable=is_editable,
        )


SlotHandler = Callable[[SurchargeContext, ResourceConfig], list[CostLineItem]]
RoomHandler = Callable[[SurchargeContext, ResourceConfig, str], list[CostLineItem]]


def _billed_cost(cost: float, resource_type: ResourceType, hours: int) -> float:
    if resource_type is ResourceType.HOURLY:
        return cost * hours
    return cost


def _typed_item(
    ctx: SurchargeContext,
    description: str,
    cost: float,
    resource_type: ResourceType,
    sub_description: Optional[str],
) -> CostLineItem:
    if resource_type is ResourceType.CUSTOM:
        return ctx.line_item(
            description,
            cost,
            sub_description or QUOTED_SEPARATELY,
            is_editable=True,
        )
    if resource_type is ResourceType.HOURLY:
        description = f"{description} ({ctx.total_hours} hours)"
    return ctx.line_item(
        description,
        _billed_cost(cost, resource_type, ctx.total_hours),
        sub_description,
    )


# --- booking-level rules ---

def early_open_staff(ctx: SurchargeContext) -> list[CostLineItem]:
    start = ctx.window.start
    opening = start.replace(
        hour=ctx.config.venue_opening_hour, minute=0, second=0, microsecond=0
    )
    if start >= opening:
        return []
    hours = math.ceil((opening - start).total_seconds() / 3600)
    return [
        ctx.line_item(
            f"Early Open Staff ({hours} hours)",
            hours * ctx.config.early_open_staff_hourly_rate,
            "Additional staff for early opening",
            is_required=True,
        )
    ]


def security(ctx: SurchargeContext) -> list[CostLineItem]:
    parking_lot = normalize_room_key(ctx.config.parking_lot_room_slug)
    includes_parking_lot = any(
        normalize_room_key(room_slug) == parking_lot for room_slug in ctx.booking.room_slugs
    )
    if not includes_parking_lot and SECURITY_RESOURCE_ID not in ctx.booking.resources:
        return []
    return [
        ctx.line_item(
            "Security (required)" if includes_parking_lot else "Security",
            0.0,
            QUOTED_SEPARATELY,
            is_required=includes_parking_lot,
            is_editable=True,
        )
    ]


# --- per-slot handlers ---

def _food_cleaning(ctx: SurchargeContext, resource: ResourceConfig) -> list[CostLineItem]:
    return [
        ctx.line_item(
            resource.description,
            resource.cost,
            resource.sub_description,
            is_required=True,
        )
    ]


def _door_staff(ctx: SurchargeContext, resource: ResourceConfig) -> list[CostLineItem]:
    hours = ctx.total_hours
    return [
        ctx.line_item(
            f"{resource.description} ({hours} hours)",
            _billed_cost(resource.cost, resource.resource_type, hours),
            resource.sub_description,
        )
    ]


def _piano_tuning(ctx: SurchargeContext, resource: ResourceConfig) -> list[CostLineItem]:
    return [
        ctx.line_item(
            resource.description,
            _billed_cost(resource.cost, resource.resource_type, ctx.total_hours),
            resource.sub_description,
        )
    ]


# --- per-room handlers ---

def _default_room_item(
    ctx: SurchargeContext,
    resource: ResourceConfig,
    room_slug: str,
) -> list[CostLineItem]:
    return [
        _typed_item(
            ctx,
            resource.description,
            resource.cost,
            resource.resource_type,
            resource.sub_description,
        )
    ]


def _backline(ctx: SurchargeContext, resource: ResourceConfig, room_slug: str) -> list[CostLineItem]:
    override = resource.override_for(room_slug)
    if override is None:
        return _default_room_item(ctx, resource, room_slug)
    return [
        _typed_item(
            ctx,
            override.description or resource.description,
            override.cost,
            override.resource_type,
            resource.sub_description,
        )
    ]


def _audio_tech(ctx: SurchargeContext, resource: ResourceConfig, room_slug: str) -> list[CostLineItem]:
    base_hours = ctx.config.audio_tech_base_hours
    items = [
        ctx.line_item(
            f"{resource.description} ({base_hours} hours included)",
            resource.cost,
            resource.sub_description,
        )
    ]
    overtime_hours = ctx.total_hours - base_hours
    if overtime_hours <= 0:
        return items
    try:
        overtime = ctx.catalog.resource(AUDIO_TECH_OVERTIME_RESOURCE_ID)
    except ResourceConfigMissingError:
        logger.warning(
            "Audio tech overtime rate missing; overtime not billed | room=%s | overtime_hours=%s",
            room_slug,
            overtime_hours,
        )
        return items
    items.append(
        ctx.line_item(
            f"{overtime.description} ({overtime_hours} hours)",
            overtime.cost * overtime_hours,
            overtime.sub_description,
        )
    )
    return items


def _bartender(ctx: SurchargeContext, resource: ResourceConfig, room_slug: str) -> list[CostLineItem]:
    booking = ctx.booking
    if (
        booking.is_private
        and booking.expected_attendance > ctx.config.bartender_comp_attendance_threshold
    ):
        return [ctx.line_item(resource.description, 0.0, "Comped for large private event")]
    hours = ctx.total_hours
    return [
        ctx.line_item(
            f"{resource.description} ({hours} hours)",
            resource.cost * hours,
            resource.sub_description,
        )
    ]


PER_SLOT_HANDLERS: dict[str, SlotHandler] = {
    "food": _food_cleaning,
    "door_staff": _door_staff,
    "piano_tuning": _piano_tuning,
}

PER_ROOM_HANDLERS: dict[str, RoomHandler] = {
    "backline": _backline,
    "audio_tech": _audio_tech,
    "bartender": _bartender,
}

# Resolved by dedicated rules rather than catalog lookup.
_BOOKING_LEVEL_RESOURCES = frozenset({SECURITY_RESOURCE_ID})


class SurchargeResolver:
    """Turns requested resources into priced line items for one booking."""

    def __init__(self, config: PricingConfig, new_id: IdGenerator) -> None:
        self._config = config
        self._new_id = new_id

    def _lookup(self, catalog: RuleCatalog, resource_id: str) -> Optional[ResourceConfig]:
        try:
            return catalog.resource(resource_id)
        except ResourceConfigMissingError as exc:
            logger.warning("Resource skipped | resource_id=%s | reason=%s", exc.resource_id, exc)
            return None

    @staticmethod
    def _bundled(
        resources: dict[str, ResourceConfig],
        room_slug: str,
    ) -> frozenset[str]:
        """Resource ids already included for a room by another requested resource."""
        included: set[str] = set()
        for resource in resources.values():
            override = resource.override_for(room_slug)
            if override is not None:
                included.update(override.includes)
        return frozenset(included)

    def _manual_room_costs(self, ctx: SurchargeContext, room_slug: str) -> list[CostLineItem]:
        room_key = normalize_room_key(room_slug)
        return [
            ctx.line_item(cost.description, cost.cost, cost.sub_description)
            for slug, costs in ctx.booking.room_costs.items()
            if normalize_room_key(slug) == room_key
            for cost in costs
            if "door staff" not in cost.description.lower()
        ]

    def resolve(
        self,
        booking: Booking,
        window: TimeWindow,
        catalog: RuleCatalog,
    ) -> SurchargeResult:
        ctx = SurchargeContext(
            booking=booking,
            window=window,
            catalog=catalog,
            config=self._config,
            new_id=self._new_id,
        )

        requested: dict[str, ResourceConfig] = {}
        for resource_id in dict.fromkeys(booking.resources):
            if resource_id in _BOOKING_LEVEL_RESOURCES:
                continue
            resource = self._lookup(catalog, resource_id)
            if resource is not None:
                requested[resource_id] = resource

        slot_items: list[CostLineItem] = []
        slot_items.extend(early_open_staff(ctx))
        slot_items.extend(security(ctx))
        for resource_id, resource in requested.items():
            handler = PER_SLOT_HANDLERS.get(resource_id)
            if handler is not None:
                slot_items.extend(handler(ctx, resource))

        room_items: dict[str, list[CostLineItem]] = {}
        for room_slug in booking.room_slugs:
            bundled = self._bundled(requested, room_slug)
            items = self._manual_room_costs(ctx, room_slug)
            for resource_id, resource in requested.items():
                if resource_id in PER_SLOT_HANDLERS:
                    continue
                if resource_id in bundled:
                    logger.debug(
                        "Resource suppressed by bundle | resource_id=%s | room=%s",
                        resource_id,
                        room_slug,
                    )
                    continue
                handler = PER_ROOM_HANDLERS.get(resource_id, _default_room_item)
                items.extend(handler(ctx, resource, room_slug))
            room_items[room_slug] = items

        custom_items = [item for item in slot_items if item.is_editable]
        for items in room_items.values():
            custom_items.extend(item for item in items if item.is_editable)

        return SurchargeResult(
            per_slot_costs=tuple(item for item in slot_items if not item.is_editable),
            per_room_costs={
                room_slug: tuple(item for item in items if not item.is_editable)
                for room_slug, items in room_items.items()
            },
            custom_line_items=tuple(custom_items),
        )
