"""Room base-price resolution from a day rule and a time split."""

from __future__ import annotations

from typing import Callable, Optional

from venue_pricing.domain.models import (
    CostLineItem,
    DayRule,
    PeriodRule,
    RateType,
    RoomPrice,
    TimeSplit,
)


IdGenerator = Callable[[], str]


def _period_price(rate: float, rate_type: RateType, hours: float) -> float:
    if rate_type is RateType.FLAT:
        return float(rate)
    return float(rate * hours)


def _hourly_label(price: float, hours: int) -> str:
    return f"${price / hours:.2f}/hour"


def describe_rates(
    *,
    daytime_hours: int,
    daytime_price: float,
    evening_hours: int,
    evening_price: float,
    evening_rate_type: Optional[RateType],
    crossover_applied: bool,
) -> str:
    parts: list[str] = []
    if daytime_hours > 0:
        daytime_part = _hourly_label(daytime_price, daytime_hours)
        if crossover_applied:
            daytime_part += " (crossover rate)"
        parts.append(daytime_part)
    if evening_rate_type is RateType.FLAT:
        parts.append("Flat rate")
    elif evening_hours > 0:
        parts.append(_hourly_label(evening_price, evening_hours))
    return " + ".join(parts)


def _price_full_day(
    full_day: PeriodRule,
    total_hours: int,
    is_private: bool,
    new_id: IdGenerator,
) -> RoomPrice:
    rate = full_day.rate_for(is_private)
    if full_day.rate_type is RateType.FLAT:
        price = float(rate)
        description = "Full day (flat)"
    else:
        effective_hours = max(total_hours, full_day.minimum_hours or 0)
        price = float(rate * effective_hours)
        description = f"Full day (${rate:.2f}/hour)"

    return RoomPrice(
        base_price=price,
        total_booking_hours=total_hours,
        full_day_price=price,
        full_day_rate=float(rate),
        full_day_rate_type=full_day.rate_type,
        is_full_day=True,
        minimum_hours=full_day.minimum_hours,
        minimum_applied=(
            full_day.rate_type is RateType.HOURLY
            and full_day.minimum_hours is not None
            and total_hours < full_day.minimum_hours
        ),
        rate_description=description,
        rate_items=(
            CostLineItem(
                id=new_id(),
                description=f"Full day ({total_hours} hours)",
                sub_description=description,
                cost=price,
                is_required=True,
            ),
        ),
    )


def price_room(
    day_rule: DayRule,
    time_split: TimeSplit,
    is_private: bool,
    new_id: IdGenerator,
) -> RoomPrice:
    """Resolve a room's base price for one booking.

    A full-day rule always wins. Otherwise the daytime and evening segments
    are priced separately; a crossover rate replaces the daytime rate when
    the booking runs past the evening boundary, and in that case no
    minimum-hour floor is applied.
    """
    total_hours = time_split.total_hours
    if day_rule.full_day is not None:
        return _price_full_day(day_rule.full_day, total_hours, is_private, new_id)

    daytime_hours = 0
    daytime_price = 0.0
    daytime_rate = 0.0
    daytime_rate_type: Optional[RateType] = None
    crossover_applied = False
    segment_floor_applied = False

    daytime_rule = day_rule.daytime
    if time_split.daytime is not None and daytime_rule is not None:
        daytime_hours = time_split.daytime.hours
        daytime_rate = daytime_rule.rate_for(is_private)
        daytime_rate_type = daytime_rule.rate_type
        if time_split.crosses_boundary and daytime_rule.crossover_rate is not None:
            daytime_rate = daytime_rule.crossover_rate
            crossover_applied = True

        billable_hours: float = daytime_hours
        if (
            not crossover_applied
            and daytime_rate_type is RateType.HOURLY
            and daytime_rule.minimum_hours is not None
            and daytime_hours < daytime_rule.minimum_hours
        ):
            billable_hours = daytime_rule.minimum_hours
            segment_floor_applied = True
        daytime_price = _period_price(daytime_rate, daytime_rate_type, billable_hours)

    evening_hours = 0
    evening_price = 0.0
    evening_rate = 0.0
    evening_rate_type: Optional[RateType] = None

    evening_rule = day_rule.evening
    if time_split.evening is not None and evening_rule is not None:
        evening_hours = time_split.evening.hours
        evening_rate = evening_rule.rate_for(is_private)
        evening_rate_type = evening_rule.rate_type
        evening_price = _period_price(evening_rate, evening_rate_type, evening_hours)

    base_price = daytime_price + evening_price
    minimum_applied = segment_floor_applied

    minimum_hours = day_rule.minimum_hours
    if (
        minimum_hours is not None
        and 0 < total_hours < minimum_hours
        and not crossover_applied
        and not segment_floor_applied
    ):
        factor = minimum_hours / total_hours
        minimum_price = base_price * factor
        if minimum_price > base_price:
            # Display-only redistribution; booked hours are unchanged.
            daytime_price *= factor
            evening_price *= factor
            base_price = minimum_price
            minimum_applied = True

    daytime_note = ""
    evening_note = ""
    if segment_floor_applied and daytime_rule is not None:
        daytime_note = f" ({daytime_rule.minimum_hours:g} hour minimum)"
    elif minimum_applied and minimum_hours is not None:
        daytime_note = evening_note = f" ({minimum_hours:g} hour minimum)"

    rate_items: list[CostLineItem] = []
    if daytime_rule is not None and (daytime_hours > 0 or daytime_price > 0):
        daytime_label = (
            "Flat rate"
            if daytime_rate_type is RateType.FLAT
            else f"${daytime_rate:.2f}/hour"
        )
        if crossover_applied:
            daytime_label += " (crossover rate)"
        rate_items.append(
            CostLineItem(
                id=new_id(),
                description=f"Daytime ({daytime_hours} hours)",
                sub_description=daytime_label + daytime_note,
                cost=daytime_price,
                is_required=True,
            )
        )
    if evening_rule is not None and (evening_hours > 0 or evening_price > 0):
        evening_label = (
            "Flat rate"
            if evening_rate_type is RateType.FLAT
            else f"${evening_rate:.2f}/hour"
        )
        rate_items.append(
            CostLineItem(
                id=new_id(),
                description=f"Evening ({evening_hours} hours)",
                sub_description=evening_label + evening_note,
                cost=evening_price,
                is_required=True,
            )
        )

    return RoomPrice(
        base_price=base_price,
        total_booking_hours=total_hours,
        daytime_hours=daytime_hours,
        evening_hours=evening_hours,
        daytime_price=daytime_price,
        evening_price=evening_price,
        daytime_rate=float(daytime_rate),
        daytime_rate_type=daytime_rate_type,
        evening_rate=float(evening_rate),
        evening_rate_type=evening_rate_type,
        crossover_applied=crossover_applied,
        minimum_applied=minimum_applied,
        minimum_hours=minimum_hours,
        rate_description=describe_rates(
            daytime_hours=daytime_hours,
            daytime_price=daytime_price,
            evening_hours=evening_hours,
            evening_price=evening_price,
            evening_rate_type=evening_rate_type,
            crossover_applied=crossover_applied,
        ),
        rate_items=tuple(rate_items),
    )
