"""Booking validation and normalization into venue-local wall-clock time."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from venue_pricing.domain.errors import ValidationError
from venue_pricing.domain.models import Booking, TimeWindow


LocalTimeNormalizer = Callable[[datetime], datetime]


def venue_time_normalizer(timezone_name: str) -> LocalTimeNormalizer:
    """Aware instants are converted to venue time; naive ones are already local."""
    zone = ZoneInfo(timezone_name)

    def normalize(instant: datetime) -> datetime:
        if instant.tzinfo is None:
            return instant
        return instant.astimezone(zone).replace(tzinfo=None)

    return normalize


def parse_instant(value: str | datetime | None, booking_id: Optional[str] = None) -> datetime:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Booking data is missing required fields", booking_id=booking_id)
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValidationError(
            f"Invalid start or end time in booking data: {value!r}",
            booking_id=booking_id,
        ) from exc


def validate_booking(booking: Booking, normalize: LocalTimeNormalizer) -> TimeWindow:
    """Check required fields and return the booking's local time window."""
    if not booking.room_slugs or not all(slug and slug.strip() for slug in booking.room_slugs):
        raise ValidationError(
            "Room slugs are undefined or empty in booking",
            booking_id=booking.booking_id,
        )

    start = normalize(parse_instant(booking.start, booking.booking_id))
    end = normalize(parse_instant(booking.end, booking.booking_id))
    if start >= end:
        raise ValidationError(
            "Booking start must be before its end",
            booking_id=booking.booking_id,
        )
    if booking.expected_attendance < 0:
        raise ValidationError(
            "expected_attendance must be >= 0",
            booking_id=booking.booking_id,
        )
    for room_slug, costs in booking.room_costs.items():
        if any(cost.cost < 0 for cost in costs):
            raise ValidationError(
                f"Additional costs for room {room_slug} must be >= 0",
                booking_id=booking.booking_id,
            )
    return TimeWindow(start=start, end=end)
