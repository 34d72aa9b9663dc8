"""Split a booking window across the day/evening boundary."""

from __future__ import annotations

from datetime import datetime

from venue_pricing.domain.models import Segment, TimeSplit, whole_hours


def boundary_for(start: datetime, boundary_hour: int) -> datetime:
    return start.replace(hour=boundary_hour, minute=0, second=0, microsecond=0)


def split(start: datetime, end: datetime, boundary_hour: int) -> TimeSplit:
    """Return daytime/evening segments for `[start, end)`.

    The boundary is `boundary_hour` on the start date. Only a segment with
    positive duration is returned; the other side is None.
    """
    boundary = boundary_for(start, boundary_hour)
    crosses_boundary = start < boundary < end

    daytime = None
    evening = None
    if start < boundary:
        daytime_end = boundary if crosses_boundary else end
        if daytime_end > start:
            daytime = Segment(start=start, end=daytime_end)
    if end > boundary:
        evening_start = boundary if crosses_boundary else max(start, boundary)
        if end > evening_start:
            evening = Segment(start=evening_start, end=end)

    return TimeSplit(
        daytime=daytime,
        evening=evening,
        crosses_boundary=crosses_boundary,
        total_hours=whole_hours(start, end),
    )
