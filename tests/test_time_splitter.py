from __future__ import annotations

from datetime import datetime

from venue_pricing.services.time_splitter import split


BOUNDARY = 17


def _at(hour: int, minute: int = 0, day: int = 5) -> datetime:
    return datetime(2026, 1, day, hour, minute)


def test_daytime_only_booking_has_no_evening_segment() -> None:
    result = split(_at(10), _at(15), BOUNDARY)

    assert result.crosses_boundary is False
    assert result.daytime is not None
    assert result.daytime.hours == 5
    assert result.evening is None
    assert result.total_hours == 5


def test_evening_only_booking_has_no_daytime_segment() -> None:
    result = split(_at(18), _at(22), BOUNDARY)

    assert result.crosses_boundary is False
    assert result.daytime is None
    assert result.evening is not None
    assert result.evening_start == _at(18)
    assert result.evening.hours == 4


def test_crossing_booking_splits_at_boundary() -> None:
    result = split(_at(15), _at(19), BOUNDARY)

    assert result.crosses_boundary is True
    assert result.daytime_start == _at(15)
    assert result.daytime_end == _at(17)
    assert result.evening_start == _at(17)
    assert result.evening_end == _at(19)
    assert result.daytime.hours + result.evening.hours == result.total_hours


def test_booking_ending_exactly_at_boundary_does_not_cross() -> None:
    result = split(_at(13), _at(17), BOUNDARY)

    assert result.crosses_boundary is False
    assert result.daytime is not None
    assert result.daytime.hours == 4
    assert result.evening is None


def test_booking_starting_exactly_at_boundary_is_evening_only() -> None:
    result = split(_at(17), _at(20), BOUNDARY)

    assert result.crosses_boundary is False
    assert result.daytime is None
    assert result.evening.hours == 3


def test_partial_hours_are_truncated() -> None:
    result = split(_at(10, 30), _at(12, 15), BOUNDARY)

    assert result.total_hours == 1
    assert result.daytime.hours == 1


def test_overnight_booking_keeps_boundary_on_start_date() -> None:
    result = split(_at(16), _at(1, day=6), BOUNDARY)

    assert result.crosses_boundary is True
    assert result.daytime.hours == 1
    assert result.evening_start == _at(17)
    assert result.evening.hours == 8
    assert result.total_hours == 9
