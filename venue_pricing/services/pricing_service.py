"""Booking pricing and batch aggregation with tax."""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Optional, Sequence
from uuid import uuid4

from venue_pricing.domain.constraints import PricingConfig, pricing_config_from_settings
from venue_pricing.domain.errors import PricingError, RuleNotFoundError
from venue_pricing.domain.models import (
    Booking,
    BookingCostEstimate,
    DayRule,
    PricedBatch,
    RoomPriceEstimate,
    RuleCatalog,
    TimeWindow,
)
from venue_pricing.repository.data_repository import DataRepository
from venue_pricing.services.booking_intake import (
    LocalTimeNormalizer,
    validate_booking,
    venue_time_normalizer,
)
from venue_pricing.services.catalog_service import CatalogService
from venue_pricing.services.room_price_service import IdGenerator, price_room
from venue_pricing.services.surcharge_service import SurchargeResolver
from venue_pricing.services.time_splitter import split
from venue_pricing.utils.config import Settings, get_settings
from venue_pricing.utils.logger import booking_logger, get_logger


logger = get_logger(__name__)

_CENT = Decimal("0.01")


def default_id_generator() -> str:
    return str(uuid4())


def round_currency(amount: float) -> float:
    return float(Decimal(str(amount)).quantize(_CENT, rounding=ROUND_HALF_UP))


def calculate_tax(grand_total: float, tax_rate: float) -> float:
    return round_currency(grand_total * tax_rate)


def calculate_total_with_tax(grand_total: float, tax: float) -> float:
    return round_currency(grand_total + tax)


class TaxCalculator:
    """Tax per grand total, memoized for the lifetime of one batch run."""

    def __init__(self, tax_rate: float) -> None:
        self._tax_rate = tax_rate
        self._cache: dict[float, float] = {}

    def tax_for(self, grand_total: float) -> float:
        tax = self._cache.get(grand_total)
        if tax is None:
            tax = calculate_tax(grand_total, self._tax_rate)
            self._cache[grand_total] = tax
        return tax


class BookingPricer:
    """Prices one booking against a catalog snapshot."""

    def __init__(
        self,
        config: PricingConfig,
        new_id: IdGenerator = default_id_generator,
        normalize: Optional[LocalTimeNormalizer] = None,
    ) -> None:
        self._config = config
        self._new_id = new_id
        self._normalize = normalize or venue_time_normalizer(get_settings().venue_timezone)
        self._surcharges = SurchargeResolver(config=config, new_id=new_id)

    def _resolve_day_rules(
        self,
        booking: Booking,
        window: TimeWindow,
        catalog: RuleCatalog,
    ) -> dict[str, DayRule]:
        weekday = window.weekday
        day_rules: dict[str, DayRule] = {}
        for room_slug in booking.room_slugs:
            rule_set = catalog.rules_for_room(room_slug)
            if rule_set is None:
                raise RuleNotFoundError(room_slug, booking_id=booking.booking_id)
            day_rule = rule_set.rule_for(weekday)
            if day_rule is None:
                raise RuleNotFoundError(room_slug, weekday, booking_id=booking.booking_id)
            day_rules[room_slug] = day_rule
        return day_rules

    def price(self, booking: Booking, catalog: RuleCatalog) -> BookingCostEstimate:
        window = validate_booking(booking, self._normalize)
        day_rules = self._resolve_day_rules(booking, window, catalog)

        time_split = split(window.start, window.end, self._config.evening_boundary_hour)
        surcharges = self._surcharges.resolve(booking, window, catalog)

        estimates: list[RoomPriceEstimate] = []
        for room_slug in booking.room_slugs:
            room_price = price_room(
                day_rules[room_slug],
                time_split,
                booking.is_private,
                self._new_id,
            )
            additional_costs = surcharges.costs_for_room(room_slug)
            estimates.append(
                RoomPriceEstimate(
                    room_slug=room_slug,
                    room_price=room_price,
                    additional_costs=additional_costs,
                    total_cost=math.fsum(
                        [room_price.base_price, *(item.cost for item in additional_costs)]
                    ),
                )
            )

        slot_total = math.fsum(
            [
                *(estimate.total_cost for estimate in estimates),
                *(item.cost for item in surcharges.per_slot_costs),
                *(item.cost for item in surcharges.custom_line_items),
            ]
        )
        return BookingCostEstimate(
            booking_id=booking.booking_id or self._new_id(),
            date=booking.booking_date,
            start=window.start.isoformat(),
            end=window.end.isoformat(),
            estimates=tuple(estimates),
            per_slot_costs=surcharges.per_slot_costs,
            custom_line_items=surcharges.custom_line_items,
            slot_total=slot_total,
            room_slugs=booking.room_slugs,
            is_private=booking.is_private,
            expected_attendance=booking.expected_attendance,
            resources=booking.resources,
        )


class BatchAggregator:
    """Prices every booking of every date; one failure never aborts the batch."""

    def __init__(
        self,
        pricer: BookingPricer,
        config: PricingConfig,
        new_id: IdGenerator = default_id_generator,
    ) -> None:
        self._pricer = pricer
        self._config = config
        self._new_id = new_id

    def _price_isolated(self, booking: Booking, catalog: RuleCatalog) -> BookingCostEstimate:
        log = booking_logger(logger, booking.booking_id)
        try:
            estimate = self._pricer.price(booking, catalog)
            log.debug("Booking priced | slot_total=%.2f", estimate.slot_total)
            return estimate
        except PricingError as exc:
            log.warning("Booking pricing failed | error=%s", exc)
            message = str(exc)
        except Exception as exc:  # pragma: no cover
            log.exception("Unexpected booking pricing failure")
            message = f"Unexpected pricing failure: {exc}"

        return BookingCostEstimate(
            booking_id=booking.booking_id or self._new_id(),
            date=booking.booking_date,
            start=str(booking.start or ""),
            end=str(booking.end or ""),
            slot_total=0.0,
            room_slugs=booking.room_slugs,
            is_private=booking.is_private,
            expected_attendance=booking.expected_attendance,
            resources=booking.resources,
            error=message,
        )

    def price_all(
        self,
        bookings_by_date: Mapping[str, Sequence[Booking]],
        catalog: RuleCatalog,
    ) -> PricedBatch:
        jobs = [
            replace(
                booking,
                booking_id=booking.booking_id or self._new_id(),
                booking_date=booking_date,
            )
            for booking_date, bookings in bookings_by_date.items()
            for booking in bookings
        ]

        if jobs:
            workers = min(self._config.max_workers, len(jobs))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                estimates = list(
                    executor.map(lambda booking: self._price_isolated(booking, catalog), jobs)
                )
        else:
            estimates = []

        grand_total = math.fsum(
            estimate.slot_total for estimate in estimates if not estimate.failed
        )
        tax = TaxCalculator(self._config.tax_rate).tax_for(grand_total)
        total_with_tax = calculate_total_with_tax(grand_total, tax)

        failed = sum(1 for estimate in estimates if estimate.failed)
        logger.info(
            "Batch priced | bookings=%s | failed=%s | grand_total=%.2f | tax=%.2f | total_with_tax=%.2f",
            len(estimates),
            failed,
            grand_total,
            tax,
            total_with_tax,
        )
        return PricedBatch(
            cost_estimates=tuple(estimates),
            grand_total=grand_total,
            tax=tax,
            total_with_tax=total_with_tax,
        )


class PricingService:
    """Orchestrates catalog loading, batch pricing and estimate persistence."""

    def __init__(
        self,
        repository: Optional[DataRepository] = None,
        settings: Optional[Settings] = None,
        catalog_service: Optional[CatalogService] = None,
        id_generator: IdGenerator = default_id_generator,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)
        self._catalog_service = catalog_service or CatalogService(
            repository=self._repository,
            settings=self._settings,
        )
        self._config = pricing_config_from_settings(self._settings)
        self._pricer = BookingPricer(
            config=self._config,
            new_id=id_generator,
            normalize=venue_time_normalizer(self._settings.venue_timezone),
        )
        self._aggregator = BatchAggregator(
            pricer=self._pricer,
            config=self._config,
            new_id=id_generator,
        )

    @property
    def config(self) -> PricingConfig:
        return self._config

    def price_booking(self, booking: Booking, catalog: RuleCatalog) -> BookingCostEstimate:
        return self._pricer.price(booking, catalog)

    def price_all(
        self,
        bookings_by_date: Mapping[str, Sequence[Booking]],
        catalog: Optional[RuleCatalog] = None,
    ) -> PricedBatch:
        """Price a whole request; catalog load failures propagate to the caller."""
        snapshot = catalog if catalog is not None else self._catalog_service.get_catalog()
        return self._aggregator.price_all(bookings_by_date, snapshot)

    def price_and_persist(
        self,
        rental_request_id: str,
        bookings_by_date: Mapping[str, Sequence[Booking]],
    ) -> tuple[str, PricedBatch]:
        batch = self.price_all(bookings_by_date)
        estimate_id = self._repository.save_cost_estimate(
            rental_request_id=rental_request_id,
            document=batch.to_api_dict(),
            grand_total=batch.grand_total,
            tax=batch.tax,
            total_with_tax=batch.total_with_tax,
        )
        logger.info(
            "Cost estimate persisted | estimate_id=%s | rental_request_id=%s",
            estimate_id,
            rental_request_id,
        )
        return estimate_id, batch
