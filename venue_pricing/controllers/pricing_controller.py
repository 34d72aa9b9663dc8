"""HTTP controller layer for cost estimation."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from venue_pricing.controllers.dependencies import get_pricing_service, get_repository
from venue_pricing.domain.errors import CatalogError
from venue_pricing.domain.models import Booking, ManualCost
from venue_pricing.repository.data_repository import DataRepository
from venue_pricing.services.pricing_service import PricingService
from venue_pricing.utils.config import get_settings
from venue_pricing.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["pricing"])


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ManualCostRequest(CamelModel):
    description: str = Field(min_length=1)
    cost: float
    sub_description: str | None = None


class RoomCostsRequest(CamelModel):
    room_slug: str = Field(min_length=1)
    additional_costs: list[ManualCostRequest] = Field(default_factory=list)


class BookingRequest(CamelModel):
    """Input DTO; times stay strings so one bad booking only fails itself."""

    id: str | None = None
    room_slugs: list[str] = Field(default_factory=list)
    start: str = ""
    end: str = ""
    is_private: bool = False
    expected_attendance: int = 0
    resources: list[str] = Field(default_factory=list)
    rooms: list[RoomCostsRequest] = Field(default_factory=list)

    def to_domain(self, booking_date: str) -> Booking:
        return Booking(
            booking_id=self.id,
            room_slugs=tuple(self.room_slugs),
            start=self.start,
            end=self.end,
            booking_date=booking_date,
            is_private=self.is_private,
            expected_attendance=self.expected_attendance,
            resources=tuple(self.resources),
            room_costs={
                room.room_slug: tuple(
                    ManualCost(
                        description=cost.description,
                        cost=cost.cost,
                        sub_description=cost.sub_description,
                    )
                    for cost in room.additional_costs
                )
                for room in self.rooms
            },
        )


class PriceRequest(CamelModel):
    rental_dates: dict[str, list[BookingRequest]] = Field(default_factory=dict)

    def to_domain(self) -> dict[str, list[Booking]]:
        return {
            booking_date: [booking.to_domain(booking_date) for booking in bookings]
            for booking_date, bookings in self.rental_dates.items()
        }


class EstimateRequest(PriceRequest):
    rental_request_id: str = Field(min_length=1)

    @field_validator("rental_request_id")
    @classmethod
    def validate_rental_request_id(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("rentalRequestId must be non-empty")
        return value.strip()


class HealthResponse(BaseModel):
    status: str
    app_name: str
    app_version: str


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health() -> HealthResponse:
    settings = get_settings()
    return HealthResponse(
        status="ok",
        app_name=settings.app_name,
        app_version=settings.app_version,
    )


@router.post("/price", status_code=status.HTTP_200_OK)
def price(
    payload: PriceRequest,
    service: PricingService = Depends(get_pricing_service),
) -> dict[str, Any]:
    """Price every booking of every rental date and return the aggregate."""
    try:
        batch = service.price_all(payload.to_domain())
        return batch.to_api_dict()
    except CatalogError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected pricing failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to price bookings",
        ) from exc


@router.post("/estimates", status_code=status.HTTP_201_CREATED)
def create_estimate(
    payload: EstimateRequest,
    service: PricingService = Depends(get_pricing_service),
) -> dict[str, Any]:
    """Price a rental request and persist the resulting cost estimate."""
    try:
        estimate_id, batch = service.price_and_persist(
            payload.rental_request_id,
            payload.to_domain(),
        )
        return {
            "estimateId": estimate_id,
            "rentalRequestId": payload.rental_request_id,
            **batch.to_api_dict(),
        }
    except CatalogError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected estimate persistence failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create cost estimate",
        ) from exc


@router.get("/estimates/{estimate_id}", status_code=status.HTTP_200_OK)
def get_estimate(
    estimate_id: str,
    repository: DataRepository = Depends(get_repository),
) -> dict[str, Any]:
    document = repository.get_cost_estimate(estimate_id)
    if document is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Cost estimate {estimate_id} not found",
        )
    return document
