"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from venue_pricing.repository.data_repository import DataRepository
from venue_pricing.services.pricing_service import PricingService


def get_repository(request: Request) -> DataRepository:
    repository = getattr(request.app.state, "repository", None)
    if repository is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Estimate store is not initialized",
        )
    return repository


def get_pricing_service(request: Request) -> PricingService:
    service = getattr(request.app.state, "pricing_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Pricing service is not initialized",
        )
    return service
