"""Error kinds raised by the pricing core and its catalog collaborators."""

from __future__ import annotations

from typing import Optional


class PricingError(Exception):
    """Base exception for pricing failures scoped to a single booking."""

    def __init__(self, message: str, booking_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.booking_id = booking_id


class ValidationError(PricingError):
    """Raised when a booking is missing required fields or has an invalid window."""


class RuleNotFoundError(PricingError):
    """Raised when no day rule resolves for a room on the booking's weekday."""

    def __init__(
        self,
        room_slug: str,
        weekday: Optional[str] = None,
        booking_id: Optional[str] = None,
    ) -> None:
        if weekday is None:
            message = f"No pricing rules found for room: {room_slug}"
        else:
            message = f"No pricing rules found for room {room_slug} on {weekday}"
        super().__init__(message, booking_id=booking_id)
        self.room_slug = room_slug
        self.weekday = weekday


class ResourceConfigMissingError(Exception):
    """Raised by catalog lookup when a requested resource id is not configured."""

    def __init__(self, resource_id: str) -> None:
        super().__init__(f"Resource '{resource_id}' is not configured in the catalog")
        self.resource_id = resource_id


class CatalogError(Exception):
    """Base exception for catalog collaborator failures."""


class CatalogFormatError(CatalogError):
    """Raised when a stored catalog document cannot be parsed."""


class CatalogLoadError(CatalogError):
    """Raised when the catalog store fails after exhausting its retry budget."""
