"""Pricing configuration and price breakdown models."""

from typing import Optional

from pydantic import Field

from booking_engine.schemas.base_schema import EngineModel


class PeakHours(EngineModel):
    """Hour-of-day window ``[start, end)`` billed at ``multiplier``."""
    start: int = Field(ge=0, le=23)
    end: int = Field(ge=0, le=24)
    multiplier: float = Field(gt=0)


class DurationDiscount(EngineModel):
    """Fractional discount for bookings of at least ``min_duration`` minutes."""
    min_duration: int = Field(ge=0)
    discount: float = Field(ge=0, le=1)


class PricingConfig(EngineModel):
    """Facility pricing policy. Omitted modifiers are neutral."""
    base_price: float = Field(ge=0)
    currency: str = ""
    peak_hours: Optional[PeakHours] = None
    weekend_multiplier: Optional[float] = Field(default=None, ge=0)
    duration_discounts: Optional[list[DurationDiscount]] = None


class PriceBreakdown(EngineModel):
    """Itemized price, stored alongside a booking as its audit record."""
    base_price: float
    time_multiplier: float
    day_multiplier: float
    duration_discount: float
    subtotal: float
    discount_amount: float
    promo_discount: Optional[float] = None
    promo_code: Optional[str] = None
    total: float
    currency: str
