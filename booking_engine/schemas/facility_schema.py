"""Facility configuration and availability map models."""

from typing import Optional

from pydantic import Field, field_validator

from booking_engine.schemas.base_schema import EngineModel
from booking_engine.schemas.pricing_schema import PricingConfig
from booking_engine.schemas.slot_schema import AvailableSlot, OccupiedSlotSummary, TimeSlot
from booking_engine.utils import DEFAULT_SLOT_DURATION, parse_time_string


class FacilityConfig(EngineModel):
    """Operating window, slot granularity and pricing for one bookable resource."""
    id: str
    name: str
    open_time: str
    close_time: str
    slot_duration_minutes: int = Field(default=DEFAULT_SLOT_DURATION, gt=0)
    pricing: PricingConfig
    timezone: Optional[str] = None

    @field_validator("open_time", "close_time")
    @classmethod
    def _check_time_string(cls, value: str) -> str:
        hours, minutes = parse_time_string(value)
        if not (0 <= hours <= 24 and 0 <= minutes < 60) or (hours == 24 and minutes):
            raise ValueError(f"Time out of range: {value!r}")
        return value


class AvailabilityMap(EngineModel):
    """Bookable and occupied slots of a facility over a date range."""
    facility_id: str
    facility_name: str
    date_range: TimeSlot
    total_slots: int
    available_slots: list[AvailableSlot] = Field(default_factory=list)
    occupied_slots: list[OccupiedSlotSummary] = Field(default_factory=list)
    occupancy_rate: float
