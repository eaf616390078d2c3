"""Time slot and occupied slot data models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from booking_engine.schemas.base_schema import EngineModel


class SlotStatus(str, Enum):
    """Why a stored slot is unavailable.

    There is deliberately no AVAILABLE member: only obstructions are stored,
    availability is computed as the complement within operating hours.
    """
    BOOKED = "BOOKED"
    BLOCKED = "BLOCKED"
    MAINTENANCE = "MAINTENANCE"


class TimeSlot(EngineModel):
    """A plain start/end range."""
    start_time: datetime
    end_time: datetime


class PricedTimeSlot(TimeSlot):
    """A time range with its computed price."""
    price: float
    currency: str


class AvailableSlot(PricedTimeSlot):
    """A bookable slot as listed in an availability map."""
    slot_id: str
    is_peak_time: bool
    is_weekend: bool


class OccupiedSlot(EngineModel):
    """A reservation or block that already exists for a facility."""
    id: str
    facility_id: str
    start_time: datetime
    end_time: datetime
    status: SlotStatus
    booking_reference: Optional[str] = None
    notes: Optional[str] = None


class OccupiedSlotSummary(EngineModel):
    """Display view of an occupied slot (no ids)."""
    start_time: datetime
    end_time: datetime
    status: SlotStatus
    notes: Optional[str] = None
