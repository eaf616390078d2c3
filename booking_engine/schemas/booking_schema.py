"""Booking preview request, conflict and result models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from booking_engine.schemas.base_schema import EngineModel
from booking_engine.schemas.pricing_schema import PriceBreakdown
from booking_engine.schemas.slot_schema import OccupiedSlot, PricedTimeSlot, SlotStatus


class BookingStatus(str, Enum):
    """Lifecycle status of a stored booking."""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    NO_SHOW = "NO_SHOW"


class ConflictType(str, Enum):
    """Geometric relationship between a requested range and an occupied one."""
    EXACT_OVERLAP = "EXACT_OVERLAP"
    CONTAINED_WITHIN = "CONTAINED_WITHIN"
    CONTAINS_EXISTING = "CONTAINS_EXISTING"
    PARTIAL_START_OVERLAP = "PARTIAL_START_OVERLAP"
    PARTIAL_END_OVERLAP = "PARTIAL_END_OVERLAP"


class BookingPreviewInput(EngineModel):
    """The reservation request being evaluated."""
    facility_id: str
    start_time: datetime
    end_time: datetime
    promo_code: Optional[str] = None


class ConflictDetectionResult(EngineModel):
    """Outcome of checking a range against a facility's occupied slots."""
    has_conflict: bool
    conflict_type: Optional[ConflictType] = None
    message: str
    conflicting_slots: list[OccupiedSlot] = Field(default_factory=list)


class ConflictingSlotSummary(EngineModel):
    """Conflicting slot as reported back to the caller."""
    start_time: datetime
    end_time: datetime
    status: SlotStatus
    booking_reference: Optional[str] = None


class PreviewConflict(EngineModel):
    has_conflict: bool
    conflict_type: Optional[ConflictType] = None
    message: str
    conflicting_slots: list[ConflictingSlotSummary] = Field(default_factory=list)


class BookingPreviewResult(EngineModel):
    """Single decision for a preview.

    ``can_book`` is true only when validation passed and no conflict exists.
    The price is filled in even when there is a conflict.
    """
    can_book: bool
    price_breakdown: PriceBreakdown
    conflict: Optional[PreviewConflict] = None
    suggested_alternatives: Optional[list[PricedTimeSlot]] = None
    validation_errors: Optional[list[str]] = None
