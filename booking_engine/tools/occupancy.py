"""
Mock booking and block store.

In production, bookings and owner blocks live in the database and are
loaded per request. This in-memory store provides the same read contract:
only time that is actually taken comes back, as OccupiedSlot values.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, TypedDict

from booking_engine.config import settings
from booking_engine.engine.booking_lifecycle import (
    BookingLifecycle,
    BookingTrigger,
    compute_hold_until,
    occupies_time,
)
from booking_engine.engine.conflict_detector import detect_conflicts
from booking_engine.engine.price_calculator import calculate_price
from booking_engine.schemas.booking_schema import BookingStatus, ConflictDetectionResult
from booking_engine.schemas.pricing_schema import PriceBreakdown
from booking_engine.schemas.slot_schema import OccupiedSlot, SlotStatus
from booking_engine.tools.facilities import get_facility
from booking_engine.utils import do_time_ranges_overlap, generate_booking_reference

logger = logging.getLogger(__name__)


class BookingRecord(TypedDict):
    """Stored booking row."""

    booking_id: str
    booking_reference: str
    facility_id: str
    customer_name: str
    start_time: datetime
    end_time: datetime
    status: BookingStatus
    hold_until: Optional[datetime]
    cancellation_reason: Optional[str]
    price_breakdown: PriceBreakdown


class BlockRecord(TypedDict):
    """Owner block or maintenance window."""

    block_id: str
    facility_id: str
    start_time: datetime
    end_time: datetime
    status: SlotStatus
    notes: Optional[str]


class BookingConflictError(Exception):
    """Raised when a new booking overlaps time that is already taken."""

    def __init__(self, conflict: ConflictDetectionResult) -> None:
        super().__init__(conflict.message)
        self.conflict = conflict


_bookings: dict[str, BookingRecord] = {}
_blocks: dict[str, BlockRecord] = {}


def add_booking(
    facility_id: str,
    start_time: datetime,
    end_time: datetime,
    customer_name: str,
    status: BookingStatus = BookingStatus.CONFIRMED,
    now: Optional[datetime] = None,
    hold_minutes: Optional[int] = None,
    promo_code: Optional[str] = None,
) -> BookingRecord:
    """
    Store a booking priced from the facility's pricing at creation time.

    PENDING bookings get a hold window from ``now``.

    Raises:
        ValueError: If the facility is unknown or the status is not PENDING/CONFIRMED.
        BookingConflictError: If the range overlaps a live booking or a block.
    """
    if status not in (BookingStatus.PENDING, BookingStatus.CONFIRMED):
        raise ValueError(f"New bookings must be PENDING or CONFIRMED, got {status.value}")

    facility = get_facility(facility_id)
    if facility is None:
        raise ValueError(f"Unknown facility: {facility_id}")

    now = now or datetime.now(timezone.utc)
    conflict = detect_conflicts(
        facility_id,
        start_time,
        end_time,
        get_occupied_slots(facility_id, start_time, end_time, now),
    )
    if conflict.has_conflict:
        logger.info(
            "Booking rejected for %s on %s: %s",
            facility_id, start_time.isoformat(), conflict.conflict_type.value,
        )
        raise BookingConflictError(conflict)

    price_breakdown = calculate_price(
        start_time,
        end_time,
        facility.pricing,
        promo_code,
        promo_discount_rate=settings.engine.promo_discount_rate,
        default_currency=settings.engine.default_currency,
    )

    hold_until = None
    if status == BookingStatus.PENDING:
        hold_until = compute_hold_until(now, hold_minutes or settings.engine.pending_hold_minutes)

    booking: BookingRecord = {
        "booking_id": str(uuid.uuid4()),
        "booking_reference": generate_booking_reference(len(_bookings) + 1, now.year),
        "facility_id": facility_id,
        "customer_name": customer_name,
        "start_time": start_time,
        "end_time": end_time,
        "status": status,
        "hold_until": hold_until,
        "cancellation_reason": None,
        "price_breakdown": price_breakdown,
    }
    _bookings[booking["booking_id"]] = booking
    logger.info(
        "Booking stored: %s for %s on %s (%s)",
        booking["booking_reference"], facility_id, start_time.isoformat(), status.value,
    )
    return booking


def update_booking_status(
    booking_id: str,
    trigger: BookingTrigger,
    now: Optional[datetime] = None,
    reason: Optional[str] = None,
) -> BookingRecord:
    """Apply a lifecycle trigger to a stored booking.

    Raises:
        KeyError: If the booking does not exist.
        InvalidStatusTransitionError: If the trigger is not allowed.
    """
    booking = _bookings[booking_id]
    lifecycle = BookingLifecycle(booking["status"], now)
    new_status = lifecycle.transition(trigger, now, reason)
    booking["status"] = new_status
    if new_status != BookingStatus.PENDING:
        booking["hold_until"] = None
    if lifecycle.cancellation_reason:
        booking["cancellation_reason"] = lifecycle.cancellation_reason
    return booking


def block_time(
    facility_id: str,
    start_time: datetime,
    end_time: datetime,
    status: SlotStatus = SlotStatus.BLOCKED,
    notes: Optional[str] = None,
) -> BlockRecord:
    """Take time out of availability without a booking."""
    if status == SlotStatus.BOOKED:
        raise ValueError("Use add_booking for BOOKED time")
    block: BlockRecord = {
        "block_id": str(uuid.uuid4()),
        "facility_id": facility_id,
        "start_time": start_time,
        "end_time": end_time,
        "status": status,
        "notes": notes,
    }
    _blocks[block["block_id"]] = block
    return block


def get_booking(booking_id: str) -> Optional[BookingRecord]:
    return _bookings.get(booking_id)


def get_occupied_slots(
    facility_id: str,
    window_start: datetime,
    window_end: datetime,
    now: Optional[datetime] = None,
) -> list[OccupiedSlot]:
    """
    Occupied time for one facility overlapping ``[window_start, window_end)``.

    Bookings count only while they hold their time (confirmed, or pending
    with an unexpired hold). Results are ordered by start time.
    """
    now = now or datetime.now(timezone.utc)
    slots: list[OccupiedSlot] = []

    for booking in _bookings.values():
        if booking["facility_id"] != facility_id:
            continue
        if not occupies_time(booking["status"], booking["hold_until"], now):
            continue
        if not do_time_ranges_overlap(
            booking["start_time"], booking["end_time"], window_start, window_end
        ):
            continue
        slots.append(OccupiedSlot(
            id=booking["booking_id"],
            facility_id=facility_id,
            start_time=booking["start_time"],
            end_time=booking["end_time"],
            status=SlotStatus.BOOKED,
            booking_reference=booking["booking_reference"],
        ))

    for block in _blocks.values():
        if block["facility_id"] != facility_id:
            continue
        if not do_time_ranges_overlap(
            block["start_time"], block["end_time"], window_start, window_end
        ):
            continue
        slots.append(OccupiedSlot(
            id=block["block_id"],
            facility_id=facility_id,
            start_time=block["start_time"],
            end_time=block["end_time"],
            status=block["status"],
            notes=block["notes"],
        ))

    return sorted(slots, key=lambda s: s.start_time)


def reset() -> None:
    """Clear all bookings and blocks. Used by test fixtures for isolation."""
    _bookings.clear()
    _blocks.clear()
