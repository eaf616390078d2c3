"""
Conflict detection between a requested time range and existing occupied slots.

Two ranges conflict when they overlap on the half-open interval: a request
that ends exactly when an existing slot starts (or starts when it ends) is
adjacent, not conflicting.

Usage:
    result = detect_conflicts("court-1", start, end, occupied_slots)
    if result.has_conflict:
        print(result.conflict_type, result.message)
"""

import logging
from datetime import datetime
from typing import Optional

from booking_engine.schemas.booking_schema import ConflictDetectionResult, ConflictType
from booking_engine.schemas.slot_schema import OccupiedSlot
from booking_engine.utils import do_time_ranges_overlap

logger = logging.getLogger(__name__)

NO_CONFLICT_MESSAGE = "No conflicts detected. Time slot is available."


def determine_conflict_type(
    requested_start: datetime,
    requested_end: datetime,
    existing_start: datetime,
    existing_end: datetime,
) -> Optional[ConflictType]:
    """Classify how the requested range overlaps an existing one.

    Returns None when the ranges do not overlap. Otherwise the first match of:
    exact, contained within, contains existing, partial end, partial start.
    """
    if not do_time_ranges_overlap(requested_start, requested_end, existing_start, existing_end):
        return None

    if requested_start == existing_start and requested_end == existing_end:
        return ConflictType.EXACT_OVERLAP

    if requested_start >= existing_start and requested_end <= existing_end:
        return ConflictType.CONTAINED_WITHIN

    if existing_start >= requested_start and existing_end <= requested_end:
        return ConflictType.CONTAINS_EXISTING

    if requested_start < existing_start and requested_end > existing_start:
        return ConflictType.PARTIAL_END_OVERLAP

    # Starts inside the existing range and runs past its end; also the
    # catch-all for any remaining overlap shape.
    return ConflictType.PARTIAL_START_OVERLAP


def generate_conflict_message(
    conflict_type: ConflictType, conflicting_slots: list[OccupiedSlot]
) -> str:
    """Human-readable sentence describing a conflict."""
    slot_count = len(conflicting_slots)
    slot_word = "slot" if slot_count == 1 else "slots"

    if conflict_type == ConflictType.EXACT_OVERLAP:
        return "This exact time slot is already booked."
    if conflict_type == ConflictType.CONTAINED_WITHIN:
        return "The requested time falls within an existing booking."
    if conflict_type == ConflictType.CONTAINS_EXISTING:
        return f"The requested time contains {slot_count} existing {slot_word}."
    if conflict_type == ConflictType.PARTIAL_START_OVERLAP:
        return "The start of your booking overlaps with an existing booking."
    if conflict_type == ConflictType.PARTIAL_END_OVERLAP:
        return "The end of your booking overlaps with an existing booking."
    return f"Time conflict detected with {slot_count} existing {slot_word}."


def detect_conflicts(
    facility_id: str,
    requested_start: datetime,
    requested_end: datetime,
    occupied_slots: list[OccupiedSlot],
) -> ConflictDetectionResult:
    """
    Check a requested range against the occupied slots of one facility.

    Every conflicting slot is reported. The primary conflict type is
    EXACT_OVERLAP if any slot matches exactly, otherwise the type of the
    first conflicting slot in iteration order.
    """
    conflicting: list[OccupiedSlot] = []
    primary_type: Optional[ConflictType] = None

    for slot in occupied_slots:
        if slot.facility_id != facility_id:
            continue

        conflict_type = determine_conflict_type(
            requested_start, requested_end, slot.start_time, slot.end_time
        )
        if conflict_type is None:
            continue

        conflicting.append(slot)
        if primary_type is None or conflict_type == ConflictType.EXACT_OVERLAP:
            primary_type = conflict_type

    if not conflicting:
        return ConflictDetectionResult(
            has_conflict=False,
            message=NO_CONFLICT_MESSAGE,
            conflicting_slots=[],
        )

    logger.debug(
        "Facility %s: %d conflicting slot(s), primary type %s",
        facility_id, len(conflicting), primary_type.value,
    )
    return ConflictDetectionResult(
        has_conflict=True,
        conflict_type=primary_type,
        message=generate_conflict_message(primary_type, conflicting),
        conflicting_slots=conflicting,
    )
