"""
Booking preview: validation, pricing, conflict detection and alternatives.

Single pass, no retries:
    VALIDATE -> (invalid) done with errors
             -> PRICE -> DETECT CONFLICT -> (conflict) FIND ALTERNATIVES -> done
                                         -> (free) done

Nothing here performs I/O or raises for business-rule violations; every
rejection is reported inside the returned BookingPreviewResult. The current
time is injectable so identical inputs always give identical results.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from booking_engine.engine.conflict_detector import detect_conflicts
from booking_engine.engine.price_calculator import (
    DEFAULT_CURRENCY,
    PROMO_DISCOUNT_RATE,
    calculate_price,
)
from booking_engine.logging_context import get_request_logger
from booking_engine.schemas.booking_schema import (
    BookingPreviewInput,
    BookingPreviewResult,
    ConflictingSlotSummary,
    PreviewConflict,
)
from booking_engine.schemas.facility_schema import FacilityConfig
from booking_engine.schemas.pricing_schema import PriceBreakdown
from booking_engine.schemas.slot_schema import OccupiedSlot, PricedTimeSlot
from booking_engine.utils import (
    add_minutes,
    diff_in_minutes,
    do_time_ranges_overlap,
    set_time_from_string,
)

logger = get_request_logger(__name__)

DEFAULT_MAX_ALTERNATIVES = 3
DEFAULT_SEARCH_WINDOW_HOURS = 4


@dataclass(frozen=True)
class PreviewPolicy:
    """Tunable values for a preview, supplied by the caller."""

    max_alternatives: int = DEFAULT_MAX_ALTERNATIVES
    search_window_hours: int = DEFAULT_SEARCH_WINDOW_HOURS
    promo_discount_rate: float = PROMO_DISCOUNT_RATE
    default_currency: str = DEFAULT_CURRENCY


def _resolve_now(now: Optional[datetime], reference: datetime) -> datetime:
    """Use the injected clock, or read the wall clock in ``reference``'s zone."""
    if now is not None:
        return now
    return datetime.now(reference.tzinfo)


def _within_operating_hours(
    start: datetime, end: datetime, facility_config: FacilityConfig
) -> bool:
    day_open = set_time_from_string(start, facility_config.open_time)
    day_close = set_time_from_string(start, facility_config.close_time)
    return start >= day_open and end <= day_close


def validate_booking_input(
    booking_input: BookingPreviewInput,
    facility_config: Optional[FacilityConfig],
    now: Optional[datetime] = None,
) -> list[str]:
    """
    Check a preview request against the facility's booking rules.

    All rules are evaluated so several errors can be reported at once;
    only a missing facility stops the checks early.

    Returns:
        Validation error messages, empty when the request is valid.
    """
    if facility_config is None:
        return ["Facility not found."]

    errors: list[str] = []
    start = booking_input.start_time
    end = booking_input.end_time
    now = _resolve_now(now, start)
    slot_minutes = facility_config.slot_duration_minutes

    if start >= end:
        errors.append("Start time must be before end time.")

    if start < now:
        errors.append("Cannot book in the past.")

    duration_minutes = diff_in_minutes(start, end)
    if duration_minutes < slot_minutes:
        errors.append(f"Minimum booking duration is {slot_minutes} minutes.")

    if duration_minutes % slot_minutes != 0:
        errors.append(f"Booking duration must be a multiple of {slot_minutes} minutes.")

    if not _within_operating_hours(start, end, facility_config):
        errors.append(
            "Booking must be within operating hours "
            f"({facility_config.open_time}-{facility_config.close_time})."
        )

    return errors


def find_alternative_slots(
    requested_start: datetime,
    requested_end: datetime,
    occupied_slots: list[OccupiedSlot],
    facility_config: FacilityConfig,
    max_alternatives: int = DEFAULT_MAX_ALTERNATIVES,
    now: Optional[datetime] = None,
    *,
    search_window_hours: int = DEFAULT_SEARCH_WINDOW_HOURS,
    default_currency: str = DEFAULT_CURRENCY,
) -> list[PricedTimeSlot]:
    """
    Suggest free ranges of the same length near the requested start.

    Candidates start at whole slot-duration offsets from the requested
    start, half the search window before it through half after it, and are
    scanned from the earliest offset forward. Results keep scan order.

    Returns:
        Up to ``max_alternatives`` priced slots (promo codes are not applied).
    """
    now = _resolve_now(now, requested_start)
    slot_minutes = facility_config.slot_duration_minutes
    duration_minutes = diff_in_minutes(requested_start, requested_end)
    facility_slots = [s for s in occupied_slots if s.facility_id == facility_config.id]

    slots_to_check = math.ceil(search_window_hours * 60 / slot_minutes)
    half_window = math.ceil(slots_to_check / 2)

    alternatives: list[PricedTimeSlot] = []
    for offset in range(-half_window, half_window + 1):
        if len(alternatives) >= max_alternatives:
            break

        candidate_start = add_minutes(requested_start, offset * slot_minutes)
        candidate_end = add_minutes(candidate_start, duration_minutes)

        if candidate_start < now:
            continue
        if not _within_operating_hours(candidate_start, candidate_end, facility_config):
            continue
        if any(
            do_time_ranges_overlap(candidate_start, candidate_end, s.start_time, s.end_time)
            for s in facility_slots
        ):
            continue

        price = calculate_price(
            candidate_start,
            candidate_end,
            facility_config.pricing,
            default_currency=default_currency,
        )
        alternatives.append(PricedTimeSlot(
            start_time=candidate_start,
            end_time=candidate_end,
            price=price.total,
            currency=price.currency,
        ))

    return alternatives


def _empty_breakdown(
    facility_config: Optional[FacilityConfig], default_currency: str
) -> PriceBreakdown:
    currency = default_currency
    if facility_config is not None and facility_config.pricing.currency:
        currency = facility_config.pricing.currency
    return PriceBreakdown(
        base_price=0.0,
        time_multiplier=1.0,
        day_multiplier=1.0,
        duration_discount=0.0,
        subtotal=0.0,
        discount_amount=0.0,
        total=0.0,
        currency=currency,
    )


def preview_booking(
    booking_input: BookingPreviewInput,
    facility_config: Optional[FacilityConfig],
    occupied_slots: list[OccupiedSlot],
    now: Optional[datetime] = None,
    policy: Optional[PreviewPolicy] = None,
) -> BookingPreviewResult:
    """
    Decide whether a booking can be made, what it costs, and what else is free.

    Args:
        booking_input: The requested facility, range and optional promo code.
        facility_config: The facility's configuration, or None if unknown.
        occupied_slots: Existing reservations and blocks; read only.
        now: Current time. Defaults to the wall clock, read once.
        policy: Alternative-search and pricing defaults.

    Returns:
        BookingPreviewResult. ``conflict`` and ``suggested_alternatives`` are
        set only when there is a conflict; ``validation_errors`` only when
        validation failed.
    """
    policy = policy or PreviewPolicy()
    now = _resolve_now(now, booking_input.start_time)

    validation_errors = validate_booking_input(booking_input, facility_config, now)
    if validation_errors:
        logger.info(
            "Preview rejected for facility %s: %d validation error(s)",
            booking_input.facility_id, len(validation_errors),
        )
        return BookingPreviewResult(
            can_book=False,
            price_breakdown=_empty_breakdown(facility_config, policy.default_currency),
            validation_errors=validation_errors,
        )

    price_breakdown = calculate_price(
        booking_input.start_time,
        booking_input.end_time,
        facility_config.pricing,
        booking_input.promo_code,
        promo_discount_rate=policy.promo_discount_rate,
        default_currency=policy.default_currency,
    )
    logger.debug(
        "Priced %s: subtotal %.2f, discounts %.2f",
        booking_input.facility_id, price_breakdown.subtotal, price_breakdown.discount_amount,
    )

    conflict_result = detect_conflicts(
        booking_input.facility_id,
        booking_input.start_time,
        booking_input.end_time,
        occupied_slots,
    )
    logger.debug("Conflict check: %s", conflict_result.message)

    if not conflict_result.has_conflict:
        logger.info(
            "Preview for facility %s: bookable, total %.2f %s",
            booking_input.facility_id, price_breakdown.total, price_breakdown.currency,
        )
        return BookingPreviewResult(can_book=True, price_breakdown=price_breakdown)

    alternatives = find_alternative_slots(
        booking_input.start_time,
        booking_input.end_time,
        occupied_slots,
        facility_config,
        policy.max_alternatives,
        now,
        search_window_hours=policy.search_window_hours,
        default_currency=policy.default_currency,
    )
    logger.info(
        "Preview for facility %s: %s, %d alternative(s) found",
        booking_input.facility_id, conflict_result.conflict_type.value, len(alternatives),
    )

    return BookingPreviewResult(
        can_book=False,
        price_breakdown=price_breakdown,
        conflict=PreviewConflict(
            has_conflict=True,
            conflict_type=conflict_result.conflict_type,
            message=conflict_result.message,
            conflicting_slots=[
                ConflictingSlotSummary(
                    start_time=slot.start_time,
                    end_time=slot.end_time,
                    status=slot.status,
                    booking_reference=slot.booking_reference,
                )
                for slot in conflict_result.conflicting_slots
            ],
        ),
        suggested_alternatives=alternatives,
    )
