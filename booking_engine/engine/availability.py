"""
Availability map for a facility over a date range.

Available slots are never stored: they are generated from the operating
hours and slot duration, then every generated slot that overlaps an
occupied slot (or starts in the past) is left out.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from booking_engine.engine.price_calculator import DEFAULT_CURRENCY, calculate_price
from booking_engine.schemas.facility_schema import AvailabilityMap, FacilityConfig
from booking_engine.schemas.slot_schema import (
    AvailableSlot,
    OccupiedSlot,
    OccupiedSlotSummary,
    TimeSlot,
)
from booking_engine.utils import (
    do_time_ranges_overlap,
    generate_slot_id,
    generate_slots_for_range,
    is_mena_weekend,
    is_peak_hour,
    start_of_day,
)

logger = logging.getLogger(__name__)


def calculate_availability(
    facility_config: FacilityConfig,
    occupied_slots: list[OccupiedSlot],
    range_start: datetime,
    range_end: datetime,
    now: Optional[datetime] = None,
    *,
    default_currency: str = DEFAULT_CURRENCY,
) -> AvailabilityMap:
    """
    List bookable slots for every day from range_start's date to range_end's date.

    ``occupancy_rate`` is the percentage of generated slots that overlap an
    occupied slot. Past slots that are free count towards ``total_slots``
    but are not offered.
    """
    if now is None:
        now = datetime.now(range_start.tzinfo)

    pricing = facility_config.pricing
    window_start = start_of_day(range_start)
    window_end = start_of_day(range_end) + timedelta(days=1)
    facility_slots = sorted(
        (s for s in occupied_slots if s.facility_id == facility_config.id),
        key=lambda s: s.start_time,
    )

    generated = generate_slots_for_range(
        range_start,
        range_end,
        facility_config.open_time,
        facility_config.close_time,
        facility_config.slot_duration_minutes,
    )

    available: list[AvailableSlot] = []
    occupied_count = 0
    for slot_start, slot_end in generated:
        if any(
            do_time_ranges_overlap(slot_start, slot_end, s.start_time, s.end_time)
            for s in facility_slots
        ):
            occupied_count += 1
            continue
        if slot_start < now:
            continue

        price = calculate_price(slot_start, slot_end, pricing, default_currency=default_currency)
        available.append(AvailableSlot(
            slot_id=generate_slot_id(facility_config.id, slot_start),
            start_time=slot_start,
            end_time=slot_end,
            price=price.total,
            currency=price.currency,
            is_peak_time=(
                pricing.peak_hours is not None
                and is_peak_hour(slot_start, pricing.peak_hours.start, pricing.peak_hours.end)
            ),
            is_weekend=is_mena_weekend(slot_start),
        ))

    total = len(generated)
    occupancy_rate = round(occupied_count / total * 100, 2) if total else 0.0

    logger.debug(
        "Availability for %s: %d/%d slot(s) free, occupancy %.2f%%",
        facility_config.id, len(available), total, occupancy_rate,
    )

    return AvailabilityMap(
        facility_id=facility_config.id,
        facility_name=facility_config.name,
        date_range=TimeSlot(start_time=window_start, end_time=window_end),
        total_slots=total,
        available_slots=available,
        occupied_slots=[
            OccupiedSlotSummary(
                start_time=s.start_time,
                end_time=s.end_time,
                status=s.status,
                notes=s.notes,
            )
            for s in facility_slots
            if do_time_ranges_overlap(s.start_time, s.end_time, window_start, window_end)
        ],
        occupancy_rate=occupancy_rate,
    )
