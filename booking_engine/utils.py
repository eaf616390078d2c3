"""Shared time-range, calendar and reference helpers used across the booking engine.

Every helper keeps the tzinfo of the datetimes it is given: hour-of-day and
weekday are read in whatever zone the caller localized the value to.
"""

import re
from datetime import datetime, time, timedelta, timezone
from typing import Optional

DEFAULT_TIMEZONE = "Asia/Riyadh"
DEFAULT_SLOT_DURATION = 60

# Sunday=0 convention: Thursday and Friday
MENA_WEEKEND_DAYS = (4, 5)

BOOKING_REFERENCE_PREFIX = "KH"
BOOKING_REFERENCE_PATTERN = re.compile(r"^([A-Z]+)-(\d{4})-(\d{6})$")

_TIME_STRING_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def diff_in_minutes(start: datetime, end: datetime) -> int:
    """Whole elapsed minutes from start to end, floored.

    Aware values are compared in UTC, so a range that crosses a daylight
    saving change counts real minutes rather than wall-clock ones.

    Examples:
        >>> diff_in_minutes(datetime(2025, 3, 15, 10, 0), datetime(2025, 3, 15, 11, 30))
        90
    """
    if start.tzinfo is not None and end.tzinfo is not None:
        start = start.astimezone(timezone.utc)
        end = end.astimezone(timezone.utc)
    return (end - start) // timedelta(minutes=1)


def add_minutes(value: datetime, minutes: int) -> datetime:
    """Shift by elapsed minutes, keeping ``value``'s zone."""
    if value.tzinfo is None:
        return value + timedelta(minutes=minutes)
    shifted = value.astimezone(timezone.utc) + timedelta(minutes=minutes)
    return shifted.astimezone(value.tzinfo)


def parse_time_string(value: str) -> tuple[int, int]:
    """Parse an ``HH:mm`` string into (hours, minutes).

    Raises:
        ValueError: If the string is not in ``HH:mm`` form.
    """
    match = _TIME_STRING_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid time string {value!r}, expected HH:mm")
    return int(match.group(1)), int(match.group(2))


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time(0), tzinfo=value.tzinfo)


def set_time_from_string(value: datetime, time_string: str) -> datetime:
    """Return ``value``'s calendar date at the wall-clock time ``time_string``.

    ``"24:00"`` resolves to the following midnight.
    """
    hours, minutes = parse_time_string(time_string)
    return start_of_day(value) + timedelta(hours=hours, minutes=minutes)


def sunday_based_weekday(value: datetime) -> int:
    """Weekday index with Sunday=0 ... Saturday=6."""
    return (value.weekday() + 1) % 7


def is_mena_weekend(value: datetime) -> bool:
    """Check if a date falls on the MENA weekend (Thursday or Friday)."""
    return sunday_based_weekday(value) in MENA_WEEKEND_DAYS


def is_peak_hour(value: datetime, peak_start: int = 17, peak_end: int = 22) -> bool:
    """Check if the hour of ``value`` lies in ``[peak_start, peak_end)``."""
    return peak_start <= value.hour < peak_end


def do_time_ranges_overlap(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """Half-open overlap test; ranges that only touch do not overlap."""
    return a_start < b_end and a_end > b_start


def does_range_contain(
    container_start: datetime,
    container_end: datetime,
    contained_start: datetime,
    contained_end: datetime,
) -> bool:
    return container_start <= contained_start and container_end >= contained_end


def generate_daily_slots(
    day: datetime,
    open_time: str,
    close_time: str,
    slot_duration: int = DEFAULT_SLOT_DURATION,
) -> list[tuple[datetime, datetime]]:
    """Generate back-to-back slots for one day inside its operating window.

    A trailing slot that would run past closing time is dropped.
    """
    slots: list[tuple[datetime, datetime]] = []
    open_at = set_time_from_string(day, open_time)
    close_at = set_time_from_string(day, close_time)

    slot_start = open_at
    while slot_start < close_at:
        slot_end = add_minutes(slot_start, slot_duration)
        if slot_end <= close_at:
            slots.append((slot_start, slot_end))
        slot_start = slot_end
    return slots


def generate_slots_for_range(
    range_start: datetime,
    range_end: datetime,
    open_time: str,
    close_time: str,
    slot_duration: int = DEFAULT_SLOT_DURATION,
) -> list[tuple[datetime, datetime]]:
    """Generate daily slots for every calendar day from range_start to range_end inclusive."""
    slots: list[tuple[datetime, datetime]] = []
    current = start_of_day(range_start)
    last = start_of_day(range_end)
    while current <= last:
        slots.extend(generate_daily_slots(current, open_time, close_time, slot_duration))
        current += timedelta(days=1)
    return slots


def generate_booking_reference(sequence_number: int, year: int) -> str:
    """Format a human-readable booking reference.

    Examples:
        >>> generate_booking_reference(1234, 2025)
        'KH-2025-001234'
    """
    return f"{BOOKING_REFERENCE_PREFIX}-{year}-{sequence_number:06d}"


def parse_booking_reference(reference: str) -> Optional[dict]:
    """Split a booking reference into prefix, year and sequence number."""
    match = BOOKING_REFERENCE_PATTERN.match(reference)
    if not match:
        return None
    return {
        "prefix": match.group(1),
        "year": int(match.group(2)),
        "sequence_number": int(match.group(3)),
    }


def is_valid_booking_reference_format(reference: str) -> bool:
    parsed = parse_booking_reference(reference)
    return parsed is not None and parsed["prefix"] == BOOKING_REFERENCE_PREFIX


def generate_slot_id(facility_id: str, start_time: datetime) -> str:
    """Build a slot id of the form ``<facility_id>-<epoch milliseconds>``."""
    return f"{facility_id}-{int(start_time.timestamp() * 1000)}"


def parse_slot_id(slot_id: str) -> Optional[tuple[str, int]]:
    facility_id, sep, timestamp = slot_id.rpartition("-")
    if not sep or not facility_id:
        return None
    try:
        return facility_id, int(timestamp)
    except ValueError:
        return None
