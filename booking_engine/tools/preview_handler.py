"""
Request handler around the booking engine.

Does what the HTTP layer does in production: load the facility (404 if it
does not exist, without calling the engine), load occupied time around the
request, turn ISO-8601 strings into facility-local datetimes, run the engine
and turn the result back into a JSON-ready camelCase dict.
"""

import json
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Optional
from zoneinfo import ZoneInfo

from pydantic import ConfigDict, Field, ValidationError

from booking_engine.config import settings
from booking_engine.engine.availability import calculate_availability
from booking_engine.engine.booking_preview import PreviewPolicy, preview_booking
from booking_engine.logging_context import get_request_logger, set_request_id
from booking_engine.schemas.base_schema import EngineModel
from booking_engine.schemas.booking_schema import BookingPreviewInput, BookingPreviewResult
from booking_engine.schemas.facility_schema import FacilityConfig
from booking_engine.schemas.slot_schema import OccupiedSlot
from booking_engine.tools.facilities import get_facility
from booking_engine.tools.occupancy import get_occupied_slots
from booking_engine.utils import start_of_day

logger = get_request_logger(__name__)

HTTP_OK = 200
HTTP_NOT_FOUND = 404
HTTP_UNPROCESSABLE_ENTITY = 422


class BookingPreviewRequest(EngineModel):
    """Wire format of a preview request (camelCase, ISO-8601 timestamps)."""
    model_config = ConfigDict(extra="forbid")

    facility_id: str = Field(min_length=1)
    start_time: datetime
    end_time: datetime
    promo_code: Optional[str] = None


@dataclass
class HandlerResponse:
    """Status code plus JSON-ready body."""

    status_code: int
    body: dict[str, Any] = field(default_factory=dict)


def facility_zone(facility: FacilityConfig) -> ZoneInfo:
    return ZoneInfo(facility.timezone or settings.engine.default_timezone)


def localize(value: datetime, zone: ZoneInfo) -> datetime:
    """Interpret naive wire values as facility-local; convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)


def build_preview_policy() -> PreviewPolicy:
    engine = settings.engine
    return PreviewPolicy(
        max_alternatives=engine.max_alternatives,
        search_window_hours=engine.alternative_search_hours,
        promo_discount_rate=engine.promo_discount_rate,
        default_currency=engine.default_currency,
    )


def serialize_preview_result(result: BookingPreviewResult) -> dict[str, Any]:
    """camelCase dict with ISO-8601 timestamps; absent optionals are omitted."""
    return result.model_dump(mode="json", by_alias=True, exclude_none=True)


def _load_occupied(
    facility: FacilityConfig,
    start: datetime,
    end: datetime,
    now: datetime,
    zone: ZoneInfo,
) -> list[OccupiedSlot]:
    lookaround = timedelta(days=settings.engine.occupancy_lookaround_days)
    window_start = start_of_day(start) - lookaround
    window_end = start_of_day(end) + timedelta(days=1) + lookaround
    return [
        slot.model_copy(update={
            "start_time": localize(slot.start_time, zone),
            "end_time": localize(slot.end_time, zone),
        })
        for slot in get_occupied_slots(facility.id, window_start, window_end, now)
    ]


def _new_request_id() -> str:
    request_id = f"REQ-{uuid.uuid4().hex[:8].upper()}"
    set_request_id(request_id)
    return request_id


def handle_preview_request(
    payload: dict[str, Any], now: Optional[datetime] = None
) -> HandlerResponse:
    """
    Evaluate a wire-format booking preview request.

    Returns:
        422 with pydantic's error list when the payload is malformed,
        404 when the facility does not exist, otherwise 200 with the
        serialized BookingPreviewResult. Business-rule rejections are part
        of the 200 body, not a different status.
    """
    request_id = _new_request_id()

    try:
        request = BookingPreviewRequest.model_validate(payload)
    except ValidationError as exc:
        logger.info("Rejected malformed preview request %s", request_id)
        return HandlerResponse(HTTP_UNPROCESSABLE_ENTITY, {
            "message": "Invalid booking preview request.",
            "errors": json.loads(exc.json(include_url=False)),
        })

    facility = get_facility(request.facility_id)
    if facility is None:
        return HandlerResponse(HTTP_NOT_FOUND, {"message": "Facility not found."})

    zone = facility_zone(facility)
    start = localize(request.start_time, zone)
    end = localize(request.end_time, zone)
    now = localize(now, zone) if now else datetime.now(zone)

    logger.debug(
        "Preview %s: facility=%s %s -> %s",
        request_id, facility.id, start.isoformat(), end.isoformat(),
    )

    result = preview_booking(
        BookingPreviewInput(
            facility_id=facility.id,
            start_time=start,
            end_time=end,
            promo_code=request.promo_code,
        ),
        facility,
        _load_occupied(facility, start, end, now, zone),
        now,
        build_preview_policy(),
    )
    return HandlerResponse(HTTP_OK, serialize_preview_result(result))


def handle_availability_request(
    facility_id: str, day: str, now: Optional[datetime] = None
) -> HandlerResponse:
    """Availability map for one facility-local calendar day (``YYYY-MM-DD``)."""
    _new_request_id()

    try:
        parsed_day = date.fromisoformat(day)
    except ValueError:
        return HandlerResponse(HTTP_UNPROCESSABLE_ENTITY, {
            "message": f"Invalid date {day!r}, expected YYYY-MM-DD.",
        })

    facility = get_facility(facility_id)
    if facility is None:
        return HandlerResponse(HTTP_NOT_FOUND, {"message": "Facility not found."})

    zone = facility_zone(facility)
    day_start = datetime(parsed_day.year, parsed_day.month, parsed_day.day, tzinfo=zone)
    now = localize(now, zone) if now else datetime.now(zone)

    availability = calculate_availability(
        facility,
        _load_occupied(facility, day_start, day_start, now, zone),
        day_start,
        day_start,
        now,
        default_currency=settings.engine.default_currency,
    )
    return HandlerResponse(
        HTTP_OK, availability.model_dump(mode="json", by_alias=True, exclude_none=True)
    )
