"""Shared test fixtures and helpers."""

from datetime import datetime
from typing import Optional

import pytest

from booking_engine.schemas.booking_schema import BookingPreviewInput
from booking_engine.schemas.facility_schema import FacilityConfig
from booking_engine.schemas.pricing_schema import DurationDiscount, PeakHours, PricingConfig
from booking_engine.schemas.slot_schema import OccupiedSlot, SlotStatus
from booking_engine.tools import occupancy

# Saturday 2025-03-15; the day after is a Sunday (not a MENA weekend day)
NOW = datetime(2025, 3, 15, 8, 0)
SUNDAY = 16
THURSDAY = 20
FRIDAY = 21

FACILITY_ID = "facility-1"


def at(hour: int, minute: int = 0, day: int = SUNDAY) -> datetime:
    """A naive datetime in March 2025."""
    if hour == 24:
        return datetime(2025, 3, day + 1, 0, minute)
    return datetime(2025, 3, day, hour, minute)


def make_occupied(
    start: datetime,
    end: datetime,
    status: SlotStatus = SlotStatus.BOOKED,
    facility_id: str = FACILITY_ID,
    slot_id: Optional[str] = None,
) -> OccupiedSlot:
    """Helper to create an OccupiedSlot."""
    return OccupiedSlot(
        id=slot_id or f"slot-{start:%d%H%M}-{end:%d%H%M}",
        facility_id=facility_id,
        start_time=start,
        end_time=end,
        status=status,
        booking_reference="KH-2025-000001" if status == SlotStatus.BOOKED else None,
    )


def make_input(
    start: datetime,
    end: datetime,
    promo_code: Optional[str] = None,
    facility_id: str = FACILITY_ID,
) -> BookingPreviewInput:
    return BookingPreviewInput(
        facility_id=facility_id, start_time=start, end_time=end, promo_code=promo_code
    )


@pytest.fixture
def pricing_config():
    """Pricing from the padel court: peak 17-22 x1.5, weekend x1.3."""
    return PricingConfig(
        base_price=100,
        currency="SAR",
        peak_hours=PeakHours(start=17, end=22, multiplier=1.5),
        weekend_multiplier=1.3,
    )


@pytest.fixture
def discounted_pricing(pricing_config):
    return pricing_config.model_copy(update={
        "duration_discounts": [
            DurationDiscount(min_duration=120, discount=0.10),
            DurationDiscount(min_duration=180, discount=0.15),
        ],
    })


@pytest.fixture
def facility_config(pricing_config):
    return FacilityConfig(
        id=FACILITY_ID,
        name="Padel Court 1",
        open_time="08:00",
        close_time="22:00",
        slot_duration_minutes=60,
        pricing=pricing_config,
    )


@pytest.fixture(autouse=True)
def reset_store():
    occupancy.reset()
    yield
    occupancy.reset()
