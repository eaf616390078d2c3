"""
Mock facility catalog.

In production, facility configuration is loaded from the tenant's database
row; this in-memory catalog stands in for it in the demo and tests.
"""

import logging
from typing import Optional

from booking_engine.schemas.facility_schema import FacilityConfig
from booking_engine.schemas.pricing_schema import DurationDiscount, PeakHours, PricingConfig

logger = logging.getLogger(__name__)

FACILITY_CATALOG: dict[str, FacilityConfig] = {
    "padel-court-1": FacilityConfig(
        id="padel-court-1",
        name="Padel Court 1",
        open_time="08:00",
        close_time="22:00",
        slot_duration_minutes=60,
        pricing=PricingConfig(
            base_price=100,
            currency="SAR",
            peak_hours=PeakHours(start=17, end=22, multiplier=1.5),
            weekend_multiplier=1.3,
            duration_discounts=[
                DurationDiscount(min_duration=120, discount=0.10),
                DurationDiscount(min_duration=180, discount=0.15),
            ],
        ),
    ),
    "football-pitch-a": FacilityConfig(
        id="football-pitch-a",
        name="Football Pitch A",
        open_time="16:00",
        close_time="24:00",
        slot_duration_minutes=60,
        pricing=PricingConfig(
            base_price=250,
            currency="SAR",
            peak_hours=PeakHours(start=19, end=23, multiplier=1.2),
        ),
    ),
    "tennis-court-2": FacilityConfig(
        id="tennis-court-2",
        name="Tennis Court 2",
        open_time="06:00",
        close_time="23:00",
        slot_duration_minutes=30,
        pricing=PricingConfig(base_price=80),
        timezone="Asia/Dubai",
    ),
}


def get_facility(facility_id: str) -> Optional[FacilityConfig]:
    """Look up a facility by id; None when it does not exist."""
    facility = FACILITY_CATALOG.get(facility_id)
    if facility is None:
        logger.info("Facility not found: %s", facility_id)
    return facility


def list_facilities() -> list[FacilityConfig]:
    """All facilities, sorted by name."""
    return sorted(FACILITY_CATALOG.values(), key=lambda f: f.name)
