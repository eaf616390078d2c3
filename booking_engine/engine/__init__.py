from booking_engine.engine.availability import calculate_availability
from booking_engine.engine.booking_lifecycle import (
    BookingLifecycle,
    BookingTrigger,
    InvalidStatusTransitionError,
)
from booking_engine.engine.booking_preview import (
    PreviewPolicy,
    find_alternative_slots,
    preview_booking,
    validate_booking_input,
)
from booking_engine.engine.conflict_detector import (
    detect_conflicts,
    determine_conflict_type,
    generate_conflict_message,
)
from booking_engine.engine.price_calculator import (
    DEFAULT_CURRENCY,
    calculate_day_multiplier,
    calculate_duration_discount,
    calculate_price,
    calculate_pricing_units,
    calculate_time_multiplier,
)

__all__ = [
    "preview_booking", "validate_booking_input", "find_alternative_slots", "PreviewPolicy",
    "detect_conflicts", "determine_conflict_type", "generate_conflict_message",
    "calculate_price", "calculate_time_multiplier", "calculate_day_multiplier",
    "calculate_duration_discount", "calculate_pricing_units", "DEFAULT_CURRENCY",
    "calculate_availability",
    "BookingLifecycle", "BookingTrigger", "InvalidStatusTransitionError",
]
