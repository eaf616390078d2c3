"""
Price calculation for a booking time range under a facility's pricing policy.

Billing is in whole-hour units. Peak and weekend multipliers are read from
the start time and multiply together; the duration discount and the promo
discount are both taken off the same multiplied subtotal and simply add up.
"""

import logging
import math
from datetime import datetime
from typing import Optional

from booking_engine.schemas.pricing_schema import PriceBreakdown, PricingConfig
from booking_engine.utils import diff_in_minutes, is_mena_weekend, is_peak_hour

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "SAR"

# Flat rate applied for any promo code; the code itself is not looked up.
PROMO_DISCOUNT_RATE = 0.10

MINUTES_PER_PRICING_UNIT = 60


def calculate_pricing_units(duration_minutes: int) -> int:
    """Number of billable hours, rounded up."""
    return math.ceil(duration_minutes / MINUTES_PER_PRICING_UNIT)


def calculate_time_multiplier(start_time: datetime, pricing_config: PricingConfig) -> float:
    peak = pricing_config.peak_hours
    if peak is None:
        return 1.0
    return peak.multiplier if is_peak_hour(start_time, peak.start, peak.end) else 1.0


def calculate_day_multiplier(start_time: datetime, pricing_config: PricingConfig) -> float:
    if not pricing_config.weekend_multiplier:
        return 1.0
    return pricing_config.weekend_multiplier if is_mena_weekend(start_time) else 1.0


def calculate_duration_discount(duration_minutes: int, pricing_config: PricingConfig) -> float:
    """Discount fraction of the largest threshold the duration qualifies for."""
    qualifying = [
        tier for tier in pricing_config.duration_discounts or []
        if duration_minutes >= tier.min_duration
    ]
    if not qualifying:
        return 0.0
    return max(qualifying, key=lambda tier: tier.min_duration).discount


def calculate_price(
    start_time: datetime,
    end_time: datetime,
    pricing_config: PricingConfig,
    promo_code: Optional[str] = None,
    *,
    promo_discount_rate: float = PROMO_DISCOUNT_RATE,
    default_currency: str = DEFAULT_CURRENCY,
) -> PriceBreakdown:
    """
    Build the itemized price for a booking.

    Args:
        start_time: Booking start; drives the peak and weekend multipliers.
        end_time: Booking end.
        pricing_config: The facility's pricing policy.
        promo_code: Optional promo code. Any non-empty code earns
            ``promo_discount_rate`` off the subtotal.
        promo_discount_rate: Fraction taken off for a promo code.
        default_currency: Used when the policy has no currency set.

    Returns:
        A PriceBreakdown whose fields fully explain the total.
    """
    duration_minutes = diff_in_minutes(start_time, end_time)
    units = calculate_pricing_units(duration_minutes)

    base_price = pricing_config.base_price
    currency = pricing_config.currency or default_currency

    time_multiplier = calculate_time_multiplier(start_time, pricing_config)
    day_multiplier = calculate_day_multiplier(start_time, pricing_config)
    duration_discount = calculate_duration_discount(duration_minutes, pricing_config)

    subtotal = base_price * units * time_multiplier * day_multiplier
    duration_discount_amount = subtotal * duration_discount
    promo_discount = subtotal * promo_discount_rate if promo_code else 0.0

    discount_amount = duration_discount_amount + promo_discount
    total = max(0.0, subtotal - discount_amount)

    logger.debug(
        "Priced %d min (%d unit(s)): subtotal=%.2f discount=%.2f total=%.2f %s",
        duration_minutes, units, subtotal, discount_amount, total, currency,
    )

    return PriceBreakdown(
        base_price=base_price,
        time_multiplier=time_multiplier,
        day_multiplier=day_multiplier,
        duration_discount=duration_discount,
        subtotal=subtotal,
        discount_amount=discount_amount,
        promo_discount=promo_discount if promo_code else None,
        promo_code=promo_code or None,
        total=total,
        currency=currency,
    )
