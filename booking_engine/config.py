"""
Centralized configuration with environment variable overrides.

Currency, timezone, promo rate and alternative-search settings live here.
The engine functions never read this module; the boundary layer passes
these values in explicitly.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

CURRENCY_CODE_PATTERN = re.compile(r"^[A-Z]{3}$")


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class EngineConfig:
    """Pricing and scheduling defaults handed to the booking engine."""

    default_currency: str = os.getenv("DEFAULT_CURRENCY", "SAR")
    default_timezone: str = os.getenv("DEFAULT_TIMEZONE", "Asia/Riyadh")
    promo_discount_rate: float = _safe_float("PROMO_DISCOUNT_RATE", "0.10")
    max_alternatives: int = _safe_int("MAX_ALTERNATIVES", "3")
    alternative_search_hours: int = _safe_int("ALTERNATIVE_SEARCH_HOURS", "4")
    default_slot_duration_minutes: int = _safe_int("DEFAULT_SLOT_DURATION", "60")
    pending_hold_minutes: int = _safe_int("PENDING_HOLD_MINUTES", "15")
    occupancy_lookaround_days: int = _safe_int("OCCUPANCY_LOOKAROUND_DAYS", "1")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    engine: EngineConfig = field(default_factory=EngineConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    service_name: str = os.getenv("SERVICE_NAME", "booking-engine")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    engine = config.engine
    if not 0.0 <= engine.promo_discount_rate <= 1.0:
        raise ValueError(
            f"PROMO_DISCOUNT_RATE must be between 0.0 and 1.0, got {engine.promo_discount_rate}"
        )
    if engine.max_alternatives < 1:
        raise ValueError(
            f"MAX_ALTERNATIVES must be >= 1, got {engine.max_alternatives}"
        )
    if engine.alternative_search_hours <= 0:
        raise ValueError(
            f"ALTERNATIVE_SEARCH_HOURS must be > 0, got {engine.alternative_search_hours}"
        )
    if engine.default_slot_duration_minutes < 1:
        raise ValueError(
            f"DEFAULT_SLOT_DURATION must be >= 1, got {engine.default_slot_duration_minutes}"
        )
    if engine.pending_hold_minutes < 1:
        raise ValueError(
            f"PENDING_HOLD_MINUTES must be >= 1, got {engine.pending_hold_minutes}"
        )
    if engine.occupancy_lookaround_days < 0:
        raise ValueError(
            f"OCCUPANCY_LOOKAROUND_DAYS must be >= 0, got {engine.occupancy_lookaround_days}"
        )
    if not CURRENCY_CODE_PATTERN.match(engine.default_currency):
        raise ValueError(
            f"DEFAULT_CURRENCY must be a 3-letter uppercase code, got {engine.default_currency!r}"
        )
    try:
        ZoneInfo(engine.default_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(
            f"DEFAULT_TIMEZONE is not a known timezone: {engine.default_timezone!r}"
        ) from None


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info(
        "Configuration loaded for '%s' (currency=%s, timezone=%s)",
        config.service_name,
        config.engine.default_currency,
        config.engine.default_timezone,
    )
    return config


# Singleton instance
settings = load_config()
