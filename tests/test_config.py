"""Tests for configuration loading and validation."""

from dataclasses import replace

import pytest

from booking_engine.config import (
    AppConfig,
    EngineConfig,
    _safe_float,
    _safe_int,
    _validate_config,
    load_config,
    settings,
)


def _config(**engine_overrides) -> AppConfig:
    return AppConfig(engine=replace(EngineConfig(), **engine_overrides))


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        _validate_config(AppConfig())  # should not raise

    def test_promo_rate_too_high(self):
        with pytest.raises(ValueError, match="PROMO_DISCOUNT_RATE"):
            _validate_config(_config(promo_discount_rate=1.5))

    def test_promo_rate_negative(self):
        with pytest.raises(ValueError, match="PROMO_DISCOUNT_RATE"):
            _validate_config(_config(promo_discount_rate=-0.1))

    def test_promo_rate_bounds_allowed(self):
        _validate_config(_config(promo_discount_rate=0.0))
        _validate_config(_config(promo_discount_rate=1.0))

    def test_max_alternatives_zero(self):
        with pytest.raises(ValueError, match="MAX_ALTERNATIVES"):
            _validate_config(_config(max_alternatives=0))

    def test_search_hours_zero(self):
        with pytest.raises(ValueError, match="ALTERNATIVE_SEARCH_HOURS"):
            _validate_config(_config(alternative_search_hours=0))

    def test_slot_duration_zero(self):
        with pytest.raises(ValueError, match="DEFAULT_SLOT_DURATION"):
            _validate_config(_config(default_slot_duration_minutes=0))

    def test_hold_minutes_zero(self):
        with pytest.raises(ValueError, match="PENDING_HOLD_MINUTES"):
            _validate_config(_config(pending_hold_minutes=0))

    def test_lookaround_negative(self):
        with pytest.raises(ValueError, match="OCCUPANCY_LOOKAROUND_DAYS"):
            _validate_config(_config(occupancy_lookaround_days=-1))

    def test_lowercase_currency(self):
        with pytest.raises(ValueError, match="DEFAULT_CURRENCY"):
            _validate_config(_config(default_currency="sar"))

    def test_unknown_timezone(self):
        with pytest.raises(ValueError, match="DEFAULT_TIMEZONE"):
            _validate_config(_config(default_timezone="Mars/Olympus_Mons"))


class TestEnvParsing:
    def test_safe_int_reads_env(self, monkeypatch):
        monkeypatch.setenv("TEST_INT_VALUE", "7")
        assert _safe_int("TEST_INT_VALUE", "1") == 7

    def test_safe_int_default(self, monkeypatch):
        monkeypatch.delenv("TEST_INT_VALUE", raising=False)
        assert _safe_int("TEST_INT_VALUE", "3") == 3

    def test_safe_int_rejects_garbage(self, monkeypatch):
        monkeypatch.setenv("TEST_INT_VALUE", "three")
        with pytest.raises(ValueError, match="TEST_INT_VALUE"):
            _safe_int("TEST_INT_VALUE", "3")

    def test_safe_float_rejects_garbage(self, monkeypatch):
        monkeypatch.setenv("TEST_FLOAT_VALUE", "ten percent")
        with pytest.raises(ValueError, match="TEST_FLOAT_VALUE"):
            _safe_float("TEST_FLOAT_VALUE", "0.1")


class TestLoadedSettings:
    def test_settings_is_app_config(self):
        assert isinstance(settings, AppConfig)

    def test_config_is_frozen(self):
        with pytest.raises(AttributeError):
            settings.engine.max_alternatives = 10  # type: ignore[misc]

    def test_load_config_matches_settings(self):
        assert load_config() == settings
