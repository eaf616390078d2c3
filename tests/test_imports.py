"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""

import pytest


class TestSchemaImports:
    def test_import_slot_schema(self):
        from booking_engine.schemas.slot_schema import (
            AvailableSlot, OccupiedSlot, PricedTimeSlot, SlotStatus, TimeSlot,
        )
        assert SlotStatus.MAINTENANCE == "MAINTENANCE"

    def test_import_booking_schema(self):
        from booking_engine.schemas.booking_schema import (
            BookingPreviewInput, BookingPreviewResult, BookingStatus, ConflictType,
        )
        assert len(ConflictType) == 5
        assert BookingStatus.NO_SHOW == "NO_SHOW"

    def test_import_pricing_schema(self):
        from booking_engine.schemas.pricing_schema import PricingConfig
        config = PricingConfig(base_price=50)
        assert config.peak_hours is None
        assert config.duration_discounts is None

    def test_models_accept_camel_case(self):
        from booking_engine.schemas.pricing_schema import PricingConfig
        config = PricingConfig.model_validate({"basePrice": 50, "weekendMultiplier": 1.2})
        assert config.weekend_multiplier == 1.2


class TestEngineImports:
    def test_engine_package_reexports(self):
        from booking_engine.engine import (
            BookingLifecycle, calculate_availability, calculate_price,
            detect_conflicts, preview_booking,
        )
        assert callable(preview_booking)

    def test_all_names_resolve(self):
        import booking_engine.engine as engine
        for name in engine.__all__:
            assert hasattr(engine, name), name

    def test_version(self):
        import booking_engine
        assert booking_engine.__version__ == "0.1.0"


class TestToolImports:
    def test_import_facilities(self):
        from booking_engine.tools.facilities import FACILITY_CATALOG, get_facility, list_facilities
        assert len(FACILITY_CATALOG) >= 3
        assert get_facility("padel-court-1").name == "Padel Court 1"
        assert get_facility("missing") is None
        names = [f.name for f in list_facilities()]
        assert names == sorted(names)

    def test_import_occupancy(self):
        from booking_engine.tools.occupancy import add_booking, block_time, reset
        assert callable(add_booking)

    def test_import_preview_handler(self):
        from booking_engine.tools.preview_handler import handle_preview_request
        assert callable(handle_preview_request)


class TestConfigImport:
    def test_import_config(self):
        from booking_engine.config import settings
        assert settings.engine.default_currency == "SAR"
        assert settings.engine.max_alternatives >= 1


class TestLoggingContext:
    def test_request_logger_carries_request_id(self):
        import logging
        from booking_engine.logging_context import (
            RequestIdFilter, get_request_logger, set_request_id,
        )
        logger = get_request_logger("booking_engine.test")
        assert any(isinstance(f, RequestIdFilter) for f in logger.filters)

        set_request_id("REQ-TEST")
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        RequestIdFilter().filter(record)
        assert record.request_id == "REQ-TEST"

    def test_filter_attached_once(self):
        from booking_engine.logging_context import RequestIdFilter, get_request_logger
        get_request_logger("booking_engine.once")
        logger = get_request_logger("booking_engine.once")
        assert sum(isinstance(f, RequestIdFilter) for f in logger.filters) == 1


class TestEntryPoints:
    def test_cli_parser(self):
        from main import build_parser
        args = build_parser().parse_args(
            ["preview", "padel-court-1", "2025-03-16T18:00", "2025-03-16T19:00"]
        )
        assert args.facility == "padel-court-1"
        assert args.promo is None

    def test_cli_requires_command(self):
        from main import build_parser
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestConsoleDemo:
    def test_console_session_imports(self):
        from console_demo import ConsoleSession
        session = ConsoleSession()
        assert session.facility.id == "padel-court-1"
        assert set(session.SCENARIOS) == {"available", "conflict", "invalid", "pricing"}

    def test_console_rejects_unknown_facility(self):
        from console_demo import ConsoleSession
        with pytest.raises(ValueError, match="Unknown facility"):
            ConsoleSession("nope")
