"""
Command-line entry point for the booking engine.

Runs the same request handler the HTTP layer uses, against the in-memory
facility catalog, and prints the JSON response.

Usage:
    Preview:       python main.py preview padel-court-1 2025-03-16T18:00 2025-03-16T19:00
    With promo:    python main.py preview padel-court-1 2025-03-16T18:00 2025-03-16T20:00 --promo SUMMER10
    Occupied time: python main.py preview padel-court-1 ... --occupied occupied.json
    Availability:  python main.py availability padel-court-1 2025-03-16
    Console demo:  python main.py console
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from booking_engine.config import settings
from booking_engine.schemas.slot_schema import SlotStatus
from booking_engine.tools.facilities import get_facility
from booking_engine.tools.occupancy import BookingConflictError, add_booking, block_time
from booking_engine.tools.preview_handler import (
    facility_zone,
    handle_availability_request,
    handle_preview_request,
    localize,
)

logger = logging.getLogger(__name__)


def _load_occupied_file(path: Path, facility_id: str) -> int:
    """Load occupied time from a JSON list of {startTime, endTime, status?, notes?}.

    Raises:
        ValueError: On malformed JSON or values, or an unknown facility.
        KeyError: If an entry is missing startTime or endTime.
        TypeError: If the file is not a list of objects.
        BookingConflictError: If an entry overlaps one loaded before it.
    """
    facility = get_facility(facility_id)
    if facility is None:
        raise ValueError(f"Unknown facility: {facility_id}")
    zone = facility_zone(facility)

    entries = json.loads(path.read_text(encoding="utf-8"))
    for entry in entries:
        start = localize(datetime.fromisoformat(entry["startTime"]), zone)
        end = localize(datetime.fromisoformat(entry["endTime"]), zone)
        status = SlotStatus(entry.get("status", SlotStatus.BOOKED.value))
        if status == SlotStatus.BOOKED:
            add_booking(facility_id, start, end, entry.get("customerName", "Walk-in"))
        else:
            block_time(facility_id, start, end, status, entry.get("notes"))
    return len(entries)


def _print_response(status_code: int, body: dict) -> None:
    sys.stdout.write(json.dumps({"status": status_code, "body": body}, indent=2) + "\n")


def _run_preview(args: argparse.Namespace) -> int:
    if args.occupied:
        occupied_path = Path(args.occupied)
        if not occupied_path.exists():
            logger.error("Occupied slots file not found: %s", occupied_path)
            return 1
        try:
            count = _load_occupied_file(occupied_path, args.facility)
        except (
            json.JSONDecodeError, KeyError, TypeError, ValueError, BookingConflictError,
        ) as exc:
            logger.error("Could not load occupied slots from %s: %s", occupied_path, exc)
            return 1
        logger.info("Loaded %d occupied slot(s) from %s", count, occupied_path)

    payload = {
        "facilityId": args.facility,
        "startTime": args.start,
        "endTime": args.end,
    }
    if args.promo:
        payload["promoCode"] = args.promo

    response = handle_preview_request(payload)
    _print_response(response.status_code, response.body)
    return 0 if response.status_code == 200 else 2


def _run_availability(args: argparse.Namespace) -> int:
    response = handle_availability_request(args.facility, args.date)
    _print_response(response.status_code, response.body)
    return 0 if response.status_code == 200 else 2


def _run_console_mode(args: argparse.Namespace) -> int:
    """Start the offline console demo."""
    from console_demo import ConsoleSession

    session = ConsoleSession()
    if args.scenario:
        session.run_scenario(args.scenario)
    else:
        session.run()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=f"{settings.service_name}: preview bookings and list availability."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    preview = subparsers.add_parser("preview", help="Preview a booking request.")
    preview.add_argument("facility", help="Facility id, e.g. padel-court-1.")
    preview.add_argument("start", help="ISO-8601 start time.")
    preview.add_argument("end", help="ISO-8601 end time.")
    preview.add_argument("--promo", default=None, help="Promo code to apply.")
    preview.add_argument(
        "--occupied",
        default=None,
        help="JSON file of occupied time to load before previewing.",
    )
    preview.set_defaults(handler=_run_preview)

    availability = subparsers.add_parser("availability", help="List a day's free slots.")
    availability.add_argument("facility", help="Facility id.")
    availability.add_argument("date", help="Facility-local date, YYYY-MM-DD.")
    availability.set_defaults(handler=_run_availability)

    console = subparsers.add_parser("console", help="Run the offline console demo.")
    console.add_argument(
        "--scenario", default=None, help="Scenario to auto-play; interactive when omitted."
    )
    console.set_defaults(handler=_run_console_mode)

    return parser


def main() -> None:
    args = build_parser().parse_args()
    sys.exit(args.handler(args))


if __name__ == "__main__":
    main()
