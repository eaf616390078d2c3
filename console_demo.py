"""
Offline console demo: previews bookings against the sample facilities.

Uses the real request handler, booking engine and in-memory stores. No
database, no network calls. Designed for live demo walkthroughs.

Usage:
    python console_demo.py
    python console_demo.py --scenario conflict
    python console_demo.py --scenario pricing
"""

import argparse
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from booking_engine.config import settings
from booking_engine.schemas.slot_schema import SlotStatus
from booking_engine.tools import occupancy
from booking_engine.tools.facilities import get_facility, list_facilities
from booking_engine.tools.preview_handler import facility_zone, handle_preview_request

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

DEMO_FACILITY = "padel-court-1"


class ConsoleSession:
    """Runs booking previews in the terminal and renders the decisions."""

    def __init__(self, facility_id: str = DEMO_FACILITY) -> None:
        facility = get_facility(facility_id)
        if facility is None:
            raise ValueError(f"Unknown facility: {facility_id}")
        self.facility = facility
        zone = facility_zone(facility)
        self.now = datetime.now(zone).replace(second=0, microsecond=0)
        self.tomorrow = (self.now + timedelta(days=1)).replace(hour=0, minute=0)

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def at(self, hour: int, days_ahead: int = 0) -> datetime:
        return self.tomorrow + timedelta(days=days_ahead, hours=hour)

    def next_thursday(self, hour: int) -> datetime:
        days_ahead = (3 - self.tomorrow.weekday()) % 7
        return self.at(hour, days_ahead)

    # ------------------------------------------------------------------ #
    # Scenarios
    # ------------------------------------------------------------------ #

    def _scenario_available(self) -> dict[str, Any]:
        return self._payload(self.at(10), self.at(11))

    def _scenario_conflict(self) -> dict[str, Any]:
        occupancy.add_booking(self.facility.id, self.at(14), self.at(15), "Demo Customer")
        occupancy.block_time(
            self.facility.id, self.at(16), self.at(17), SlotStatus.MAINTENANCE, "Net repair"
        )
        self.system_log("Stored booking 14:00-15:00 and maintenance 16:00-17:00")
        return self._payload(self.at(14), self.at(15))

    def _scenario_invalid(self) -> dict[str, Any]:
        return self._payload(self.at(15), self.at(14))

    def _scenario_pricing(self) -> dict[str, Any]:
        self.system_log("Thursday peak booking, 3 hours, with promo code")
        return self._payload(self.next_thursday(18), self.next_thursday(21), "SUMMER10")

    SCENARIOS: dict[str, Callable[["ConsoleSession"], dict[str, Any]]] = {
        "available": _scenario_available,
        "conflict": _scenario_conflict,
        "invalid": _scenario_invalid,
        "pricing": _scenario_pricing,
    }

    def _payload(
        self, start: datetime, end: datetime, promo_code: Optional[str] = None
    ) -> dict[str, Any]:
        payload = {
            "facilityId": self.facility.id,
            "startTime": start.isoformat(),
            "endTime": end.isoformat(),
        }
        if promo_code:
            payload["promoCode"] = promo_code
        return payload

    # ------------------------------------------------------------------ #
    # Rendering
    # ------------------------------------------------------------------ #

    def preview(self, payload: dict[str, Any]) -> None:
        print(f"\n{BLUE}[Request]{RESET} {payload}")
        response = handle_preview_request(payload, now=self.now)
        if response.status_code != 200:
            print(f"{RED}HTTP {response.status_code}: {response.body.get('message')}{RESET}")
            return
        self.render(response.body)

    def render(self, body: dict[str, Any]) -> None:
        price = body["priceBreakdown"]
        if body["canBook"]:
            print(f"{GREEN}{BOLD}Bookable{RESET} {GREEN}"
                  f"{price['total']:.2f} {price['currency']}{RESET}")
        else:
            print(f"{RED}{BOLD}Cannot book{RESET}")

        for error in body.get("validationErrors", []):
            print(f"{RED}  - {error}{RESET}")

        if not body.get("validationErrors"):
            self.system_log(
                f"subtotal {price['subtotal']:.2f}, time x{price['timeMultiplier']}, "
                f"day x{price['dayMultiplier']}, duration -{price['durationDiscount']:.0%}, "
                f"discounts {price['discountAmount']:.2f}"
            )
            if "promoCode" in price:
                self.system_log(f"promo {price['promoCode']}: -{price['promoDiscount']:.2f}")

        conflict = body.get("conflict")
        if conflict:
            print(f"{YELLOW}  {conflict['conflictType']}: {conflict['message']}{RESET}")
            for slot in conflict["conflictingSlots"]:
                self.system_log(
                    f"occupied {slot['startTime']} -> {slot['endTime']} ({slot['status']})"
                )
            alternatives = body.get("suggestedAlternatives", [])
            if not alternatives:
                print(f"{YELLOW}  No alternatives nearby.{RESET}")
            for alt in alternatives:
                print(f"{GREEN}  Alternative: {alt['startTime']} -> {alt['endTime']} "
                      f"{alt['price']:.2f} {alt['currency']}{RESET}")

    def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario."""
        build = self.SCENARIOS.get(scenario)
        if build is None:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        occupancy.reset()
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  BOOKING ENGINE - Scenario: {scenario}{RESET}")
        print(f"{BOLD}  Facility: {self.facility.name} "
              f"({self.facility.open_time}-{self.facility.close_time}){RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        self.preview(build(self))

    def run(self) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  BOOKING ENGINE - Console Demo ({settings.service_name}){RESET}")
        print(f"{BOLD}  Facilities: {', '.join(f.id for f in list_facilities())}{RESET}")
        print(f"{BOLD}  Enter: <facility> <start ISO> <end ISO> [promo], 'quit' to exit{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

        while True:
            line = input(f"\n{BLUE}[Preview] {RESET}").strip()
            if not line:
                continue
            if line.lower() in ("quit", "exit", "q"):
                print(f"\n{DIM}Session ended.{RESET}")
                break

            parts = line.split()
            if len(parts) not in (3, 4):
                print(f"{RED}Expected: <facility> <start> <end> [promo]{RESET}")
                continue
            payload = {"facilityId": parts[0], "startTime": parts[1], "endTime": parts[2]}
            if len(parts) == 4:
                payload["promoCode"] = parts[3]
            self.preview(payload)


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline console demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    args = parser.parse_args()

    session = ConsoleSession()
    if args.scenario:
        session.run_scenario(args.scenario)
    else:
        session.run()


if __name__ == "__main__":
    main()
