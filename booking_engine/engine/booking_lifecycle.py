"""
Finite state machine for the lifecycle of a stored booking.

PENDING bookings hold their time for a short window and are then either
confirmed or cancelled. CONFIRMED bookings end as completed, cancelled or
no-show. Every change goes through an explicit transition so a booking can
never jump between states the business does not allow.

Usage:
    lifecycle = BookingLifecycle()
    lifecycle.transition(BookingTrigger.CONFIRM)
    assert lifecycle.current_status == BookingStatus.CONFIRMED
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from booking_engine.schemas.booking_schema import BookingStatus

logger = logging.getLogger(__name__)

DEFAULT_PENDING_HOLD_MINUTES = 15
AUTO_CANCEL_REASON = "Auto-cancelled: hold expired"


class BookingTrigger(str, Enum):
    """Events that change a booking's status."""
    CONFIRM = "confirm"
    CANCEL = "cancel"
    HOLD_EXPIRED = "hold_expired"
    COMPLETE = "complete"
    MARK_NO_SHOW = "mark_no_show"


@dataclass
class Transition:
    """A single valid status transition."""
    from_status: BookingStatus
    to_status: BookingStatus
    trigger: BookingTrigger


@dataclass
class StatusEntry:
    """Recorded history entry for a status change."""
    status: BookingStatus
    entered_at: datetime
    trigger: Optional[BookingTrigger] = None


class InvalidStatusTransitionError(Exception):
    """Raised when a trigger is not valid from the current status."""


class BookingLifecycle:
    """
    Deterministic status machine for one booking.

    CANCELLED, COMPLETED and NO_SHOW are terminal: no trigger leaves them.
    """

    TRANSITIONS: list[Transition] = [
        # --- Pending hold ---
        Transition(BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingTrigger.CONFIRM),
        Transition(BookingStatus.PENDING, BookingStatus.CANCELLED, BookingTrigger.CANCEL),
        Transition(BookingStatus.PENDING, BookingStatus.CANCELLED, BookingTrigger.HOLD_EXPIRED),

        # --- Confirmed ---
        Transition(BookingStatus.CONFIRMED, BookingStatus.CANCELLED, BookingTrigger.CANCEL),
        Transition(BookingStatus.CONFIRMED, BookingStatus.COMPLETED, BookingTrigger.COMPLETE),
        Transition(BookingStatus.CONFIRMED, BookingStatus.NO_SHOW, BookingTrigger.MARK_NO_SHOW),
    ]

    def __init__(
        self,
        status: BookingStatus = BookingStatus.PENDING,
        now: Optional[datetime] = None,
    ) -> None:
        self._current_status = status
        self._history: list[StatusEntry] = [
            StatusEntry(status=status, entered_at=now or datetime.now(timezone.utc))
        ]
        self._cancellation_reason: Optional[str] = None

    @property
    def current_status(self) -> BookingStatus:
        return self._current_status

    @property
    def cancellation_reason(self) -> Optional[str]:
        return self._cancellation_reason

    def transition(
        self,
        trigger: BookingTrigger,
        now: Optional[datetime] = None,
        reason: Optional[str] = None,
    ) -> BookingStatus:
        """
        Apply a trigger to the booking.

        Args:
            trigger: The event changing the status.
            now: When the change happened. Defaults to the UTC wall clock.
            reason: Optional cancellation reason.

        Returns:
            The new booking status.

        Raises:
            InvalidStatusTransitionError: If no transition exists for the trigger.
        """
        for t in self.TRANSITIONS:
            if t.from_status == self._current_status and t.trigger == trigger:
                old_status = self._current_status
                self._current_status = t.to_status
                self._history.append(StatusEntry(
                    status=self._current_status,
                    entered_at=now or datetime.now(timezone.utc),
                    trigger=trigger,
                ))

                if t.to_status == BookingStatus.CANCELLED:
                    if trigger == BookingTrigger.HOLD_EXPIRED:
                        self._cancellation_reason = AUTO_CANCEL_REASON
                    else:
                        self._cancellation_reason = reason

                logger.debug(
                    "Booking status: %s -> %s (trigger: %s)",
                    old_status.value, self._current_status.value, trigger.value,
                )
                return self._current_status

        valid = [t.value for t in self.get_valid_triggers()]
        raise InvalidStatusTransitionError(
            f"No valid transition from '{self._current_status.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    def get_valid_triggers(self) -> list[BookingTrigger]:
        """Return all triggers valid from the current status."""
        return [t.trigger for t in self.TRANSITIONS if t.from_status == self._current_status]

    def get_history(self) -> list[StatusEntry]:
        return list(self._history)

    def get_status_trace(self) -> list[str]:
        """Return ordered list of status names visited."""
        return [entry.status.value for entry in self._history]

    def is_terminal(self) -> bool:
        return not self.get_valid_triggers()


def can_transition(from_status: BookingStatus, to_status: BookingStatus) -> bool:
    """Whether any trigger moves a booking from ``from_status`` to ``to_status``."""
    return any(
        t.from_status == from_status and t.to_status == to_status
        for t in BookingLifecycle.TRANSITIONS
    )


def compute_hold_until(
    now: datetime, hold_minutes: int = DEFAULT_PENDING_HOLD_MINUTES
) -> datetime:
    """End of the hold window for a booking created as PENDING at ``now``."""
    return now + timedelta(minutes=hold_minutes)


def occupies_time(
    status: BookingStatus, hold_until: Optional[datetime], now: datetime
) -> bool:
    """
    Whether a booking blocks its time range for new reservations.

    Confirmed bookings always do; pending ones only while their hold is
    still in the future.
    """
    if status == BookingStatus.CONFIRMED:
        return True
    if status == BookingStatus.PENDING:
        return hold_until is not None and hold_until > now
    return False
