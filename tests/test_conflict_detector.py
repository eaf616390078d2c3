"""Tests for conflict classification and detection."""

from booking_engine.engine.conflict_detector import (
    NO_CONFLICT_MESSAGE,
    detect_conflicts,
    determine_conflict_type,
    generate_conflict_message,
)
from booking_engine.schemas.booking_schema import ConflictType
from booking_engine.schemas.slot_schema import SlotStatus
from tests.conftest import FACILITY_ID, at, make_occupied


class TestDetermineConflictType:
    def test_no_overlap_returns_none(self):
        assert determine_conflict_type(at(10), at(11), at(14), at(15)) is None

    def test_exact_overlap(self):
        result = determine_conflict_type(at(14), at(15), at(14), at(15))
        assert result == ConflictType.EXACT_OVERLAP

    def test_contained_within(self):
        result = determine_conflict_type(at(14), at(15), at(13), at(16))
        assert result == ConflictType.CONTAINED_WITHIN

    def test_contained_within_sharing_start(self):
        result = determine_conflict_type(at(14), at(15), at(14), at(17))
        assert result == ConflictType.CONTAINED_WITHIN

    def test_contains_existing(self):
        result = determine_conflict_type(at(13), at(17), at(14), at(15))
        assert result == ConflictType.CONTAINS_EXISTING

    def test_partial_end_overlap(self):
        # Requested starts before and ends inside the existing range
        result = determine_conflict_type(at(13), at(15), at(14), at(16))
        assert result == ConflictType.PARTIAL_END_OVERLAP

    def test_partial_start_overlap(self):
        # Requested starts inside and ends after the existing range
        result = determine_conflict_type(at(15), at(17), at(14), at(16))
        assert result == ConflictType.PARTIAL_START_OVERLAP

    def test_adjacent_after_is_not_conflict(self):
        assert determine_conflict_type(at(15), at(16), at(14), at(15)) is None

    def test_adjacent_before_is_not_conflict(self):
        assert determine_conflict_type(at(13), at(14), at(14), at(15)) is None


class TestGenerateConflictMessage:
    def test_exact_overlap_message(self):
        msg = generate_conflict_message(ConflictType.EXACT_OVERLAP, [])
        assert msg == "This exact time slot is already booked."

    def test_contained_within_message(self):
        msg = generate_conflict_message(ConflictType.CONTAINED_WITHIN, [])
        assert "falls within an existing booking" in msg

    def test_contains_existing_single_slot(self):
        slots = [make_occupied(at(14), at(15))]
        msg = generate_conflict_message(ConflictType.CONTAINS_EXISTING, slots)
        assert msg == "The requested time contains 1 existing slot."

    def test_contains_existing_counts_slots(self):
        slots = [make_occupied(at(14), at(15)), make_occupied(at(16), at(17))]
        msg = generate_conflict_message(ConflictType.CONTAINS_EXISTING, slots)
        assert msg == "The requested time contains 2 existing slots."

    def test_partial_messages_differ(self):
        start = generate_conflict_message(ConflictType.PARTIAL_START_OVERLAP, [])
        end = generate_conflict_message(ConflictType.PARTIAL_END_OVERLAP, [])
        assert "start of your booking" in start
        assert "end of your booking" in end


class TestDetectConflicts:
    def test_no_occupied_slots(self):
        result = detect_conflicts(FACILITY_ID, at(14), at(15), [])
        assert not result.has_conflict
        assert result.conflict_type is None
        assert result.message == NO_CONFLICT_MESSAGE
        assert result.conflicting_slots == []

    def test_free_time(self):
        occupied = [make_occupied(at(10), at(11)), make_occupied(at(16), at(17))]
        result = detect_conflicts(FACILITY_ID, at(14), at(15), occupied)
        assert not result.has_conflict

    def test_conflict_with_booked_slot(self):
        occupied = [make_occupied(at(14), at(15))]
        result = detect_conflicts(FACILITY_ID, at(14), at(15), occupied)
        assert result.has_conflict
        assert result.conflict_type == ConflictType.EXACT_OVERLAP
        assert result.conflicting_slots == occupied

    def test_conflict_with_maintenance_slot(self):
        occupied = [make_occupied(at(13), at(16), SlotStatus.MAINTENANCE)]
        result = detect_conflicts(FACILITY_ID, at(14), at(15), occupied)
        assert result.has_conflict
        assert result.conflict_type == ConflictType.CONTAINED_WITHIN
        assert result.conflicting_slots[0].status == SlotStatus.MAINTENANCE

    def test_ignores_other_facilities(self):
        occupied = [make_occupied(at(14), at(15), facility_id="facility-2")]
        result = detect_conflicts(FACILITY_ID, at(14), at(15), occupied)
        assert not result.has_conflict

    def test_reports_every_conflicting_slot(self):
        occupied = [
            make_occupied(at(14), at(15)),
            make_occupied(at(16), at(17), SlotStatus.BLOCKED),
        ]
        result = detect_conflicts(FACILITY_ID, at(13), at(18), occupied)
        assert result.has_conflict
        assert len(result.conflicting_slots) == 2
        assert result.conflict_type == ConflictType.CONTAINS_EXISTING
        assert "2 existing slots" in result.message

    def test_exact_overlap_wins_over_earlier_type(self):
        occupied = [
            make_occupied(at(13), at(15, 30)),  # contained within, seen first
            make_occupied(at(14), at(15)),      # exact
        ]
        result = detect_conflicts(FACILITY_ID, at(14), at(15), occupied)
        assert result.conflict_type == ConflictType.EXACT_OVERLAP

    def test_first_type_kept_when_no_exact_overlap(self):
        occupied = [
            make_occupied(at(15), at(17)),  # partial end overlap
            make_occupied(at(12), at(14)),  # partial start overlap
        ]
        result = detect_conflicts(FACILITY_ID, at(13), at(16), occupied)
        assert result.conflict_type == ConflictType.PARTIAL_END_OVERLAP
        assert len(result.conflicting_slots) == 2
