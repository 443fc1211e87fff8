"""Tests for PrayerEngine - pure logic, no HA fixtures needed.

These tests validate time-window checks, mark/unmark transitions and the
auto-miss sweep plan without any Home Assistant mocking.
"""

from __future__ import annotations

from custom_components.prayertracker import const
from custom_components.prayertracker.engines.prayer_engine import PrayerEngine
from tests.helpers import make_slots

FAJR = {
    const.DATA_SLOT_ID: const.PRAYER_ID_FAJR,
    const.DATA_SLOT_START_TIME: "05:00",
    const.DATA_SLOT_MOSQUE_TIME: None,
    const.DATA_SLOT_END_TIME: "06:30",
}

# =============================================================================
# TEST: TIME WINDOW
# =============================================================================


class TestHasCrossed:
    """Test the wall-clock boundary check."""

    def test_before_boundary(self) -> None:
        """04:59 has not crossed 05:00."""
        assert not PrayerEngine.has_crossed("05:00", "04:59")

    def test_at_boundary(self) -> None:
        """Reaching the boundary minute counts as crossed."""
        assert PrayerEngine.has_crossed("05:00", "05:00")

    def test_after_boundary(self) -> None:
        """Later times have crossed."""
        assert PrayerEngine.has_crossed("05:00", "17:45")

    def test_zero_padded_ordering(self) -> None:
        """Zero padding keeps 09:00 before 10:00."""
        assert not PrayerEngine.has_crossed("10:00", "09:59")


class TestGateTime:
    """Test which time opens the marking window."""

    def test_start_time_when_no_mosque_time(self) -> None:
        """Start time is the gate without a mosque time."""
        assert PrayerEngine.gate_time(FAJR) == "05:00"

    def test_mosque_time_wins(self) -> None:
        """A configured mosque time overrides the start time."""
        slot = {**FAJR, const.DATA_SLOT_MOSQUE_TIME: "05:30"}
        assert PrayerEngine.gate_time(slot) == "05:30"

    def test_no_gate(self) -> None:
        """Neither time configured yields None."""
        slot = {**FAJR, const.DATA_SLOT_START_TIME: None}
        assert PrayerEngine.gate_time(slot) is None


# =============================================================================
# TEST: TRANSITIONS
# =============================================================================


class TestCalculateTransition:
    """Test the outcome of a tap on a prayer."""

    def test_too_early_rejected(self) -> None:
        """Marking before the start time is rejected with the gate time."""
        result = PrayerEngine.calculate_transition(
            const.PRAYER_STATUS_PENDING, FAJR, "04:59"
        )

        assert not result.accepted
        assert result.new_status is None
        assert result.reject_reason == const.REJECT_REASON_TOO_EARLY
        assert result.gate_time == "05:00"

    def test_within_window_prayed(self) -> None:
        """Marking inside the window stores Prayed."""
        result = PrayerEngine.calculate_transition(
            const.PRAYER_STATUS_PENDING, FAJR, "05:30"
        )

        assert result.accepted
        assert result.new_status == const.PRAYER_STATUS_PRAYED

    def test_after_end_late(self) -> None:
        """Marking after the end time stores Late."""
        result = PrayerEngine.calculate_transition(
            const.PRAYER_STATUS_PENDING, FAJR, "07:00"
        )

        assert result.new_status == const.PRAYER_STATUS_LATE

    def test_exactly_at_end_is_late(self) -> None:
        """The end minute itself is already past the window."""
        result = PrayerEngine.calculate_transition(
            const.PRAYER_STATUS_PENDING, FAJR, "06:30"
        )

        assert result.new_status == const.PRAYER_STATUS_LATE

    def test_missed_can_be_made_up(self) -> None:
        """A Missed prayer marked later becomes Late."""
        result = PrayerEngine.calculate_transition(
            const.PRAYER_STATUS_MISSED, FAJR, "12:00"
        )

        assert result.new_status == const.PRAYER_STATUS_LATE

    def test_unmark_prayed_ignores_time(self) -> None:
        """Prayed unmarks to Pending even before the window opens."""
        result = PrayerEngine.calculate_transition(
            const.PRAYER_STATUS_PRAYED, FAJR, "04:00"
        )

        assert result.new_status == const.PRAYER_STATUS_PENDING

    def test_unmark_late(self) -> None:
        """Late unmarks to Pending."""
        result = PrayerEngine.calculate_transition(
            const.PRAYER_STATUS_LATE, FAJR, "23:00"
        )

        assert result.new_status == const.PRAYER_STATUS_PENDING

    def test_mosque_time_gates_marking(self) -> None:
        """With a mosque time, marking between start and mosque time is early."""
        slot = {**FAJR, const.DATA_SLOT_MOSQUE_TIME: "05:30"}

        early = PrayerEngine.calculate_transition(
            const.PRAYER_STATUS_PENDING, slot, "05:15"
        )
        on_time = PrayerEngine.calculate_transition(
            const.PRAYER_STATUS_PENDING, slot, "05:30"
        )

        assert early.reject_reason == const.REJECT_REASON_TOO_EARLY
        assert early.gate_time == "05:30"
        assert on_time.new_status == const.PRAYER_STATUS_PRAYED

    def test_missing_end_time(self) -> None:
        """A slot without an end time cannot be marked."""
        slot = {**FAJR, const.DATA_SLOT_END_TIME: None}

        result = PrayerEngine.calculate_transition(
            const.PRAYER_STATUS_PENDING, slot, "05:30"
        )

        assert result.reject_reason == const.REJECT_REASON_CONFIG_MISSING

    def test_missing_gate(self) -> None:
        """A slot with neither start nor mosque time cannot be marked."""
        slot = {**FAJR, const.DATA_SLOT_START_TIME: None}

        result = PrayerEngine.calculate_transition(
            const.PRAYER_STATUS_PENDING, slot, "05:30"
        )

        assert result.reject_reason == const.REJECT_REASON_CONFIG_MISSING


# =============================================================================
# TEST: AUTO-MISS SWEEP
# =============================================================================


class TestPlanAutoMissed:
    """Test the sweep plan."""

    def test_expired_absent_slots_missed(self) -> None:
        """Absent entries count as Pending and expire."""
        changes = PrayerEngine.plan_auto_missed({}, make_slots(), "16:00")

        assert changes == {
            const.PRAYER_ID_FAJR: const.PRAYER_STATUS_MISSED,
            const.PRAYER_ID_DHUHR: const.PRAYER_STATUS_MISSED,
        }

    def test_completed_and_missed_untouched(self) -> None:
        """Only Pending slots are swept."""
        record = {
            const.PRAYER_ID_FAJR: const.PRAYER_STATUS_PRAYED,
            const.PRAYER_ID_DHUHR: const.PRAYER_STATUS_LATE,
            const.PRAYER_ID_ASR: const.PRAYER_STATUS_MISSED,
        }

        changes = PrayerEngine.plan_auto_missed(record, make_slots(), "19:00")

        assert changes == {}

    def test_explicit_pending_missed(self) -> None:
        """An unmarked (explicit Pending) slot is swept too."""
        record = {const.PRAYER_ID_FAJR: const.PRAYER_STATUS_PENDING}

        changes = PrayerEngine.plan_auto_missed(record, make_slots(), "06:30")

        assert changes == {const.PRAYER_ID_FAJR: const.PRAYER_STATUS_MISSED}

    def test_sweep_is_idempotent(self) -> None:
        """Applying the plan then planning again changes nothing."""
        record: dict[str, str] = {}
        record.update(PrayerEngine.plan_auto_missed(record, make_slots(), "20:00"))

        assert PrayerEngine.plan_auto_missed(record, make_slots(), "20:00") == {}

    def test_nothing_before_first_end(self) -> None:
        """Early morning sweeps find nothing."""
        assert PrayerEngine.plan_auto_missed({}, make_slots(), "05:10") == {}


class TestQueries:
    """Test status queries."""

    def test_get_status_defaults_pending(self) -> None:
        """Absent dates and prayers read as Pending."""
        history = {"2024-01-04": {const.PRAYER_ID_FAJR: const.PRAYER_STATUS_LATE}}

        assert (
            PrayerEngine.get_status(history, "2024-01-04", const.PRAYER_ID_FAJR)
            == const.PRAYER_STATUS_LATE
        )
        assert (
            PrayerEngine.get_status(history, "2024-01-04", const.PRAYER_ID_ISHA)
            == const.PRAYER_STATUS_PENDING
        )
        assert (
            PrayerEngine.get_status(history, "2024-01-05", const.PRAYER_ID_FAJR)
            == const.PRAYER_STATUS_PENDING
        )

    def test_count_completed(self) -> None:
        """Prayed and Late count, Missed and Pending do not."""
        record = {
            "1": const.PRAYER_STATUS_PRAYED,
            "2": const.PRAYER_STATUS_LATE,
            "3": const.PRAYER_STATUS_MISSED,
            "4": const.PRAYER_STATUS_PENDING,
        }

        assert PrayerEngine.count_completed(record) == 2

    def test_find_slot(self) -> None:
        """find_slot returns the matching config or None."""
        slots = make_slots()

        assert PrayerEngine.find_slot(slots, "3")[const.DATA_SLOT_START_TIME] == "15:45"
        assert PrayerEngine.find_slot(slots[:2], "3") is None
