"""Tests for StreakEngine - consecutive full-day streak logic.

Tests verify:
- A day counts only when all five prayers are Prayed or Late
- Consecutive days increment, gaps restart at 1, same day is counted once
- The load-time gap reset zeroes only the current streak
"""

from __future__ import annotations

from custom_components.prayertracker import const
from custom_components.prayertracker.engines.streak_engine import StreakEngine
from tests.helpers import full_day


def _streak(current: int, longest: int, last: str | None) -> dict:
    return {
        const.DATA_CURRENT_STREAK: current,
        const.DATA_LONGEST_STREAK: longest,
        const.DATA_LAST_COMPLETED_DATE: last,
    }


class TestIsFullDay:
    """Full-day classification."""

    def test_all_prayed(self) -> None:
        """Five Prayed is a full day."""
        assert StreakEngine.is_full_day(full_day())

    def test_mixed_prayed_and_late(self) -> None:
        """Late counts as completed."""
        record = full_day()
        record[const.PRAYER_ID_ISHA] = const.PRAYER_STATUS_LATE
        assert StreakEngine.is_full_day(record)

    def test_one_missed(self) -> None:
        """A single Missed breaks the day."""
        record = full_day()
        record[const.PRAYER_ID_ASR] = const.PRAYER_STATUS_MISSED
        assert not StreakEngine.is_full_day(record)

    def test_incomplete_and_empty(self) -> None:
        """Absent prayers are not completed."""
        assert not StreakEngine.is_full_day({const.PRAYER_ID_FAJR: "Prayed"})
        assert not StreakEngine.is_full_day({})
        assert not StreakEngine.is_full_day(None)


class TestRecompute:
    """Streak recompute after today's record changes."""

    def test_consecutive_day_increments(self) -> None:
        """Completing the day after the last completed date increments."""
        history = {
            "2024-01-01": full_day(),
            "2024-01-02": full_day(),
            "2024-01-03": full_day(),
            "2024-01-04": full_day(),
        }

        result = StreakEngine.recompute(_streak(3, 3, "2024-01-03"), history, "2024-01-04")

        assert result == _streak(4, 4, "2024-01-04")

    def test_incomplete_today_unchanged(self) -> None:
        """An incomplete day never decrements."""
        history = {"2024-01-04": {const.PRAYER_ID_FAJR: const.PRAYER_STATUS_PRAYED}}
        streak = _streak(3, 5, "2024-01-03")

        assert StreakEngine.recompute(streak, history, "2024-01-04") == streak

    def test_same_day_counted_once(self) -> None:
        """Recomputing an already counted day leaves the streak alone."""
        history = {"2024-01-04": full_day()}
        streak = _streak(4, 4, "2024-01-04")

        assert StreakEngine.recompute(streak, history, "2024-01-04") == streak

    def test_gap_restarts_at_one(self) -> None:
        """A skipped day restarts the streak, longest is kept."""
        history = {"2024-01-04": full_day()}

        result = StreakEngine.recompute(_streak(6, 9, "2024-01-01"), history, "2024-01-04")

        assert result == _streak(1, 9, "2024-01-04")

    def test_first_ever_full_day(self) -> None:
        """No previous completion starts at 1."""
        history = {"2024-01-04": full_day(const.PRAYER_STATUS_LATE)}

        result = StreakEngine.recompute(
            StreakEngine.empty_state(), history, "2024-01-04"
        )

        assert result == _streak(1, 1, "2024-01-04")

    def test_month_boundary_is_consecutive(self) -> None:
        """Civil day arithmetic crosses month ends."""
        history = {"2024-03-01": full_day()}

        result = StreakEngine.recompute(_streak(2, 2, "2024-02-29"), history, "2024-03-01")

        assert result[const.DATA_CURRENT_STREAK] == 3

    def test_input_not_mutated(self) -> None:
        """The input streak dict is left untouched."""
        streak = _streak(1, 1, "2024-01-03")
        StreakEngine.recompute(streak, {"2024-01-04": full_day()}, "2024-01-04")

        assert streak == _streak(1, 1, "2024-01-03")

    def test_longest_never_decreases(self) -> None:
        """Longest only grows across a sequence of recomputes."""
        streak = StreakEngine.empty_state()
        history: dict[str, dict[str, str]] = {}
        longest_seen = 0
        for day in ("2024-01-01", "2024-01-02", "2024-01-04", "2024-01-05"):
            history[day] = full_day()
            streak = StreakEngine.recompute(streak, history, day)
            assert streak[const.DATA_LONGEST_STREAK] >= longest_seen
            longest_seen = streak[const.DATA_LONGEST_STREAK]

        assert streak == _streak(2, 2, "2024-01-05")


class TestApplyGapReset:
    """Load-time streak reset."""

    def test_yesterday_keeps_streak(self) -> None:
        """Last completed yesterday keeps the streak (day not yet evaluated)."""
        streak = _streak(3, 3, "2024-01-03")

        assert StreakEngine.apply_gap_reset(streak, "2024-01-04") == streak

    def test_today_keeps_streak(self) -> None:
        """Last completed today keeps the streak."""
        streak = _streak(4, 4, "2024-01-04")

        assert StreakEngine.apply_gap_reset(streak, "2024-01-04") == streak

    def test_gap_resets_current_only(self) -> None:
        """A gap of two or more days zeroes current, keeps the rest."""
        result = StreakEngine.apply_gap_reset(_streak(7, 12, "2024-01-02"), "2024-01-04")

        assert result == _streak(0, 12, "2024-01-02")

    def test_never_completed(self) -> None:
        """No last completed date means nothing to reset."""
        streak = StreakEngine.empty_state()

        assert StreakEngine.apply_gap_reset(streak, "2024-01-04") == streak

    def test_load_then_complete(self) -> None:
        """Three full days, load on day four, then complete day four."""
        history = {
            "2024-01-01": full_day(),
            "2024-01-02": full_day(),
            "2024-01-03": full_day(),
        }
        loaded = StreakEngine.apply_gap_reset(_streak(3, 3, "2024-01-03"), "2024-01-04")
        assert loaded[const.DATA_CURRENT_STREAK] == 3

        history["2024-01-04"] = full_day()
        result = StreakEngine.recompute(loaded, history, "2024-01-04")

        assert result[const.DATA_CURRENT_STREAK] == 4
