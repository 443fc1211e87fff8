"""Streak Engine - Consecutive full-day tracking.

A day counts toward the streak only when all five prayers reached Prayed or
Late. Streak logic:
- Today not complete: no change (a missed day is handled by the load-time gap
  reset, never by decrementing here)
- Already counted today: no change
- Last completed day was yesterday: increment
- Any other case: restart at 1

Design Principles:
    - Stateless: operates on passed data structures and returns new state
    - Civil dates only: day gaps are calendar-day counts, never elapsed hours
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import dt_days_between, dt_shift_iso_date

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..type_defs import PrayerHistory, StreakState


class StreakEngine:
    """Pure logic engine for the daily prayer streak.

    All methods are static and never mutate their inputs; callers persist the
    returned StreakState.
    """

    @staticmethod
    def empty_state() -> StreakState:
        """Return a zeroed streak state."""
        return {
            const.DATA_CURRENT_STREAK: 0,
            const.DATA_LONGEST_STREAK: 0,
            const.DATA_LAST_COMPLETED_DATE: None,
        }

    @staticmethod
    def is_full_day(day_record: Mapping[str, str] | None) -> bool:
        """Return True when every fixed prayer is Prayed or Late."""
        if not day_record:
            return False
        return all(
            day_record.get(prayer_id) in const.COMPLETED_STATUSES
            for prayer_id in const.PRAYER_IDS
        )

    @staticmethod
    def recompute(
        streak: StreakState,
        history: PrayerHistory,
        today_iso: str,
    ) -> StreakState:
        """Recompute the streak after a mutation of today's record.

        Args:
            streak: Current streak state
            history: Full prayer history (date -> prayer id -> status)
            today_iso: Today's civil date in the reference zone

        Returns:
            The updated streak state (a new dict; input is not modified)

        Example:
            last_completed_date "2024-01-03", current 3, today "2024-01-04"
            fully prayed -> current 4, last_completed_date "2024-01-04"
        """
        result: StreakState = {
            const.DATA_CURRENT_STREAK: streak.get(const.DATA_CURRENT_STREAK, 0),
            const.DATA_LONGEST_STREAK: streak.get(const.DATA_LONGEST_STREAK, 0),
            const.DATA_LAST_COMPLETED_DATE: streak.get(const.DATA_LAST_COMPLETED_DATE),
        }

        if not StreakEngine.is_full_day(history.get(today_iso)):
            return result

        last_completed = result[const.DATA_LAST_COMPLETED_DATE]
        if last_completed == today_iso:
            # Same day - already counted
            return result

        if last_completed == dt_shift_iso_date(today_iso, -1):
            result[const.DATA_CURRENT_STREAK] += 1
        else:
            # Gap or first time
            result[const.DATA_CURRENT_STREAK] = 1

        if result[const.DATA_CURRENT_STREAK] > result[const.DATA_LONGEST_STREAK]:
            result[const.DATA_LONGEST_STREAK] = result[const.DATA_CURRENT_STREAK]
        result[const.DATA_LAST_COMPLETED_DATE] = today_iso
        return result

    @staticmethod
    def apply_gap_reset(streak: StreakState, today_iso: str) -> StreakState:
        """Reset the current streak on load when a full day was skipped.

        Only run at load/startup. When the civil-day gap between the last
        completed date and today exceeds one, `current_streak` drops to 0;
        `longest_streak` and `last_completed_date` are left untouched.

        Args:
            streak: Streak state as loaded from storage
            today_iso: Today's civil date in the reference zone

        Returns:
            The (possibly reset) streak state as a new dict
        """
        result: StreakState = {
            const.DATA_CURRENT_STREAK: streak.get(const.DATA_CURRENT_STREAK, 0),
            const.DATA_LONGEST_STREAK: streak.get(const.DATA_LONGEST_STREAK, 0),
            const.DATA_LAST_COMPLETED_DATE: streak.get(const.DATA_LAST_COMPLETED_DATE),
        }
        last_completed = result[const.DATA_LAST_COMPLETED_DATE]
        if not last_completed or last_completed == today_iso:
            return result

        if abs(dt_days_between(last_completed, today_iso)) > 1:
            const.LOGGER.debug(
                "Streak gap since %s exceeds one day, resetting current streak",
                last_completed,
            )
            result[const.DATA_CURRENT_STREAK] = 0
        return result
