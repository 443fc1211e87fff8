"""Gamification Engine - Pure logic for badge progress and unlock evaluation.

This engine provides stateless, pure Python functions for:
- Badge progress computation per badge type
- Deciding which not-yet-earned badges have met their requirement

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are class/static methods that operate on passed-in data.
The GamificationManager handles side effects (earned set, storage, remote log).

Badge Types (closed set):
- streak: live current streak value
- total_prayers: number of full days (all five prayers Prayed/Late)
- late_prayers: number of Late statuses across all days
- fajr_streak: consecutive most-recent dates with Fajr Prayed/Late
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from .. import const
from ..type_defs import BadgeDefinition
from ..utils.dt_utils import dt_shift_iso_date
from .streak_engine import StreakEngine

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..type_defs import BadgeProgress, PrayerHistory


# =============================================================================
# BADGE DEFINITIONS
# =============================================================================

BADGE_DEFINITIONS: tuple[BadgeDefinition, ...] = (
    BadgeDefinition(
        id=const.BADGE_ID_FIRST_STEP,
        requirement=1,
        type=const.BADGE_TYPE_TOTAL_PRAYERS,
    ),
    BadgeDefinition(
        id=const.BADGE_ID_FAJR_WARRIOR,
        requirement=7,
        type=const.BADGE_TYPE_FAJR_STREAK,
    ),
    BadgeDefinition(
        id=const.BADGE_ID_LATE_BUT_PRESENT,
        requirement=10,
        type=const.BADGE_TYPE_LATE_PRAYERS,
    ),
    BadgeDefinition(
        id=const.BADGE_ID_STREAK_MASTER,
        requirement=30,
        type=const.BADGE_TYPE_STREAK,
    ),
)

BADGES_BY_ID: dict[str, BadgeDefinition] = {
    badge.id: badge for badge in BADGE_DEFINITIONS
}

# Handler function signature: (history, current_streak) -> current value
ProgressHandler = Callable[["PrayerHistory", int], int]


# =============================================================================
# GAMIFICATION ENGINE
# =============================================================================


class GamificationEngine:
    """Pure logic engine for badge evaluation.

    PURITY CONTRACT:
    - All data comes via arguments (history, current streak, earned set)
    - No side effects, no storage access, no state mutation

    Evaluation Flow:
        1. Manager passes the updated history and live streak
        2. Engine computes progress per badge type
        3. Engine returns ids that newly meet their requirement
        4. Manager records the unlock (local set, notification, remote log)
    """

    # =========================================================================
    # PROGRESS HANDLER REGISTRY
    # =========================================================================

    # Maps badge type to handler function
    _PROGRESS_HANDLERS: dict[str, ProgressHandler] = {}

    @classmethod
    def _register_handlers(cls) -> None:
        """Register all progress handlers.

        Called lazily on first evaluation to populate _PROGRESS_HANDLERS.
        """
        if cls._PROGRESS_HANDLERS:
            return  # Already registered

        cls._PROGRESS_HANDLERS = {
            const.BADGE_TYPE_STREAK: cls._progress_streak,
            const.BADGE_TYPE_LATE_PRAYERS: cls._progress_late_prayers,
            const.BADGE_TYPE_TOTAL_PRAYERS: cls._progress_full_days,
            const.BADGE_TYPE_FAJR_STREAK: cls._progress_fajr_streak,
        }

    # =========================================================================
    # MAIN EVALUATION METHODS
    # =========================================================================

    @classmethod
    def get_progress(
        cls,
        badge_id: str,
        history: PrayerHistory,
        current_streak: int,
    ) -> BadgeProgress:
        """Return progress of one badge towards its requirement.

        Args:
            badge_id: One of the fixed badge ids
            history: Full prayer history
            current_streak: Live current streak value

        Returns:
            BadgeProgress; {0, 0} for an unknown badge id
        """
        cls._register_handlers()

        badge = BADGES_BY_ID.get(badge_id)
        if badge is None:
            return {"current": 0, "total": 0}

        handler = cls._PROGRESS_HANDLERS.get(badge.type)
        if handler is None:
            const.LOGGER.warning(
                "Unknown badge type: %s for badge %s", badge.type, badge_id
            )
            return {"current": 0, "total": badge.requirement}

        return {"current": handler(history, current_streak), "total": badge.requirement}

    @classmethod
    def evaluate_badges(
        cls,
        history: PrayerHistory,
        current_streak: int,
        earned: Iterable[str],
    ) -> list[str]:
        """Return ids of not-yet-earned badges whose requirement is met.

        Earned badges are skipped entirely, so calling this twice with the
        same inputs after recording the first result returns nothing new.

        Args:
            history: Full prayer history
            current_streak: Live current streak value
            earned: Badge ids already unlocked

        Returns:
            Badge ids to unlock, in definition order
        """
        earned_set = set(earned)
        unlocked: list[str] = []
        for badge in BADGE_DEFINITIONS:
            if badge.id in earned_set:
                continue
            progress = cls.get_progress(badge.id, history, current_streak)
            if progress["current"] >= progress["total"]:
                unlocked.append(badge.id)
        return unlocked

    # =========================================================================
    # PROGRESS HANDLERS
    # =========================================================================

    @staticmethod
    def _progress_streak(history: PrayerHistory, current_streak: int) -> int:
        """Live current streak."""
        return current_streak

    @staticmethod
    def _progress_late_prayers(history: PrayerHistory, current_streak: int) -> int:
        """Total Late statuses across all dates and slots."""
        return sum(
            1
            for day_record in history.values()
            for status in day_record.values()
            if status == const.PRAYER_STATUS_LATE
        )

    @staticmethod
    def _progress_full_days(history: PrayerHistory, current_streak: int) -> int:
        """Distinct dates on which all five prayers were completed."""
        return sum(
            1 for day_record in history.values() if StreakEngine.is_full_day(day_record)
        )

    @staticmethod
    def _progress_fajr_streak(history: PrayerHistory, current_streak: int) -> int:
        """Consecutive completed Fajr, walking recorded dates newest first.

        Stops at the first recorded date whose Fajr is not Prayed/Late, and at
        any missing calendar day between two recorded dates.
        """
        count = 0
        previous_date: str | None = None
        for iso_date in sorted(history, reverse=True):
            if previous_date is not None and not _is_previous_day(
                iso_date, previous_date
            ):
                break
            fajr_status = history[iso_date].get(const.PRAYER_ID_FAJR)
            if fajr_status not in const.COMPLETED_STATUSES:
                break
            count += 1
            previous_date = iso_date
        return count


def _is_previous_day(candidate: str, reference: str) -> bool:
    """Return True when candidate is the civil day right before reference."""
    return dt_shift_iso_date(reference, -1) == candidate
