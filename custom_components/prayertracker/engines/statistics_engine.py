"""Statistics Engine - Derived completion metrics over the prayer history.

This engine centralizes the read-only progress figures shown to the user:
- Today's completion ratio
- Completed counts for a trailing window of days
- Per-prayer completion breakdown over the same window
- Day classification for calendar markers (full / partial / none)

Design Principles:
    - Stateless: No coordinator reference, operates on passed data structures
    - Absent dates and prayers count as not completed
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import dt_last_n_days
from .prayer_engine import PrayerEngine

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..type_defs import (
        DayClass,
        PrayerBreakdownEntry,
        PrayerHistory,
        TodayRatio,
    )


class StatisticsEngine:
    """Pure logic engine for completion metrics.

    All methods are static - they operate on the history passed in and never
    mutate it.
    """

    @staticmethod
    def today_ratio(history: PrayerHistory, today_iso: str) -> TodayRatio:
        """Return completed prayers today out of the fixed daily total."""
        return {
            "completed": PrayerEngine.count_completed(history.get(today_iso, {})),
            "total": const.PRAYERS_PER_DAY,
        }

    @staticmethod
    def weekly_progress(
        history: PrayerHistory,
        today_iso: str,
        days: int = const.DEFAULT_PROGRESS_DAYS,
    ) -> list[int]:
        """Return completed counts per day, oldest first, ending today.

        Example:
            [5, 3, 0, 5, 5, 4, 2]
        """
        return [
            PrayerEngine.count_completed(history.get(iso_date, {}))
            for iso_date in dt_last_n_days(today_iso, days)
        ]

    @staticmethod
    def prayer_breakdown(
        history: PrayerHistory,
        today_iso: str,
        days: int = const.DEFAULT_PROGRESS_DAYS,
    ) -> list[PrayerBreakdownEntry]:
        """Return how often each prayer was completed over the trailing window."""
        window = dt_last_n_days(today_iso, days)
        breakdown: list[PrayerBreakdownEntry] = []
        for prayer_id in const.PRAYER_IDS:
            count = sum(
                1
                for iso_date in window
                if PrayerEngine.is_completed_status(
                    history.get(iso_date, {}).get(prayer_id)
                )
            )
            breakdown.append(
                {
                    "prayer_id": prayer_id,
                    "name": const.PRAYER_NAMES[prayer_id],
                    "count": count,
                    "total": days,
                }
            )
        return breakdown

    @staticmethod
    def classify_day(day_record: Mapping[str, str] | None) -> DayClass:
        """Classify a day as full (5 completed), partial (1-4) or none (0)."""
        completed = PrayerEngine.count_completed(day_record or {})
        if completed >= const.PRAYERS_PER_DAY:
            return const.DAY_CLASS_FULL
        if completed > 0:
            return const.DAY_CLASS_PARTIAL
        return const.DAY_CLASS_NONE

    @staticmethod
    def calendar_markers(
        history: PrayerHistory,
        today_iso: str,
        days: int = const.DEFAULT_CALENDAR_DAYS,
    ) -> dict[str, DayClass]:
        """Return the day classification for recorded dates in the trailing window.

        Dates with no record are left out, so the result never holds more
        than `days` entries however long the history grows.
        """
        return {
            iso_date: StatisticsEngine.classify_day(history[iso_date])
            for iso_date in dt_last_n_days(today_iso, days)
            if iso_date in history
        }
