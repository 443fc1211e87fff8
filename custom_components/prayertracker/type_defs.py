"""Type definitions for Prayer Tracker data structures.

TypedDict is used for structures with fixed keys (slot configs, settings,
streak state, derived metrics). The history map is keyed by runtime values
(civil date, prayer id) and is therefore a plain dict alias.

IMPORTANT: This file must NOT import from coordinator.py or any manager to
avoid circular dependencies. Only typing machinery is imported here.
"""

from dataclasses import dataclass
from typing import Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

PrayerId = str  # "1".."5"
ISODate = str  # Civil date "2026-01-18"
HHMM = str  # Zero-padded 24-hour time "05:30"
PrayerStatus = Literal["Pending", "Prayed", "Missed", "Late"]
BadgeType = Literal["streak", "total_prayers", "late_prayers", "fajr_streak"]
DayClass = Literal["full", "partial", "none"]

# date -> prayer id -> status. A missing entry means implicit Pending.
DayRecord = dict[PrayerId, str]
PrayerHistory = dict[ISODate, DayRecord]


# =============================================================================
# Settings
# =============================================================================


class PrayerSlotConfig(TypedDict):
    """Configured time window for one of the five fixed prayers.

    Keys mirror the remote `prayer_settings` blob (camelCase).
    """

    id: PrayerId
    startTime: NotRequired[HHMM | None]
    mosqueTime: NotRequired[HHMM | None]
    endTime: HHMM


class PrayerSettings(TypedDict):
    """User settings blob, stored locally and on the remote profile."""

    prayerTimes: list[PrayerSlotConfig]
    notificationsEnabled: bool
    reminderLeadTime: int


# =============================================================================
# Streak + Badges
# =============================================================================


class StreakState(TypedDict):
    """Consecutive full-day counters."""

    current_streak: int
    longest_streak: int
    last_completed_date: ISODate | None


@dataclass(frozen=True)
class BadgeDefinition:
    """Static badge reference data.

    Closed over BadgeType; presentation fields (icon, colour, copy) live in
    the frontend only.
    """

    id: str
    requirement: int
    type: BadgeType


class BadgeProgress(TypedDict):
    """Progress of one badge towards its requirement."""

    current: int
    total: int


# =============================================================================
# Derived Metrics
# =============================================================================


class TodayRatio(TypedDict):
    """Completed prayers for today out of the fixed daily total."""

    completed: int
    total: int


class PrayerBreakdownEntry(TypedDict):
    """Per-prayer completion count over a trailing window of days."""

    prayer_id: PrayerId
    name: str
    count: int
    total: int
