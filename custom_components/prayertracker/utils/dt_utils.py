# File: utils/dt_utils.py
"""Date and time utilities for Prayer Tracker.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Prayer windows are evaluated against a fixed reference time zone rather than
the device zone, so a travelling user's windows do not drift. Times of day
are handled as zero-padded 24-hour "HH:MM" strings; civil dates as ISO
"YYYY-MM-DD" strings.

Functions:
    - resolve_time_zone: Resolve the reference zone, falling back to local
    - dt_now_local: Current datetime in the reference zone
    - dt_now_hhmm: Current wall clock as "HH:MM" in the reference zone
    - dt_today_iso: Today's civil date in the reference zone
    - dt_shift_iso_date: Add/subtract whole days from an ISO date
    - dt_days_between: Civil-calendar day count between two ISO dates
    - dt_last_n_days: Trailing window of ISO dates ending at a given date
    - dt_combine_local: Build an aware datetime from an ISO date and "HH:MM"
    - is_valid_hhmm: Validate "HH:MM" format
    - hhmm_to_minutes: Convert "HH:MM" to minutes since midnight
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
import logging
import re
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

if TYPE_CHECKING:
    from datetime import tzinfo

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

_HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

HHMM_FORMAT = "%H:%M"


# ==============================================================================
# Timezone Resolution
# ==============================================================================


def resolve_time_zone(name: str | None, fallback: tzinfo) -> tzinfo:
    """Resolve the reference time zone by IANA name.

    When the zone database cannot resolve the name (missing tzdata, typo in
    configuration), the device/local zone is used instead. This degrades
    silently: only a debug record is written.

    Args:
        name: IANA zone name, e.g. "Asia/Karachi"
        fallback: Zone to use when `name` cannot be resolved

    Returns:
        The resolved tzinfo.
    """
    if not name:
        return fallback
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as err:
        _LOGGER.debug(
            "Reference time zone '%s' unavailable (%s), using local zone", name, err
        )
        return fallback


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_local(tz: tzinfo) -> datetime:
    """Return the current datetime in the given zone (timezone-aware)."""
    return datetime.now(tz)


def dt_now_hhmm(tz: tzinfo) -> str:
    """Return the current wall clock as zero-padded "HH:MM" in the given zone.

    Example:
        "05:07"
    """
    return dt_now_local(tz).strftime(HHMM_FORMAT)


def dt_today_iso(tz: tzinfo) -> str:
    """Return today's civil date in the given zone as "YYYY-MM-DD"."""
    return dt_now_local(tz).date().isoformat()


# ==============================================================================
# Civil Date Arithmetic
# ==============================================================================


def dt_shift_iso_date(iso_date: str, days: int) -> str:
    """Shift an ISO date by a whole number of days.

    Example:
        dt_shift_iso_date("2024-03-01", -1) -> "2024-02-29"
    """
    return (date.fromisoformat(iso_date) + timedelta(days=days)).isoformat()


def dt_days_between(start_iso: str, end_iso: str) -> int:
    """Return the civil-calendar day count from start to end.

    Pure calendar arithmetic on dates, never elapsed hours, so daylight-saving
    transitions cannot shift the result.

    Example:
        dt_days_between("2024-01-03", "2024-01-05") -> 2
    """
    return (date.fromisoformat(end_iso) - date.fromisoformat(start_iso)).days


def dt_last_n_days(end_iso: str, count: int) -> list[str]:
    """Return `count` ISO dates ending at `end_iso`, oldest first."""
    return [dt_shift_iso_date(end_iso, -offset) for offset in range(count - 1, -1, -1)]


def dt_combine_local(iso_date: str, hhmm: str, tz: tzinfo) -> datetime:
    """Build an aware datetime for a civil date and "HH:MM" in the given zone."""
    hour, minute = (int(part) for part in hhmm.split(":"))
    return datetime.combine(date.fromisoformat(iso_date), time(hour, minute), tzinfo=tz)


# ==============================================================================
# Time-of-Day Helpers
# ==============================================================================


def is_valid_hhmm(value: object) -> bool:
    """Return True when value is a zero-padded 24-hour "HH:MM" string."""
    return isinstance(value, str) and bool(_HHMM_PATTERN.match(value))


def hhmm_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight.

    Raises:
        ValueError: If value is not a valid "HH:MM" string.
    """
    match = _HHMM_PATTERN.match(value) if isinstance(value, str) else None
    if match is None:
        raise ValueError(f"Invalid time of day: {value!r}")
    return int(match.group(1)) * 60 + int(match.group(2))
