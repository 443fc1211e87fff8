"""Test helpers for Prayer Tracker tests.

    from tests.helpers import TEST_TODAY, TEST_USER_ID, full_day, make_slots
"""

import copy
from typing import Any

from custom_components.prayertracker import const

TEST_USER_ID = "user-123"
TEST_ENTRY_ID = "test_entry_id"
TEST_TODAY = "2024-01-04"
# 13:00 on TEST_TODAY in the default reference zone (UTC+5)
TEST_NOW_UTC = "2024-01-04T08:00:00+00:00"


def full_day(status: str = const.PRAYER_STATUS_PRAYED) -> dict[str, str]:
    """Return a day record with every prayer set to status."""
    return dict.fromkeys(const.PRAYER_IDS, status)


def make_slots(**overrides: dict[str, Any]) -> list[dict[str, Any]]:
    """Return the default prayer slots, with per-prayer field overrides.

    Example:
        make_slots(**{"1": {"mosqueTime": "05:30"}})
    """
    slots = copy.deepcopy(list(const.DEFAULT_PRAYER_TIMES))
    for slot in slots:
        slot.update(overrides.get(slot[const.DATA_SLOT_ID], {}))
    return slots
