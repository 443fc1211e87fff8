"""Prayer Engine - Pure logic for prayer time windows and status transitions.

This engine provides stateless, pure Python functions for:
- Time-window checks against the reference zone wall clock ("HH:MM")
- Status transition decisions for a single prayer tap (mark / unmark)
- Planning the periodic auto-miss sweep
- Status queries over the history map

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data. The current
time is always an explicit "HH:MM" argument, so every decision is a pure
function of (status, slot, now). State management belongs in PrayerManager.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .. import const

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ..type_defs import DayRecord, PrayerHistory, PrayerSlotConfig


# =============================================================================
# TRANSITION RESULT DATA STRUCTURE
# =============================================================================


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a mark/unmark decision for one prayer.

    Exactly one of `new_status` / `reject_reason` is set.

    Attributes:
        new_status: Status to store when the action is accepted
        reject_reason: One of const.REJECT_REASON_* when rejected
        gate_time: The "HH:MM" the window opens at (set for too-early rejections)
    """

    new_status: str | None = None
    reject_reason: str | None = None
    gate_time: str | None = None

    @property
    def accepted(self) -> bool:
        """Return True when the action produced a new status."""
        return self.reject_reason is None


# =============================================================================
# PRAYER ENGINE
# =============================================================================


class PrayerEngine:
    """Pure logic engine for prayer status decisions.

    All methods are static - no instance state. This enables easy unit testing
    without any Home Assistant mocking.
    """

    # =========================================================================
    # TIME WINDOW
    # =========================================================================

    @staticmethod
    def has_crossed(target_time: str, now_hhmm: str) -> bool:
        """Return True when the wall clock is at or past target_time.

        Both sides are zero-padded 24-hour "HH:MM" strings rendered in the
        same reference zone, so lexicographic order equals chronological
        order within a day.

        Args:
            target_time: Boundary to test, "HH:MM"
            now_hhmm: Current wall clock, "HH:MM"

        Returns:
            True iff now_hhmm >= target_time
        """
        return now_hhmm >= target_time

    @staticmethod
    def gate_time(slot: PrayerSlotConfig | Mapping[str, str | None]) -> str | None:
        """Return the time marking opens at (mosque time wins over start time)."""
        return slot.get(const.DATA_SLOT_MOSQUE_TIME) or slot.get(
            const.DATA_SLOT_START_TIME
        )

    # =========================================================================
    # STATUS TRANSITION LOGIC
    # =========================================================================

    @staticmethod
    def calculate_transition(
        current_status: str,
        slot: PrayerSlotConfig | Mapping[str, str | None],
        now_hhmm: str,
    ) -> TransitionResult:
        """Decide the outcome of a user tap on a prayer.

        Prayed/Late taps unmark back to Pending with no time check. Pending/
        Missed taps mark the prayer done: rejected before the gate time,
        Late once the end time is crossed, Prayed otherwise.

        Args:
            current_status: Stored status (absent entries are Pending)
            slot: The prayer's configured time window
            now_hhmm: Current wall clock in the reference zone

        Returns:
            TransitionResult with the new status or a rejection reason
        """
        if current_status in const.COMPLETED_STATUSES:
            return TransitionResult(new_status=const.PRAYER_STATUS_PENDING)

        gate = PrayerEngine.gate_time(slot)
        end_time = slot.get(const.DATA_SLOT_END_TIME)
        if not gate or not end_time:
            return TransitionResult(reject_reason=const.REJECT_REASON_CONFIG_MISSING)

        if not PrayerEngine.has_crossed(gate, now_hhmm):
            return TransitionResult(
                reject_reason=const.REJECT_REASON_TOO_EARLY, gate_time=gate
            )

        if PrayerEngine.has_crossed(end_time, now_hhmm):
            return TransitionResult(new_status=const.PRAYER_STATUS_LATE)
        return TransitionResult(new_status=const.PRAYER_STATUS_PRAYED)

    # =========================================================================
    # AUTO-MISS SWEEP
    # =========================================================================

    @staticmethod
    def plan_auto_missed(
        day_record: Mapping[str, str],
        slots: Iterable[PrayerSlotConfig],
        now_hhmm: str,
    ) -> dict[str, str]:
        """Plan which of today's slots the sweep should force to Missed.

        Only slots still Pending (explicitly or by absence) whose end time has
        been crossed are returned. Prayed/Late/Missed slots are never touched,
        so applying the plan twice equals applying it once.

        Args:
            day_record: Today's prayer id -> status map
            slots: Configured slots
            now_hhmm: Current wall clock in the reference zone

        Returns:
            Mapping of prayer id -> Missed for every slot to update
        """
        changes: dict[str, str] = {}
        for slot in slots:
            prayer_id = slot[const.DATA_SLOT_ID]
            status = day_record.get(prayer_id, const.PRAYER_STATUS_PENDING)
            if status != const.PRAYER_STATUS_PENDING:
                continue
            end_time = slot.get(const.DATA_SLOT_END_TIME)
            if end_time and PrayerEngine.has_crossed(end_time, now_hhmm):
                changes[prayer_id] = const.PRAYER_STATUS_MISSED
        return changes

    # =========================================================================
    # QUERY FUNCTIONS
    # =========================================================================

    @staticmethod
    def get_status(history: PrayerHistory, iso_date: str, prayer_id: str) -> str:
        """Return the stored status, defaulting to Pending when absent."""
        return history.get(iso_date, {}).get(prayer_id, const.PRAYER_STATUS_PENDING)

    @staticmethod
    def is_completed_status(status: str | None) -> bool:
        """Return True for Prayed or Late."""
        return status in const.COMPLETED_STATUSES

    @staticmethod
    def count_completed(day_record: DayRecord | Mapping[str, str]) -> int:
        """Count Prayed/Late entries in one day's record."""
        return sum(
            1 for status in day_record.values() if status in const.COMPLETED_STATUSES
        )

    @staticmethod
    def find_slot(
        slots: Iterable[PrayerSlotConfig], prayer_id: str
    ) -> PrayerSlotConfig | None:
        """Return the slot config for prayer_id, or None when not configured."""
        for slot in slots:
            if slot.get(const.DATA_SLOT_ID) == prayer_id:
                return slot
        return None
