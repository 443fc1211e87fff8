"""Prayer Manager - Stateful prayer marking and sync orchestration.

This manager owns every read-modify-write of the prayer history:
- Marking / unmarking a prayer (optimistic apply, remote upsert, rollback)
- The periodic auto-miss sweep for today's slots
- Reconciling today's record from the remote store
- Full local data reset

ARCHITECTURE:
- PrayerManager = "The Job" (STATEFUL orchestration, storage, remote calls)
- PrayerEngine / StreakEngine = Pure decision logic (STATELESS)
- GamificationManager = Badge unlocks, invoked inside the apply phase
- NotificationManager = Listens to PRAYER_MARKED / DATA_RESET signals

A mark moves through Validating -> Applying -> Syncing and ends Committed or
RolledBack. All entry points share the coordinator's state lock, so a user
mark and a sweep tick never interleave their writes.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError, ServiceValidationError

from .. import const
from ..api_client import PrayerTrackerApiError, PrayerTrackerPolicyError
from ..engines.prayer_engine import PrayerEngine
from ..engines.streak_engine import StreakEngine
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import PrayerTrackerCoordinator
    from ..type_defs import PrayerHistory, StreakState


__all__ = ["PrayerManager", "PrayerSnapshot", "SyncResult"]


@dataclass(frozen=True)
class SyncResult:
    """Outcome of pushing one prayer status to the remote store.

    Attributes:
        ok: True when the remote upsert succeeded
        error: Backend or transport message when it did not
        policy_error: True when the backend reported a policy misconfiguration
    """

    ok: bool
    error: str | None = None
    policy_error: bool = False


@dataclass(frozen=True)
class PrayerSnapshot:
    """Pre-apply copy of everything a failed sync must restore."""

    history: PrayerHistory
    streak: StreakState


class PrayerManager(BaseManager):
    """Manager for prayer status workflows.

    Responsibilities:
    - Validate and apply mark/unmark actions
    - Snapshot and roll back local state when the remote upsert fails
    - Run the auto-miss sweep and the today reconciliation
    - Emit PRAYER_MARKED / DATA_RESET for downstream listeners

    NOT responsible for:
    - Time-window and streak rules (PrayerEngine / StreakEngine)
    - Badge bookkeeping (GamificationManager)
    - Notification scheduling (NotificationManager)
    """

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: PrayerTrackerCoordinator,
    ) -> None:
        """Initialize PrayerManager with dependencies."""
        super().__init__(hass, coordinator)
        self._coordinator = coordinator

    async def async_setup(self) -> None:
        """Set up the PrayerManager.

        No subscriptions: prayer workflows are driven by services and the
        coordinator's update tick.
        """

    # =========================================================================
    # MARK / UNMARK
    # =========================================================================

    async def async_mark_prayer(self, prayer_id: str) -> str:
        """Toggle one of today's prayers and sync the result.

        Pending/Missed prayers become Prayed or Late; Prayed/Late prayers are
        unmarked back to Pending.

        Args:
            prayer_id: One of the fixed prayer ids ("1".."5")

        Returns:
            The committed status

        Raises:
            ServiceValidationError: Unknown prayer, or marked before the gate time
            HomeAssistantError: Missing slot config, policy block, or sync failure
                (local state has been rolled back)
        """
        if prayer_id not in const.PRAYER_IDS:
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_UNKNOWN_PRAYER,
                translation_placeholders={"prayer": str(prayer_id)},
            )
        self._raise_if_policy_blocked()

        async with self._coordinator.state_lock:
            return await self._mark_prayer_locked(prayer_id)

    async def _mark_prayer_locked(self, prayer_id: str) -> str:
        """Run Validating -> Applying -> Syncing while holding the state lock."""
        prayer_name = const.PRAYER_NAMES[prayer_id]
        today = self._coordinator.today_iso()
        now_hhmm = self._coordinator.now_hhmm()

        # Validating
        slot = PrayerEngine.find_slot(self._coordinator.prayer_times, prayer_id)
        if slot is None:
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_CONFIG_MISSING,
                translation_placeholders={"prayer": prayer_name},
            )

        current = PrayerEngine.get_status(self._coordinator.history, today, prayer_id)
        result = PrayerEngine.calculate_transition(current, slot, now_hhmm)
        if not result.accepted:
            if result.reject_reason == const.REJECT_REASON_TOO_EARLY:
                raise ServiceValidationError(
                    translation_domain=const.DOMAIN,
                    translation_key=const.TRANS_KEY_ERROR_TOO_EARLY,
                    translation_placeholders={
                        "prayer": prayer_name,
                        "gate_time": str(result.gate_time),
                    },
                )
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_CONFIG_MISSING,
                translation_placeholders={"prayer": prayer_name},
            )

        new_status = str(result.new_status)
        const.LOGGER.debug(
            "Marking %s on %s: %s -> %s (now %s)",
            prayer_name,
            today,
            current,
            new_status,
            now_hhmm,
        )

        # Applying (optimistic)
        snapshot = self._take_snapshot()
        await self._async_apply_today(today, {prayer_id: new_status})
        self.emit(
            const.SIGNAL_SUFFIX_PRAYER_MARKED,
            prayer_id=prayer_id,
            status=new_status,
            date=today,
        )
        self._coordinator.async_update_listeners()

        # Syncing
        sync_result = await self._async_sync_prayer(today, prayer_id, new_status)
        if sync_result.ok:
            const.LOGGER.debug("Synced %s=%s for %s", prayer_name, new_status, today)
            return new_status

        # RolledBack
        const.LOGGER.error(
            "Failed to sync %s=%s for %s, reverting local changes: %s",
            prayer_name,
            new_status,
            today,
            sync_result.error,
        )
        await self._async_restore_snapshot(snapshot)
        self.emit(
            const.SIGNAL_SUFFIX_PRAYER_MARKED,
            prayer_id=prayer_id,
            status=current,
            date=today,
        )
        if sync_result.policy_error:
            self._coordinator.set_profile_status(
                const.PROFILE_STATUS_POLICY_ERROR, sync_result.error
            )
        self._coordinator.async_update_listeners()
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_SYNC_FAILED,
            translation_placeholders={
                "prayer": prayer_name,
                "status": new_status,
                "error": sync_result.error or "",
            },
        )

    async def _async_sync_prayer(
        self, iso_date: str, prayer_id: str, status: str
    ) -> SyncResult:
        """Upsert one status remotely; every failure becomes a failed SyncResult."""
        try:
            await self._coordinator.api.async_upsert_prayer(
                self._coordinator.user_id,
                iso_date,
                const.PRAYER_NAMES[prayer_id],
                status,
            )
        except PrayerTrackerPolicyError as err:
            return SyncResult(ok=False, error=str(err), policy_error=True)
        except PrayerTrackerApiError as err:
            return SyncResult(ok=False, error=str(err))
        except Exception as err:  # pylint: disable=broad-exception-caught
            const.LOGGER.exception("Unexpected error syncing %s", prayer_id)
            return SyncResult(ok=False, error=str(err) or type(err).__name__)
        return SyncResult(ok=True)

    def _raise_if_policy_blocked(self) -> None:
        """Refuse workflow actions while the profile is in the policy-error state."""
        if self._coordinator.profile_status == const.PROFILE_STATUS_POLICY_ERROR:
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_POLICY,
            )

    # =========================================================================
    # APPLY / SNAPSHOT HELPERS
    # =========================================================================

    def _take_snapshot(self) -> PrayerSnapshot:
        """Copy history and streak counters before an optimistic apply."""
        return PrayerSnapshot(
            history=copy.deepcopy(self._coordinator.history),
            streak=self._coordinator.streak_state,
        )

    async def _async_restore_snapshot(self, snapshot: PrayerSnapshot) -> None:
        """Restore a snapshot in memory and in local storage."""
        data = self._coordinator.store.data
        data[const.DATA_HISTORY] = copy.deepcopy(snapshot.history)
        data.update(snapshot.streak)
        await self._coordinator.async_persist()

    async def _async_apply_today(
        self, today: str, changes: dict[str, str], replace: bool = False
    ) -> None:
        """Merge (or replace) today's record, then recompute streak and badges.

        History is persisted before the streak recompute, and the streak and
        badge results are persisted afterwards.
        """
        history = self._coordinator.history
        if replace:
            history[today] = dict(changes)
        else:
            history.setdefault(today, {}).update(changes)
        await self._coordinator.async_persist()

        new_streak = StreakEngine.recompute(
            self._coordinator.streak_state, history, today
        )
        self._coordinator.store.data.update(new_streak)
        await self._coordinator.gamification_manager.async_evaluate_and_unlock(
            history, new_streak[const.DATA_CURRENT_STREAK]
        )
        await self._coordinator.async_persist()

    # =========================================================================
    # AUTO-MISS SWEEP
    # =========================================================================

    async def async_run_auto_miss_sweep(self) -> dict[str, str]:
        """Force today's expired Pending slots to Missed.

        Local only; running it again right away changes nothing.

        Returns:
            Mapping of prayer id -> Missed for the slots changed by this run
        """
        async with self._coordinator.state_lock:
            today = self._coordinator.today_iso()
            history = self._coordinator.history
            changes = PrayerEngine.plan_auto_missed(
                history.get(today, {}),
                self._coordinator.prayer_times,
                self._coordinator.now_hhmm(),
            )
            if not changes:
                return {}

            history.setdefault(today, {}).update(changes)
            await self._coordinator.async_persist()

        const.LOGGER.info(
            "Auto-marked as missed for %s: %s",
            today,
            ", ".join(const.PRAYER_NAMES.get(pid, pid) for pid in changes),
        )
        return changes

    # =========================================================================
    # RECONCILIATION / RESET
    # =========================================================================

    async def async_refresh_today(self) -> dict[str, str]:
        """Replace today's record with the remote rows (last writer wins).

        Rows naming an unknown prayer or status are ignored. The streak is
        recomputed from the refreshed record.

        Returns:
            Today's record after the refresh

        Raises:
            HomeAssistantError: When the remote read fails (local state untouched)
        """
        async with self._coordinator.state_lock:
            today = self._coordinator.today_iso()
            try:
                rows = await self._coordinator.api.async_fetch_prayers(
                    self._coordinator.user_id, today
                )
            except PrayerTrackerApiError as err:
                const.LOGGER.error("Error refreshing today's prayers: %s", err)
                raise HomeAssistantError(
                    translation_domain=const.DOMAIN,
                    translation_key=const.TRANS_KEY_ERROR_REFRESH_FAILED,
                    translation_placeholders={"error": str(err)},
                ) from err

            record = self._record_from_rows(rows)
            await self._async_apply_today(today, record, replace=True)
            const.LOGGER.debug(
                "Refreshed %s from remote store: %s rows", today, len(record)
            )
            self._coordinator.async_update_listeners()
            return dict(record)

    @staticmethod
    def _record_from_rows(rows: list[dict[str, Any]]) -> dict[str, str]:
        """Map remote (prayer_name, status) rows to a prayer id -> status record."""
        record: dict[str, str] = {}
        for row in rows:
            prayer_id = const.PRAYER_IDS_BY_NAME.get(
                row.get(const.REMOTE_COL_PRAYER_NAME, "")
            )
            status = row.get(const.REMOTE_COL_STATUS)
            if prayer_id is None or status not in const.PRAYER_STATUSES:
                const.LOGGER.debug("Ignoring unrecognized remote prayer row: %s", row)
                continue
            record[prayer_id] = status
        return record

    async def async_reset_all_data(self) -> None:
        """Clear all local prayer data and settings back to defaults.

        Remote rows are left untouched.
        """
        async with self._coordinator.state_lock:
            await self._coordinator.store.async_clear()
        self.emit(const.SIGNAL_SUFFIX_DATA_RESET)
        self._coordinator.async_update_listeners()
