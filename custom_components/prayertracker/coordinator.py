# File: coordinator.py
"""Coordinator for the Prayer Tracker integration.

Owns the state container (prayer history, streak counters, earned badges,
settings, profile status), the local store, the backend client and the
managers. The periodic update runs the auto-miss sweep; the first refresh
loads local state and reconciles it with the backend.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed
from homeassistant.util import dt as dt_util

from . import const
from .engines.statistics_engine import StatisticsEngine
from .engines.streak_engine import StreakEngine
from .managers import (
    GamificationManager,
    NotificationManager,
    PrayerManager,
    SettingsManager,
)
from .utils.dt_utils import dt_now_hhmm, dt_today_iso, resolve_time_zone

if TYPE_CHECKING:
    from datetime import tzinfo

    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from .api_client import PrayerTrackerApiClient
    from .store import PrayerTrackerStore
    from .type_defs import (
        DayClass,
        PrayerBreakdownEntry,
        PrayerHistory,
        PrayerSettings,
        PrayerSlotConfig,
        StreakState,
        TodayRatio,
    )


class PrayerTrackerCoordinator(DataUpdateCoordinator[dict[str, Any]]):
    """Coordinator for Prayer Tracker.

    All mutable state lives in the store's in-memory document; properties
    below return live references so managers mutate in place and persist
    through async_persist().
    """

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        store: PrayerTrackerStore,
        api: PrayerTrackerApiClient,
    ) -> None:
        """Initialize the PrayerTrackerCoordinator."""
        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=const.DEFAULT_SWEEP_INTERVAL,
        )
        self.store = store
        self.api = api
        self.user_id: str = config_entry.data[const.CONF_USER_ID]
        self.notify_service: str = config_entry.data.get(
            const.CONF_NOTIFY_SERVICE, const.DEFAULT_NOTIFY_SERVICE
        )
        self.time_zone: tzinfo = dt_util.get_default_time_zone()

        # Single critical section for every read-modify-write of the state
        self.state_lock = asyncio.Lock()

        self.profile: dict[str, Any] | None = None
        self.profile_status: str = const.PROFILE_STATUS_IDLE
        self.profile_error: str | None = None

        self.prayer_manager = PrayerManager(hass, self)
        self.gamification_manager = GamificationManager(hass, self)
        self.settings_manager = SettingsManager(hass, self)
        self.notification_manager = NotificationManager(hass, self)

    # -------------------------------------------------------------------------------------
    # Clock (reference zone)
    # -------------------------------------------------------------------------------------

    def today_iso(self) -> str:
        """Return today's civil date in the reference zone."""
        return dt_today_iso(self.time_zone)

    def now_hhmm(self) -> str:
        """Return the current wall clock "HH:MM" in the reference zone."""
        return dt_now_hhmm(self.time_zone)

    # -------------------------------------------------------------------------------------
    # State container
    # -------------------------------------------------------------------------------------

    @property
    def history(self) -> PrayerHistory:
        """Return the live prayer history (date -> prayer id -> status)."""
        return self.store.data.setdefault(const.DATA_HISTORY, {})

    @property
    def settings(self) -> PrayerSettings:
        """Return the live settings blob."""
        return self.store.data[const.DATA_SETTINGS]

    @property
    def prayer_times(self) -> list[PrayerSlotConfig]:
        """Return the configured prayer slots."""
        return self.settings.get(const.DATA_SETTINGS_PRAYER_TIMES, [])

    @property
    def earned_badges(self) -> list[str]:
        """Return the live list of earned badge ids."""
        return self.store.data.setdefault(const.DATA_EARNED_BADGES, [])

    @property
    def streak_state(self) -> StreakState:
        """Return a copy of the streak counters."""
        data = self.store.data
        return {
            const.DATA_CURRENT_STREAK: data.get(const.DATA_CURRENT_STREAK, 0),
            const.DATA_LONGEST_STREAK: data.get(const.DATA_LONGEST_STREAK, 0),
            const.DATA_LAST_COMPLETED_DATE: data.get(const.DATA_LAST_COMPLETED_DATE),
        }

    def set_profile_status(self, status: str, error: str | None = None) -> None:
        """Record the remote profile status and its error message."""
        const.LOGGER.debug("Profile status: %s -> %s", self.profile_status, status)
        self.profile_status = status
        self.profile_error = error

    async def async_persist(self) -> None:
        """Save the state container to local storage."""
        await self.store.async_save()

    # -------------------------------------------------------------------------------------
    # Derived metrics
    # -------------------------------------------------------------------------------------

    def get_today_ratio(self) -> TodayRatio:
        """Return today's completed count out of five."""
        return StatisticsEngine.today_ratio(self.history, self.today_iso())

    def get_weekly_progress(self) -> list[int]:
        """Return completed counts for the last seven days, oldest first."""
        return StatisticsEngine.weekly_progress(self.history, self.today_iso())

    def get_prayer_breakdown(self) -> list[PrayerBreakdownEntry]:
        """Return per-prayer completion counts for the last seven days."""
        return StatisticsEngine.prayer_breakdown(self.history, self.today_iso())

    def get_calendar_markers(self) -> dict[str, DayClass]:
        """Return full/partial/none for recorded dates of the last month."""
        return StatisticsEngine.calendar_markers(self.history, self.today_iso())

    # -------------------------------------------------------------------------------------
    # Update cycle
    # -------------------------------------------------------------------------------------

    async def _async_update_data(self) -> dict[str, Any]:
        """Periodic update: auto-miss sweep for today."""
        try:
            await self.prayer_manager.async_run_auto_miss_sweep()
        except Exception as err:  # pylint: disable=broad-exception-caught
            raise UpdateFailed(f"Error updating Prayer Tracker data: {err}") from err
        return self.store.data

    async def async_config_entry_first_refresh(self) -> None:
        """Load local state, then reconcile it with the backend.

        Remote reads are non-fatal: the integration keeps running on local
        state when the backend is unreachable.
        """
        self.time_zone = await self.hass.async_add_executor_job(
            resolve_time_zone,
            self.config_entry.data.get(
                const.CONF_REFERENCE_TIME_ZONE, const.DEFAULT_REFERENCE_TIME_ZONE
            ),
            dt_util.get_default_time_zone(),
        )

        for manager in (
            self.prayer_manager,
            self.gamification_manager,
            self.settings_manager,
            self.notification_manager,
        ):
            await manager.async_setup()

        # Lazy streak reset: only checked at load
        streak = StreakEngine.apply_gap_reset(self.streak_state, self.today_iso())
        if streak != self.streak_state:
            self.store.data.update(streak)
            await self.async_persist()

        await self.settings_manager.async_load_profile()
        if self.profile_status == const.PROFILE_STATUS_SUCCESS:
            await self.settings_manager.async_sync_cloud_settings()
            await self.gamification_manager.async_sync_remote_achievements()

        if self.profile_status != const.PROFILE_STATUS_POLICY_ERROR:
            try:
                await self.prayer_manager.async_refresh_today()
            except HomeAssistantError as err:
                const.LOGGER.warning(
                    "Continuing with local prayer data, refresh failed: %s", err
                )

        await self.prayer_manager.async_run_auto_miss_sweep()

        self.notification_manager.async_schedule_today()
        await super().async_config_entry_first_refresh()
