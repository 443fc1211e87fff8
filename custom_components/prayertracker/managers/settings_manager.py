"""Settings Manager - Prayer time configuration, notification prefs, profile.

Handles the user settings blob (five prayer windows, notification toggle,
reminder lead time) and the remote profile that mirrors it:
- Validated edits, persisted locally then pushed to the profile
- Cloud settings merged over local ones at startup
- Profile loading with a distinct policy-error state
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import ServiceValidationError
from homeassistant.util import dt as dt_util

from .. import const
from ..api_client import PrayerTrackerApiError, PrayerTrackerPolicyError
from ..utils.dt_utils import hhmm_to_minutes, is_valid_hhmm
from .base_manager import BaseManager

if TYPE_CHECKING:
    from collections.abc import Mapping

    from homeassistant.core import HomeAssistant

    from ..coordinator import PrayerTrackerCoordinator
    from ..type_defs import PrayerSettings, PrayerSlotConfig


def validate_prayer_slot(slot: Mapping[str, Any]) -> str | None:
    """Return a reason string when a slot config is invalid, else None.

    Rules:
    - start and mosque times are optional, but at least one must be set
    - end time is required
    - every set time is a zero-padded "HH:MM"
    - end time is strictly later than start time
    """
    start_time = slot.get(const.DATA_SLOT_START_TIME)
    mosque_time = slot.get(const.DATA_SLOT_MOSQUE_TIME)
    end_time = slot.get(const.DATA_SLOT_END_TIME)

    if not start_time and not mosque_time:
        return "start or mosque time required"
    if not end_time:
        return "end time required"
    for value in (start_time, mosque_time, end_time):
        if value and not is_valid_hhmm(value):
            return f"invalid time '{value}'"
    if start_time and hhmm_to_minutes(end_time) <= hhmm_to_minutes(start_time):
        return "end time must be later than start time"
    return None


class SettingsManager(BaseManager):
    """Manager for settings and the remote profile."""

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: PrayerTrackerCoordinator,
    ) -> None:
        """Initialize the SettingsManager."""
        super().__init__(hass, coordinator)
        self._coordinator = coordinator

    async def async_setup(self) -> None:
        """Set up the SettingsManager (no subscriptions needed)."""

    # =========================================================================
    # LOCAL EDITS
    # =========================================================================

    async def async_update_settings(
        self,
        prayer_times: list[PrayerSlotConfig] | None = None,
        notifications_enabled: bool | None = None,
        reminder_lead_time: int | None = None,
    ) -> PrayerSettings:
        """Apply a partial settings update.

        The five prayer slots can be edited but never added or removed.

        Returns:
            The full settings blob after the update

        Raises:
            ServiceValidationError: Invalid slot, or the slot ids do not match
                the five fixed prayers
        """
        async with self._coordinator.state_lock:
            updated: dict[str, Any] = copy.deepcopy(dict(self._coordinator.settings))
            if prayer_times is not None:
                updated[const.DATA_SETTINGS_PRAYER_TIMES] = self._validated_prayer_times(
                    prayer_times
                )
            if notifications_enabled is not None:
                updated[const.DATA_SETTINGS_NOTIFICATIONS_ENABLED] = bool(
                    notifications_enabled
                )
            if reminder_lead_time is not None:
                updated[const.DATA_SETTINGS_REMINDER_LEAD_TIME] = int(reminder_lead_time)

            self._coordinator.store.data[const.DATA_SETTINGS] = updated
            await self._coordinator.async_persist()

        await self._async_push_remote_settings(updated)
        self.emit(const.SIGNAL_SUFFIX_SETTINGS_UPDATED)
        self._coordinator.async_update_listeners()
        return updated  # type: ignore[return-value]

    async def async_update_prayer_time(
        self,
        prayer_id: str,
        end_time: str,
        start_time: str | None = None,
        mosque_time: str | None = None,
    ) -> PrayerSettings:
        """Replace the window of one prayer, keeping the other four."""
        if prayer_id not in const.PRAYER_IDS:
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_UNKNOWN_PRAYER,
                translation_placeholders={"prayer": str(prayer_id)},
            )
        prayer_times = [dict(slot) for slot in self._coordinator.prayer_times]
        new_slot = {
            const.DATA_SLOT_ID: prayer_id,
            const.DATA_SLOT_START_TIME: start_time or None,
            const.DATA_SLOT_MOSQUE_TIME: mosque_time or None,
            const.DATA_SLOT_END_TIME: end_time,
        }
        for index, slot in enumerate(prayer_times):
            if slot.get(const.DATA_SLOT_ID) == prayer_id:
                prayer_times[index] = new_slot
                break
        else:
            prayer_times.append(new_slot)
        return await self.async_update_settings(prayer_times=prayer_times)  # type: ignore[arg-type]

    async def async_set_notifications(
        self, enabled: bool, reminder_lead_time: int | None = None
    ) -> PrayerSettings:
        """Toggle notifications (and optionally the reminder lead time)."""
        return await self.async_update_settings(
            notifications_enabled=enabled, reminder_lead_time=reminder_lead_time
        )

    @staticmethod
    def _validated_prayer_times(
        prayer_times: list[PrayerSlotConfig] | list[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        """Validate and normalize a full list of slot configs, in prayer order."""
        by_id = {str(slot.get(const.DATA_SLOT_ID)): slot for slot in prayer_times}
        if set(by_id) != set(const.PRAYER_IDS) or len(prayer_times) != len(
            const.PRAYER_IDS
        ):
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_INVALID_PRAYER_TIME,
                translation_placeholders={
                    "prayer": ", ".join(sorted(by_id)),
                    "reason": "exactly the five fixed prayers are required",
                },
            )

        normalized: list[dict[str, Any]] = []
        for prayer_id in const.PRAYER_IDS:
            slot = by_id[prayer_id]
            reason = validate_prayer_slot(slot)
            if reason is not None:
                raise ServiceValidationError(
                    translation_domain=const.DOMAIN,
                    translation_key=const.TRANS_KEY_ERROR_INVALID_PRAYER_TIME,
                    translation_placeholders={
                        "prayer": const.PRAYER_NAMES[prayer_id],
                        "reason": reason,
                    },
                )
            normalized.append(
                {
                    const.DATA_SLOT_ID: prayer_id,
                    const.DATA_SLOT_START_TIME: slot.get(const.DATA_SLOT_START_TIME)
                    or None,
                    const.DATA_SLOT_MOSQUE_TIME: slot.get(const.DATA_SLOT_MOSQUE_TIME)
                    or None,
                    const.DATA_SLOT_END_TIME: slot[const.DATA_SLOT_END_TIME],
                }
            )
        return normalized

    async def _async_push_remote_settings(self, settings: Mapping[str, Any]) -> None:
        """Mirror the settings blob onto the remote profile (errors logged)."""
        try:
            await self._coordinator.api.async_update_prayer_settings(
                self._coordinator.user_id,
                settings,
                dt_util.utcnow().isoformat(),
            )
        except PrayerTrackerApiError as err:
            const.LOGGER.warning("Failed to push settings to remote profile: %s", err)

    # =========================================================================
    # REMOTE PROFILE
    # =========================================================================

    async def async_load_profile(self) -> str:
        """Fetch the remote profile and record the resulting profile status.

        Returns:
            One of const.PROFILE_STATUS_*
        """
        self._coordinator.set_profile_status(const.PROFILE_STATUS_LOADING)
        try:
            profile = await self._coordinator.api.async_fetch_profile(
                self._coordinator.user_id
            )
        except PrayerTrackerPolicyError as err:
            const.LOGGER.error("Profile blocked by backend policy error: %s", err)
            self._coordinator.profile = None
            self._coordinator.set_profile_status(
                const.PROFILE_STATUS_POLICY_ERROR, const.PROFILE_POLICY_ERROR_MESSAGE
            )
        except PrayerTrackerApiError as err:
            const.LOGGER.warning("Error fetching profile: %s", err)
            self._coordinator.set_profile_status(const.PROFILE_STATUS_ERROR, str(err))
        else:
            self._coordinator.profile = profile
            if profile is None:
                self._coordinator.set_profile_status(const.PROFILE_STATUS_MISSING)
            else:
                self._coordinator.set_profile_status(const.PROFILE_STATUS_SUCCESS)

        self._coordinator.async_update_listeners()
        return self._coordinator.profile_status

    async def async_sync_cloud_settings(self) -> bool:
        """Merge the profile's prayer_settings over the local settings.

        Uses the profile already loaded when present, otherwise fetches it.
        Non-fatal: read errors and invalid remote slots are logged and the
        local settings are kept.

        Returns:
            True when local settings changed
        """
        profile = self._coordinator.profile
        if profile is None:
            try:
                profile = await self._coordinator.api.async_fetch_profile(
                    self._coordinator.user_id
                )
            except PrayerTrackerApiError as err:
                const.LOGGER.warning("Error syncing cloud settings: %s", err)
                return False

        cloud_settings = (profile or {}).get(const.REMOTE_COL_PRAYER_SETTINGS)
        if not isinstance(cloud_settings, dict) or not cloud_settings:
            return False

        async with self._coordinator.state_lock:
            merged: dict[str, Any] = {**self._coordinator.settings, **cloud_settings}
            try:
                merged[const.DATA_SETTINGS_PRAYER_TIMES] = self._validated_prayer_times(
                    merged.get(const.DATA_SETTINGS_PRAYER_TIMES) or []
                )
            except ServiceValidationError:
                const.LOGGER.warning(
                    "Ignoring invalid prayer times in cloud settings: %s",
                    cloud_settings.get(const.DATA_SETTINGS_PRAYER_TIMES),
                )
                merged[const.DATA_SETTINGS_PRAYER_TIMES] = copy.deepcopy(
                    self._coordinator.prayer_times
                )
            merged = {
                key: merged[key]
                for key in (
                    const.DATA_SETTINGS_PRAYER_TIMES,
                    const.DATA_SETTINGS_NOTIFICATIONS_ENABLED,
                    const.DATA_SETTINGS_REMINDER_LEAD_TIME,
                )
                if key in merged
            }
            if merged == self._coordinator.settings:
                return False
            self._coordinator.store.data[const.DATA_SETTINGS] = merged
            await self._coordinator.async_persist()

        const.LOGGER.debug("Applied cloud settings from remote profile")
        self.emit(const.SIGNAL_SUFFIX_SETTINGS_UPDATED)
        return True
