# File: services.py
"""Defines custom services for the Prayer Tracker integration.

These services allow direct actions through scripts, automations and
dashboard buttons: marking prayers, editing prayer windows, toggling
notifications and resetting local data.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import voluptuous as vol
from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.helpers import config_validation as cv

from . import const
from .helpers.entity_helpers import get_first_prayertracker_entry
from .utils.dt_utils import is_valid_hhmm

if TYPE_CHECKING:
    from .coordinator import PrayerTrackerCoordinator


def _hhmm(value: str) -> str:
    """Voluptuous validator for zero-padded "HH:MM" strings."""
    value = cv.string(value)
    if not is_valid_hhmm(value):
        raise vol.Invalid(f"Invalid time '{value}', expected HH:MM")
    return value


def _optional_hhmm(value: str | None) -> str | None:
    """Accept "HH:MM", or an empty value to clear the time."""
    if value in (None, ""):
        return None
    return _hhmm(value)


PRAYER_NAME_VALIDATOR = vol.In(list(const.PRAYER_IDS_BY_NAME))

# --- Service Schemas ---
MARK_PRAYER_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_PRAYER): PRAYER_NAME_VALIDATOR,
    }
)

REFRESH_TODAY_SCHEMA = vol.Schema({})

UPDATE_PRAYER_TIME_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_PRAYER): PRAYER_NAME_VALIDATOR,
        vol.Required(const.FIELD_END_TIME): _hhmm,
        vol.Optional(const.FIELD_START_TIME): _optional_hhmm,
        vol.Optional(const.FIELD_MOSQUE_TIME): _optional_hhmm,
    }
)

SET_NOTIFICATIONS_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_ENABLED): cv.boolean,
        vol.Optional(const.FIELD_REMINDER_LEAD_TIME): vol.All(
            vol.Coerce(int), vol.Range(min=1, max=180)
        ),
    }
)

RESET_ALL_DATA_SCHEMA = vol.Schema({})

REFRESH_PROFILE_SCHEMA = vol.Schema({})


def _get_coordinator(
    hass: HomeAssistant, service_name: str
) -> PrayerTrackerCoordinator | None:
    """Return the coordinator of the first loaded entry, or None with a warning."""
    entry_id = get_first_prayertracker_entry(hass)
    if not entry_id:
        const.LOGGER.warning("%s: No Prayer Tracker entry found", service_name)
        return None
    return hass.data[const.DOMAIN][entry_id][const.COORDINATOR]


def async_setup_services(hass: HomeAssistant) -> None:
    """Register Prayer Tracker services."""

    async def handle_mark_prayer(call: ServiceCall) -> None:
        """Handle marking (or unmarking) one of today's prayers."""
        coordinator = _get_coordinator(hass, const.SERVICE_MARK_PRAYER)
        if coordinator is None:
            return
        prayer_id = const.PRAYER_IDS_BY_NAME[call.data[const.FIELD_PRAYER]]
        status = await coordinator.prayer_manager.async_mark_prayer(prayer_id)
        const.LOGGER.info(
            "%s marked as %s", call.data[const.FIELD_PRAYER], status
        )

    async def handle_refresh_today(_call: ServiceCall) -> None:
        """Handle pulling today's prayers from the backend."""
        coordinator = _get_coordinator(hass, const.SERVICE_REFRESH_TODAY)
        if coordinator is None:
            return
        await coordinator.prayer_manager.async_refresh_today()

    async def handle_update_prayer_time(call: ServiceCall) -> None:
        """Handle editing one prayer's time window."""
        coordinator = _get_coordinator(hass, const.SERVICE_UPDATE_PRAYER_TIME)
        if coordinator is None:
            return
        prayer_id = const.PRAYER_IDS_BY_NAME[call.data[const.FIELD_PRAYER]]
        current = next(
            (
                slot
                for slot in coordinator.prayer_times
                if slot.get(const.DATA_SLOT_ID) == prayer_id
            ),
            {},
        )
        # Omitted fields keep their current value
        await coordinator.settings_manager.async_update_prayer_time(
            prayer_id,
            end_time=call.data[const.FIELD_END_TIME],
            start_time=call.data.get(
                const.FIELD_START_TIME, current.get(const.DATA_SLOT_START_TIME)
            ),
            mosque_time=call.data.get(
                const.FIELD_MOSQUE_TIME, current.get(const.DATA_SLOT_MOSQUE_TIME)
            ),
        )

    async def handle_set_notifications(call: ServiceCall) -> None:
        """Handle toggling prayer notifications."""
        coordinator = _get_coordinator(hass, const.SERVICE_SET_NOTIFICATIONS)
        if coordinator is None:
            return
        await coordinator.settings_manager.async_set_notifications(
            call.data[const.FIELD_ENABLED],
            reminder_lead_time=call.data.get(const.FIELD_REMINDER_LEAD_TIME),
        )

    async def handle_reset_all_data(_call: ServiceCall) -> None:
        """Handle clearing all local prayer data (backend rows are kept)."""
        coordinator = _get_coordinator(hass, const.SERVICE_RESET_ALL_DATA)
        if coordinator is None:
            return
        await coordinator.prayer_manager.async_reset_all_data()
        const.LOGGER.info("Prayer Tracker local data reset to defaults")

    async def handle_refresh_profile(_call: ServiceCall) -> None:
        """Handle retrying the profile load (e.g. after a policy error)."""
        coordinator = _get_coordinator(hass, const.SERVICE_REFRESH_PROFILE)
        if coordinator is None:
            return
        status = await coordinator.settings_manager.async_load_profile()
        if status == const.PROFILE_STATUS_SUCCESS:
            await coordinator.settings_manager.async_sync_cloud_settings()
            await coordinator.gamification_manager.async_sync_remote_achievements()

    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_MARK_PRAYER,
        handle_mark_prayer,
        schema=MARK_PRAYER_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_REFRESH_TODAY,
        handle_refresh_today,
        schema=REFRESH_TODAY_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_UPDATE_PRAYER_TIME,
        handle_update_prayer_time,
        schema=UPDATE_PRAYER_TIME_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_SET_NOTIFICATIONS,
        handle_set_notifications,
        schema=SET_NOTIFICATIONS_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RESET_ALL_DATA,
        handle_reset_all_data,
        schema=RESET_ALL_DATA_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_REFRESH_PROFILE,
        handle_refresh_profile,
        schema=REFRESH_PROFILE_SCHEMA,
    )

    const.LOGGER.info("Prayer Tracker services have been registered successfully")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister Prayer Tracker services when unloading the integration."""
    services = [
        const.SERVICE_MARK_PRAYER,
        const.SERVICE_REFRESH_TODAY,
        const.SERVICE_UPDATE_PRAYER_TIME,
        const.SERVICE_SET_NOTIFICATIONS,
        const.SERVICE_RESET_ALL_DATA,
        const.SERVICE_REFRESH_PROFILE,
    ]
    for service in services:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("Prayer Tracker services have been unregistered")
