# File: __init__.py
"""Initialization file for the Prayer Tracker integration.

Handles setting up the integration: loading local storage, building the
backend client and the coordinator, registering services and forwarding the
sensor platform.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from . import const
from .api_client import PrayerTrackerApiClient
from .coordinator import PrayerTrackerCoordinator
from .services import async_setup_services, async_unload_services
from .store import PrayerTrackerStore


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("Starting setup for Prayer Tracker entry: %s", entry.entry_id)

    store = PrayerTrackerStore(hass, const.STORAGE_KEY)
    await store.async_initialize()

    api = PrayerTrackerApiClient(
        async_get_clientsession(hass),
        entry.data[const.CONF_API_URL],
        entry.data[const.CONF_API_KEY],
        access_token=entry.data.get(const.CONF_ACCESS_TOKEN),
    )

    coordinator = PrayerTrackerCoordinator(hass, entry, store, api)

    # Raises ConfigEntryNotReady when the first update fails; remote reads
    # inside the first refresh are non-fatal
    await coordinator.async_config_entry_first_refresh()

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
        const.STORE: store,
    }

    async_setup_services(hass)

    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)

    const.LOGGER.info("Prayer Tracker setup complete for entry: %s", entry.entry_id)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("Unloading Prayer Tracker entry: %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, const.PLATFORMS)

    if unload_ok:
        hass.data[const.DOMAIN].pop(entry.entry_id)
        if not hass.data[const.DOMAIN]:
            await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry: delete the local storage file."""
    const.LOGGER.info("Removing Prayer Tracker entry: %s", entry.entry_id)
    store = PrayerTrackerStore(hass, const.STORAGE_KEY)
    await store.async_delete_storage()
    const.LOGGER.info("Prayer Tracker entry data cleared: %s", entry.entry_id)
