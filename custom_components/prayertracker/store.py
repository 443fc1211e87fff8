# File: store.py
"""Handles persistent local storage for the Prayer Tracker integration.

Uses Home Assistant's Storage helper as a durable key-value store, ensuring
prayer history, streak counters, settings and earned badges survive
restarts. Values are JSON-serializable and addressed by the DATA_* keys in
const.py.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.storage import Store

from . import const

if TYPE_CHECKING:
    from collections.abc import Mapping

    from homeassistant.core import HomeAssistant


class PrayerTrackerStore:
    """Handles persistent storage operations for Prayer Tracker data.

    Thin wrapper around Home Assistant's Store API exposing get/set/clear over
    a single JSON document.
    """

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).

        """
        self.hass = hass
        self._storage_key = storage_key
        self._store: Store = Store(hass, const.STORAGE_VERSION, storage_key)
        self._data: dict[str, Any] = {}  # In-memory data cache for quick access.

    @staticmethod
    def get_default_structure() -> dict[str, Any]:
        """Return canonical empty data structure for fresh installations.

        Returns:
            dict: Default structure with every recognized key initialized.
        """
        return {
            const.DATA_SCHEMA_VERSION: const.SCHEMA_VERSION_CURRENT,
            const.DATA_HISTORY: {},
            const.DATA_CURRENT_STREAK: 0,
            const.DATA_LONGEST_STREAK: 0,
            const.DATA_LAST_COMPLETED_DATE: None,
            const.DATA_SETTINGS: {
                const.DATA_SETTINGS_NOTIFICATIONS_ENABLED: (
                    const.DEFAULT_NOTIFICATIONS_ENABLED
                ),
                const.DATA_SETTINGS_REMINDER_LEAD_TIME: const.DEFAULT_REMINDER_LEAD_TIME,
                const.DATA_SETTINGS_PRAYER_TIMES: copy.deepcopy(
                    list(const.DEFAULT_PRAYER_TIMES)
                ),
            },
            const.DATA_EARNED_BADGES: [],
        }

    async def async_initialize(self) -> None:
        """Load data from storage during startup.

        If no data exists, initializes with the default structure. Keys added
        in later versions are filled with their defaults.
        """
        const.LOGGER.debug("PrayerTrackerStore: Loading data from storage")
        existing_data = await self._store.async_load()

        if existing_data is None:
            const.LOGGER.info("No existing storage found. Initializing new data")
            self._data = PrayerTrackerStore.get_default_structure()
        else:
            self._data = existing_data
            for key, value in PrayerTrackerStore.get_default_structure().items():
                self._data.setdefault(key, value)
            const.LOGGER.debug(
                "Loaded existing data from storage: %s days of history",
                len(self._data.get(const.DATA_HISTORY, {})),
            )

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory data cache."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Return a deep copy of the stored value for key."""
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    async def async_set(self, key: str, value: Any) -> None:
        """Store a single value and save."""
        const.LOGGER.debug("Updating stored value for key: %s", key)
        self._data[key] = copy.deepcopy(value)
        await self.async_save()

    async def async_set_many(self, values: Mapping[str, Any]) -> None:
        """Store several values with a single save."""
        const.LOGGER.debug("Updating stored values for keys: %s", list(values))
        for key, value in values.items():
            self._data[key] = copy.deepcopy(value)
        await self.async_save()

    async def async_save(self) -> None:
        """Save the current data structure to storage asynchronously.

        Raises:
            No exceptions raised - errors are logged but do not stop execution.
            OSError: Logged when file system issues prevent saving.
            TypeError: Logged when data contains non-serializable types.
            ValueError: Logged when data is invalid for JSON serialization.
        """
        try:
            await self._store.async_save(self._data)
            const.LOGGER.debug("Data saved successfully to storage")
        except OSError as err:
            const.LOGGER.error(
                "Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
        except TypeError as err:
            const.LOGGER.error(
                "Failed to save storage due to non-serializable data: %s", err
            )
        except ValueError as err:
            const.LOGGER.error(
                "Failed to save storage due to invalid data format: %s", err
            )

    async def async_clear(self) -> None:
        """Clear all stored data and reset to default structure."""
        const.LOGGER.warning("Clearing all Prayer Tracker data and resetting storage")
        self._data.clear()
        self._data = PrayerTrackerStore.get_default_structure()
        await self.async_save()

    async def async_delete_storage(self) -> None:
        """Delete the storage file completely from disk."""
        self._data = PrayerTrackerStore.get_default_structure()
        try:
            await self._store.async_remove()
            const.LOGGER.info("Storage file removed successfully: %s", self._store.path)
        except OSError as err:
            const.LOGGER.error(
                "Failed to remove storage file %s: %s. Check file permissions",
                self._store.path,
                err,
            )
