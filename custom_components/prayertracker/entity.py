"""Base entity classes for Prayer Tracker integration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .coordinator import PrayerTrackerCoordinator
from .helpers.device_helpers import create_tracker_device_info

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry


class PrayerTrackerCoordinatorEntity(CoordinatorEntity[PrayerTrackerCoordinator]):
    """Base entity class for Prayer Tracker sensors with typed coordinator access.

    Every entity of an entry is attached to the same tracker device.
    """

    _attr_has_entity_name = True

    def __init__(
        self, coordinator: PrayerTrackerCoordinator, entry: ConfigEntry
    ) -> None:
        """Initialize the entity and attach it to the tracker device."""
        super().__init__(coordinator)
        self._entry = entry
        self._attr_device_info = create_tracker_device_info(entry)

    @property
    def coordinator(self) -> PrayerTrackerCoordinator:
        """Return typed coordinator."""
        return object.__getattribute__(self, "_coordinator")

    @coordinator.setter
    def coordinator(self, value: PrayerTrackerCoordinator) -> None:
        """Set coordinator with proper typing."""
        object.__setattr__(self, "_coordinator", value)
