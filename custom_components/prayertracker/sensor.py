# File: sensor.py
"""Sensors for the Prayer Tracker integration.

Entities (one device per config entry):
- Prayer status (x5): today's status of each prayer, with its window
- Current streak / longest streak: consecutive full days
- Today progress: completed prayers today, with weekly and per-prayer stats
- Badges: number of earned badges, with per-badge progress
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)

from . import const
from .engines.gamification_engine import BADGE_DEFINITIONS
from .engines.prayer_engine import PrayerEngine
from .entity import PrayerTrackerCoordinatorEntity
from .helpers.entity_helpers import get_prayer_unique_id

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from .coordinator import PrayerTrackerCoordinator


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up sensors for Prayer Tracker integration."""
    data = hass.data[const.DOMAIN][entry.entry_id]
    coordinator: PrayerTrackerCoordinator = data[const.COORDINATOR]

    entities: list[SensorEntity] = [
        PrayerStatusSensor(coordinator, entry, prayer_id)
        for prayer_id in const.PRAYER_IDS
    ]
    entities.append(CurrentStreakSensor(coordinator, entry))
    entities.append(LongestStreakSensor(coordinator, entry))
    entities.append(TodayProgressSensor(coordinator, entry))
    entities.append(BadgesSensor(coordinator, entry))

    async_add_entities(entities)


class PrayerStatusSensor(PrayerTrackerCoordinatorEntity, SensorEntity):
    """Today's status of one prayer: Pending, Prayed, Missed or Late."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_PRAYER_STATUS
    _attr_device_class = SensorDeviceClass.ENUM
    _attr_options = [status.lower() for status in const.PRAYER_STATUSES]

    def __init__(
        self,
        coordinator: PrayerTrackerCoordinator,
        entry: ConfigEntry,
        prayer_id: str,
    ) -> None:
        """Initialize the sensor.

        Args:
            coordinator: PrayerTrackerCoordinator instance for data access.
            entry: ConfigEntry for this integration instance.
            prayer_id: One of the fixed prayer ids.
        """
        super().__init__(coordinator, entry)
        self._prayer_id = prayer_id
        self._prayer_name = const.PRAYER_NAMES[prayer_id]
        self._attr_unique_id = get_prayer_unique_id(entry.entry_id, prayer_id)
        self._attr_translation_placeholders = {
            const.ATTR_PRAYER_NAME: self._prayer_name
        }

    @property
    def native_value(self) -> str:
        """Return today's status, lowercased (absent entries are pending)."""
        return PrayerEngine.get_status(
            self.coordinator.history, self.coordinator.today_iso(), self._prayer_id
        ).lower()

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Include the configured window and the time marking opens."""
        slot = PrayerEngine.find_slot(self.coordinator.prayer_times, self._prayer_id)
        slot_info: dict[str, Any] = dict(slot) if slot else {}
        return {
            const.ATTR_PRAYER_NAME: self._prayer_name,
            const.ATTR_START_TIME: slot_info.get(const.DATA_SLOT_START_TIME),
            const.ATTR_MOSQUE_TIME: slot_info.get(const.DATA_SLOT_MOSQUE_TIME),
            const.ATTR_END_TIME: slot_info.get(const.DATA_SLOT_END_TIME),
            const.ATTR_GATE_TIME: PrayerEngine.gate_time(slot) if slot else None,
        }


class CurrentStreakSensor(PrayerTrackerCoordinatorEntity, SensorEntity):
    """Consecutive full days ending at the last completed day."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_CURRENT_STREAK
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = "days"

    def __init__(self, coordinator: PrayerTrackerCoordinator, entry: ConfigEntry) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry)
        self._attr_unique_id = f"{entry.entry_id}{const.SENSOR_UID_SUFFIX_CURRENT_STREAK}"

    @property
    def native_value(self) -> int:
        """Return the current streak."""
        return self.coordinator.streak_state[const.DATA_CURRENT_STREAK]

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Include the last completed date."""
        return {
            const.ATTR_LAST_COMPLETED_DATE: self.coordinator.streak_state[
                const.DATA_LAST_COMPLETED_DATE
            ]
        }


class LongestStreakSensor(PrayerTrackerCoordinatorEntity, SensorEntity):
    """Best streak ever reached."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_LONGEST_STREAK
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = "days"

    def __init__(self, coordinator: PrayerTrackerCoordinator, entry: ConfigEntry) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry)
        self._attr_unique_id = f"{entry.entry_id}{const.SENSOR_UID_SUFFIX_LONGEST_STREAK}"

    @property
    def native_value(self) -> int:
        """Return the longest streak."""
        return self.coordinator.streak_state[const.DATA_LONGEST_STREAK]


class TodayProgressSensor(PrayerTrackerCoordinatorEntity, SensorEntity):
    """Prayers completed today (Prayed or Late) out of five.

    Attributes carry the trailing seven-day counts and the per-prayer
    breakdown used by progress dashboards.
    """

    _attr_translation_key = const.TRANS_KEY_SENSOR_TODAY_PROGRESS
    _attr_state_class = SensorStateClass.MEASUREMENT
    _unrecorded_attributes = frozenset({const.ATTR_CALENDAR_MARKERS})

    def __init__(self, coordinator: PrayerTrackerCoordinator, entry: ConfigEntry) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry)
        self._attr_unique_id = f"{entry.entry_id}{const.SENSOR_UID_SUFFIX_TODAY_PROGRESS}"

    @property
    def native_value(self) -> int:
        """Return today's completed count."""
        return self.coordinator.get_today_ratio()["completed"]

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Include totals, weekly progress, breakdown, day markers and profile status."""
        return {
            const.ATTR_TOTAL: const.PRAYERS_PER_DAY,
            const.ATTR_WEEKLY_PROGRESS: self.coordinator.get_weekly_progress(),
            const.ATTR_PRAYER_BREAKDOWN: self.coordinator.get_prayer_breakdown(),
            const.ATTR_CALENDAR_MARKERS: self.coordinator.get_calendar_markers(),
            const.ATTR_PROFILE_STATUS: self.coordinator.profile_status,
        }


class BadgesSensor(PrayerTrackerCoordinatorEntity, SensorEntity):
    """Number of earned badges, with progress towards every badge."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_BADGES
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(self, coordinator: PrayerTrackerCoordinator, entry: ConfigEntry) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry)
        self._attr_unique_id = f"{entry.entry_id}{const.SENSOR_UID_SUFFIX_BADGES}"

    @property
    def native_value(self) -> int:
        """Return how many badges are earned."""
        return len(self.coordinator.earned_badges)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Include the earned ids and per-badge progress."""
        progress = self.coordinator.gamification_manager.get_all_badge_progress()
        return {
            const.ATTR_TOTAL: len(BADGE_DEFINITIONS),
            const.ATTR_EARNED_BADGES: list(self.coordinator.earned_badges),
            const.ATTR_BADGE_PROGRESS: {
                badge_id: dict(value) for badge_id, value in progress.items()
            },
        }
