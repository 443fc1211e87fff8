"""Tests for Prayer Tracker sensor states and attributes."""

from typing import Any
from unittest.mock import AsyncMock, patch

from homeassistant.core import HomeAssistant
from homeassistant.helpers import entity_registry as er
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.prayertracker import const
from custom_components.prayertracker.api_client import PrayerTrackerApiClient
from custom_components.prayertracker.helpers.entity_helpers import (
    get_prayer_unique_id,
)


def _state(hass: HomeAssistant, unique_id: str) -> Any:
    entity_id = er.async_get(hass).async_get_entity_id(
        "sensor", const.DOMAIN, unique_id
    )
    assert entity_id is not None, unique_id
    return hass.states.get(entity_id)


async def test_prayer_status_sensors(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Test the five status sensors after the startup sweep at 13:00."""
    entry_id = init_integration.entry_id
    expected = {
        const.PRAYER_ID_FAJR: "missed",
        const.PRAYER_ID_DHUHR: "pending",
        const.PRAYER_ID_ASR: "pending",
        const.PRAYER_ID_MAGHRIB: "pending",
        const.PRAYER_ID_ISHA: "pending",
    }
    for prayer_id, status in expected.items():
        state = _state(hass, get_prayer_unique_id(entry_id, prayer_id))
        assert state.state == status

    dhuhr = _state(hass, get_prayer_unique_id(entry_id, const.PRAYER_ID_DHUHR))
    assert dhuhr.attributes[const.ATTR_PRAYER_NAME] == "Dhuhr"
    assert dhuhr.attributes[const.ATTR_START_TIME] == "12:30"
    assert dhuhr.attributes[const.ATTR_END_TIME] == "15:45"
    assert dhuhr.attributes[const.ATTR_GATE_TIME] == "12:30"


async def test_summary_sensors_defaults(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Test streak, progress and badge sensors on a fresh install."""
    entry_id = init_integration.entry_id

    current = _state(hass, f"{entry_id}{const.SENSOR_UID_SUFFIX_CURRENT_STREAK}")
    assert current.state == "0"
    assert current.attributes[const.ATTR_LAST_COMPLETED_DATE] is None
    assert (
        _state(hass, f"{entry_id}{const.SENSOR_UID_SUFFIX_LONGEST_STREAK}").state == "0"
    )

    progress = _state(hass, f"{entry_id}{const.SENSOR_UID_SUFFIX_TODAY_PROGRESS}")
    assert progress.state == "0"
    assert progress.attributes[const.ATTR_TOTAL] == const.PRAYERS_PER_DAY
    assert progress.attributes[const.ATTR_PROFILE_STATUS] == (
        const.PROFILE_STATUS_MISSING
    )
    assert progress.attributes[const.ATTR_CALENDAR_MARKERS] == {"2024-01-04": "none"}

    badges = _state(hass, f"{entry_id}{const.SENSOR_UID_SUFFIX_BADGES}")
    assert badges.state == "0"
    assert badges.attributes[const.ATTR_EARNED_BADGES] == []
    assert const.BADGE_ID_FIRST_STEP in badges.attributes[const.ATTR_BADGE_PROGRESS]


async def test_sensors_follow_marking(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Test that marking Dhuhr updates the status and progress sensors."""
    entry_id = init_integration.entry_id

    with patch.object(PrayerTrackerApiClient, "async_upsert_prayer", new=AsyncMock()):
        await hass.services.async_call(
            const.DOMAIN,
            const.SERVICE_MARK_PRAYER,
            {const.FIELD_PRAYER: "Dhuhr"},
            blocking=True,
        )
        await hass.async_block_till_done()

    dhuhr = _state(hass, get_prayer_unique_id(entry_id, const.PRAYER_ID_DHUHR))
    assert dhuhr.state == "prayed"
    progress = _state(hass, f"{entry_id}{const.SENSOR_UID_SUFFIX_TODAY_PROGRESS}")
    assert progress.state == "1"
