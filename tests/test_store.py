"""Direct unit tests for PrayerTrackerStore.

Tests default structure creation, loading of older documents, get/set
helpers, error handling on save and data clearing.
"""

# pylint: disable=protected-access  # Accessing _store for testing
# pylint: disable=redefined-outer-name  # Pytest fixtures redefine names
# pylint: disable=unused-argument  # Test fixtures may be unused in simple tests

from unittest.mock import AsyncMock, patch

import pytest
from homeassistant.core import HomeAssistant

from custom_components.prayertracker import const
from custom_components.prayertracker.store import PrayerTrackerStore


@pytest.fixture
def store(hass: HomeAssistant) -> PrayerTrackerStore:
    """Return a store instance."""
    return PrayerTrackerStore(hass)


async def test_async_initialize_creates_default_structure(
    hass: HomeAssistant,
    store: PrayerTrackerStore,
) -> None:
    """Test that async_initialize creates defaults when no data exists."""
    with patch.object(store._store, "async_load", return_value=None):
        await store.async_initialize()

    data = store.data
    assert data[const.DATA_HISTORY] == {}
    assert data[const.DATA_CURRENT_STREAK] == 0
    assert data[const.DATA_LONGEST_STREAK] == 0
    assert data[const.DATA_LAST_COMPLETED_DATE] is None
    assert data[const.DATA_EARNED_BADGES] == []
    assert data[const.DATA_SCHEMA_VERSION] == const.SCHEMA_VERSION_CURRENT

    settings = data[const.DATA_SETTINGS]
    assert settings[const.DATA_SETTINGS_NOTIFICATIONS_ENABLED] is False
    assert settings[const.DATA_SETTINGS_REMINDER_LEAD_TIME] == 15
    assert [slot["id"] for slot in settings[const.DATA_SETTINGS_PRAYER_TIMES]] == list(
        const.PRAYER_IDS
    )


async def test_async_initialize_loads_existing_data(
    hass: HomeAssistant,
    store: PrayerTrackerStore,
) -> None:
    """Test that existing data is loaded and missing keys are defaulted."""
    existing_data = {
        const.DATA_HISTORY: {"2024-01-03": {"1": const.PRAYER_STATUS_PRAYED}},
        const.DATA_CURRENT_STREAK: 3,
    }

    with patch.object(store._store, "async_load", return_value=existing_data):
        await store.async_initialize()

    assert store.data[const.DATA_HISTORY] == {
        "2024-01-03": {"1": const.PRAYER_STATUS_PRAYED}
    }
    assert store.data[const.DATA_CURRENT_STREAK] == 3
    assert store.data[const.DATA_LONGEST_STREAK] == 0
    assert const.DATA_SETTINGS in store.data


async def test_default_structures_are_independent() -> None:
    """Test that each default structure is a fresh copy."""
    first = PrayerTrackerStore.get_default_structure()
    first[const.DATA_SETTINGS][const.DATA_SETTINGS_PRAYER_TIMES][0]["endTime"] = "07:00"

    second = PrayerTrackerStore.get_default_structure()

    assert second[const.DATA_SETTINGS][const.DATA_SETTINGS_PRAYER_TIMES][0][
        "endTime"
    ] == "06:30"


async def test_get_returns_copy(
    hass: HomeAssistant,
    store: PrayerTrackerStore,
) -> None:
    """Test that get() hands out copies and a default for missing keys."""
    with patch.object(store._store, "async_load", return_value=None):
        await store.async_initialize()

    history = store.get(const.DATA_HISTORY)
    history["2024-01-04"] = {}

    assert store.data[const.DATA_HISTORY] == {}
    assert store.get("missing", "fallback") == "fallback"


async def test_async_set_many_saves_once(
    hass: HomeAssistant,
    store: PrayerTrackerStore,
) -> None:
    """Test that several values are written with a single save."""
    with patch.object(store._store, "async_load", return_value=None):
        await store.async_initialize()

    with patch.object(store._store, "async_save", new=AsyncMock()) as mock_save:
        await store.async_set_many(
            {const.DATA_CURRENT_STREAK: 2, const.DATA_LONGEST_STREAK: 5}
        )

    mock_save.assert_awaited_once()
    assert store.data[const.DATA_CURRENT_STREAK] == 2
    assert store.data[const.DATA_LONGEST_STREAK] == 5


async def test_async_save_handles_os_error(
    hass: HomeAssistant,
    store: PrayerTrackerStore,
) -> None:
    """Test that file system errors are logged, not raised."""
    with (
        patch.object(store._store, "async_save", side_effect=OSError("Disk full")),
        patch.object(const.LOGGER, "error") as mock_error,
    ):
        await store.async_save()

    mock_error.assert_called_once()


async def test_async_clear_resets_to_defaults(
    hass: HomeAssistant,
    store: PrayerTrackerStore,
) -> None:
    """Test that clearing wipes history, streak, badges and settings."""
    existing_data = PrayerTrackerStore.get_default_structure()
    existing_data[const.DATA_HISTORY] = {"2024-01-03": {"1": "Prayed"}}
    existing_data[const.DATA_CURRENT_STREAK] = 4
    existing_data[const.DATA_EARNED_BADGES] = [const.BADGE_ID_FIRST_STEP]
    existing_data[const.DATA_SETTINGS][const.DATA_SETTINGS_NOTIFICATIONS_ENABLED] = True

    with patch.object(store._store, "async_load", return_value=existing_data):
        await store.async_initialize()

    with patch.object(store._store, "async_save", new=AsyncMock()):
        await store.async_clear()

    assert store.data == PrayerTrackerStore.get_default_structure()


async def test_async_delete_storage(
    hass: HomeAssistant,
    store: PrayerTrackerStore,
) -> None:
    """Test that deleting storage removes the file."""
    with patch.object(store._store, "async_remove", new=AsyncMock()) as mock_remove:
        await store.async_delete_storage()

    mock_remove.assert_awaited_once()
    assert store.data[const.DATA_HISTORY] == {}
