"""Shared fixtures for Prayer Tracker tests."""

import asyncio
from typing import Any
from unittest.mock import AsyncMock, MagicMock, PropertyMock, patch
from zoneinfo import ZoneInfo

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.prayertracker import const
from custom_components.prayertracker.api_client import PrayerTrackerApiClient
from custom_components.prayertracker.store import PrayerTrackerStore
from tests.helpers import TEST_ENTRY_ID, TEST_NOW_UTC, TEST_TODAY, TEST_USER_ID

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title=const.PRAYERTRACKER_TITLE,
        data={
            const.CONF_API_URL: "https://example.supabase.co",
            const.CONF_API_KEY: "anon-key",
            const.CONF_ACCESS_TOKEN: "user-jwt",
            const.CONF_USER_ID: TEST_USER_ID,
            const.CONF_REFERENCE_TIME_ZONE: const.DEFAULT_REFERENCE_TIME_ZONE,
            const.CONF_NOTIFY_SERVICE: "notify.mobile_app_phone",
        },
        unique_id=TEST_USER_ID,
        entry_id=TEST_ENTRY_ID,
    )


@pytest.fixture
def mock_storage_data() -> dict[str, Any]:
    """Return a fresh default storage document."""
    return PrayerTrackerStore.get_default_structure()


@pytest.fixture
def mock_hass() -> MagicMock:
    """Return a mock hass whose scheduled tasks are closed, not run."""
    hass = MagicMock()

    def _close_coro(coro: Any, *args: Any, **kwargs: Any) -> MagicMock:
        coro.close()
        return MagicMock()

    hass.async_create_task = MagicMock(side_effect=_close_coro)
    return hass


@pytest.fixture
def mock_coordinator(
    mock_storage_data: dict[str, Any],  # pylint: disable=redefined-outer-name
) -> MagicMock:
    """Return a mock coordinator backed by a real in-memory state document.

    The state properties read through to the document on every access, so
    code that swaps out a whole value (rollback, reset) stays visible.
    """
    mock = MagicMock()
    mock.config_entry.entry_id = TEST_ENTRY_ID
    mock.user_id = TEST_USER_ID
    mock.notify_service = "notify.mobile_app_phone"
    mock.time_zone = ZoneInfo(const.DEFAULT_REFERENCE_TIME_ZONE)
    mock.state_lock = asyncio.Lock()
    mock.profile = None
    mock.profile_status = const.PROFILE_STATUS_IDLE
    mock.profile_error = None

    mock.store.data = mock_storage_data

    async def _clear() -> None:
        mock.store.data = PrayerTrackerStore.get_default_structure()

    mock.store.async_clear = AsyncMock(side_effect=_clear)

    coordinator_type = type(mock)
    coordinator_type.history = PropertyMock(
        side_effect=lambda: mock.store.data.setdefault(const.DATA_HISTORY, {})
    )
    coordinator_type.settings = PropertyMock(
        side_effect=lambda: mock.store.data[const.DATA_SETTINGS]
    )
    coordinator_type.prayer_times = PropertyMock(
        side_effect=lambda: mock.store.data[const.DATA_SETTINGS].get(
            const.DATA_SETTINGS_PRAYER_TIMES, []
        )
    )
    coordinator_type.earned_badges = PropertyMock(
        side_effect=lambda: mock.store.data.setdefault(const.DATA_EARNED_BADGES, [])
    )
    coordinator_type.streak_state = PropertyMock(
        side_effect=lambda: {
            const.DATA_CURRENT_STREAK: mock.store.data.get(
                const.DATA_CURRENT_STREAK, 0
            ),
            const.DATA_LONGEST_STREAK: mock.store.data.get(
                const.DATA_LONGEST_STREAK, 0
            ),
            const.DATA_LAST_COMPLETED_DATE: mock.store.data.get(
                const.DATA_LAST_COMPLETED_DATE
            ),
        }
    )

    def _set_profile_status(status: str, error: str | None = None) -> None:
        mock.profile_status = status
        mock.profile_error = error

    mock.set_profile_status = MagicMock(side_effect=_set_profile_status)
    mock.today_iso = MagicMock(return_value=TEST_TODAY)
    mock.now_hhmm = MagicMock(return_value="13:00")
    mock.async_persist = AsyncMock()
    mock.async_update_listeners = MagicMock()

    mock.api = AsyncMock()
    mock.gamification_manager.async_evaluate_and_unlock = AsyncMock(return_value=[])
    return mock


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    freezer: Any,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
) -> MockConfigEntry:
    """Set up Prayer Tracker at 13:00 reference time with a mocked backend.

    Fresh storage, no remote profile and no remote rows for today.
    """
    freezer.move_to(TEST_NOW_UTC)
    mock_config_entry.add_to_hass(hass)

    with (
        patch("homeassistant.helpers.storage.Store.async_load", return_value=None),
        patch.object(PrayerTrackerApiClient, "async_fetch_profile", return_value=None),
        patch.object(PrayerTrackerApiClient, "async_fetch_prayers", return_value=[]),
        patch.object(
            PrayerTrackerApiClient, "async_fetch_achievements", return_value=set()
        ),
    ):
        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

    return mock_config_entry
