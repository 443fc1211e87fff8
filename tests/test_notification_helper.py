"""Tests for notification_helper.async_send_notification."""

from unittest.mock import patch

from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import async_mock_service

from custom_components.prayertracker import const
from custom_components.prayertracker.notification_helper import (
    async_send_notification,
)


async def test_send_with_full_service_name(hass: HomeAssistant) -> None:
    """Test that a "notify.x" service receives title, message and data."""
    calls = async_mock_service(hass, "notify", "mobile_app_phone")

    await async_send_notification(
        hass,
        "notify.mobile_app_phone",
        "Time for Asr",
        "It is now time for Asr.",
        extra_data={const.NOTIFY_TAG: "3_start"},
    )

    assert len(calls) == 1
    assert calls[0].data == {
        "title": "Time for Asr",
        "message": "It is now time for Asr.",
        "data": {"tag": "3_start"},
    }


async def test_send_with_bare_service_name(hass: HomeAssistant) -> None:
    """Test that a bare service name defaults to the notify domain."""
    calls = async_mock_service(hass, "notify", "mobile_app_phone")

    await async_send_notification(hass, "mobile_app_phone", "Title", "Message")

    assert len(calls) == 1
    assert "data" not in calls[0].data


async def test_missing_service_is_skipped(hass: HomeAssistant) -> None:
    """Test that an unknown notify service logs a warning and does not raise."""
    with patch.object(const.LOGGER, "warning") as mock_warning:
        await async_send_notification(hass, "notify.nobody", "Title", "Message")

    mock_warning.assert_called_once()
