# File: notification_helper.py
"""Sends notifications using Home Assistant's notify services.

Prayer start and ending-soon alerts are delivered through the notify service
configured for the entry (e.g. "notify.mobile_app_phone" or just
"mobile_app_phone").
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from . import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


async def async_send_notification(
    hass: HomeAssistant,
    notify_service: str,
    title: str,
    message: str,
    extra_data: dict[str, str] | None = None,
) -> None:
    """Send a notification using the specified notify service.

    A missing notify service is logged as a warning and skipped without
    raising.
    """
    if "." not in notify_service:
        domain = const.NOTIFY_DOMAIN
        service = notify_service
    else:
        domain, service = notify_service.split(".", 1)

    if not hass.services.has_service(domain, service):
        const.LOGGER.warning(
            "Notification service '%s.%s' not available - skipping notification. "
            "Configure the '%s' integration to enable prayer alerts.",
            domain,
            service,
            domain,
        )
        return

    payload: dict[str, Any] = {const.NOTIFY_TITLE: title, const.NOTIFY_MESSAGE: message}
    if extra_data:
        payload[const.NOTIFY_DATA] = dict(extra_data)

    try:
        await hass.services.async_call(domain, service, payload, blocking=True)
        const.LOGGER.debug("Notification sent via '%s.%s'", domain, service)

    except Exception as err:  # pylint: disable=broad-exception-caught
        # Runs from scheduled callbacks; never let the task fail
        const.LOGGER.error(
            "Unexpected error sending notification via '%s.%s': %s. Payload: %s",
            domain,
            service,
            err,
            payload,
        )
