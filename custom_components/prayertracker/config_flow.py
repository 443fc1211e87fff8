# File: config_flow.py
"""Config flow for the Prayer Tracker integration.

A single step collects the backend connection (URL, API key, access token,
user id), the reference time zone prayer windows are evaluated in, and an
optional notify service for prayer alerts.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.util import dt as dt_util

from . import const
from .api_client import (
    PrayerTrackerApiClient,
    PrayerTrackerApiError,
    PrayerTrackerPolicyError,
)

# pylint: disable=abstract-method


def build_user_schema(defaults: dict[str, Any] | None = None) -> vol.Schema:
    """Build the user step schema, pre-filled with previous input."""
    defaults = defaults or {}
    return vol.Schema(
        {
            vol.Required(
                const.CONF_API_URL, default=defaults.get(const.CONF_API_URL, "")
            ): cv.string,
            vol.Required(
                const.CONF_API_KEY, default=defaults.get(const.CONF_API_KEY, "")
            ): cv.string,
            vol.Optional(
                const.CONF_ACCESS_TOKEN,
                default=defaults.get(const.CONF_ACCESS_TOKEN, ""),
            ): cv.string,
            vol.Required(
                const.CONF_USER_ID, default=defaults.get(const.CONF_USER_ID, "")
            ): cv.string,
            vol.Required(
                const.CONF_REFERENCE_TIME_ZONE,
                default=defaults.get(
                    const.CONF_REFERENCE_TIME_ZONE, const.DEFAULT_REFERENCE_TIME_ZONE
                ),
            ): cv.string,
            vol.Optional(
                const.CONF_NOTIFY_SERVICE,
                default=defaults.get(
                    const.CONF_NOTIFY_SERVICE, const.DEFAULT_NOTIFY_SERVICE
                ),
            ): cv.string,
        }
    )


class PrayerTrackerConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for Prayer Tracker."""

    VERSION = 1

    async def async_step_user(self, user_input: dict[str, Any] | None = None):
        """Collect backend and time zone settings."""
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        errors: dict[str, str] = {}

        if user_input is not None:
            if await dt_util.async_get_time_zone(
                user_input[const.CONF_REFERENCE_TIME_ZONE]
            ) is None:
                errors[const.CONF_REFERENCE_TIME_ZONE] = (
                    const.TRANS_KEY_ERROR_INVALID_TIME_ZONE
                )
            else:
                errors = await self._async_validate_connection(user_input)

            if not errors:
                await self.async_set_unique_id(user_input[const.CONF_USER_ID])
                self._abort_if_unique_id_configured()
                return self.async_create_entry(
                    title=const.PRAYERTRACKER_TITLE, data=user_input
                )

        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_USER,
            data_schema=build_user_schema(user_input),
            errors=errors,
        )

    async def _async_validate_connection(
        self, user_input: dict[str, Any]
    ) -> dict[str, str]:
        """Try a profile read with the given credentials.

        A policy error still proves the backend is reachable; it is surfaced
        later as the profile's policy-error state.
        """
        api = PrayerTrackerApiClient(
            async_get_clientsession(self.hass),
            user_input[const.CONF_API_URL],
            user_input[const.CONF_API_KEY],
            access_token=user_input.get(const.CONF_ACCESS_TOKEN) or None,
            retries=0,
        )
        try:
            await api.async_fetch_profile(user_input[const.CONF_USER_ID])
        except PrayerTrackerPolicyError:
            const.LOGGER.warning("Backend reachable but reports a policy error")
        except PrayerTrackerApiError as err:
            const.LOGGER.warning("Cannot connect to Prayer Tracker backend: %s", err)
            return {"base": const.TRANS_KEY_ERROR_CANNOT_CONNECT}
        return {}
