# File: helpers/device_helpers.py
"""Device registry helper functions for Prayer Tracker."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo

from .. import const

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry


def create_tracker_device_info(config_entry: ConfigEntry) -> DeviceInfo:
    """Create device info grouping all sensors of one tracker instance.

    Args:
        config_entry: Config entry for this integration instance

    Returns:
        DeviceInfo dict for the tracker device
    """
    return DeviceInfo(
        identifiers={(const.DOMAIN, config_entry.entry_id)},
        name=config_entry.title,
        manufacturer=const.DEVICE_MANUFACTURER,
        model=const.DEVICE_MODEL,
        entry_type=DeviceEntryType.SERVICE,
    )
