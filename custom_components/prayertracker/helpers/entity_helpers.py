# File: helpers/entity_helpers.py
"""Entity and signal helper functions for Prayer Tracker."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .. import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


# ==============================================================================
# Event Signal Helpers (Manager Communication)
# ==============================================================================


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build instance-scoped event signal name for dispatcher.

    Each config entry gets its own signal namespace, so two installed
    instances never receive each other's events.

    Format: 'prayertracker_{entry_id}_{suffix}'

    Args:
        entry_id: ConfigEntry.entry_id from coordinator
        suffix: Signal suffix constant from const.py (e.g., SIGNAL_SUFFIX_PRAYER_MARKED)

    Returns:
        Fully qualified signal name scoped to this integration instance

    Example:
        >>> get_event_signal("abc123", const.SIGNAL_SUFFIX_PRAYER_MARKED)
        'prayertracker_abc123_prayer_marked'
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


def get_prayer_unique_id(entry_id: str, prayer_id: str) -> str:
    """Return the unique_id of the status sensor for one prayer."""
    return f"{entry_id}_{prayer_id}{const.SENSOR_UID_SUFFIX_PRAYER_STATUS}"


def get_first_prayertracker_entry(hass: HomeAssistant) -> str | None:
    """Retrieve the first loaded Prayer Tracker config entry ID."""
    domain_entries = hass.data.get(const.DOMAIN)
    if not domain_entries:
        return None
    return next(iter(domain_entries.keys()), None)
