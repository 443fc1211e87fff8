"""Shared plumbing for the Prayer Tracker managers.

Badge evaluation is awaited inline by the prayer manager while it holds the
state lock. Everything else a manager announces goes out on a
dispatcher signal scoped to the config entry:

    prayer_marked     PrayerManager -> NotificationManager
    badge_unlocked    GamificationManager -> (no listener)
    settings_updated  SettingsManager -> NotificationManager
    data_reset        PrayerManager -> NotificationManager
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.dispatcher import (
    async_dispatcher_connect,
    async_dispatcher_send,
)

from .. import const
from ..helpers.entity_helpers import get_event_signal

if TYPE_CHECKING:
    from collections.abc import Callable

    from homeassistant.core import HomeAssistant

    from ..coordinator import PrayerTrackerCoordinator


class BaseManager(ABC):
    """Base class giving each manager entry-scoped emit/listen."""

    def __init__(
        self, hass: HomeAssistant, coordinator: PrayerTrackerCoordinator
    ) -> None:
        """Store hass, the owning coordinator and its entry id."""
        self.hass = hass
        self.coordinator = coordinator
        self.entry_id = coordinator.config_entry.entry_id

    def emit(self, suffix: str, **payload: Any) -> None:
        """Send a signal to the other managers of this entry.

        Listeners receive the keyword arguments as one dict, e.g.
        ``self.emit(const.SIGNAL_SUFFIX_PRAYER_MARKED, prayer_id="2",
        status="Late", date="2024-01-04")``.
        """
        const.LOGGER.debug(
            "%s -> %s %s", self.__class__.__name__, suffix, sorted(payload)
        )
        async_dispatcher_send(self.hass, get_event_signal(self.entry_id, suffix), payload)

    def listen(self, suffix: str, callback: Callable[..., Any]) -> None:
        """Subscribe to a signal of this entry until the entry unloads."""
        unsub = async_dispatcher_connect(
            self.hass, get_event_signal(self.entry_id, suffix), callback
        )
        self.coordinator.config_entry.async_on_unload(unsub)
        const.LOGGER.debug("%s listening for %s", self.__class__.__name__, suffix)

    @abstractmethod
    async def async_setup(self) -> None:
        """Subscribe to signals; called once from the coordinator."""
