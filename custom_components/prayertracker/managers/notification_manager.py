"""Notification Manager - Prayer start and ending-soon alerts.

Schedules two alerts per prayer for today through async_track_point_in_time:
- start: at the mosque time when set, otherwise at the start time
- reminder: reminderLeadTime minutes before the end time

Only alerts still in the future are scheduled, and only while notifications
are enabled and a notify service is configured. A prayer's reminder is
cancelled once it is marked Prayed or Late. Everything is rescheduled when
settings change and at the reference-zone midnight.
"""

from __future__ import annotations

from datetime import timedelta
from functools import partial
from typing import TYPE_CHECKING, Any

from homeassistant.core import callback
from homeassistant.helpers.event import async_track_point_in_time

from .. import const
from ..notification_helper import async_send_notification
from ..utils.dt_utils import dt_combine_local, dt_now_local, dt_shift_iso_date
from .base_manager import BaseManager

if TYPE_CHECKING:
    from datetime import datetime

    from homeassistant.core import CALLBACK_TYPE, HomeAssistant

    from ..coordinator import PrayerTrackerCoordinator


def alert_key(prayer_id: str, kind: str) -> str:
    """Return the identifier of one scheduled alert, e.g. "1_reminder"."""
    return f"{prayer_id}_{kind}"


class NotificationManager(BaseManager):
    """Manager for scheduled prayer notifications."""

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: PrayerTrackerCoordinator,
    ) -> None:
        """Initialize the NotificationManager."""
        super().__init__(hass, coordinator)
        self._coordinator = coordinator
        self._scheduled: dict[str, CALLBACK_TYPE] = {}
        self._rollover_unsub: CALLBACK_TYPE | None = None

    async def async_setup(self) -> None:
        """Subscribe to prayer, settings and reset events."""
        self.listen(const.SIGNAL_SUFFIX_PRAYER_MARKED, self._on_prayer_marked)
        self.listen(const.SIGNAL_SUFFIX_SETTINGS_UPDATED, self._on_settings_updated)
        self.listen(const.SIGNAL_SUFFIX_DATA_RESET, self._on_data_reset)
        self.coordinator.config_entry.async_on_unload(self.async_shutdown)

    @callback
    def async_shutdown(self) -> None:
        """Cancel every pending alert and the midnight reschedule."""
        self.cancel_all()
        if self._rollover_unsub is not None:
            self._rollover_unsub()
            self._rollover_unsub = None

    @property
    def scheduled_alerts(self) -> list[str]:
        """Return identifiers of the alerts currently scheduled."""
        return sorted(self._scheduled)

    # =========================================================================
    # EVENT HANDLERS
    # =========================================================================

    @callback
    def _on_prayer_marked(self, payload: dict[str, Any]) -> None:
        """Drop the ending-soon alert once a prayer is completed.

        An unmark or a rolled-back mark brings the alert back when it is
        still in the future.
        """
        prayer_id = payload["prayer_id"]
        if payload.get("status") in const.COMPLETED_STATUSES:
            self.cancel_alert(prayer_id, const.ALERT_KIND_REMINDER)
        elif alert_key(prayer_id, const.ALERT_KIND_REMINDER) not in self._scheduled:
            self.async_schedule_today()

    @callback
    def _on_settings_updated(self, payload: dict[str, Any]) -> None:
        """Reschedule with the new windows (or cancel when disabled)."""
        self.async_schedule_today()

    @callback
    def _on_data_reset(self, payload: dict[str, Any]) -> None:
        """Defaults have notifications off; cancel everything."""
        self.cancel_all()

    # =========================================================================
    # SCHEDULING
    # =========================================================================

    @callback
    def async_schedule_today(self) -> list[str]:
        """Replace all scheduled alerts with today's future ones.

        Returns:
            Identifiers of the alerts scheduled
        """
        self.cancel_all()
        self._schedule_rollover()

        settings = self._coordinator.settings
        if not settings.get(const.DATA_SETTINGS_NOTIFICATIONS_ENABLED):
            return []
        if not self._coordinator.notify_service:
            const.LOGGER.debug("No notify service configured, skipping prayer alerts")
            return []

        tz = self._coordinator.time_zone
        now = dt_now_local(tz)
        today = self._coordinator.today_iso()
        today_record = self._coordinator.history.get(today, {})
        lead_minutes = int(
            settings.get(
                const.DATA_SETTINGS_REMINDER_LEAD_TIME, const.DEFAULT_REMINDER_LEAD_TIME
            )
        )

        for slot in self._coordinator.prayer_times:
            prayer_id = slot[const.DATA_SLOT_ID]
            mosque_time = slot.get(const.DATA_SLOT_MOSQUE_TIME)
            gate = mosque_time or slot.get(const.DATA_SLOT_START_TIME)
            if gate:
                start_at = dt_combine_local(today, gate, tz)
                if start_at > now:
                    self._schedule(
                        prayer_id, const.ALERT_KIND_START, start_at, bool(mosque_time)
                    )

            end_time = slot.get(const.DATA_SLOT_END_TIME)
            if not end_time or today_record.get(prayer_id) in const.COMPLETED_STATUSES:
                continue
            remind_at = dt_combine_local(today, end_time, tz) - timedelta(
                minutes=lead_minutes
            )
            if remind_at > now:
                self._schedule(prayer_id, const.ALERT_KIND_REMINDER, remind_at, False)

        const.LOGGER.debug("Scheduled prayer alerts: %s", self.scheduled_alerts)
        return self.scheduled_alerts

    def _schedule(
        self, prayer_id: str, kind: str, when: datetime, at_mosque: bool
    ) -> None:
        """Register one alert with the HA scheduler."""
        key = alert_key(prayer_id, kind)
        self._scheduled[key] = async_track_point_in_time(
            self.hass,
            partial(self._async_fire_alert, prayer_id, kind, at_mosque),
            when,
        )

    def _schedule_rollover(self) -> None:
        """Reschedule alerts at the next reference-zone midnight."""
        if self._rollover_unsub is not None:
            self._rollover_unsub()
        tomorrow = dt_shift_iso_date(self._coordinator.today_iso(), 1)
        midnight = dt_combine_local(tomorrow, "00:00", self._coordinator.time_zone)
        self._rollover_unsub = async_track_point_in_time(
            self.hass, self._on_day_rollover, midnight
        )

    @callback
    def _on_day_rollover(self, now: datetime) -> None:
        """Start a new day of alerts."""
        self._rollover_unsub = None
        self.async_schedule_today()

    def cancel_alert(self, prayer_id: str, kind: str) -> bool:
        """Cancel one scheduled alert; returns True when one was pending."""
        unsub = self._scheduled.pop(alert_key(prayer_id, kind), None)
        if unsub is None:
            return False
        unsub()
        const.LOGGER.debug("Cancelled %s alert for prayer %s", kind, prayer_id)
        return True

    def cancel_all(self) -> None:
        """Cancel every scheduled alert."""
        for unsub in self._scheduled.values():
            unsub()
        self._scheduled.clear()

    # =========================================================================
    # DELIVERY
    # =========================================================================

    async def _async_fire_alert(
        self, prayer_id: str, kind: str, at_mosque: bool, now: datetime
    ) -> None:
        """Send one alert when its time point is reached."""
        self._scheduled.pop(alert_key(prayer_id, kind), None)
        prayer = const.PRAYER_NAMES.get(prayer_id, prayer_id)

        if kind == const.ALERT_KIND_START:
            title = const.NOTIF_TITLE_START.format(prayer=prayer)
            template = (
                const.NOTIF_MESSAGE_START_MOSQUE if at_mosque else const.NOTIF_MESSAGE_START
            )
            message = template.format(prayer=prayer)
        else:
            minutes = self._coordinator.settings.get(
                const.DATA_SETTINGS_REMINDER_LEAD_TIME, const.DEFAULT_REMINDER_LEAD_TIME
            )
            title = const.NOTIF_TITLE_REMINDER.format(prayer=prayer)
            message = const.NOTIF_MESSAGE_REMINDER.format(minutes=minutes, prayer=prayer)

        await async_send_notification(
            self.hass,
            self._coordinator.notify_service,
            title,
            message,
            extra_data={const.NOTIFY_TAG: alert_key(prayer_id, kind)},
        )
