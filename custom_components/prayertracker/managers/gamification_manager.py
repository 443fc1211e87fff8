"""Gamification Manager - Badge unlock bookkeeping.

This manager applies GamificationEngine results:
- Records newly met badges in the local earned set (idempotent)
- Emits BADGE_UNLOCKED for notifications and entities
- Appends each unlock to the remote achievement log (fire-and-forget)
- Merges remotely recorded achievements into the local set on startup

ARCHITECTURE:
- GamificationManager = "The Judge" (STATEFUL orchestration)
- GamificationEngine = Pure evaluation logic (STATELESS)

The local earned set is the source of truth for presentation. A failed
remote insert is logged and never undoes a local unlock.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .. import const
from ..api_client import PrayerTrackerApiError
from ..engines.gamification_engine import BADGE_DEFINITIONS, GamificationEngine
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import PrayerTrackerCoordinator
    from ..type_defs import BadgeProgress, PrayerHistory


class GamificationManager(BaseManager):
    """Manager for badge unlocks.

    Responsibilities:
    - Maintain the earned badge set
    - Schedule remote achievement inserts
    - Expose per-badge progress for entities

    NOT responsible for:
    - Progress rules (GamificationEngine)
    - Storage persistence timing (PrayerManager persists after the apply phase)
    """

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: PrayerTrackerCoordinator,
    ) -> None:
        """Initialize the GamificationManager.

        Args:
            hass: Home Assistant instance
            coordinator: The main Prayer Tracker coordinator
        """
        super().__init__(hass, coordinator)
        self._coordinator = coordinator

    async def async_setup(self) -> None:
        """Set up the GamificationManager (no subscriptions needed)."""

    # =========================================================================
    # EVALUATION
    # =========================================================================

    async def async_evaluate_and_unlock(
        self, history: PrayerHistory, current_streak: int
    ) -> list[str]:
        """Unlock every not-yet-earned badge whose requirement is now met.

        Calling this again with unchanged inputs unlocks nothing and sends no
        second remote insert.

        Args:
            history: Full prayer history after the latest change
            current_streak: Streak value after the latest recompute

        Returns:
            Badge ids unlocked by this call, in definition order
        """
        earned = self._coordinator.earned_badges
        unlocked = GamificationEngine.evaluate_badges(history, current_streak, earned)
        if not unlocked:
            return []

        earned.extend(unlocked)
        for badge_id in unlocked:
            const.LOGGER.info("Badge unlocked: %s", badge_id)
            self.emit(const.SIGNAL_SUFFIX_BADGE_UNLOCKED, badge_id=badge_id)
            self.hass.async_create_task(
                self._async_record_remote_achievement(badge_id)
            )
        return unlocked

    async def _async_record_remote_achievement(self, badge_id: str) -> None:
        """Append one unlock to the remote achievement log (best effort)."""
        try:
            await self._coordinator.api.async_insert_achievement(
                self._coordinator.user_id, badge_id
            )
        except PrayerTrackerApiError as err:
            const.LOGGER.warning(
                "Failed to record achievement '%s' remotely: %s", badge_id, err
            )
        except Exception as err:  # pylint: disable=broad-exception-caught
            const.LOGGER.error(
                "Unexpected error recording achievement '%s': %s", badge_id, err
            )

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_badge_progress(self, badge_id: str) -> BadgeProgress:
        """Return progress of one badge against the live history and streak."""
        return GamificationEngine.get_progress(
            badge_id,
            self._coordinator.history,
            self._coordinator.streak_state[const.DATA_CURRENT_STREAK],
        )

    def get_all_badge_progress(self) -> dict[str, BadgeProgress]:
        """Return progress for every badge, keyed by badge id."""
        return {badge.id: self.get_badge_progress(badge.id) for badge in BADGE_DEFINITIONS}

    # =========================================================================
    # REMOTE SYNC
    # =========================================================================

    async def async_sync_remote_achievements(self) -> set[str]:
        """Merge remotely recorded achievements into the local earned set.

        Non-fatal: read errors are logged and the local set is kept.

        Returns:
            Badge ids added locally by this sync
        """
        try:
            remote = await self._coordinator.api.async_fetch_achievements(
                self._coordinator.user_id
            )
        except PrayerTrackerApiError as err:
            const.LOGGER.warning("Error syncing achievements from remote store: %s", err)
            return set()

        known_ids = {badge.id for badge in BADGE_DEFINITIONS}
        earned = self._coordinator.earned_badges
        added = {badge_id for badge_id in remote & known_ids if badge_id not in earned}
        if not added:
            return set()

        # Keep definition order for stable presentation
        earned.extend(badge.id for badge in BADGE_DEFINITIONS if badge.id in added)
        await self._coordinator.async_persist()
        const.LOGGER.debug("Merged remote achievements: %s", sorted(added))
        return added
