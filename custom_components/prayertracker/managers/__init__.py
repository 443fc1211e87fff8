"""Manager modules for Prayer Tracker integration.

Managers orchestrate workflows and coordinate between engines.
They are stateful, event-aware, and handle cross-cutting concerns.
"""

from .base_manager import BaseManager
from .gamification_manager import GamificationManager
from .notification_manager import NotificationManager
from .prayer_manager import PrayerManager, SyncResult
from .settings_manager import SettingsManager

__all__ = [
    "BaseManager",
    "GamificationManager",
    "NotificationManager",
    "PrayerManager",
    "SettingsManager",
    "SyncResult",
]
