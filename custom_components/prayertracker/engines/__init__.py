"""Engine modules for Prayer Tracker integration.

Contains specialized computation engines:
- prayer_engine: Time windows, status transitions, auto-miss planning
- streak_engine: Consecutive full-day streak and load-time gap reset
- gamification_engine: Badge progress and unlock evaluation
- statistics_engine: Completion ratios and trailing-window metrics
"""

# Use relative imports within package to avoid mypy module resolution issues
from .gamification_engine import BADGE_DEFINITIONS, GamificationEngine
from .prayer_engine import PrayerEngine, TransitionResult
from .statistics_engine import StatisticsEngine
from .streak_engine import StreakEngine

__all__ = [
    "BADGE_DEFINITIONS",
    "GamificationEngine",
    "PrayerEngine",
    "StatisticsEngine",
    "StreakEngine",
    "TransitionResult",
]
