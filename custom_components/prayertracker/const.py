# File: const.py
"""Constants for the Prayer Tracker integration.

This file centralizes configuration keys, defaults, storage keys, prayer and
badge reference data, signal names and translation keys for consistency
across the integration.
"""

import logging
from datetime import timedelta

from homeassistant.const import Platform

# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
PRAYERTRACKER_TITLE = "Prayer Tracker"

# Integration Domain
DOMAIN = "prayertracker"

# Logger
LOGGER = logging.getLogger(__package__)

# Supported Platforms
PLATFORMS = [
    Platform.SENSOR,
]

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Storage and Versioning
STORE = "store"
STORAGE_KEY = "prayertracker_data"
STORAGE_VERSION = 1

# Auto-miss sweep cadence
DEFAULT_SWEEP_INTERVAL = timedelta(seconds=60)

# ------------------------------------------------------------------------------------------------
# Configuration Keys
# ------------------------------------------------------------------------------------------------
CONF_API_URL = "api_url"
CONF_API_KEY = "api_key"
CONF_ACCESS_TOKEN = "access_token"
CONF_USER_ID = "user_id"
CONF_REFERENCE_TIME_ZONE = "reference_time_zone"
CONF_NOTIFY_SERVICE = "notify_service"

CONFIG_FLOW_STEP_USER = "user"

DEFAULT_REFERENCE_TIME_ZONE = "Asia/Karachi"
DEFAULT_NOTIFY_SERVICE = ""

# Remote request behaviour
DEFAULT_REQUEST_TIMEOUT = 10  # seconds
DEFAULT_REQUEST_RETRIES = 2
DEFAULT_RETRY_BACKOFF = 0.5  # seconds, doubled per attempt

# ------------------------------------------------------------------------------------------------
# Prayers
# ------------------------------------------------------------------------------------------------
PRAYER_ID_FAJR = "1"
PRAYER_ID_DHUHR = "2"
PRAYER_ID_ASR = "3"
PRAYER_ID_MAGHRIB = "4"
PRAYER_ID_ISHA = "5"

# Fixed order, never added to or removed from
PRAYER_IDS: tuple[str, ...] = (
    PRAYER_ID_FAJR,
    PRAYER_ID_DHUHR,
    PRAYER_ID_ASR,
    PRAYER_ID_MAGHRIB,
    PRAYER_ID_ISHA,
)

PRAYER_NAMES: dict[str, str] = {
    PRAYER_ID_FAJR: "Fajr",
    PRAYER_ID_DHUHR: "Dhuhr",
    PRAYER_ID_ASR: "Asr",
    PRAYER_ID_MAGHRIB: "Maghrib",
    PRAYER_ID_ISHA: "Isha",
}
PRAYER_IDS_BY_NAME: dict[str, str] = {
    name: prayer_id for prayer_id, name in PRAYER_NAMES.items()
}
PRAYERS_PER_DAY = len(PRAYER_IDS)

# Prayer statuses
PRAYER_STATUS_PENDING = "Pending"
PRAYER_STATUS_PRAYED = "Prayed"
PRAYER_STATUS_MISSED = "Missed"
PRAYER_STATUS_LATE = "Late"

PRAYER_STATUSES: tuple[str, ...] = (
    PRAYER_STATUS_PENDING,
    PRAYER_STATUS_PRAYED,
    PRAYER_STATUS_MISSED,
    PRAYER_STATUS_LATE,
)
COMPLETED_STATUSES: frozenset[str] = frozenset(
    {PRAYER_STATUS_PRAYED, PRAYER_STATUS_LATE}
)

# Transition rejection reasons
REJECT_REASON_TOO_EARLY = "too_early"
REJECT_REASON_CONFIG_MISSING = "config_missing"

# Day classification (calendar markers)
DAY_CLASS_FULL = "full"
DAY_CLASS_PARTIAL = "partial"
DAY_CLASS_NONE = "none"

DEFAULT_PROGRESS_DAYS = 7
DEFAULT_CALENDAR_DAYS = 31

# ------------------------------------------------------------------------------------------------
# Data Keys (storage + in-memory state)
# ------------------------------------------------------------------------------------------------
DATA_HISTORY = "prayer_history"
DATA_CURRENT_STREAK = "current_streak"
DATA_LONGEST_STREAK = "longest_streak"
DATA_LAST_COMPLETED_DATE = "last_completed_date"
DATA_SETTINGS = "settings"
DATA_EARNED_BADGES = "earned_badges"
DATA_SCHEMA_VERSION = "schema_version"

SCHEMA_VERSION_CURRENT = 1

# Settings blob
DATA_SETTINGS_PRAYER_TIMES = "prayerTimes"
DATA_SETTINGS_NOTIFICATIONS_ENABLED = "notificationsEnabled"
DATA_SETTINGS_REMINDER_LEAD_TIME = "reminderLeadTime"

# Prayer slot config
DATA_SLOT_ID = "id"
DATA_SLOT_START_TIME = "startTime"
DATA_SLOT_MOSQUE_TIME = "mosqueTime"
DATA_SLOT_END_TIME = "endTime"

DEFAULT_REMINDER_LEAD_TIME = 15  # minutes
DEFAULT_NOTIFICATIONS_ENABLED = False

DEFAULT_PRAYER_TIMES: tuple[dict[str, str | None], ...] = (
    {"id": "1", "startTime": "05:00", "mosqueTime": None, "endTime": "06:30"},
    {"id": "2", "startTime": "12:30", "mosqueTime": None, "endTime": "15:45"},
    {"id": "3", "startTime": "15:45", "mosqueTime": None, "endTime": "18:15"},
    {"id": "4", "startTime": "18:15", "mosqueTime": None, "endTime": "19:40"},
    {"id": "5", "startTime": "19:40", "mosqueTime": None, "endTime": "23:59"},
)

# ------------------------------------------------------------------------------------------------
# Badges
# ------------------------------------------------------------------------------------------------
BADGE_TYPE_STREAK = "streak"
BADGE_TYPE_TOTAL_PRAYERS = "total_prayers"
BADGE_TYPE_LATE_PRAYERS = "late_prayers"
BADGE_TYPE_FAJR_STREAK = "fajr_streak"

BADGE_ID_FIRST_STEP = "first_step"
BADGE_ID_FAJR_WARRIOR = "fajr_warrior"
BADGE_ID_LATE_BUT_PRESENT = "late_but_present"
BADGE_ID_STREAK_MASTER = "streak_master"


# ------------------------------------------------------------------------------------------------
# Remote store (tables + columns)
# ------------------------------------------------------------------------------------------------
REMOTE_REST_PATH = "/rest/v1"
REMOTE_TABLE_PRAYERS = "prayers"
REMOTE_TABLE_ACHIEVEMENTS = "achievements"
REMOTE_TABLE_PROFILES = "profiles"

REMOTE_COL_USER_ID = "user_id"
REMOTE_COL_DATE = "date"
REMOTE_COL_PRAYER_NAME = "prayer_name"
REMOTE_COL_STATUS = "status"
REMOTE_COL_BADGE_TYPE = "badge_type"
REMOTE_COL_ID = "id"
REMOTE_COL_PRAYER_SETTINGS = "prayer_settings"
REMOTE_COL_UPDATED_AT = "updated_at"

REMOTE_PRAYERS_CONFLICT_KEY = "user_id,date,prayer_name"
REMOTE_PROFILE_COLUMNS = "id,username,full_name,avatar_url,prayer_settings"

# Substrings identifying a backend authorization-policy misconfiguration
REMOTE_POLICY_ERROR_MARKERS: tuple[str, ...] = ("recursion", "policy")

# Profile status
PROFILE_STATUS_IDLE = "idle"
PROFILE_STATUS_LOADING = "loading"
PROFILE_STATUS_SUCCESS = "success"
PROFILE_STATUS_MISSING = "missing"
PROFILE_STATUS_ERROR = "error"
PROFILE_STATUS_POLICY_ERROR = "policy_error"

PROFILE_POLICY_ERROR_MESSAGE = "Database Policy Error"

# ------------------------------------------------------------------------------------------------
# Signals (instance-scoped via get_event_signal)
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_PRAYER_MARKED = "prayer_marked"
SIGNAL_SUFFIX_BADGE_UNLOCKED = "badge_unlocked"
SIGNAL_SUFFIX_SETTINGS_UPDATED = "settings_updated"
SIGNAL_SUFFIX_DATA_RESET = "data_reset"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_MARK_PRAYER = "mark_prayer"
SERVICE_REFRESH_TODAY = "refresh_today"
SERVICE_UPDATE_PRAYER_TIME = "update_prayer_time"
SERVICE_SET_NOTIFICATIONS = "set_notifications"
SERVICE_RESET_ALL_DATA = "reset_all_data"
SERVICE_REFRESH_PROFILE = "refresh_profile"

FIELD_PRAYER = "prayer"
FIELD_START_TIME = "start_time"
FIELD_MOSQUE_TIME = "mosque_time"
FIELD_END_TIME = "end_time"
FIELD_ENABLED = "enabled"
FIELD_REMINDER_LEAD_TIME = "reminder_lead_time"

# ------------------------------------------------------------------------------------------------
# Notifications
# ------------------------------------------------------------------------------------------------
NOTIFY_DOMAIN = "notify"
NOTIFY_TITLE = "title"
NOTIFY_MESSAGE = "message"
NOTIFY_DATA = "data"
NOTIFY_TAG = "tag"

ALERT_KIND_START = "start"
ALERT_KIND_REMINDER = "reminder"

# ------------------------------------------------------------------------------------------------
# Sensors
# ------------------------------------------------------------------------------------------------
SENSOR_UID_SUFFIX_PRAYER_STATUS = "_prayer_status"
SENSOR_UID_SUFFIX_CURRENT_STREAK = "_current_streak"
SENSOR_UID_SUFFIX_LONGEST_STREAK = "_longest_streak"
SENSOR_UID_SUFFIX_TODAY_PROGRESS = "_today_progress"
SENSOR_UID_SUFFIX_BADGES = "_badges"

ATTR_PRAYER_NAME = "prayer_name"
ATTR_START_TIME = "start_time"
ATTR_MOSQUE_TIME = "mosque_time"
ATTR_END_TIME = "end_time"
ATTR_GATE_TIME = "gate_time"
ATTR_TOTAL = "total"
ATTR_WEEKLY_PROGRESS = "weekly_progress"
ATTR_PRAYER_BREAKDOWN = "prayer_breakdown"
ATTR_CALENDAR_MARKERS = "calendar_markers"
ATTR_LAST_COMPLETED_DATE = "last_completed_date"
ATTR_EARNED_BADGES = "earned_badges"
ATTR_BADGE_PROGRESS = "badge_progress"
ATTR_PROFILE_STATUS = "profile_status"

DEVICE_MANUFACTURER = "Prayer Tracker"
DEVICE_MODEL = "Daily Prayers"

# ------------------------------------------------------------------------------------------------
# Translation Keys
# ------------------------------------------------------------------------------------------------
TRANS_KEY_ERROR_TOO_EARLY = "too_early"
TRANS_KEY_ERROR_CONFIG_MISSING = "config_missing"
TRANS_KEY_ERROR_SYNC_FAILED = "sync_failed"
TRANS_KEY_ERROR_REFRESH_FAILED = "refresh_failed"
TRANS_KEY_ERROR_INVALID_PRAYER_TIME = "invalid_prayer_time"
TRANS_KEY_ERROR_POLICY = "policy_error"
TRANS_KEY_ERROR_UNKNOWN_PRAYER = "unknown_prayer"
TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"
TRANS_KEY_ERROR_CANNOT_CONNECT = "cannot_connect"
TRANS_KEY_ERROR_INVALID_TIME_ZONE = "invalid_time_zone"

TRANS_KEY_SENSOR_PRAYER_STATUS = "prayer_status"
TRANS_KEY_SENSOR_CURRENT_STREAK = "current_streak"
TRANS_KEY_SENSOR_LONGEST_STREAK = "longest_streak"
TRANS_KEY_SENSOR_TODAY_PROGRESS = "today_progress"
TRANS_KEY_SENSOR_BADGES = "badges"

# ------------------------------------------------------------------------------------------------
# Notification Texts
# ------------------------------------------------------------------------------------------------
NOTIF_TITLE_START = "Time for {prayer}"
NOTIF_MESSAGE_START = "It is now time for {prayer}."
NOTIF_MESSAGE_START_MOSQUE = "Jamaat time for {prayer}."
NOTIF_TITLE_REMINDER = "{prayer} Ending Soon"
NOTIF_MESSAGE_REMINDER = "{minutes} minutes remaining for {prayer}!"
