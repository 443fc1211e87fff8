# File: helpers/__init__.py
"""Home Assistant-bound helper functions for Prayer Tracker.

This module contains functions that REQUIRE Home Assistant dependencies.

NOTE: Functions that need `hass` or HA registry types belong here, NOT in utils/.

Submodules:
    - entity_helpers: Instance-scoped dispatcher signal names
    - device_helpers: DeviceInfo construction
"""

from . import device_helpers, entity_helpers

__all__ = [
    "device_helpers",
    "entity_helpers",
]
