"""Event system: bus and event types for the purge pass."""

from csspurge.events.bus import EventBus
from csspurge.events.types import AssetPurged, AssetSkipped, ModulesScanned, SafelistBuilt

__all__ = [
    "EventBus",
    "ModulesScanned",
    "SafelistBuilt",
    "AssetPurged",
    "AssetSkipped",
]
