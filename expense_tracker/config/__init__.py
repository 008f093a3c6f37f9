"""Configuration package."""

from expense_tracker.config.settings import (
    LoggingSettings,
    Settings,
    TrackerSettings,
    get_settings,
)

__all__ = [
    "LoggingSettings",
    "Settings",
    "TrackerSettings",
    "get_settings",
]
