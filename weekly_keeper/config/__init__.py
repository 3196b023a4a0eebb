"""Configuration package."""

from weekly_keeper.config.settings import (
    AppSettings,
    RestSyncSettings,
    Settings,
    WebDAVSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "RestSyncSettings",
    "Settings",
    "WebDAVSettings",
    "get_settings",
    "validate_all_settings",
]
