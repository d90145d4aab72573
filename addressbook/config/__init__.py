"""Configuration package."""

from addressbook.config.settings import (
    AccountSettings,
    Settings,
    get_settings,
)

__all__ = [
    "AccountSettings",
    "Settings",
    "get_settings",
]
