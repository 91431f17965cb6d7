"""Configuration package."""

from treepush.config.settings import Settings, settings

__all__ = [
    "Settings",
    "settings",
]
