"""Common utilities for twiliosig."""

from twiliosig.common.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
