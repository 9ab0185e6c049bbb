"""ReelVault Configuration Module

Provides the Settings facade, its domain models and the loader functions
(get_config, load_settings, reload_config).
"""

from __future__ import annotations

from .loader import get_config, load_settings, reload_config
from .models import CacheSettings, HttpSettings, LoggingSettings, Settings

__all__ = [
    "CacheSettings",
    "HttpSettings",
    "LoggingSettings",
    "Settings",
    "get_config",
    "load_settings",
    "reload_config",
]
