"""Configuration domain models."""

from __future__ import annotations

from .cache_settings import CacheSettings
from .http_settings import HttpSettings
from .logging_settings import LoggingSettings
from .settings import Settings

__all__ = [
    "CacheSettings",
    "HttpSettings",
    "LoggingSettings",
    "Settings",
]
