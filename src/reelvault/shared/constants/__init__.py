"""
ReelVault Constants Module

Centralized constants shared across the package.
"""

from .cache import (
    BASE_DAY,
    BASE_HOUR,
    BASE_MINUTE,
    BASE_SECOND,
    Cache,
    CacheRecordKeys,
    CompressionStatsKeys,
)
from .cli import CLICommands, CLIDefaults, CLIHelp
from .imdb import IMDbConfig, MatchingConfig, SuggestionKeys, TitleCategory

__all__ = [
    "BASE_DAY",
    "BASE_HOUR",
    "BASE_MINUTE",
    "BASE_SECOND",
    "CLICommands",
    "CLIDefaults",
    "CLIHelp",
    "Cache",
    "CacheRecordKeys",
    "CompressionStatsKeys",
    "IMDbConfig",
    "MatchingConfig",
    "SuggestionKeys",
    "TitleCategory",
]
