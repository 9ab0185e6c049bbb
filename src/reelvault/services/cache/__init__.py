"""Persistent compressed cache."""

from reelvault.services.cache.compression import CompressionMethod
from reelvault.services.cache.file_cache import (
    CacheRecord,
    FileCache,
    detect_compression_method,
    reset_cache_state,
)

__all__ = [
    "CacheRecord",
    "CompressionMethod",
    "FileCache",
    "detect_compression_method",
    "reset_cache_state",
]
