"""
Cache Configuration Constants

TTL values, file layout and compression tags for the persistent cache.
"""

# Base time units for TTL calculations
BASE_SECOND = 1
BASE_MINUTE = 60 * BASE_SECOND
BASE_HOUR = 60 * BASE_MINUTE
BASE_DAY = 24 * BASE_HOUR


class Cache:
    """Cache configuration constants."""

    DEFAULT_TTL = 31 * BASE_DAY  # 2678400 seconds
    DEFAULT_DIR = "cache"
    FILE_EXTENSION = ".cache"

    # Compression levels handed to the codecs
    ZSTD_LEVEL = 3
    BZIP2_LEVEL = 6
    ZLIB_LEVEL = 6


class CacheRecordKeys:
    """Keys of the metadata wrapper persisted for every cache entry."""

    PAYLOAD = "cdata"
    COMPRESSION_METHOD = "compression_method"
    ORIGINAL_SIZE = "original_size"
    COMPRESSED_SIZE = "compressed_size"
    TIMESTAMP = "timestamp"

    # Envelope written to disk around the wrapper
    KEY = "key"
    TTL = "ttl"
    VALUE = "value"


class CompressionStatsKeys:
    """Keys of the dictionary returned by FileCache.get_compression_stats()."""

    COMPRESSION_METHOD = "compression_method"
    ORIGINAL_SIZE = "original_size"
    COMPRESSED_SIZE = "compressed_size"
    COMPRESSION_RATIO = "compression_ratio"
    TIMESTAMP = "timestamp"


__all__ = [
    "BASE_DAY",
    "BASE_HOUR",
    "BASE_MINUTE",
    "BASE_SECOND",
    "Cache",
    "CacheRecordKeys",
    "CompressionStatsKeys",
]
