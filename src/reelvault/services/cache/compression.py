"""Compression codecs for cache payloads.

Codecs are probed by import. ``zstandard`` and ``lz4`` are optional
third-party packages; ``bz2`` and ``zlib`` ship with most interpreter
builds but can be compiled out, so they are probed the same way.
"""

from __future__ import annotations

from enum import Enum

try:
    import zstandard
except ImportError:
    zstandard = None  # type: ignore[assignment]

try:
    import lz4.frame as lz4_frame
except ImportError:
    lz4_frame = None  # type: ignore[assignment]

try:
    import bz2
except ImportError:
    bz2 = None  # type: ignore[assignment]

try:
    import zlib
except ImportError:
    zlib = None  # type: ignore[assignment]

from reelvault.shared.constants import Cache
from reelvault.shared.errors import ErrorCode, ErrorContext, InfrastructureError

# Raw deflate stream, no zlib header or checksum
_RAW_DEFLATE_WBITS = -15


class CompressionMethod(str, Enum):
    """Tag persisted next to every compressed payload."""

    ZSTD = "zstd"
    LZ4 = "lz4"
    BZIP2 = "bzip2"
    GZIP = "gzip"
    DEFLATE = "deflate"
    NONE = "none"


def is_available(method: CompressionMethod) -> bool:
    """Whether the codec behind ``method`` can be used in this process."""
    if method == CompressionMethod.ZSTD:
        return zstandard is not None
    if method == CompressionMethod.LZ4:
        return lz4_frame is not None
    if method == CompressionMethod.BZIP2:
        return bz2 is not None
    if method in (CompressionMethod.GZIP, CompressionMethod.DEFLATE):
        return zlib is not None
    return True


def probe_compression_method() -> CompressionMethod:
    """Best available codec, preferring zstd, then lz4, bzip2 and gzip."""
    for method in (
        CompressionMethod.ZSTD,
        CompressionMethod.LZ4,
        CompressionMethod.BZIP2,
        CompressionMethod.GZIP,
    ):
        if is_available(method):
            return method
    return CompressionMethod.NONE


def _unavailable(method: CompressionMethod, operation: str) -> InfrastructureError:
    return InfrastructureError(
        ErrorCode.COMPRESSION_FAILED,
        f"Compression method '{method.value}' is not available in this environment",
        ErrorContext(operation=operation, additional_data={"method": method.value}),
    )


def compress(data: bytes, method: CompressionMethod) -> bytes:
    """Compress ``data`` with ``method``.

    Raises:
        InfrastructureError: If the codec is not installed.
    """
    method = CompressionMethod(method)
    if not is_available(method):
        raise _unavailable(method, "compress")

    if method == CompressionMethod.ZSTD:
        return zstandard.ZstdCompressor(level=Cache.ZSTD_LEVEL).compress(data)
    if method == CompressionMethod.LZ4:
        return lz4_frame.compress(data)
    if method == CompressionMethod.BZIP2:
        return bz2.compress(data, Cache.BZIP2_LEVEL)
    if method == CompressionMethod.GZIP:
        return zlib.compress(data, Cache.ZLIB_LEVEL)
    if method == CompressionMethod.DEFLATE:
        compressor = zlib.compressobj(Cache.ZLIB_LEVEL, zlib.DEFLATED, _RAW_DEFLATE_WBITS)
        return compressor.compress(data) + compressor.flush()
    return data


def decompress(data: bytes, method: CompressionMethod | str) -> bytes:
    """Decompress ``data`` that was written with ``method``.

    Raises:
        ValueError: If ``method`` is not a known tag.
        InfrastructureError: If the codec is not installed.
    """
    method = CompressionMethod(method)
    if not is_available(method):
        raise _unavailable(method, "decompress")

    if method == CompressionMethod.ZSTD:
        return zstandard.ZstdDecompressor().decompressobj().decompress(data)
    if method == CompressionMethod.LZ4:
        return lz4_frame.decompress(data)
    if method == CompressionMethod.BZIP2:
        return bz2.decompress(data)
    if method == CompressionMethod.GZIP:
        return zlib.decompress(data)
    if method == CompressionMethod.DEFLATE:
        return zlib.decompress(data, _RAW_DEFLATE_WBITS)
    return data


__all__ = [
    "CompressionMethod",
    "compress",
    "decompress",
    "is_available",
    "probe_compression_method",
]
