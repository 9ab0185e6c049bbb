"""Compressed, self-pruning file cache.

Every entry is one ``<sha256(key)>.cache`` file holding a JSON envelope::

    {"key": ..., "ttl": ..., "value": {"cdata": ..., "compression_method": ...,
                                       "original_size": ..., "compressed_size": ...,
                                       "timestamp": ...}}

Expiry is computed from the file modification time. The compression codec is
detected once per process and the cache directory is pruned at most once per
process, on the first successful construction.
"""

from __future__ import annotations

import base64
import hashlib
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from reelvault.core import serialization
from reelvault.services.cache.compression import (
    CompressionMethod,
    compress,
    decompress,
    probe_compression_method,
)
from reelvault.shared.constants import Cache, CacheRecordKeys, CompressionStatsKeys
from reelvault.shared.errors import (
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    create_cache_error,
)
from reelvault.shared.logging import (
    log_file_operation,
    log_operation_error,
    log_operation_success,
)

logger = logging.getLogger(__name__)


@dataclass
class _CacheState:
    """Process-wide lazy state shared by every FileCache instance."""

    compression_method: CompressionMethod | None = None
    pruned: bool = False


_state = _CacheState()


def detect_compression_method() -> CompressionMethod:
    """Probe the best codec once per process and remember it."""
    if _state.compression_method is None:
        _state.compression_method = probe_compression_method()
        logger.debug("Detected cache compression method: %s", _state.compression_method.value)
    return _state.compression_method


def reset_cache_state() -> None:
    """Forget the detected codec and the pruning latch."""
    _state.compression_method = None
    _state.pruned = False


class CacheRecord(BaseModel):
    """Metadata wrapper around one compressed payload."""

    model_config = ConfigDict(populate_by_name=True)

    payload: str = Field(..., alias=CacheRecordKeys.PAYLOAD, description="base64 of the compressed bytes")
    compression_method: CompressionMethod
    original_size: int = 0
    compressed_size: int = 0
    timestamp: int | None = None

    @classmethod
    def is_wrapped(cls, value: Any) -> bool:
        """Whether ``value`` carries the metadata written by :meth:`FileCache.add`."""
        return (
            isinstance(value, dict)
            and CacheRecordKeys.PAYLOAD in value
            and CacheRecordKeys.COMPRESSION_METHOD in value
        )


class FileCache:
    """Persistent key → value store with TTL, compression and pruning.

    Args:
        cache_dir: Directory holding the ``.cache`` files. Created if missing.
        default_ttl: TTL in seconds used when ``add`` is given none, and the
            age threshold for pruning.

    Raises:
        InfrastructureError: If the directory cannot be created or is not writable.
    """

    def __init__(
        self,
        cache_dir: Path | str = Cache.DEFAULT_DIR,
        default_ttl: int = Cache.DEFAULT_TTL,
    ) -> None:
        self.cache_dir = Path(cache_dir)
        self.default_ttl = default_ttl if default_ttl > 0 else Cache.DEFAULT_TTL

        context = ErrorContext(
            operation="initialize_cache",
            additional_data={"cache_dir": str(self.cache_dir)},
        )

        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            error = InfrastructureError(
                code=ErrorCode.DIRECTORY_CREATION_FAILED,
                message=f"Failed to create cache directory: {self.cache_dir}",
                context=context,
                original_error=e,
            )
            log_operation_error(logger=logger, error=error, operation="initialize_cache")
            raise error from e

        if not os.access(self.cache_dir, os.W_OK):
            error = InfrastructureError(
                code=ErrorCode.PERMISSION_DENIED,
                message=f'Cache directory "{self.cache_dir}" is not writable',
                context=context,
            )
            log_operation_error(logger=logger, error=error, operation="initialize_cache")
            raise error

        detect_compression_method()

        if not _state.pruned:
            _state.pruned = self.prune()

        log_operation_success(
            logger=logger,
            operation="initialize_cache",
            duration_ms=0,
            context=context,
        )

    @property
    def compression_method(self) -> CompressionMethod:
        return detect_compression_method()

    def _file_path(self, key: str) -> Path:
        key_hash = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.cache_dir / f"{key_hash}{Cache.FILE_EXTENSION}"

    def _effective_ttl(self, ttl: int | None) -> int:
        return ttl if ttl is not None and ttl > 0 else self.default_ttl

    def _iter_cache_files(self) -> list[Path]:
        return [
            path
            for path in self.cache_dir.iterdir()
            if path.suffix == Cache.FILE_EXTENSION and path.is_file()
        ]

    # ------------------------------------------------------------------
    # Envelope handling
    # ------------------------------------------------------------------

    def _wrap(self, value: Any) -> dict[str, Any]:
        method = detect_compression_method()
        raw = serialization.encode(value)
        compressed = compress(raw, method)
        return {
            CacheRecordKeys.PAYLOAD: base64.b64encode(compressed).decode("ascii"),
            CacheRecordKeys.COMPRESSION_METHOD: method.value,
            CacheRecordKeys.ORIGINAL_SIZE: len(raw),
            CacheRecordKeys.COMPRESSED_SIZE: len(compressed),
            CacheRecordKeys.TIMESTAMP: int(time.time()),
        }

    @staticmethod
    def _unwrap(value: Any) -> Any:
        if not CacheRecord.is_wrapped(value):
            # Entries written without metadata are returned as stored
            return value
        record = CacheRecord.model_validate(value)
        raw = decompress(base64.b64decode(record.payload), record.compression_method)
        return serialization.decode(raw)

    def _read_envelope(self, path: Path) -> tuple[Any, int]:
        """Return ``(stored value, ttl)`` for the file at ``path``."""
        document = orjson.loads(path.read_bytes())
        if isinstance(document, dict) and CacheRecordKeys.VALUE in document:
            stored_ttl = document.get(CacheRecordKeys.TTL)
            ttl = stored_ttl if isinstance(stored_ttl, int) else None
            return document[CacheRecordKeys.VALUE], self._effective_ttl(ttl)
        return document, self.default_ttl

    def _is_fresh(self, path: Path, ttl: int) -> bool:
        age = time.time() - path.stat().st_mtime
        return age <= ttl

    def _load(self, key: str, operation: str) -> tuple[bool, Any]:
        """Read a live entry. Returns ``(found, stored value)``."""
        path = self._file_path(key)
        if not path.is_file():
            return False, None
        try:
            value, ttl = self._read_envelope(path)
            if not self._is_fresh(path, ttl):
                logger.debug("Cache entry expired for key '%s'", key)
                return False, None
        except (OSError, orjson.JSONDecodeError) as e:
            error = create_cache_error(
                f"Failed to read cache file for key '{key}': {e!s}",
                code=ErrorCode.CACHE_READ_FAILED,
                file_path=str(path),
                operation=operation,
                original_error=e,
            )
            log_operation_error(logger=logger, error=error, operation=operation)
            return False, None
        return True, value

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store ``value`` under ``key``. Never raises; False on failure."""
        path = self._file_path(key)
        effective_ttl = self._effective_ttl(ttl)
        try:
            envelope = {
                CacheRecordKeys.KEY: key,
                CacheRecordKeys.TTL: effective_ttl,
                CacheRecordKeys.VALUE: self._wrap(value),
            }
            with open(path, "wb") as f:
                f.write(orjson.dumps(envelope))
        except Exception as e:  # noqa: BLE001
            # Boundary: serialization, codec and I/O errors all map to a False return
            error = create_cache_error(
                f"Failed to cache data for key '{key}': {e!s}",
                code=ErrorCode.CACHE_WRITE_FAILED,
                file_path=str(path),
                operation="cache_add",
                original_error=e,
            )
            log_operation_error(logger=logger, error=error, operation="cache_add")
            return False

        log_operation_success(
            logger=logger,
            operation="cache_add",
            duration_ms=0,
            context={"key": key, "ttl": effective_ttl},
        )
        return True

    def has(self, key: str) -> bool:
        """Whether a live (non-expired) entry exists for ``key``."""
        found, _ = self._load(key, "cache_has")
        return found

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key``, or ``default``."""
        found, stored = self._load(key, "cache_get")
        if not found:
            return default
        try:
            return self._unwrap(stored)
        except Exception as e:  # noqa: BLE001
            error = create_cache_error(
                f"Failed to decode cache data for key '{key}': {e!s}",
                code=ErrorCode.CACHE_READ_FAILED,
                file_path=str(self._file_path(key)),
                operation="cache_get",
                original_error=e,
            )
            log_operation_error(logger=logger, error=error, operation="cache_get")
            return default

    def delete(self, key: str) -> bool:
        """Remove the entry for ``key``. False if it did not exist or could not be removed."""
        path = self._file_path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            log_file_operation(logger, "delete", str(path), success=False, error_message=str(e))
            return False
        log_file_operation(logger, "delete", str(path))
        return True

    def clear(self) -> bool:
        """Remove every ``.cache`` file. False only if the directory cannot be scanned."""
        try:
            paths = self._iter_cache_files()
        except OSError as e:
            error = create_cache_error(
                f"Failed to scan cache directory: {e!s}",
                code=ErrorCode.CACHE_ERROR,
                file_path=str(self.cache_dir),
                operation="cache_clear",
                original_error=e,
            )
            log_operation_error(logger=logger, error=error, operation="cache_clear")
            return False

        for path in paths:
            try:
                path.unlink()
            except OSError as e:
                log_file_operation(logger, "clear", str(path), success=False, error_message=str(e))
        return True

    def prune(self) -> bool:
        """Delete entries older than the default TTL.

        The age threshold is always ``default_ttl``; a longer TTL given to
        :meth:`add` does not protect an entry from pruning. Individual delete
        failures are logged and skipped. Returns False only if the directory
        cannot be scanned.
        """
        try:
            paths = self._iter_cache_files()
        except OSError as e:
            error = create_cache_error(
                f"Cache pruning failed: {e!s}",
                code=ErrorCode.CACHE_PRUNE_FAILED,
                file_path=str(self.cache_dir),
                operation="cache_prune",
                original_error=e,
            )
            log_operation_error(logger=logger, error=error, operation="cache_prune")
            return False

        now = time.time()
        removed = 0
        for path in paths:
            try:
                if now - path.stat().st_mtime > self.default_ttl:
                    path.unlink()
                    removed += 1
            except OSError as e:
                log_file_operation(logger, "prune", str(path), success=False, error_message=str(e))

        if removed:
            logger.info("Pruned %d expired cache entries from %s", removed, self.cache_dir)
        return True

    def get_compression_stats(self, key: str) -> dict[str, Any] | None:
        """Compression details of the entry for ``key``, or None."""
        found, stored = self._load(key, "cache_stats")
        if not found or not CacheRecord.is_wrapped(stored):
            return None
        try:
            record = CacheRecord.model_validate(stored)
        except ValidationError:
            return None

        if record.original_size > 0:
            ratio = round((1 - record.compressed_size / record.original_size) * 100, 2)
        else:
            ratio = 0
        return {
            CompressionStatsKeys.COMPRESSION_METHOD: record.compression_method.value,
            CompressionStatsKeys.ORIGINAL_SIZE: record.original_size,
            CompressionStatsKeys.COMPRESSED_SIZE: record.compressed_size,
            CompressionStatsKeys.COMPRESSION_RATIO: ratio,
            CompressionStatsKeys.TIMESTAMP: record.timestamp,
        }


__all__ = ["CacheRecord", "FileCache", "detect_compression_method", "reset_cache_state"]
