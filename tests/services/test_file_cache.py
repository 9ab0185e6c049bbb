"""Tests for the compressed, self-pruning file cache."""

from __future__ import annotations

import hashlib
import os
import time
from pathlib import Path

import orjson
import pytest

from reelvault.core.collection import Collection
from reelvault.core.entities import Title
from reelvault.services.cache import CompressionMethod, FileCache, reset_cache_state
from reelvault.services.cache import compression
from reelvault.shared.constants import Cache
from reelvault.shared.errors import ErrorCode, InfrastructureError


def entry_path(cache_dir: Path, key: str) -> Path:
    return cache_dir / f"{hashlib.sha256(key.encode('utf-8')).hexdigest()}.cache"


def age_file(path: Path, seconds: float) -> None:
    past = time.time() - seconds
    os.utime(path, (past, past))


def write_envelope(cache_dir: Path, key: str, value: object, ttl: int = Cache.DEFAULT_TTL) -> Path:
    path = entry_path(cache_dir, key)
    path.write_bytes(orjson.dumps({"key": key, "ttl": ttl, "value": value}))
    return path


class TestInitialization:
    def test_creates_missing_directory(self, cache_dir: Path) -> None:
        assert not cache_dir.exists()

        FileCache(cache_dir)

        assert cache_dir.is_dir()

    def test_directory_creation_failure(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(InfrastructureError) as exc_info:
            FileCache(blocker / "cache")

        assert exc_info.value.code == ErrorCode.DIRECTORY_CREATION_FAILED

    def test_unwritable_directory(self, cache_dir: Path, mocker) -> None:
        mocker.patch("reelvault.services.cache.file_cache.os.access", return_value=False)

        with pytest.raises(InfrastructureError) as exc_info:
            FileCache(cache_dir)

        assert exc_info.value.code == ErrorCode.PERMISSION_DENIED

    def test_codec_detected_once(self, cache_dir: Path, mocker) -> None:
        probe = mocker.patch(
            "reelvault.services.cache.file_cache.probe_compression_method",
            return_value=CompressionMethod.GZIP,
        )

        first = FileCache(cache_dir)
        second = FileCache(cache_dir)

        assert probe.call_count == 1
        assert first.compression_method == second.compression_method == CompressionMethod.GZIP


class TestRoundTrip:
    def test_plain_values(self, file_cache: FileCache) -> None:
        value = {"title": "The Room", "genres": ["Drama"], "year": 2003}

        assert file_cache.add("k", value)
        assert file_cache.has("k")
        assert file_cache.get("k") == value

    def test_title_entity(self, file_cache: FileCache) -> None:
        title = Title.from_dict(
            {"id": "tt0368226", "title": "The Room", "actors": [{"id": "nm1", "name": "Tommy"}]},
        )

        file_cache.add("tt0368226", title)
        restored = file_cache.get("tt0368226")

        assert restored == title
        assert isinstance(restored.actors, Collection)

    @pytest.mark.parametrize(
        ("missing", "expected"),
        [
            ((), CompressionMethod.ZSTD),
            (("zstandard",), CompressionMethod.LZ4),
            (("zstandard", "lz4_frame"), CompressionMethod.BZIP2),
            (("zstandard", "lz4_frame", "bz2"), CompressionMethod.GZIP),
            (("zstandard", "lz4_frame", "bz2", "zlib"), CompressionMethod.NONE),
        ],
    )
    def test_every_detected_codec(
        self,
        cache_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
        missing: tuple[str, ...],
        expected: CompressionMethod,
    ) -> None:
        for module_name in missing:
            monkeypatch.setattr(compression, module_name, None)
        reset_cache_state()
        cache = FileCache(cache_dir)

        cache.add("key", {"payload": "x" * 500})

        assert cache.compression_method == expected
        assert cache.get("key") == {"payload": "x" * 500}
        assert cache.get_compression_stats("key")["compression_method"] == expected.value

    def test_envelope_layout_on_disk(self, file_cache: FileCache, cache_dir: Path) -> None:
        file_cache.add("layout", [1, 2, 3], ttl=60)

        document = orjson.loads(entry_path(cache_dir, "layout").read_bytes())

        assert document["key"] == "layout"
        assert document["ttl"] == 60
        assert set(document["value"]) == {
            "cdata",
            "compression_method",
            "original_size",
            "compressed_size",
            "timestamp",
        }

    def test_unserializable_value_returns_false(self, file_cache: FileCache) -> None:
        assert file_cache.add("bad", object()) is False
        assert not file_cache.has("bad")


class TestExpiry:
    def test_missing_key(self, file_cache: FileCache) -> None:
        assert not file_cache.has("absent")
        assert file_cache.get("absent") is None
        assert file_cache.get("absent", "fallback") == "fallback"

    def test_expired_entry_is_invisible(self, file_cache: FileCache, cache_dir: Path) -> None:
        file_cache.add("short", "value", ttl=1)
        age_file(entry_path(cache_dir, "short"), 5)

        assert not file_cache.has("short")
        assert file_cache.get("short") is None

    def test_non_positive_ttl_uses_default(self, file_cache: FileCache, cache_dir: Path) -> None:
        file_cache.add("zero", "value", ttl=0)
        path = entry_path(cache_dir, "zero")
        age_file(path, 3600)

        assert orjson.loads(path.read_bytes())["ttl"] == Cache.DEFAULT_TTL
        assert file_cache.has("zero")

    def test_corrupt_file_is_a_miss(self, file_cache: FileCache, cache_dir: Path) -> None:
        entry_path(cache_dir, "corrupt").write_bytes(b"{not json")

        assert not file_cache.has("corrupt")
        assert file_cache.get("corrupt", "fallback") == "fallback"

    def test_undecodable_payload_returns_default(self, file_cache: FileCache, cache_dir: Path) -> None:
        write_envelope(
            cache_dir,
            "garbled",
            {"cdata": "bm90IGd6aXA=", "compression_method": "gzip", "original_size": 7},
        )

        assert file_cache.has("garbled")
        assert file_cache.get("garbled", "fallback") == "fallback"


class TestLegacyEntries:
    def test_unwrapped_value_returned_as_stored(self, file_cache: FileCache, cache_dir: Path) -> None:
        write_envelope(cache_dir, "legacy", {"title": "Old"})

        assert file_cache.get("legacy") == {"title": "Old"}
        assert file_cache.get_compression_stats("legacy") is None

    def test_document_without_envelope(self, file_cache: FileCache, cache_dir: Path) -> None:
        entry_path(cache_dir, "bare").write_bytes(orjson.dumps(["a", "b"]))

        assert file_cache.get("bare") == ["a", "b"]


class TestDeleteAndClear:
    def test_delete(self, file_cache: FileCache) -> None:
        file_cache.add("k", 1)

        assert file_cache.delete("k") is True
        assert file_cache.delete("k") is False
        assert not file_cache.has("k")

    def test_clear_only_touches_cache_files(self, file_cache: FileCache, cache_dir: Path) -> None:
        file_cache.add("a", 1)
        file_cache.add("b", 2)
        keep = cache_dir / "notes.txt"
        keep.write_text("keep me")

        assert file_cache.clear() is True
        assert list(cache_dir.glob("*.cache")) == []
        assert keep.exists()


class TestPruning:
    def test_prune_removes_entries_older_than_default_ttl(self, cache_dir: Path) -> None:
        cache = FileCache(cache_dir, default_ttl=100)
        cache.add("old", 1)
        cache.add("new", 2)
        age_file(entry_path(cache_dir, "old"), 200)

        assert cache.prune() is True
        assert not entry_path(cache_dir, "old").exists()
        assert entry_path(cache_dir, "new").exists()

    def test_longer_entry_ttl_does_not_protect_from_prune(self, cache_dir: Path) -> None:
        cache = FileCache(cache_dir, default_ttl=100)
        cache.add("long", 1, ttl=10_000)
        path = entry_path(cache_dir, "long")
        age_file(path, 200)

        assert cache.has("long")
        cache.prune()
        assert not path.exists()

    def test_first_construction_prunes_once(self, cache_dir: Path) -> None:
        cache_dir.mkdir()
        stale = write_envelope(cache_dir, "stale", 1)
        age_file(stale, Cache.DEFAULT_TTL + 60)

        FileCache(cache_dir)

        assert not stale.exists()

        stale = write_envelope(cache_dir, "stale", 1)
        age_file(stale, Cache.DEFAULT_TTL + 60)
        FileCache(cache_dir)

        assert stale.exists()


class TestCompressionStats:
    def test_ratio_matches_sizes(self, file_cache: FileCache) -> None:
        file_cache.add("big", {"text": "abc" * 1000})

        stats = file_cache.get_compression_stats("big")

        assert stats is not None
        expected = round((1 - stats["compressed_size"] / stats["original_size"]) * 100, 2)
        assert stats["compression_ratio"] == expected
        assert stats["compressed_size"] < stats["original_size"]
        assert isinstance(stats["timestamp"], int)

    def test_zero_original_size(self, file_cache: FileCache, cache_dir: Path) -> None:
        write_envelope(
            cache_dir,
            "empty",
            {
                "cdata": "",
                "compression_method": "none",
                "original_size": 0,
                "compressed_size": 0,
                "timestamp": 1,
            },
        )

        assert file_cache.get_compression_stats("empty")["compression_ratio"] == 0

    def test_missing_entry(self, file_cache: FileCache) -> None:
        assert file_cache.get_compression_stats("absent") is None
