"""Tagged JSON codec for cache payloads.

Plain JSON loses the distinction between a Collection and a dict, drops
integer keys and cannot name an entity variant. :func:`encode` wraps those
values in small tagged objects so :func:`decode` can rebuild them exactly.

Tags:
    ``__entity__``: entity variant name, with its fields under ``fields``
    ``__collection__``: ordered ``[key, value]`` pairs
    ``__mapping__``: ordered pairs for dicts with non-string keys
    ``__bytes__``: base64 text
"""

from __future__ import annotations

import base64
from collections.abc import Mapping
from dataclasses import fields
from typing import Any

import orjson

from reelvault.core.collection import Collection
from reelvault.core.entities.base import Entity

ENTITY_TAG = "__entity__"
COLLECTION_TAG = "__collection__"
MAPPING_TAG = "__mapping__"
BYTES_TAG = "__bytes__"


def _tag(value: Any) -> Any:
    if isinstance(value, Entity):
        return {
            ENTITY_TAG: type(value).__name__,
            "fields": {f.name: _tag(getattr(value, f.name)) for f in fields(value)},
        }
    if isinstance(value, Collection):
        return {COLLECTION_TAG: [[key, _tag(item)] for key, item in value.items()]}
    if isinstance(value, Mapping):
        if all(isinstance(key, str) for key in value):
            return {key: _tag(item) for key, item in value.items()}
        return {MAPPING_TAG: [[key, _tag(item)] for key, item in value.items()]}
    if isinstance(value, (list, tuple)):
        return [_tag(item) for item in value]
    if isinstance(value, (bytes, bytearray)):
        return {BYTES_TAG: base64.b64encode(bytes(value)).decode("ascii")}
    return value


def _untag(value: Any) -> Any:
    if isinstance(value, list):
        return [_untag(item) for item in value]
    if not isinstance(value, dict):
        return value

    if ENTITY_TAG in value:
        entity = Entity.variant(value[ENTITY_TAG])()
        for name, item in value.get("fields", {}).items():
            setattr(entity, name, _untag(item))
        return entity
    if COLLECTION_TAG in value:
        return Collection({key: _untag(item) for key, item in value[COLLECTION_TAG]})
    if MAPPING_TAG in value:
        return {key: _untag(item) for key, item in value[MAPPING_TAG]}
    if BYTES_TAG in value:
        return base64.b64decode(value[BYTES_TAG])
    return {key: _untag(item) for key, item in value.items()}


def encode(value: Any) -> bytes:
    """Serialize ``value`` (entities, collections, plain data) to JSON bytes."""
    return orjson.dumps(_tag(value))


def decode(data: bytes | str) -> Any:
    """Inverse of :func:`encode`."""
    return _untag(orjson.loads(data))


__all__ = ["decode", "encode"]
