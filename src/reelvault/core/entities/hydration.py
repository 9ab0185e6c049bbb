"""Schema-directed hydration of raw nested data into entities.

Raw records arrive as loosely structured mappings (scraped JSON, cached
dicts). :func:`hydrate` walks one record key by key:

1. The key is normalised (``ratingVotes`` → ``rating_votes``) and must name a
   declared field of the variant.
2. Fields listed in the variant's ``CASTS`` table are turned into a
   :class:`~reelvault.core.collection.Collection` of the target variant.
   Each raw item is first classified as a :class:`SingleRecord` or a
   :class:`GroupedRecords`; groupings become nested Collections.
3. A ``set_<field>`` method on the variant, when present, receives the
   value. Otherwise the value is assigned directly.
"""

from __future__ import annotations

import re
from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar, Union

from reelvault.core.collection import Collection
from reelvault.core.entities.base import Entity
from reelvault.shared.errors import (
    ErrorCode,
    ErrorContext,
    InvalidArgumentError,
    UnknownFieldError,
)

E = TypeVar("E", bound=Entity)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")

_NESTED_TYPES = (Mapping, list, tuple, Collection)


@dataclass(frozen=True)
class SingleRecord:
    """A raw item that hydrates into one entity."""

    index: Hashable
    raw: Any


@dataclass(frozen=True)
class GroupedRecords:
    """A raw item whose attributes are all non-empty nested records."""

    index: Hashable
    members: list[tuple[Hashable, Any]]


RecordShape = Union[SingleRecord, GroupedRecords]


def field_name_for(key: str) -> str:
    """Map a raw camelCase key onto its snake_case field name."""
    return _CAMEL_BOUNDARY.sub(r"_\1", key).lower()


def _attributes(item: Any) -> list[tuple[Hashable, Any]]:
    if isinstance(item, Collection):
        return item.items()
    if isinstance(item, Mapping):
        return list(item.items())
    if isinstance(item, (list, tuple)):
        return list(enumerate(item))
    return []


def _record_index(item: Any, position: Hashable) -> Hashable:
    if isinstance(item, Entity):
        identifier = getattr(item, "id", None) if "id" in item.__dataclass_fields__ else None
    elif isinstance(item, Mapping):
        identifier = item.get("id")
    else:
        identifier = None
    if identifier and isinstance(identifier, Hashable):
        return identifier
    return position


def classify(position: Hashable, item: Any) -> RecordShape:
    """Decide once whether ``item`` is a single record or a grouping.

    An item is a grouping when every one of its attributes is a non-empty
    nested value. An item with no attributes at all therefore counts as an
    (empty) grouping.
    """
    if isinstance(item, Entity):
        return SingleRecord(_record_index(item, position), item)

    attributes = _attributes(item)
    nested = sum(1 for _, value in attributes if isinstance(value, _NESTED_TYPES) and len(value) > 0)
    if isinstance(item, (Mapping, list, tuple, Collection)) and nested == len(attributes):
        return GroupedRecords(_record_index(item, position), attributes)
    return SingleRecord(_record_index(item, position), item)


def _hydrate_item(variant: type[E], raw: Any) -> E:
    if isinstance(raw, Entity):
        return raw  # type: ignore[return-value]
    if not isinstance(raw, Mapping):
        raise InvalidArgumentError(
            ErrorCode.INVALID_ARGUMENT,
            f"{variant.__name__} can only be hydrated from a mapping, got {type(raw).__name__}",
            ErrorContext(
                operation="hydrate",
                additional_data={"variant": variant.__name__, "raw_type": type(raw).__name__},
            ),
        )
    return hydrate(variant, raw)


def cast_collection(variant: type[Entity], raw: Any) -> Collection[Any]:
    """Turn an iterable of raw items into a Collection of ``variant``."""
    if isinstance(raw, Collection):
        items = raw.items()
    elif isinstance(raw, Mapping):
        items = list(raw.items())
    elif isinstance(raw, Iterable) and not isinstance(raw, (str, bytes)):
        items = list(enumerate(raw))
    else:
        raise InvalidArgumentError(
            ErrorCode.INVALID_ARGUMENT,
            f"Cannot cast {type(raw).__name__} into a collection of {variant.__name__}",
            ErrorContext(
                operation="cast_collection",
                additional_data={"variant": variant.__name__, "raw_type": type(raw).__name__},
            ),
        )

    result: Collection[Any] = Collection()
    for position, item in items:
        shape = classify(position, item)
        if isinstance(shape, GroupedRecords):
            group: Collection[Any] = Collection()
            for sub_position, member in shape.members:
                group.put(_record_index(member, sub_position), _hydrate_item(variant, member))
            result.put(shape.index, group)
        else:
            result.put(shape.index, _hydrate_item(variant, shape.raw))
    return result


def assign(entity: Entity, key: str, value: Any) -> None:
    """Set one raw key on ``entity`` following the cast table and setters."""
    name = key if key in entity.__dataclass_fields__ else field_name_for(key)
    if name not in entity.__dataclass_fields__:
        raise UnknownFieldError(type(entity).__name__, key, operation="set")

    target = entity.CASTS.get(name)
    if target is not None and value is not None:
        value = cast_collection(Entity.variant(target), value)

    setter = getattr(type(entity), f"set_{name}", None)
    if callable(setter):
        setter(entity, value)
    else:
        setattr(entity, name, value)


def hydrate(variant: type[E], raw: Mapping[str, Any]) -> E:
    """Build an instance of ``variant`` from a raw mapping.

    Raises:
        UnknownFieldError: If ``raw`` names a field the variant does not declare.
        InvalidArgumentError: If a cast field holds something non-iterable,
            or a cast item is not a mapping.
    """
    entity = variant()
    for key, value in raw.items():
        assign(entity, str(key), value)
    return entity


__all__ = [
    "GroupedRecords",
    "RecordShape",
    "SingleRecord",
    "assign",
    "cast_collection",
    "classify",
    "field_name_for",
    "hydrate",
]
