"""Recursive ordered collection.

A Collection is an ordered key → value store that behaves both like a list
(auto-incrementing integer keys, iteration over values) and like a mapping
(string keys, ``get``/``put``). Values may themselves be Collections, and
most read and transform operations recurse into them.

Every transformation returns a new Collection. Only ``put``, ``append``,
item assignment and item deletion mutate the receiver.
"""

from __future__ import annotations

import functools
import math
from collections.abc import Callable, Hashable, Iterable, Iterator, Mapping
from enum import Enum
from typing import Any, Generic, TypeVar

import orjson

from reelvault.shared.errors import ErrorCode, ErrorContext, InvalidArgumentError

V = TypeVar("V")

_SCALARS = (str, bytes, int, float, bool)


class SortMode(str, Enum):
    """Comparison modes for sort_by / sort_asc / sort_desc."""

    REGULAR = "regular"  # generic three-way comparison
    NUMERIC = "numeric"  # numeric difference
    STRING = "string"  # lexicographic comparison of str() values


def _compare(left: Any, right: Any, mode: SortMode) -> int:
    if mode == SortMode.NUMERIC:
        difference = left - right
        return (difference > 0) - (difference < 0)
    if mode == SortMode.STRING:
        left, right = str(left), str(right)
    return (left > right) - (left < right)


def _lookup_field(item: Any, field: str) -> tuple[bool, Any]:
    """Read ``field`` from a mapping leaf or an object leaf.

    Mapping leaves report a field as present whenever the key exists.
    Object leaves report it only when the attribute is set and not None.
    """
    if isinstance(item, Mapping):
        if field in item:
            return True, item[field]
        return False, None
    if item is None or isinstance(item, _SCALARS):
        return False, None
    value = getattr(item, field, None)
    if value is None:
        return False, None
    return True, value


def _unique(values: Iterable[Any]) -> list[Any]:
    # Equality based so unhashable leaves (dicts, entities) are supported
    seen: list[Any] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def _is_nested(value: Any) -> bool:
    return isinstance(value, (Collection, Mapping, list, tuple, set, frozenset))


class Collection(Generic[V]):
    """Ordered, recursive key → value container.

    Args:
        items: A mapping (keys preserved), another Collection (copied) or
            any non-string iterable (re-indexed from 0).

    Raises:
        InvalidArgumentError: If ``items`` is neither a mapping nor an iterable.
    """

    __slots__ = ("_items", "_next_index")

    def __init__(self, items: Mapping[Hashable, V] | Iterable[V] | None = None) -> None:
        if items is None:
            self._items: dict[Hashable, V] = {}
        elif isinstance(items, Collection):
            self._items = dict(items._items)
        elif isinstance(items, Mapping):
            self._items = dict(items)
        elif isinstance(items, Iterable) and not isinstance(items, (str, bytes)):
            self._items = dict(enumerate(items))
        else:
            raise InvalidArgumentError(
                ErrorCode.INVALID_ARGUMENT,
                f"Collection items must be a mapping or an iterable, got {type(items).__name__}",
                ErrorContext(
                    operation="collection_init",
                    additional_data={"items_type": type(items).__name__},
                ),
            )
        self._next_index = self._compute_next_index()

    @classmethod
    def new(cls, items: Mapping[Hashable, V] | Iterable[V] | None = None) -> Collection[V]:
        """Static constructor, equivalent to ``Collection(items)``."""
        return cls(items)

    def _compute_next_index(self) -> int:
        int_keys = [key for key in self._items if isinstance(key, int) and not isinstance(key, bool)]
        return max(int_keys) + 1 if int_keys else 0

    # ------------------------------------------------------------------
    # Recursive traversal
    # ------------------------------------------------------------------

    def each(self, callback: Callable[[Any, Hashable], Any]) -> Collection[V]:
        """Run ``callback(value, key)`` on every leaf, recursively."""
        for key, value in self._items.items():
            if isinstance(value, Collection):
                value.each(callback)
            else:
                callback(value, key)
        return self

    def filter(self, callback: Callable[[Any, Hashable], Any] | None = None) -> Collection[V]:
        """Keep leaves for which ``callback(value, key)`` is truthy.

        Without a callback the leaf's own truthiness decides. Nested
        Collections are filtered recursively and dropped when they end up
        empty.
        """
        results: dict[Hashable, Any] = {}
        for key, value in self._items.items():
            if isinstance(value, Collection):
                filtered = value.filter(callback)
                if filtered.count() > 0:
                    results[key] = filtered
            else:
                keep = bool(callback(value, key)) if callback is not None else bool(value)
                if keep:
                    results[key] = value
        return Collection(results)

    def map(self, callback: Callable[[Any, Hashable], Any]) -> Collection[Any]:
        """Apply ``callback(value, key)`` to every leaf, rebuilding nested Collections."""
        mapped: dict[Hashable, Any] = {}
        for key, value in self._items.items():
            if isinstance(value, Collection):
                mapped[key] = value.map(callback)
            else:
                mapped[key] = callback(value, key)
        return Collection(mapped)

    def contains(self, value: Any, field: str | None = None) -> bool:
        """Whether any leaf equals ``value`` (or has ``field`` equal to it)."""
        for item in self._items.values():
            if isinstance(item, Collection):
                if item.contains(value, field):
                    return True
            elif field is not None:
                found, current = _lookup_field(item, field)
                if found and current == value:
                    return True
            elif item == value:
                return True
        return False

    def first_where(self, field: str, value: Any) -> Any | None:
        """First leaf, depth first, whose ``field`` equals ``value``."""
        for item in self._items.values():
            if isinstance(item, Collection):
                found_item = item.first_where(field, value)
                if found_item is not None:
                    return found_item
            else:
                found, current = _lookup_field(item, field)
                if found and current == value:
                    return item
        return None

    def where(self, field: str, value: Any) -> Collection[V]:
        """Recursive filter on field equality."""

        def matches(item: Any, _key: Hashable) -> bool:
            found, current = _lookup_field(item, field)
            return found and current == value

        return self.filter(matches)

    def pluck(self, field: str) -> Collection[Any]:
        """Collect ``field`` from every leaf into a flat, re-indexed Collection."""
        results: list[Any] = []
        for item in self._items.values():
            if isinstance(item, Collection):
                results.extend(item.pluck(field).values())
            else:
                found, current = _lookup_field(item, field)
                if found:
                    results.append(current)
        return Collection(results)

    def pluck_unique(self, field: str) -> Collection[Any]:
        """Like :meth:`pluck` with duplicate values suppressed."""
        return Collection(_unique(self.pluck(field).values()))

    def flatten(self, depth: float = math.inf) -> Collection[Any]:
        """Flatten nested iterables up to ``depth`` levels.

        Uses an explicit stack of iterators, so arbitrarily deep graphs do
        not grow the call stack. Mappings contribute their values.
        """
        results: list[Any] = []
        stack: list[tuple[Iterator[Any], float]] = [(iter(self.values()), depth)]
        while stack:
            iterator, remaining = stack[-1]
            try:
                item = next(iterator)
            except StopIteration:
                stack.pop()
                continue
            if _is_nested(item) and remaining >= 1:
                children = item.values() if isinstance(item, (Collection, Mapping)) else item
                stack.append((iter(children), remaining - 1))
            else:
                results.append(item)
        return Collection(results)

    # ------------------------------------------------------------------
    # Single-level transforms
    # ------------------------------------------------------------------

    def reduce(self, callback: Callable[[Any, V, Hashable], Any], initial: Any = None) -> Any:
        """Left fold ``callback(carry, value, key)`` over this level only."""
        carry = initial
        for key, value in self._items.items():
            carry = callback(carry, value, key)
        return carry

    def except_keys(self, keys: Iterable[Hashable]) -> Collection[V]:
        """Copy without the given keys."""
        excluded = list(keys)
        return Collection({k: v for k, v in self._items.items() if k not in excluded})

    def slice(self, offset: int, length: int | None = None) -> Collection[V]:
        """Slice by position, preserving keys."""
        entries = list(self._items.items())
        if length is None:
            selected = entries[offset:]
        elif length >= 0:
            start = offset if offset >= 0 else max(len(entries) + offset, 0)
            selected = entries[start : start + length]
        else:
            selected = entries[offset:length]
        return Collection(dict(selected))

    def sort_by(
        self,
        callbacks: Iterable[Callable[[V], Any]],
        mode: SortMode = SortMode.REGULAR,
    ) -> Collection[V]:
        """Stable sort by a chain of key functions; the result is re-indexed."""
        key_functions = list(callbacks)

        def compare(left: V, right: V) -> int:
            for key_function in key_functions:
                result = _compare(key_function(left), key_function(right), mode)
                if result != 0:
                    return result
            return 0

        return Collection(sorted(self._items.values(), key=functools.cmp_to_key(compare)))

    def sort_asc(self, mode: SortMode = SortMode.REGULAR) -> Collection[V]:
        """Sort by value ascending, preserving keys."""
        return self._sort_values(mode, reverse=False)

    def sort_desc(self, mode: SortMode = SortMode.REGULAR) -> Collection[V]:
        """Sort by value descending, preserving keys."""
        return self._sort_values(mode, reverse=True)

    def _sort_values(self, mode: SortMode, *, reverse: bool) -> Collection[V]:
        def compare(left: tuple[Hashable, V], right: tuple[Hashable, V]) -> int:
            return _compare(left[1], right[1], mode)

        ordered = sorted(self._items.items(), key=functools.cmp_to_key(compare), reverse=reverse)
        return Collection(dict(ordered))

    # ------------------------------------------------------------------
    # Access and mutation
    # ------------------------------------------------------------------

    def first(self) -> V | None:
        """First value in insertion order, or None when empty."""
        return next(iter(self._items.values()), None)

    def has(self, key: Hashable) -> bool:
        return key in self._items

    def get(self, key: Hashable, default: Any = None) -> Any:
        return self._items.get(key, default)

    def put(self, key: Hashable, value: V) -> Collection[V]:
        """Add or replace ``key`` in place and return self."""
        self._items[key] = value
        if isinstance(key, int) and not isinstance(key, bool) and key >= self._next_index:
            self._next_index = key + 1
        return self

    def append(self, value: V) -> Collection[V]:
        """Store ``value`` under the next integer key, in place."""
        return self.put(self._next_index, value)

    def count(self) -> int:
        return len(self._items)

    def keys(self, unique: bool = False) -> list[Hashable]:
        keys = list(self._items.keys())
        return _unique(keys) if unique else keys

    def values(self, unique: bool = False) -> list[V]:
        values = list(self._items.values())
        return _unique(values) if unique else values

    def items(self) -> list[tuple[Hashable, V]]:
        return list(self._items.items())

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[Hashable, Any]:
        """Recursively expand nested Collections into dicts, keys preserved."""
        return {
            key: value.to_dict() if isinstance(value, Collection) else value
            for key, value in self._items.items()
        }

    def to_list(self) -> list[Any]:
        """Recursively expand nested Collections into lists of values."""
        return [
            value.to_list() if isinstance(value, Collection) else value
            for value in self._items.values()
        ]

    def to_json(self) -> str:
        """JSON rendering; entity leaves are expanded through their ``to_dict``."""
        return orjson.dumps(
            self.to_dict(),
            default=_json_default,
            option=orjson.OPT_NON_STR_KEYS,
        ).decode("utf-8")

    def to_string(self) -> str:
        """Comma separated rendering of every leaf, recursively."""
        parts: list[str] = []
        for value in self._items.values():
            if isinstance(value, Collection):
                nested = value.to_string()
                if nested:
                    parts.append(nested)
            elif isinstance(value, Mapping):
                parts.extend(str(v) for v in value.values() if isinstance(v, _SCALARS))
            elif isinstance(value, _SCALARS):
                parts.append(str(value))
            else:
                parts.append(type(value).__name__)
        return ", ".join(parts)

    # ------------------------------------------------------------------
    # Python protocols
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[V]:
        return iter(list(self._items.values()))

    def __getitem__(self, key: Hashable) -> V:
        return self._items[key]

    def __setitem__(self, key: Hashable | None, value: V) -> None:
        if key is None:
            self.append(value)
        else:
            self.put(key, value)

    def __delitem__(self, key: Hashable) -> None:
        del self._items[key]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Collection):
            return NotImplemented
        return list(self._items.items()) == list(other._items.items())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Collection({self._items!r})"


def _json_default(value: Any) -> Any:
    if isinstance(value, Collection):
        return value.to_dict()
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"Type is not JSON serializable: {type(value).__name__}")


__all__ = ["Collection", "SortMode"]
