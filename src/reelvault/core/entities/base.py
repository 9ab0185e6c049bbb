"""Base class for typed IMDb records.

Every record variant is a dataclass deriving from :class:`Entity`. Only the
declared dataclass fields may be read or written; anything else raises
:class:`~reelvault.shared.errors.UnknownFieldError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any, ClassVar

import orjson

from reelvault.core.collection import Collection
from reelvault.shared.errors import UnknownFieldError


@dataclass
class Entity:
    """Typed record with a per-variant cast table.

    ``CASTS`` maps a field name to the name of the variant its raw nested
    data hydrates into. Variants register themselves by class name.
    """

    CASTS: ClassVar[dict[str, str]] = {}

    _registry: ClassVar[dict[str, type[Entity]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        Entity._registry[cls.__name__] = cls

    @classmethod
    def variant(cls, name: str) -> type[Entity]:
        """Look up a registered variant by class name."""
        try:
            return Entity._registry[name]
        except KeyError:
            raise LookupError(f"Unknown entity variant: {name}") from None

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Entity:
        """Hydrate an instance of this variant from raw nested data."""
        from reelvault.core.entities.hydration import hydrate

        return hydrate(cls, raw)

    def __setattr__(self, name: str, value: Any) -> None:
        if name not in self.__dataclass_fields__:
            raise UnknownFieldError(type(self).__name__, name, operation="set")
        object.__setattr__(self, name, value)

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        raise UnknownFieldError(type(self).__name__, name, operation="get")

    def to_dict(self) -> dict[str, Any]:
        """Field → value mapping, recursing through Collections and Entities."""
        return {f.name: to_plain(getattr(self, f.name)) for f in fields(self)}

    def to_json(self) -> str:
        return orjson.dumps(self.to_dict(), option=orjson.OPT_NON_STR_KEYS).decode("utf-8")


def to_plain(value: Any) -> Any:
    """Expand Entities and Collections into plain dicts and lists."""
    if isinstance(value, Entity):
        return value.to_dict()
    if isinstance(value, Collection):
        return {key: to_plain(item) for key, item in value.items()}
    if isinstance(value, Mapping):
        return {key: to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    return value
